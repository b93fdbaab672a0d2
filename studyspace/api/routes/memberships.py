import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from studyspace.api.deps import get_db, get_group_or_404, require_admin_or_moderator
from studyspace.core.auth import get_current_user
from studyspace.models.membership import GroupMember, GroupModerator
from studyspace.models.user import User
from studyspace.schemas.membership import (
    GroupModerCreate,
    GroupModerPublic,
    GroupUserCreate,
    GroupUserPublic,
    GroupUserUpdate,
)

logger = logging.getLogger(__name__)

users_router = APIRouter(prefix="/api/group-users", tags=["group-users"])
moders_router = APIRouter(prefix="/api/group-moders", tags=["group-moders"])


def _require_user(db: Session, user_id: int) -> None:
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")


def _get_member_or_404(db: Session, group_id: int, user_id: int) -> GroupMember:
    member = db.get(GroupMember, (group_id, user_id))
    if not member:
        raise HTTPException(status_code=404, detail="Group user not found")
    return member


def _get_moder_or_404(db: Session, group_id: int, user_id: int) -> GroupModerator:
    moder = db.get(GroupModerator, (group_id, user_id))
    if not moder:
        raise HTTPException(status_code=404, detail="Group moderator not found")
    return moder


# ---------- group-users ----------

@users_router.get("/{group_id}/{user_id}", response_model=GroupUserPublic)
def get_group_user(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_member_or_404(db, group_id, user_id)


@users_router.post("", response_model=GroupUserPublic, status_code=201)
def create_group_user(
    payload: GroupUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, payload.group_id)
    require_admin_or_moderator(db, payload.group_id, current_user)
    _require_user(db, payload.user_id)

    if db.get(GroupMember, (payload.group_id, payload.user_id)):
        raise HTTPException(status_code=400, detail="user is already a group member")

    member = GroupMember(group_id=payload.group_id, user_id=payload.user_id, role=payload.role)
    db.add(member)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="user is already a group member")
    db.refresh(member)

    logger.info(
        "Group user added",
        extra={"group_id": member.group_id, "user_id": member.user_id, "by": current_user.user_id},
    )
    return member


@users_router.patch("/{group_id}/{user_id}", response_model=GroupUserPublic)
def update_group_user(
    group_id: int,
    user_id: int,
    payload: GroupUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    member = _get_member_or_404(db, group_id, user_id)
    require_admin_or_moderator(db, group_id, current_user)

    if group.admin_id == user_id:
        raise HTTPException(status_code=400, detail="The group admin role cannot be changed")

    role = payload.role.strip()
    if not role:
        raise HTTPException(status_code=400, detail="role is required")

    member.role = role
    db.commit()
    db.refresh(member)
    return member


@users_router.delete("/{group_id}/{user_id}")
def delete_group_user(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    member = _get_member_or_404(db, group_id, user_id)
    require_admin_or_moderator(db, group_id, current_user)

    if group.admin_id == user_id:
        raise HTTPException(status_code=400, detail="The group admin cannot be removed")

    db.delete(member)
    db.commit()

    logger.info("Group user removed", extra={"group_id": group_id, "user_id": user_id})
    return {"ok": True}


# ---------- group-moders ----------

@moders_router.get("/{group_id}/{user_id}", response_model=GroupModerPublic)
def get_group_moder(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_moder_or_404(db, group_id, user_id)


@moders_router.post("", response_model=GroupModerPublic, status_code=201)
def create_group_moder(
    payload: GroupModerCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, payload.group_id)
    require_admin_or_moderator(db, payload.group_id, current_user)
    _require_user(db, payload.user_id)

    if db.get(GroupModerator, (payload.group_id, payload.user_id)):
        raise HTTPException(status_code=400, detail="moderator already exists")

    moder = GroupModerator(group_id=payload.group_id, user_id=payload.user_id)
    db.add(moder)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="moderator already exists")
    db.refresh(moder)

    logger.info(
        "Group moderator added",
        extra={"group_id": moder.group_id, "user_id": moder.user_id, "by": current_user.user_id},
    )
    return moder


@moders_router.delete("/{group_id}/{user_id}")
def delete_group_moder(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    moder = _get_moder_or_404(db, group_id, user_id)
    require_admin_or_moderator(db, group_id, current_user)

    db.delete(moder)
    db.commit()

    logger.info("Group moderator removed", extra={"group_id": group_id, "user_id": user_id})
    return {"ok": True}
