import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from studyspace.api.deps import (
    Page,
    get_db,
    get_group_or_404,
    get_page,
    require_admin,
    require_admin_or_moderator,
    require_member,
)
from studyspace.core.auth import get_current_user
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.application import GroupApplication
from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, GroupModerator, ROLE_ADMIN
from studyspace.models.subject import Subject
from studyspace.models.task import Task
from studyspace.models.user import User
from studyspace.realtime.sse import publish
from studyspace.schemas.group import (
    GroupCreate,
    GroupPublic,
    GroupUpdate,
    GroupsResponse,
    ModeratorsResponse,
    to_group_public,
)
from studyspace.schemas.pagination import paginate_meta
from studyspace.schemas.subject import SubjectPublic, SubjectsResponse
from studyspace.schemas.task import TaskPublic, to_task_public
from studyspace.schemas.user import MemberPublic, to_user_public

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/groups", tags=["groups"])


def _paged_groups(db: Session, stmt, page: Page) -> GroupsResponse:
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    groups = db.execute(
        stmt.order_by(Group.id.asc()).offset(page.offset).limit(page.page_size)
    ).scalars().all()
    return GroupsResponse(
        groups=[to_group_public(g) for g in groups],
        pagination=paginate_meta(page.page, page.page_size, total),
    )


@router.get("", response_model=GroupsResponse)
def list_groups(
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _paged_groups(db, select(Group), page)


@router.post("", response_model=GroupPublic, status_code=201)
def create_group(
    payload: GroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not db.get(AcademicGroup, payload.academic_group_id):
        raise HTTPException(status_code=404, detail="Academic group not found")

    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    group = Group(
        name=name,
        academic_group_id=payload.academic_group_id,
        admin_id=current_user.user_id,
    )
    db.add(group)
    db.flush()

    # el admin entra como miembro
    db.add(GroupMember(group_id=group.id, user_id=current_user.user_id, role=ROLE_ADMIN))
    db.commit()
    db.refresh(group)

    logger.info(
        "Group created",
        extra={"group_id": group.id, "admin_id": current_user.user_id, "name": group.name},
    )
    return to_group_public(group)


@router.get("/available", response_model=GroupsResponse)
def available_groups(
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Groups the caller can apply to: not admin, member or moderator."""
    uid = current_user.user_id
    stmt = (
        select(Group)
        .where(Group.admin_id != uid)
        .where(Group.id.not_in(select(GroupMember.group_id).where(GroupMember.user_id == uid)))
        .where(Group.id.not_in(select(GroupModerator.group_id).where(GroupModerator.user_id == uid)))
    )
    return _paged_groups(db, stmt, page)


@router.get("/my-groups", response_model=GroupsResponse)
def my_groups(
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    uid = current_user.user_id
    stmt = select(Group).where(
        Group.id.in_(select(GroupMember.group_id).where(GroupMember.user_id == uid))
        | Group.id.in_(select(GroupModerator.group_id).where(GroupModerator.user_id == uid))
    )
    return _paged_groups(db, stmt, page)


@router.get("/{group_id}", response_model=GroupPublic)
def get_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return to_group_public(get_group_or_404(db, group_id))


@router.patch("/{group_id}", response_model=GroupPublic)
def update_group(
    group_id: int,
    payload: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    require_admin(group, current_user, "Only the group admin can update the group")

    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    group.name = name
    db.commit()
    db.refresh(group)
    return to_group_public(group)


@router.delete("/{group_id}")
def delete_group(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    require_admin(group, current_user, "Only group admin can delete the group")

    # todo lo que cuelga del grupo, luego el grupo
    db.execute(delete(Task).where(Task.group_id == group_id))
    db.execute(delete(GroupApplication).where(GroupApplication.group_id == group_id))
    db.execute(delete(GroupModerator).where(GroupModerator.group_id == group_id))
    db.execute(delete(GroupMember).where(GroupMember.group_id == group_id))
    db.delete(group)
    db.commit()

    logger.info("Group deleted", extra={"group_id": group_id, "admin_id": current_user.user_id})
    publish("GROUP_DELETED", {"group_id": group_id})

    return {"ok": True, "deleted_group_id": group_id}


@router.get("/{group_id}/users", response_model=list[MemberPublic])
def group_users(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, group_id)
    require_member(db, group_id, current_user)

    members = db.execute(
        select(GroupMember)
        .join(User, User.user_id == GroupMember.user_id)
        .where(GroupMember.group_id == group_id)
        .order_by(User.username.asc())
    ).scalars().all()

    return [MemberPublic(id=m.user.user_id, username=m.user.username, role=m.role) for m in members]


@router.get("/{group_id}/moderators", response_model=ModeratorsResponse)
def group_moderators(
    group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    require_admin_or_moderator(db, group_id, current_user)

    moders = db.execute(
        select(GroupModerator)
        .where(GroupModerator.group_id == group_id)
        .order_by(GroupModerator.created_at.asc())
    ).scalars().all()

    return ModeratorsResponse(
        admin=to_user_public(group.admin),
        moderators=[to_user_public(m.user) for m in moders],
    )


@router.get("/{group_id}/subjects", response_model=SubjectsResponse)
def group_subjects(
    group_id: int,
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    require_member(db, group_id, current_user)

    stmt = select(Subject).where(Subject.academic_group_id == group.academic_group_id)
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    subjects = db.execute(
        stmt.order_by(Subject.id.asc()).offset(page.offset).limit(page.page_size)
    ).scalars().all()

    return SubjectsResponse(
        subjects=[SubjectPublic.model_validate(s) for s in subjects],
        pagination=paginate_meta(page.page, page.page_size, total),
    )


@router.get("/{group_id}/subjects/{subject_id}/tasks", response_model=list[TaskPublic])
def subject_tasks(
    group_id: int,
    subject_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, group_id)
    require_member(db, group_id, current_user)

    if not db.get(Subject, subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")

    tasks = db.execute(
        select(Task)
        .where(Task.group_id == group_id, Task.subject_id == subject_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    ).scalars().all()
    return [to_task_public(t) for t in tasks]
