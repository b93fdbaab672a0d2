from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from studyspace.api.deps import get_db
from studyspace.core.auth import get_current_user
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.group import Group
from studyspace.models.subject import Subject
from studyspace.models.user import User
from studyspace.schemas.academic_group import (
    AcademicGroupCreate,
    AcademicGroupPublic,
    AcademicGroupUpdate,
)

router = APIRouter(prefix="/api/academic-groups", tags=["academic-groups"])


def _get_or_404(db: Session, academic_group_id: int) -> AcademicGroup:
    ag = db.get(AcademicGroup, academic_group_id)
    if not ag:
        raise HTTPException(status_code=404, detail="Academic group not found")
    return ag


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    stmt = select(AcademicGroup.id).where(AcademicGroup.name == name)
    if exclude_id is not None:
        stmt = stmt.where(AcademicGroup.id != exclude_id)
    return db.execute(stmt).first() is not None


@router.get("", response_model=list[AcademicGroupPublic])
def list_academic_groups(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return db.execute(select(AcademicGroup).order_by(AcademicGroup.id.asc())).scalars().all()


@router.get("/{academic_group_id}", response_model=AcademicGroupPublic)
def get_academic_group(
    academic_group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_or_404(db, academic_group_id)


@router.post("", response_model=AcademicGroupPublic, status_code=201)
def create_academic_group(
    payload: AcademicGroupCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    if _name_taken(db, name):
        raise HTTPException(status_code=400, detail="Academic group already exists")

    ag = AcademicGroup(name=name)
    db.add(ag)
    db.commit()
    db.refresh(ag)
    return ag


@router.patch("/{academic_group_id}", response_model=AcademicGroupPublic)
def update_academic_group(
    academic_group_id: int,
    payload: AcademicGroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ag = _get_or_404(db, academic_group_id)

    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    if _name_taken(db, name, exclude_id=ag.id):
        raise HTTPException(status_code=400, detail="Academic group already exists")

    ag.name = name
    db.commit()
    db.refresh(ag)
    return ag


@router.delete("/{academic_group_id}")
def delete_academic_group(
    academic_group_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ag = _get_or_404(db, academic_group_id)

    in_use = db.execute(select(Group.id).where(Group.academic_group_id == ag.id)).first() or db.execute(
        select(Subject.id).where(Subject.academic_group_id == ag.id)
    ).first()
    if in_use:
        raise HTTPException(status_code=400, detail="Academic group is still referenced by groups or subjects")

    db.delete(ag)
    db.commit()
    return {"ok": True, "deleted_academic_group_id": academic_group_id}
