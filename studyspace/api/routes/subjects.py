from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from studyspace.api.deps import Page, get_db, get_page
from studyspace.core.auth import get_current_user
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.group import Group
from studyspace.models.membership import GroupMember, GroupModerator
from studyspace.models.subject import Subject
from studyspace.models.task import Task
from studyspace.models.user import User
from studyspace.schemas.academic_group import AcademicGroupPublic
from studyspace.schemas.group import to_group_public
from studyspace.schemas.pagination import paginate_meta
from studyspace.schemas.subject import (
    SubjectCreate,
    SubjectDetail,
    SubjectPublic,
    SubjectUpdate,
    SubjectsDetailResponse,
)

router = APIRouter(prefix="/api/subjects", tags=["subjects"])


def _get_subject_or_404(db: Session, subject_id: int) -> Subject:
    subject = db.get(Subject, subject_id)
    if not subject:
        raise HTTPException(status_code=404, detail="Subject not found")
    return subject


@router.get("/my-groups", response_model=SubjectsDetailResponse)
def my_subjects(
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Subjects of every academic group the caller's groups belong to."""
    uid = current_user.user_id
    groups = db.execute(
        select(Group)
        .where(
            Group.id.in_(select(GroupMember.group_id).where(GroupMember.user_id == uid))
            | Group.id.in_(select(GroupModerator.group_id).where(GroupModerator.user_id == uid))
        )
        .order_by(Group.id.asc())
    ).scalars().all()
    academic_ids = sorted({g.academic_group_id for g in groups})

    stmt = select(Subject).where(Subject.academic_group_id.in_(academic_ids))
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    subjects = db.execute(
        stmt.order_by(Subject.id.asc()).offset(page.offset).limit(page.page_size)
    ).scalars().all()

    return SubjectsDetailResponse(
        subjects=[
            SubjectDetail(
                id=s.id,
                name=s.name,
                academic_group=AcademicGroupPublic.model_validate(s.academic_group),
                groups=[to_group_public(g) for g in groups if g.academic_group_id == s.academic_group_id],
            )
            for s in subjects
        ],
        pagination=paginate_meta(page.page, page.page_size, total),
    )


@router.get("/{subject_id}", response_model=SubjectPublic)
def get_subject(
    subject_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_subject_or_404(db, subject_id)


@router.post("", response_model=SubjectPublic, status_code=201)
def create_subject(
    payload: SubjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if not db.get(AcademicGroup, payload.academic_group_id):
        raise HTTPException(status_code=404, detail="Academic group not found")

    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    subject = Subject(name=name, academic_group_id=payload.academic_group_id)
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return subject


@router.patch("/{subject_id}", response_model=SubjectPublic)
def update_subject(
    subject_id: int,
    payload: SubjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subject = _get_subject_or_404(db, subject_id)

    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    subject.name = name
    db.commit()
    db.refresh(subject)
    return subject


@router.delete("/{subject_id}")
def delete_subject(
    subject_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    subject = _get_subject_or_404(db, subject_id)
    # las tareas se quedan, sin asignatura
    db.execute(update(Task).where(Task.subject_id == subject_id).values(subject_id=None))
    db.delete(subject)
    db.commit()
    return {"ok": True, "deleted_subject_id": subject_id}
