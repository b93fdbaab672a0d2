import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from studyspace.api.deps import (
    Page,
    get_db,
    get_group_or_404,
    get_page,
    require_admin_or_moderator,
    require_member,
)
from studyspace.core.auth import get_current_user
from studyspace.models.membership import GroupMember
from studyspace.models.subject import Subject
from studyspace.models.task import Task
from studyspace.models.user import User
from studyspace.realtime.sse import publish
from studyspace.schemas.pagination import paginate_meta
from studyspace.schemas.task import (
    TaskCreate,
    TaskPublic,
    TasksResponse,
    VerificationRequest,
    to_task_public,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def _to_utc_naive(dt: datetime | None) -> datetime | None:
    """DB guarda DateTime naive en UTC."""
    if dt is None or dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def _paged_tasks(db: Session, stmt, page: Page) -> TasksResponse:
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    tasks = db.execute(
        stmt.order_by(Task.created_at.desc(), Task.id.desc()).offset(page.offset).limit(page.page_size)
    ).scalars().all()
    return TasksResponse(
        tasks=[to_task_public(t) for t in tasks],
        pagination=paginate_meta(page.page, page.page_size, total),
    )


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("", response_model=TasksResponse)
def group_tasks(
    group_id: int = Query(...),
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, group_id)
    require_member(db, group_id, current_user)

    return _paged_tasks(db, select(Task).where(Task.group_id == group_id), page)


# my-groups antes que /{task_id}
@router.get("/my-groups", response_model=TasksResponse)
def my_group_tasks(
    page: Page = Depends(get_page),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    my_group_ids = select(GroupMember.group_id).where(GroupMember.user_id == current_user.user_id)
    return _paged_tasks(db, select(Task).where(Task.group_id.in_(my_group_ids)), page)


@router.post("", response_model=TaskPublic, status_code=201)
def create_task(
    payload: TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    get_group_or_404(db, payload.group_id)
    require_member(db, payload.group_id, current_user)

    if payload.subject_id is not None and not db.get(Subject, payload.subject_id):
        raise HTTPException(status_code=404, detail="Subject not found")

    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="title is required")

    task = Task(
        group_id=payload.group_id,
        user_id=current_user.user_id,
        subject_id=payload.subject_id,
        title=title,
        description=payload.description or "",
        is_verified=False,
        deadline=_to_utc_naive(payload.deadline),
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info(
        "Task created successfully",
        extra={
            "task_id": task.id,
            "group_id": task.group_id,
            "user_id": task.user_id,
            "subject_id": task.subject_id,
        },
    )
    publish("TASK_CREATED", {"task_id": task.id, "group_id": task.group_id, "title": task.title})

    return to_task_public(task)


@router.get("/{task_id}", response_model=TaskPublic)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = _get_task_or_404(db, task_id)
    require_member(db, task.group_id, current_user)
    return to_task_public(task)


@router.patch("/{task_id}/verify", response_model=TaskPublic)
def verify_task(
    task_id: int,
    payload: VerificationRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = _get_task_or_404(db, task_id)
    require_admin_or_moderator(db, task.group_id, current_user)

    task.is_verified = payload.is_verified
    db.commit()
    db.refresh(task)

    logger.info(
        "Task verification status updated",
        extra={"task_id": task.id, "is_verified": task.is_verified},
    )
    publish(
        "TASK_VERIFIED",
        {"task_id": task.id, "group_id": task.group_id, "is_verified": task.is_verified},
    )
    return to_task_public(task)


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = _get_task_or_404(db, task_id)
    require_admin_or_moderator(db, task.group_id, current_user)

    db.delete(task)
    db.commit()

    logger.info("Task deleted successfully", extra={"task_id": task_id})
    return {"ok": True, "deleted_task_id": task_id}
