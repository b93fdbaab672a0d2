from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from studyspace.schemas.pagination import PaginationMeta


class TaskCreate(BaseModel):
    group_id: int
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    deadline: Optional[datetime] = None
    subject_id: Optional[int] = None


class VerificationRequest(BaseModel):
    is_verified: bool


class TaskPublic(BaseModel):
    id: int
    group_id: int
    user_id: int
    username: str
    subject_id: Optional[int] = None
    title: str
    description: str
    is_verified: bool
    deadline: Optional[datetime] = None
    created_at: datetime


class TasksResponse(BaseModel):
    tasks: list[TaskPublic]
    pagination: PaginationMeta


def to_task_public(task) -> TaskPublic:
    return TaskPublic(
        id=task.id,
        group_id=task.group_id,
        user_id=task.user_id,
        username=task.user.username,
        subject_id=task.subject_id,
        title=task.title,
        description=task.description,
        is_verified=task.is_verified,
        deadline=task.deadline,
        created_at=task.created_at,
    )
