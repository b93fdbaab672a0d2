from dataclasses import dataclass

from fastapi import HTTPException, Query
from sqlalchemy.orm import Session

from studyspace.core.database import get_db  # noqa: F401
from studyspace.models.group import Group
from studyspace.models.user import User
from studyspace.services.permissions import is_admin_or_moderator, is_group_member


@dataclass
class Page:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def get_page(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> Page:
    return Page(page=page, page_size=page_size)


def get_group_or_404(db: Session, group_id: int) -> Group:
    group = db.get(Group, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Group not found")
    return group


def require_member(db: Session, group_id: int, user: User) -> None:
    if not is_group_member(db, group_id, user.user_id):
        raise HTTPException(status_code=403, detail="Access denied: group membership required")


def require_admin_or_moderator(db: Session, group_id: int, user: User) -> None:
    if not is_admin_or_moderator(db, group_id, user.user_id):
        raise HTTPException(status_code=403, detail="Access denied: admin or moderator role required")


def require_admin(group: Group, user: User, detail: str = "Only the group admin can do this") -> None:
    if group.admin_id != user.user_id:
        raise HTTPException(status_code=403, detail=detail)
