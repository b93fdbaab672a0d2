from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyspace.core.database import Base
from studyspace.models.user import User

ROLE_MEMBER = "member"
ROLE_ADMIN = "admin"


class GroupMember(Base):
    """Accepted membership of a user in a group."""

    __tablename__ = "group_users"

    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True, index=True)
    role: Mapped[str] = mapped_column(String(50), default=ROLE_MEMBER, nullable=False)  # member/admin
    joined_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    user: Mapped[User] = relationship(lazy="joined")


class GroupModerator(Base):
    __tablename__ = "group_moders"

    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), primary_key=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    user: Mapped[User] = relationship(lazy="joined")
