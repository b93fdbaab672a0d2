from datetime import datetime

from sqlalchemy import DateTime, String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyspace.core.database import Base
from studyspace.models.academic_group import AcademicGroup
from studyspace.models.user import User


class Group(Base):
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    academic_group_id: Mapped[int] = mapped_column(
        ForeignKey("academic_groups.id"), nullable=False, index=True
    )
    admin_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    admin: Mapped[User] = relationship(lazy="joined")
    academic_group: Mapped[AcademicGroup] = relationship(lazy="joined")
