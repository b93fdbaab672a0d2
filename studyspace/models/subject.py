from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyspace.core.database import Base
from studyspace.models.academic_group import AcademicGroup


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    academic_group_id: Mapped[int] = mapped_column(
        ForeignKey("academic_groups.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    academic_group: Mapped[AcademicGroup] = relationship(lazy="joined")
