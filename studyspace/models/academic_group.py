from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from studyspace.core.database import Base


class AcademicGroup(Base):
    """A cohort (e.g. "IKBO-14-20") that study groups and subjects belong to."""

    __tablename__ = "academic_groups"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
