from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from studyspace.core.database import Base
from studyspace.models.user import User

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"

REVIEW_DECISIONS = (STATUS_APPROVED, STATUS_REJECTED)

_PENDING_ONLY = text("status = 'pending'")


class GroupApplication(Base):
    __tablename__ = "group_applications"
    # una sola solicitud pending por (grupo, usuario); las resueltas no cuentan
    __table_args__ = (
        Index(
            "uq_group_applications_pending",
            "group_id",
            "user_id",
            unique=True,
            sqlite_where=_PENDING_ONLY,
            postgresql_where=_PENDING_ONLY,
        ),
    )

    application_id: Mapped[int] = mapped_column(primary_key=True, index=True)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False, index=True)
    message: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(String(50), default=STATUS_PENDING, nullable=False)  # pending/approved/rejected
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    user: Mapped[User] = relationship(lazy="joined")
