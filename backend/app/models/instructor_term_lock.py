import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class InstructorTermLock(Base):
    __tablename__ = "instructor_term_locks"
    __table_args__ = (
        UniqueConstraint("term_id", "instructor_id", name="uq_instructor_term_locks_term_instructor"),
        Index("ix_instructor_term_locks_term_locked", "term_id", "office_hours_locked"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    term_id: Mapped[str] = mapped_column(String(36), ForeignKey("terms.id", ondelete="CASCADE"), nullable=False)
    instructor_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("instructors.id", ondelete="CASCADE"), nullable=False
    )
    office_hours_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    office_hours_locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    office_hours_locked_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
