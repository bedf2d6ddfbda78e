import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class Term(Base):
    __tablename__ = "terms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    starts_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    ends_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    weeks_in_term: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    slot_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=15)
    buffer_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=10)
    schedule_locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    schedule_locked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    schedule_locked_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
