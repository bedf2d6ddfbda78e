import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from app.models.enums import SectionModality


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    offering_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("offerings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    section_code: Mapped[str] = mapped_column(String(20), nullable=False)
    instructor_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("instructors.id", ondelete="SET NULL"), nullable=True, index=True
    )
    modality: Mapped[SectionModality] = mapped_column(
        SAEnum(SectionModality, name="section_modality"), nullable=False, default=SectionModality.in_person
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
