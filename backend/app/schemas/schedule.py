from pydantic import BaseModel, Field, field_validator

from app.models.enums import MeetingBlockType, SectionModality
from app.schemas.time_block import TimeBlockFields


class OfferingCreate(BaseModel):
    catalog_course_id: str = Field(min_length=1, max_length=36)
    delivery_method: str | None = Field(default=None, max_length=50)
    notes: str | None = None


class OfferingOut(OfferingCreate):
    id: str
    term_id: str

    model_config = {"from_attributes": True}


class SectionCreate(BaseModel):
    offering_id: str = Field(min_length=1, max_length=36)
    section_code: str = Field(min_length=1, max_length=20)
    instructor_id: str | None = Field(default=None, max_length=36)
    modality: SectionModality = SectionModality.in_person
    notes: str | None = None


class SectionUpdate(BaseModel):
    section_code: str | None = Field(default=None, min_length=1, max_length=20)
    instructor_id: str | None = Field(default=None, max_length=36)
    modality: SectionModality | None = None
    notes: str | None = None

    @field_validator("section_code", "modality")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class SectionOut(SectionCreate):
    id: str

    model_config = {"from_attributes": True}


class MeetingBlockCreate(TimeBlockFields):
    type: MeetingBlockType = MeetingBlockType.lecture
    room_id: str | None = Field(default=None, max_length=36)
    notes: str | None = None


class MeetingBlockOut(MeetingBlockCreate):
    id: str
    section_id: str

    model_config = {"from_attributes": True}


class OfficeHourBlockCreate(TimeBlockFields):
    notes: str | None = None


class OfficeHourBlockOut(OfficeHourBlockCreate):
    id: str
    term_id: str
    instructor_id: str

    model_config = {"from_attributes": True}
