from pydantic import BaseModel, Field

from app.schemas.time_block import TimeBlockFields
from app.services.conflict_service import CandidateKind, ConflictKind


class CandidateCheckRequest(TimeBlockFields):
    kind: CandidateKind = CandidateKind.class_block
    room_id: str | None = Field(default=None, max_length=36)
    instructor_id: str | None = Field(default=None, max_length=36)
    section_id: str | None = Field(default=None, max_length=36)
    exclude_block_id: str | None = Field(default=None, max_length=36)


class CandidateCheckOut(BaseModel):
    ok: bool
    message: str
    conflicts: dict[str, list[str]]


class RoomConflictOut(BaseModel):
    room_id: str
    room_name: str | None
    a_block_id: str
    b_block_id: str
    a_label: str
    b_label: str


class InstructorConflictOut(BaseModel):
    instructor_id: str
    kind: ConflictKind
    a_block_id: str
    b_block_id: str
    a_label: str
    b_label: str
    a_section_id: str | None = None
    b_section_id: str | None = None
