from pydantic import BaseModel

from app.schemas.conflict import InstructorConflictOut, RoomConflictOut


class SectionIssueOut(BaseModel):
    section_id: str
    course_code: str
    section_code: str


class MeetingBlockIssueOut(BaseModel):
    block_id: str
    section_id: str
    label: str


class InstructionalMinutesOut(BaseModel):
    section_id: str
    course_code: str
    section_code: str
    weeks: int
    lecture_contact_hours: float
    lab_contact_hours: float
    lecture_credits: float
    lab_credits: float
    scheduled_minutes_per_week: int
    required_minutes: int
    scheduled_minutes: int
    delta_minutes: int
    passed: bool

    model_config = {"from_attributes": True}


class OfficeHoursComplianceOut(BaseModel):
    instructor_id: str
    instructor_name: str
    is_full_time: bool
    locked: bool
    minutes_per_week: int
    hours_per_week: float
    distinct_days: int
    meets_hours: bool
    meets_days: bool
    passed: bool

    model_config = {"from_attributes": True}


class ReadinessSummaryOut(BaseModel):
    sections_missing_instructor: int
    sections_missing_meeting_blocks: int
    meeting_blocks_missing_room: int
    room_conflicts: int
    instructor_conflicts: int
    minutes_failing: int
    office_hours_failing: int
    ready: bool
    warnings: list[str]


class ReadinessOut(BaseModel):
    term_id: str
    buffer_minutes: int
    summary: ReadinessSummaryOut
    sections_missing_instructor: list[SectionIssueOut]
    sections_missing_meeting_blocks: list[SectionIssueOut]
    meeting_blocks_missing_room: list[MeetingBlockIssueOut]
    room_conflicts: list[RoomConflictOut]
    instructor_conflicts: list[InstructorConflictOut]
    instructional_minutes: list[InstructionalMinutesOut]
    office_hours_compliance: list[OfficeHoursComplianceOut]
