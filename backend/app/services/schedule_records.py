from __future__ import annotations

from dataclasses import dataclass, field

from app.services.time_intervals import TimeBlock


@dataclass(frozen=True)
class TermRecord:
    id: str
    code: str
    buffer_minutes: int
    weeks_in_term: int
    schedule_locked: bool = False


@dataclass(frozen=True)
class SectionRecord:
    id: str
    section_code: str
    course_code: str
    modality: str
    instructor_id: str | None = None
    lecture_hours_per_week: float | None = None
    lab_hours_per_week: float | None = None
    contact_hours_per_week: float | None = None


@dataclass(frozen=True)
class ClassBlockRecord:
    id: str
    section_id: str
    course_code: str
    section_code: str
    time: TimeBlock
    instructor_id: str | None = None
    room_id: str | None = None
    room_name: str | None = None
    block_type: str = "LECTURE"
    modality: str = "IN_PERSON"

    @property
    def occupies_room(self) -> bool:
        return bool(self.room_id) and self.modality != "ONLINE"


@dataclass(frozen=True)
class OfficeBlockRecord:
    id: str
    instructor_id: str
    time: TimeBlock
    notes: str | None = None


@dataclass(frozen=True)
class InstructorRecord:
    id: str
    name: str
    is_full_time: bool
    is_active: bool = True


@dataclass(frozen=True)
class TermSnapshot:
    """Everything the engine reads about one term, captured at a single point."""

    term: TermRecord
    sections: tuple[SectionRecord, ...] = ()
    class_blocks: tuple[ClassBlockRecord, ...] = ()
    office_blocks: tuple[OfficeBlockRecord, ...] = ()
    instructors: tuple[InstructorRecord, ...] = ()
    office_hours_locks: dict[str, bool] = field(default_factory=dict)
