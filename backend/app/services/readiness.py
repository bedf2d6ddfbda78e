from __future__ import annotations

from dataclasses import dataclass

from app.core.config import get_settings
from app.models.enums import SectionModality
from app.services.compliance import (
    InstructionalMinutesResult,
    OfficeHoursComplianceResult,
    compute_instructional_minutes,
    compute_office_hours_compliance,
)
from app.services.conflict_service import (
    InstructorConflictPair,
    RoomConflictPair,
    ScheduleConflictService,
)
from app.services.schedule_records import ClassBlockRecord, SectionRecord, TermSnapshot


@dataclass(frozen=True)
class ReadinessReport:
    term_id: str
    buffer_minutes: int
    sections_missing_instructor: list[SectionRecord]
    sections_missing_meeting_blocks: list[SectionRecord]
    meeting_blocks_missing_room: list[ClassBlockRecord]
    room_conflicts: list[RoomConflictPair]
    instructor_conflicts: list[InstructorConflictPair]
    instructional_minutes: list[InstructionalMinutesResult]
    office_hours_compliance: list[OfficeHoursComplianceResult]

    @property
    def minutes_failing(self) -> list[InstructionalMinutesResult]:
        return [row for row in self.instructional_minutes if not row.passed]

    @property
    def office_hours_failing(self) -> list[OfficeHoursComplianceResult]:
        return [row for row in self.office_hours_compliance if row.is_full_time and not row.passed]

    @property
    def is_ready(self) -> bool:
        return not (
            self.sections_missing_instructor
            or self.sections_missing_meeting_blocks
            or self.meeting_blocks_missing_room
            or self.room_conflicts
            or self.instructor_conflicts
            or self.minutes_failing
            or self.office_hours_failing
        )


def compute_readiness(snapshot: TermSnapshot, buffer_minutes: int | None = None) -> ReadinessReport:
    settings = get_settings()
    conflicts = ScheduleConflictService.for_snapshot(snapshot, buffer_minutes)

    sections_with_blocks = {block.section_id for block in snapshot.class_blocks}

    return ReadinessReport(
        term_id=snapshot.term.id,
        buffer_minutes=conflicts.buffer_minutes,
        sections_missing_instructor=[section for section in snapshot.sections if not section.instructor_id],
        sections_missing_meeting_blocks=[
            section for section in snapshot.sections if section.id not in sections_with_blocks
        ],
        meeting_blocks_missing_room=[
            block
            for block in snapshot.class_blocks
            if not block.room_id and block.modality != SectionModality.online.value
        ],
        room_conflicts=conflicts.all_room_conflict_pairs(),
        instructor_conflicts=conflicts.all_instructor_conflict_pairs(),
        instructional_minutes=compute_instructional_minutes(
            snapshot.term.weeks_in_term,
            snapshot.sections,
            snapshot.class_blocks,
        ),
        office_hours_compliance=compute_office_hours_compliance(
            snapshot.instructors,
            snapshot.office_blocks,
            snapshot.office_hours_locks,
            min_minutes_per_week=settings.office_hours_min_minutes_per_week,
            min_distinct_days=settings.office_hours_min_distinct_days,
        ),
    )


def readiness_warnings(report: ReadinessReport) -> list[str]:
    warnings: list[str] = []
    counts = (
        (len(report.sections_missing_instructor), "section(s) missing instructor"),
        (len(report.sections_missing_meeting_blocks), "section(s) missing meeting blocks"),
        (len(report.meeting_blocks_missing_room), "meeting block(s) missing room"),
        (len(report.room_conflicts), "room conflict(s)"),
        (len(report.instructor_conflicts), "instructor conflict(s)"),
    )
    for count, label in counts:
        if count > 0:
            warnings.append(f"{count} {label}")
    return warnings
