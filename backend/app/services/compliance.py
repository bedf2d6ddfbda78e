"""Term compliance rules: instructional minutes and office-hours coverage.

Instructional minutes per section are derived from the course's weekly
contact hours, converted to credit-hour equivalents::

    lecture_credits = lecture_contact_hours
    lab_credits     = lab_contact_hours / 3
    required_base   = lecture_credits * 750 + lab_credits * 2250   (15-week term)
    required        = round(required_base * weeks_in_term / 15)

Scheduled minutes are ``sum(duration * distinct days)`` over the section's
meeting blocks, multiplied by the number of weeks.

Full-time instructors must hold at least 240 office-hour minutes per week
spread over at least 3 distinct days. Part-time instructors always pass.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
import math
from typing import Iterable, Mapping

from app.services.schedule_records import (
    ClassBlockRecord,
    InstructorRecord,
    OfficeBlockRecord,
    SectionRecord,
)

LECTURE_MINUTES_PER_CREDIT_15W = 750
LAB_MINUTES_PER_CREDIT_15W = 2250
LAB_CONTACT_HOURS_PER_CREDIT = 3
BASE_WEEKS = 15

OFFICE_HOURS_MIN_MINUTES_PER_WEEK = 240
OFFICE_HOURS_MIN_DISTINCT_DAYS = 3


def round_half_up(value: float) -> int:
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def effective_weeks(weeks_in_term: int | None) -> int:
    weeks = int(weeks_in_term or 0)
    return weeks if weeks > 0 else BASE_WEEKS


def resolve_contact_hours(section: SectionRecord) -> tuple[float, float]:
    lecture = section.lecture_hours_per_week
    lab = section.lab_hours_per_week
    if lecture is not None and lab is not None:
        return float(lecture), float(lab)
    if section.contact_hours_per_week is not None:
        return float(section.contact_hours_per_week), 0.0
    return float(lecture or 0), float(lab or 0)


@dataclass(frozen=True)
class InstructionalMinutesResult:
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


@dataclass(frozen=True)
class OfficeHoursComplianceResult:
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


def compute_instructional_minutes(
    weeks_in_term: int | None,
    sections: Iterable[SectionRecord],
    class_blocks: Iterable[ClassBlockRecord],
) -> list[InstructionalMinutesResult]:
    weeks = effective_weeks(weeks_in_term)
    scale = weeks / BASE_WEEKS

    weekly_by_section: dict[str, int] = defaultdict(int)
    for block in class_blocks:
        weekly_by_section[block.section_id] += block.time.weekly_minutes

    results: list[InstructionalMinutesResult] = []
    for section in sections:
        lecture_contact, lab_contact = resolve_contact_hours(section)
        lecture_credits = lecture_contact
        lab_credits = lab_contact / LAB_CONTACT_HOURS_PER_CREDIT

        required_base = (
            lecture_credits * LECTURE_MINUTES_PER_CREDIT_15W
            + lab_credits * LAB_MINUTES_PER_CREDIT_15W
        )
        required_minutes = round_half_up(required_base * scale)

        scheduled_per_week = weekly_by_section.get(section.id, 0)
        scheduled_minutes = round_half_up(scheduled_per_week * weeks)

        results.append(
            InstructionalMinutesResult(
                section_id=section.id,
                course_code=section.course_code,
                section_code=section.section_code,
                weeks=weeks,
                lecture_contact_hours=lecture_contact,
                lab_contact_hours=lab_contact,
                lecture_credits=lecture_credits,
                lab_credits=lab_credits,
                scheduled_minutes_per_week=scheduled_per_week,
                required_minutes=required_minutes,
                scheduled_minutes=scheduled_minutes,
                delta_minutes=scheduled_minutes - required_minutes,
                passed=required_minutes == 0 or scheduled_minutes >= required_minutes,
            )
        )

    # Failing first, then most deficient.
    results.sort(key=lambda row: (row.passed, row.delta_minutes))
    return results


def compute_office_hours_compliance(
    instructors: Iterable[InstructorRecord],
    office_blocks: Iterable[OfficeBlockRecord],
    locks: Mapping[str, bool] | None = None,
    *,
    min_minutes_per_week: int = OFFICE_HOURS_MIN_MINUTES_PER_WEEK,
    min_distinct_days: int = OFFICE_HOURS_MIN_DISTINCT_DAYS,
) -> list[OfficeHoursComplianceResult]:
    locks = locks or {}
    blocks_by_instructor: dict[str, list[OfficeBlockRecord]] = defaultdict(list)
    for block in office_blocks:
        blocks_by_instructor[block.instructor_id].append(block)

    results: list[OfficeHoursComplianceResult] = []
    for instructor in instructors:
        if not instructor.is_active:
            continue
        blocks = blocks_by_instructor.get(instructor.id, [])
        minutes_per_week = sum(block.time.weekly_minutes for block in blocks)
        distinct_days = len({day for block in blocks for day in block.time.days})

        meets_hours = minutes_per_week >= min_minutes_per_week
        meets_days = distinct_days >= min_distinct_days

        results.append(
            OfficeHoursComplianceResult(
                instructor_id=instructor.id,
                instructor_name=instructor.name,
                is_full_time=instructor.is_full_time,
                locked=bool(locks.get(instructor.id, False)),
                minutes_per_week=minutes_per_week,
                hours_per_week=minutes_per_week / 60.0,
                distinct_days=distinct_days,
                meets_hours=meets_hours,
                meets_days=meets_days,
                passed=(not instructor.is_full_time) or (meets_hours and meets_days),
            )
        )

    results.sort(key=lambda row: (row.passed, row.minutes_per_week, row.instructor_name))
    return results
