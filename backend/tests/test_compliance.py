from app.services.compliance import (
    compute_instructional_minutes,
    compute_office_hours_compliance,
    effective_weeks,
    resolve_contact_hours,
    round_half_up,
)
from app.services.schedule_records import ClassBlockRecord, InstructorRecord, OfficeBlockRecord, SectionRecord
from app.services.time_intervals import TimeBlock


def section(section_id="s1", lecture=None, lab=None, contact=None):
    return SectionRecord(
        id=section_id,
        section_code="01",
        course_code="BIO 150",
        modality="IN_PERSON",
        instructor_id="i1",
        lecture_hours_per_week=lecture,
        lab_hours_per_week=lab,
        contact_hours_per_week=contact,
    )


def meeting(section_id, days, starts_at, ends_at, block_id="b1"):
    return ClassBlockRecord(
        id=block_id,
        section_id=section_id,
        course_code="BIO 150",
        section_code="01",
        time=TimeBlock.build(days, starts_at, ends_at),
    )


def office(instructor_id, days, starts_at, ends_at):
    return OfficeBlockRecord(id=f"o-{instructor_id}-{starts_at}", instructor_id=instructor_id,
                             time=TimeBlock.build(days, starts_at, ends_at))


def test_three_credit_lecture_meets_requirement_exactly():
    rows = compute_instructional_minutes(15, [section(lecture=3, lab=0)], [meeting("s1", ["Mon", "Wed", "Fri"], "09:00", "09:50")])
    row = rows[0]
    assert row.required_minutes == 2250
    assert row.scheduled_minutes_per_week == 150
    assert row.scheduled_minutes == 2250
    assert row.delta_minutes == 0
    assert row.passed is True


def test_contact_hours_fallback_and_lab_credits():
    assert resolve_contact_hours(section(contact=4)) == (4.0, 0.0)
    assert resolve_contact_hours(section(lecture=0, lab=0, contact=4)) == (0.0, 0.0)
    assert resolve_contact_hours(section(lecture=2)) == (2.0, 0.0)

    rows = compute_instructional_minutes(15, [section(lecture=3, lab=3)], [])
    assert rows[0].lab_credits == 1
    assert rows[0].required_minutes == 3 * 750 + 2250
    assert rows[0].passed is False


def test_weeks_scale_requirement_and_default_when_missing():
    assert effective_weeks(0) == 15
    assert effective_weeks(None) == 15
    rows = compute_instructional_minutes(8, [section(lecture=1, lab=0)], [])
    assert rows[0].required_minutes == 400
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -3


def test_sections_without_hours_pass_vacuously():
    rows = compute_instructional_minutes(15, [section()], [])
    assert rows[0].required_minutes == 0
    assert rows[0].passed is True


def test_failing_sections_sort_first_by_deficit():
    sections = [section("ok", lecture=1, lab=0), section("short", lecture=3, lab=0), section("shorter", lecture=4, lab=0)]
    blocks = [
        meeting("ok", ["Mon"], "09:00", "09:50", block_id="b-ok"),
        meeting("short", ["Mon"], "09:00", "09:50", block_id="b-short"),
    ]
    rows = compute_instructional_minutes(15, sections, blocks)
    assert [row.section_id for row in rows] == ["shorter", "short", "ok"]


def test_full_time_instructor_needs_minutes_and_days():
    instructors = [
        InstructorRecord(id="ft", name="Ada Full", is_full_time=True),
        InstructorRecord(id="pt", name="Ben Part", is_full_time=False),
        InstructorRecord(id="gone", name="Cy Gone", is_full_time=True, is_active=False),
    ]
    blocks = [office("ft", ["Mon", "Wed"], "10:00", "11:00"), office("pt", ["Fri"], "12:00", "12:30")]

    rows = compute_office_hours_compliance(instructors, blocks, {"ft": True})
    by_id = {row.instructor_id: row for row in rows}

    assert "gone" not in by_id
    assert by_id["ft"].minutes_per_week == 120
    assert by_id["ft"].distinct_days == 2
    assert by_id["ft"].meets_hours is False
    assert by_id["ft"].passed is False
    assert by_id["ft"].locked is True
    assert by_id["pt"].passed is True
    assert by_id["pt"].locked is False
    assert rows[0].instructor_id == "ft"


def test_full_time_instructor_passes_at_threshold():
    instructors = [InstructorRecord(id="ft", name="Ada Full", is_full_time=True)]
    blocks = [office("ft", ["Mon", "Wed", "Fri"], "10:00", "11:00"), office("ft", ["Tue"], "14:00", "15:00")]
    row = compute_office_hours_compliance(instructors, blocks)[0]
    assert row.minutes_per_week == 240
    assert row.distinct_days == 4
    assert row.hours_per_week == 4.0
    assert row.passed is True
