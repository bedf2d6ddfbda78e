import pytest

from app.services.conflict_service import (
    MISSING_ROOM_LABEL,
    CandidateKind,
    ConflictCategory,
    ConflictKind,
    ScheduleConflictService,
    format_class_label,
    format_office_label,
    parse_label_schedule,
)
from app.services.schedule_records import ClassBlockRecord, OfficeBlockRecord, TermRecord, TermSnapshot
from app.services.time_intervals import TimeBlock


def class_block(block_id, days, starts_at, ends_at, *, room_id="r101", room_name="R101", instructor_id="i1",
                course_code="MATH 101", section_code="01"):
    return ClassBlockRecord(
        id=block_id,
        section_id=f"sec-{block_id}",
        course_code=course_code,
        section_code=section_code,
        time=TimeBlock.build(days, starts_at, ends_at),
        instructor_id=instructor_id,
        room_id=room_id,
        room_name=room_name,
    )


def office_block(block_id, days, starts_at, ends_at, instructor_id="i1"):
    return OfficeBlockRecord(id=block_id, instructor_id=instructor_id, time=TimeBlock.build(days, starts_at, ends_at))


@pytest.fixture
def service():
    return ScheduleConflictService(
        buffer_minutes=10,
        class_blocks=[class_block("b1", ["Mon", "Wed"], "10:00", "11:00")],
        office_blocks=[office_block("o1", ["Tue"], "09:00", "10:00")],
    )


def test_room_conflict_respects_buffer(service):
    hits = service.room_conflicts("r101", ["Mon"], "10:55", "11:30")
    assert [block.id for block in hits] == ["b1"]

    # Both intervals widen, so a 10 minute buffer needs a gap of more than 20 minutes.
    assert [block.id for block in service.room_conflicts("r101", ["Mon"], "11:15", "12:00")] == ["b1"]
    assert service.room_conflicts("r101", ["Mon"], "11:25", "12:00") == []
    assert service.room_conflicts("r202", ["Mon"], "10:00", "11:00") == []
    assert service.room_conflicts(None, ["Mon"], "10:00", "11:00") == []


def test_candidate_class_message_lists_room_and_instructor(service):
    check = service.check_candidate_block(
        CandidateKind.class_block, ["Mon"], "10:55", "11:30", room_id="r101", instructor_id="i2"
    )
    assert check.ok is False
    assert check.message == "Room conflict with: MATH 101 01 (Mon,Wed 10:00-11:00, Room: R101)"
    assert check.as_dict()[ConflictCategory.instructor_classes.value] == []


def test_class_candidate_against_office_hours(service):
    check = service.check_candidate_block(
        CandidateKind.class_block, ["Tue"], "09:30", "10:30", room_id="r300", instructor_id="i1"
    )
    assert check.ok is False
    assert check.conflicts[ConflictCategory.instructor_office_hours] == ["Office Hours (Tue 09:00-10:00)"]
    assert check.message == "Instructor conflict with office hours: Office Hours (Tue 09:00-10:00)"


def test_office_candidate_message_uses_office_prefixes(service):
    check = service.check_candidate_block(CandidateKind.office_block, ["Wed"], "10:30", "11:30", instructor_id="i1")
    assert check.message == "Conflicts with class meeting blocks: MATH 101 01 (Mon,Wed 10:00-11:00, Room: R101)"


def test_all_conflict_categories_are_reported_together():
    svc = ScheduleConflictService(
        buffer_minutes=0,
        class_blocks=[
            class_block("b1", ["Mon"], "10:00", "11:00", instructor_id="i9"),
            class_block("b2", ["Mon"], "10:00", "11:00", room_id="r2", room_name="R2", course_code="CHEM 110"),
        ],
        office_blocks=[office_block("o1", ["Mon"], "10:30", "11:30")],
    )
    check = svc.check_candidate_block(
        CandidateKind.class_block, ["Mon"], "10:15", "10:45", room_id="r101", instructor_id="i1"
    )
    parts = check.message.split(" | ")
    assert parts[0].startswith("Room conflict with: ")
    assert parts[1] == "Instructor conflict with classes: CHEM 110 01 (Mon 10:00-11:00, Room: R2)"
    assert parts[2].startswith("Instructor conflict with office hours: ")


def test_exclude_skips_the_block_being_edited(service):
    assert service.room_conflicts("r101", ["Mon"], "10:00", "11:00", exclude_block_id="b1") == []
    result = service.instructor_conflicts_for_office("i1", ["Tue"], "09:00", "10:00", exclude_block_id="o1")
    assert result.is_empty


def test_exclude_only_applies_to_same_kind(service):
    # An office-hours id never hides class blocks and vice versa.
    result = service.instructor_conflicts_for_class("i1", ["Tue"], "09:00", "10:00", exclude_block_id="o1")
    assert [block.id for block in result.office_blocks] == ["o1"]


def test_missing_instructor_yields_no_instructor_conflicts(service):
    assert service.instructor_conflicts_for_class(None, ["Mon"], "10:00", "11:00").is_empty
    check = service.check_candidate_block(CandidateKind.class_block, ["Mon"], "10:00", "11:00")
    assert check.ok is True
    assert check.message == ""


def test_repeated_checks_are_stable(service):
    first = service.check_candidate_block(CandidateKind.class_block, ["Mon"], "10:55", "11:30", room_id="r101")
    second = service.check_candidate_block(CandidateKind.class_block, ["Mon"], "10:55", "11:30", room_id="r101")
    assert first == second


def test_labels_round_trip_to_schedule():
    block = class_block("b1", ["Wed", "Mon"], "10:00", "11:00", room_id=None, room_name=None)
    label = format_class_label(block)
    assert label == f"MATH 101 01 (Mon,Wed 10:00-11:00, Room: {MISSING_ROOM_LABEL})"
    assert parse_label_schedule(label) == (("Mon", "Wed"), "10:00", "11:00")

    office_label = format_office_label(office_block("o1", ["Fri", "Tue"], "13:00", "14:30"))
    assert parse_label_schedule(office_label) == (("Tue", "Fri"), "13:00", "14:30")

    with pytest.raises(ValueError):
        parse_label_schedule("not a label")


def test_all_pairs_cover_rooms_and_instructors():
    snapshot = TermSnapshot(
        term=TermRecord(id="t1", code="FA26", buffer_minutes=10, weeks_in_term=15),
        class_blocks=(
            class_block("b1", ["Mon"], "10:00", "11:00"),
            class_block("b2", ["Mon"], "11:05", "12:00", instructor_id="i2"),
            class_block("b3", ["Tue"], "10:00", "11:00", room_id="r2", room_name="R2"),
        ),
        office_blocks=(
            office_block("o1", ["Tue"], "10:30", "11:30", instructor_id="i2"),
            office_block("o2", ["Thu"], "09:00", "10:00", instructor_id="i3"),
            office_block("o3", ["Thu"], "09:30", "10:30", instructor_id="i3"),
        ),
    )
    svc = ScheduleConflictService.for_snapshot(snapshot)

    rooms = svc.all_room_conflict_pairs()
    assert [(pair.a.id, pair.b.id) for pair in rooms] == [("b1", "b2")]

    pairs = {(pair.instructor_id, pair.kind, pair.a.id, pair.b.id) for pair in svc.all_instructor_conflict_pairs()}
    assert ("i1", ConflictKind.class_vs_class, "b1", "b3") not in pairs
    assert ("i3", ConflictKind.office_vs_office, "o2", "o3") in pairs
    assert not any(kind == ConflictKind.class_vs_office for _, kind, _, _ in pairs)

    assert ScheduleConflictService.for_snapshot(snapshot, buffer_minutes=0).all_room_conflict_pairs() == []


def test_online_blocks_never_hold_a_room():
    online = ClassBlockRecord(
        id="w1",
        section_id="sec-w1",
        course_code="MATH 101",
        section_code="W1",
        time=TimeBlock.build(["Mon"], "10:00", "11:00"),
        instructor_id="i2",
        room_id="r101",
        room_name="R101",
        modality="ONLINE",
    )
    svc = ScheduleConflictService(
        buffer_minutes=10,
        class_blocks=[class_block("b1", ["Mon"], "10:00", "11:00"), online],
        office_blocks=[],
    )
    assert [block.id for block in svc.room_conflicts("r101", ["Mon"], "10:30", "11:30")] == ["b1"]
    assert svc.all_room_conflict_pairs() == []
