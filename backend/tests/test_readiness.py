from app.services.readiness import compute_readiness, readiness_warnings
from app.services.schedule_records import (
    ClassBlockRecord,
    InstructorRecord,
    OfficeBlockRecord,
    SectionRecord,
    TermRecord,
    TermSnapshot,
)
from app.services.time_intervals import TimeBlock

from conftest import add_section, block_path, create_resource, seed_term


def _snapshot(**overrides):
    sections = (
        SectionRecord(id="s1", section_code="01", course_code="HIST 200", modality="IN_PERSON", instructor_id="i1",
                      lecture_hours_per_week=3, lab_hours_per_week=0),
        SectionRecord(id="s2", section_code="W1", course_code="HIST 200", modality="ONLINE",
                      lecture_hours_per_week=3, lab_hours_per_week=0),
    )
    class_blocks = (
        ClassBlockRecord(id="b1", section_id="s1", course_code="HIST 200", section_code="01",
                         time=TimeBlock.build(["Mon", "Wed", "Fri"], "09:00", "09:50"), instructor_id="i1",
                         room_id=None),
        ClassBlockRecord(id="b2", section_id="s2", course_code="HIST 200", section_code="W1",
                         time=TimeBlock.build(["Tue"], "18:00", "20:00"), modality="ONLINE"),
    )
    office_blocks = (
        OfficeBlockRecord(id="o1", instructor_id="i1", time=TimeBlock.build(["Mon", "Wed", "Fri"], "09:40", "11:00")),
    )
    values = dict(
        term=TermRecord(id="t1", code="FA26", buffer_minutes=10, weeks_in_term=15),
        sections=sections,
        class_blocks=class_blocks,
        office_blocks=office_blocks,
        instructors=(InstructorRecord(id="i1", name="Ida Wells", is_full_time=True),),
        office_hours_locks={"i1": True},
    )
    values.update(overrides)
    return TermSnapshot(**values)


def test_readiness_collects_every_issue():
    report = compute_readiness(_snapshot())

    assert [s.id for s in report.sections_missing_instructor] == ["s2"]
    assert report.sections_missing_meeting_blocks == []
    # Online blocks never need a room.
    assert [b.id for b in report.meeting_blocks_missing_room] == ["b1"]
    assert report.room_conflicts == []
    assert [(p.a.id, p.b.id) for p in report.instructor_conflicts] == [("b1", "o1")]
    assert [row.section_id for row in report.minutes_failing] == ["s2"]
    assert report.office_hours_failing == []
    assert report.office_hours_compliance[0].locked is True
    assert report.is_ready is False

    assert readiness_warnings(report) == [
        "1 section(s) missing instructor",
        "1 meeting block(s) missing room",
        "1 instructor conflict(s)",
    ]


def test_readiness_buffer_override_applies_to_pairs():
    report = compute_readiness(_snapshot(), buffer_minutes=0)
    assert report.buffer_minutes == 0
    assert len(report.instructor_conflicts) == 1

    shifted = _snapshot(
        office_blocks=(
            OfficeBlockRecord(id="o1", instructor_id="i1", time=TimeBlock.build(["Mon", "Wed", "Fri"], "09:55", "11:15")),
        )
    )
    assert len(compute_readiness(shifted, buffer_minutes=0).instructor_conflicts) == 0
    assert len(compute_readiness(shifted).instructor_conflicts) == 1


def test_readiness_endpoint_reports_summary(client, scheduler_headers):
    data = seed_term(client, scheduler_headers)
    section = add_section(client, scheduler_headers, data, "01", data["ada"]["id"])
    create_resource(
        client,
        block_path(data, section),
        {"days": ["Mon", "Wed", "Fri"], "starts_at": "09:00", "ends_at": "09:50", "room_id": data["room"]["id"]},
        scheduler_headers,
    )
    add_section(client, scheduler_headers, data, "02")

    response = client.get(f"/api/terms/{data['term']['id']}/readiness", headers=scheduler_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["buffer_minutes"] == 10
    summary = body["summary"]
    assert summary["sections_missing_instructor"] == 1
    assert summary["sections_missing_meeting_blocks"] == 1
    assert summary["room_conflicts"] == 0
    assert summary["ready"] is False

    minutes = {row["section_id"]: row for row in body["instructional_minutes"]}
    assert minutes[section["id"]]["required_minutes"] == 2250
    assert minutes[section["id"]]["scheduled_minutes"] == 2250
    assert minutes[section["id"]]["passed"] is True

    office = {row["instructor_id"]: row for row in body["office_hours_compliance"]}
    assert office[data["ada"]["id"]]["passed"] is False
    assert office[data["alan"]["id"]]["minutes_per_week"] == 0
