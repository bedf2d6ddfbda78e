from app.models.catalog_course import CatalogCourse
from app.models.enums import SectionModality
from app.models.instructor import Instructor
from app.models.meeting_block import MeetingBlock
from app.models.office_hour_block import OfficeHourBlock
from app.models.offering import Offering
from app.models.room import Room
from app.models.section import Section
from app.models.term import Term
from app.services.schedule_snapshot import load_class_blocks, load_term_snapshot


def test_snapshot_normalizes_stored_rows(db_session):
    term = Term(code="FA26", name="Fall 2026", weeks_in_term=15, slot_minutes=15, buffer_minutes=5)
    course = CatalogCourse(code="PHYS 210", title="Mechanics", credits=4, contact_hours_per_week=4)
    room = Room(name="LAB-2")
    instructor = Instructor(name="Lise Meitner", is_full_time=False)
    db_session.add_all([term, course, room, instructor])
    db_session.flush()

    offering = Offering(term_id=term.id, catalog_course_id=course.id)
    db_session.add(offering)
    db_session.flush()
    section = Section(offering_id=offering.id, section_code="01", instructor_id=instructor.id,
                      modality=SectionModality.hybrid)
    db_session.add(section)
    db_session.flush()

    # Rows written before day lists were canonical.
    db_session.add_all(
        [
            MeetingBlock(section_id=section.id, days="Thu,tuesday", starts_at="08:00", ends_at="09:30", room_id=room.id),
            OfficeHourBlock(term_id=term.id, instructor_id=instructor.id, days=["Fri", "Bogus"],
                            starts_at="12:00", ends_at="13:00"),
        ]
    )
    db_session.commit()

    snapshot = load_term_snapshot(db_session, term.id)

    assert snapshot.term.buffer_minutes == 5
    assert snapshot.sections[0].contact_hours_per_week == 4
    assert snapshot.sections[0].modality == "HYBRID"
    block = snapshot.class_blocks[0]
    assert block.time.days == ("Tue", "Thu")
    assert block.room_name == "LAB-2"
    assert block.instructor_id == instructor.id
    assert snapshot.office_blocks[0].time.days == ("Fri",)
    assert snapshot.office_hours_locks == {}

    assert load_class_blocks(db_session, term.id, room_id="elsewhere") == []
    assert len(load_class_blocks(db_session, term.id, instructor_id=instructor.id)) == 1
