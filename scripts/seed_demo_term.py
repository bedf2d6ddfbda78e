"""Seed a small demo term with courses, rooms, instructors and blocks.

Run:
  PYTHONPATH=backend python scripts/seed_demo_term.py
"""

from __future__ import annotations

import os

from sqlalchemy import func, select

from app.core.config import get_settings
from app.db.bootstrap import ensure_runtime_schema_compatibility
from app.db.session import SessionLocal
from app.models.catalog_course import CatalogCourse
from app.models.enums import MeetingBlockType, SectionModality
from app.models.instructor import Instructor
from app.models.meeting_block import MeetingBlock
from app.models.office_hour_block import OfficeHourBlock
from app.models.offering import Offering
from app.models.room import Room
from app.models.section import Section
from app.models.term import Term
from app.services.readiness import compute_readiness, readiness_warnings
from app.services.schedule_snapshot import load_term_snapshot

TERM_CODE = os.getenv("SEED_TERM_CODE", "FA26").strip() or "FA26"
TERM_NAME = os.getenv("SEED_TERM_NAME", "Fall 2026").strip() or "Fall 2026"
MOCK_EMAIL_DOMAIN = os.getenv("SEED_MOCK_EMAIL_DOMAIN", "college.edu").strip().lower() or "college.edu"

# code, title, credits, lecture hours, lab hours, contact hours
COURSES = [
    ("ENGL 101", "Composition I", 3, 3, 0, None),
    ("MATH 151", "Calculus I", 4, 4, 0, None),
    ("BIOL 110", "General Biology", 4, 3, 3, None),
    ("CHEM 105", "Chemistry for Health Sciences", 4, None, None, 4),
]

ROOMS = [
    ("A101", "Academic Hall", "101"),
    ("A102", "Academic Hall", "102"),
    ("S210", "Science Center", "210"),
    ("LAB-1", "Science Center", "L1"),
]

# name, full time
INSTRUCTORS = [
    ("Maya Angelou", True),
    ("Emmy Noether", True),
    ("Rachel Carson", True),
    ("Percy Julian", False),
]

# course code, section code, instructor name, modality, blocks
SECTIONS = [
    ("ENGL 101", "01", "Maya Angelou", SectionModality.in_person, [
        (MeetingBlockType.lecture, ["Mon", "Wed", "Fri"], "09:00", "09:50", "A101"),
    ]),
    ("ENGL 101", "W1", "Maya Angelou", SectionModality.online, [
        (MeetingBlockType.lecture, ["Tue", "Thu"], "18:00", "19:15", None),
    ]),
    ("MATH 151", "01", "Emmy Noether", SectionModality.in_person, [
        (MeetingBlockType.lecture, ["Mon", "Tue", "Wed", "Thu"], "10:00", "10:50", "A102"),
    ]),
    ("BIOL 110", "01", "Rachel Carson", SectionModality.hybrid, [
        (MeetingBlockType.lecture, ["Tue", "Thu"], "13:00", "14:15", "S210"),
        (MeetingBlockType.lab, ["Wed"], "13:00", "15:50", "LAB-1"),
    ]),
    ("CHEM 105", "01", "Percy Julian", SectionModality.in_person, [
        (MeetingBlockType.lecture, ["Mon", "Wed"], "11:00", "12:50", "S210"),
    ]),
]

# instructor name, days, start, end
OFFICE_HOURS = [
    ("Maya Angelou", ["Mon", "Wed", "Fri"], "10:00", "11:20"),
    ("Emmy Noether", ["Mon", "Wed"], "13:00", "15:00"),
    ("Rachel Carson", ["Mon", "Tue", "Thu"], "09:00", "10:20"),
]


def mock_email(name: str) -> str:
    return f"{name.lower().replace(' ', '.')}@{MOCK_EMAIL_DOMAIN}"


def upsert_term(session) -> Term:
    settings = get_settings()
    term = session.execute(select(Term).where(Term.code == TERM_CODE)).scalar_one_or_none()
    if term is None:
        term = Term(
            code=TERM_CODE,
            name=TERM_NAME,
            weeks_in_term=settings.default_weeks_in_term,
            slot_minutes=settings.default_slot_minutes,
            buffer_minutes=settings.default_buffer_minutes,
        )
        session.add(term)
    else:
        term.name = TERM_NAME
    session.flush()
    return term


def upsert_courses(session) -> dict[str, CatalogCourse]:
    courses: dict[str, CatalogCourse] = {}
    for code, title, credits, lecture, lab, contact in COURSES:
        course = session.execute(select(CatalogCourse).where(CatalogCourse.code == code)).scalar_one_or_none()
        if course is None:
            course = CatalogCourse(code=code, title=title)
            session.add(course)
        course.title = title
        course.credits = credits
        course.lecture_hours_per_week = lecture
        course.lab_hours_per_week = lab
        course.contact_hours_per_week = contact
        courses[code] = course
    session.flush()
    return courses


def upsert_rooms(session) -> dict[str, Room]:
    rooms: dict[str, Room] = {}
    for name, building, number in ROOMS:
        room = session.execute(select(Room).where(Room.name == name)).scalar_one_or_none()
        if room is None:
            room = Room(name=name)
            session.add(room)
        room.building = building
        room.room_number = number
        rooms[name] = room
    session.flush()
    return rooms


def upsert_instructors(session) -> dict[str, Instructor]:
    instructors: dict[str, Instructor] = {}
    for name, full_time in INSTRUCTORS:
        email = mock_email(name)
        instructor = session.execute(select(Instructor).where(Instructor.email == email)).scalar_one_or_none()
        if instructor is None:
            instructor = Instructor(name=name, email=email)
            session.add(instructor)
        instructor.is_full_time = full_time
        instructors[name] = instructor
    session.flush()
    return instructors


def replace_schedule(session, term: Term, courses, rooms, instructors) -> None:
    # The demo term is rebuilt from scratch on every run.
    offering_ids = select(Offering.id).where(Offering.term_id == term.id)
    section_ids = select(Section.id).where(Section.offering_id.in_(offering_ids))
    session.query(MeetingBlock).filter(MeetingBlock.section_id.in_(section_ids)).delete(synchronize_session=False)
    session.query(Section).filter(Section.id.in_(section_ids)).delete(synchronize_session=False)
    session.query(Offering).filter(Offering.term_id == term.id).delete(synchronize_session=False)
    session.query(OfficeHourBlock).filter(OfficeHourBlock.term_id == term.id).delete(synchronize_session=False)
    session.flush()

    offerings: dict[str, Offering] = {}
    for course_code, section_code, instructor_name, modality, blocks in SECTIONS:
        offering = offerings.get(course_code)
        if offering is None:
            offering = Offering(term_id=term.id, catalog_course_id=courses[course_code].id)
            session.add(offering)
            session.flush()
            offerings[course_code] = offering
        section = Section(
            offering_id=offering.id,
            section_code=section_code,
            instructor_id=instructors[instructor_name].id,
            modality=modality,
        )
        session.add(section)
        session.flush()
        for block_type, days, starts_at, ends_at, room_name in blocks:
            room_id = rooms[room_name].id if room_name and modality != SectionModality.online else None
            session.add(
                MeetingBlock(
                    section_id=section.id,
                    type=block_type,
                    days=days,
                    starts_at=starts_at,
                    ends_at=ends_at,
                    room_id=room_id,
                )
            )

    for instructor_name, days, starts_at, ends_at in OFFICE_HOURS:
        session.add(
            OfficeHourBlock(
                term_id=term.id,
                instructor_id=instructors[instructor_name].id,
                days=days,
                starts_at=starts_at,
                ends_at=ends_at,
            )
        )


def main() -> None:
    ensure_runtime_schema_compatibility()
    with SessionLocal() as session:
        term = upsert_term(session)
        if term.schedule_locked:
            print(f"Term {term.code} is locked; unlock it before reseeding.")
            return
        courses = upsert_courses(session)
        rooms = upsert_rooms(session)
        instructors = upsert_instructors(session)
        replace_schedule(session, term, courses, rooms, instructors)
        session.commit()

        block_count = session.execute(select(func.count(MeetingBlock.id))).scalar_one()
        report = compute_readiness(load_term_snapshot(session, term.id))

    print("Demo term seeded successfully.")
    print("")
    print(f"Term: {TERM_NAME} ({TERM_CODE})")
    print(f"Courses: {len(courses)}")
    print(f"Rooms: {len(rooms)}")
    print(f"Instructors: {len(instructors)}")
    print(f"Meeting blocks: {block_count}")
    print(f"Ready to lock: {'yes' if report.is_ready else 'no'}")
    for warning in readiness_warnings(report):
        print(f"  Warning: {warning}")
    for row in report.office_hours_failing:
        print(f"  Office hours short: {row.instructor_name} ({row.minutes_per_week} min, {row.distinct_days} day(s))")
    for row in report.minutes_failing:
        print(f"  Instructional minutes short: {row.course_code} {row.section_code} ({row.delta_minutes} min)")


if __name__ == "__main__":
    main()
