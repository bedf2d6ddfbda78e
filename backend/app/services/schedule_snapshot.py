from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.catalog_course import CatalogCourse
from app.models.instructor import Instructor
from app.models.instructor_term_lock import InstructorTermLock
from app.models.meeting_block import MeetingBlock
from app.models.office_hour_block import OfficeHourBlock
from app.models.offering import Offering
from app.models.room import Room
from app.models.section import Section
from app.models.term import Term
from app.services.schedule_records import (
    ClassBlockRecord,
    InstructorRecord,
    OfficeBlockRecord,
    SectionRecord,
    TermRecord,
    TermSnapshot,
)
from app.services.time_intervals import TimeBlock


def _enum_value(value) -> str:
    return getattr(value, "value", value)


def get_term_or_404(db: Session, term_id: str) -> Term:
    term = db.get(Term, term_id)
    if term is None:
        raise ResourceNotFoundError("Term", term_id)
    return term


def term_record(term: Term) -> TermRecord:
    return TermRecord(
        id=term.id,
        code=term.code,
        buffer_minutes=term.buffer_minutes or 0,
        weeks_in_term=term.weeks_in_term,
        schedule_locked=bool(term.schedule_locked),
    )


def load_sections(db: Session, term_id: str) -> list[SectionRecord]:
    rows = db.execute(
        select(Section, CatalogCourse)
        .join(Offering, Section.offering_id == Offering.id)
        .join(CatalogCourse, Offering.catalog_course_id == CatalogCourse.id)
        .where(Offering.term_id == term_id)
        .order_by(CatalogCourse.code, Section.section_code, Section.id)
    ).all()
    return [
        SectionRecord(
            id=section.id,
            section_code=section.section_code,
            course_code=course.code,
            modality=_enum_value(section.modality),
            instructor_id=section.instructor_id,
            lecture_hours_per_week=course.lecture_hours_per_week,
            lab_hours_per_week=course.lab_hours_per_week,
            contact_hours_per_week=course.contact_hours_per_week,
        )
        for section, course in rows
    ]


def load_class_blocks(
    db: Session,
    term_id: str,
    *,
    room_id: str | None = None,
    instructor_id: str | None = None,
) -> list[ClassBlockRecord]:
    query = (
        select(MeetingBlock, Section, CatalogCourse, Room)
        .join(Section, MeetingBlock.section_id == Section.id)
        .join(Offering, Section.offering_id == Offering.id)
        .join(CatalogCourse, Offering.catalog_course_id == CatalogCourse.id)
        .outerjoin(Room, MeetingBlock.room_id == Room.id)
        .where(Offering.term_id == term_id)
    )
    if room_id is not None:
        query = query.where(MeetingBlock.room_id == room_id)
    if instructor_id is not None:
        query = query.where(Section.instructor_id == instructor_id)
    query = query.order_by(MeetingBlock.starts_at, MeetingBlock.id)

    return [
        ClassBlockRecord(
            id=block.id,
            section_id=section.id,
            course_code=course.code,
            section_code=section.section_code,
            time=TimeBlock.build(block.days, block.starts_at, block.ends_at),
            instructor_id=section.instructor_id,
            room_id=block.room_id,
            room_name=room.name if room is not None else None,
            block_type=_enum_value(block.type),
            modality=_enum_value(section.modality),
        )
        for block, section, course, room in db.execute(query).all()
    ]


def load_office_blocks(db: Session, term_id: str, *, instructor_id: str | None = None) -> list[OfficeBlockRecord]:
    query = select(OfficeHourBlock).where(OfficeHourBlock.term_id == term_id)
    if instructor_id is not None:
        query = query.where(OfficeHourBlock.instructor_id == instructor_id)
    query = query.order_by(OfficeHourBlock.starts_at, OfficeHourBlock.id)
    return [
        OfficeBlockRecord(
            id=block.id,
            instructor_id=block.instructor_id,
            time=TimeBlock.build(block.days, block.starts_at, block.ends_at),
            notes=block.notes,
        )
        for block in db.execute(query).scalars()
    ]


def load_instructors(db: Session) -> list[InstructorRecord]:
    return [
        InstructorRecord(
            id=instructor.id,
            name=instructor.name,
            is_full_time=bool(instructor.is_full_time),
            is_active=bool(instructor.is_active),
        )
        for instructor in db.execute(select(Instructor).order_by(Instructor.name)).scalars()
    ]


def load_office_hours_locks(db: Session, term_id: str) -> dict[str, bool]:
    # Read-only: instructors without a lock row are simply absent (unlocked).
    rows = db.execute(select(InstructorTermLock).where(InstructorTermLock.term_id == term_id)).scalars()
    return {row.instructor_id: bool(row.office_hours_locked) for row in rows}


def load_term_snapshot(db: Session, term_id: str) -> TermSnapshot:
    term = get_term_or_404(db, term_id)
    return TermSnapshot(
        term=term_record(term),
        sections=tuple(load_sections(db, term.id)),
        class_blocks=tuple(load_class_blocks(db, term.id)),
        office_blocks=tuple(load_office_blocks(db, term.id)),
        instructors=tuple(load_instructors(db)),
        office_hours_locks=load_office_hours_locks(db, term.id),
    )
