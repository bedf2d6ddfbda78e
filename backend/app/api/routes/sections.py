from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db, require_schedulers
from app.core.exceptions import ResourceNotFoundError, ScheduleValidationError
from app.core.security import Principal
from app.models.catalog_course import CatalogCourse
from app.models.enums import SectionModality
from app.models.instructor import Instructor
from app.models.meeting_block import MeetingBlock
from app.models.offering import Offering
from app.models.room import Room
from app.models.section import Section
from app.models.term import Term
from app.schemas.schedule import (
    MeetingBlockCreate,
    MeetingBlockOut,
    OfferingCreate,
    OfferingOut,
    SectionCreate,
    SectionOut,
    SectionUpdate,
)
from app.services.lock_guard import ensure_term_unlocked
from app.services.schedule_guard import check_class_candidate, raise_on_conflict
from app.services.schedule_snapshot import get_term_or_404

router = APIRouter()


def _get_offering_in_term(db: Session, term: Term, offering_id: str) -> Offering:
    offering = db.get(Offering, offering_id)
    if offering is None or offering.term_id != term.id:
        raise ResourceNotFoundError("Offering", offering_id)
    return offering


def _get_section_in_term(db: Session, term: Term, section_id: str) -> Section:
    section = db.get(Section, section_id)
    offering = db.get(Offering, section.offering_id) if section is not None else None
    if offering is None or offering.term_id != term.id:
        raise ResourceNotFoundError("Section", section_id)
    return section


def _get_block_in_section(db: Session, section: Section, block_id: str) -> MeetingBlock:
    block = db.get(MeetingBlock, block_id)
    if block is None or block.section_id != section.id:
        raise ResourceNotFoundError("MeetingBlock", block_id)
    return block


def _ensure_instructor_exists(db: Session, instructor_id: str | None) -> None:
    if instructor_id and db.get(Instructor, instructor_id) is None:
        raise ResourceNotFoundError("Instructor", instructor_id)


def _resolve_room_id(db: Session, section: Section, room_id: str | None) -> str | None:
    if section.modality == SectionModality.online:
        return None
    if not room_id:
        raise ScheduleValidationError(
            "Room is required for in-person or hybrid sections.",
            details={"field": "room_id"},
        )
    if db.get(Room, room_id) is None:
        raise ResourceNotFoundError("Room", room_id)
    return room_id


@router.post("/{term_id}/offerings", response_model=OfferingOut, status_code=status.HTTP_201_CREATED)
def create_offering(
    term_id: str,
    payload: OfferingCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> OfferingOut:
    term = get_term_or_404(db, term_id)
    if db.get(CatalogCourse, payload.catalog_course_id) is None:
        raise ResourceNotFoundError("CatalogCourse", payload.catalog_course_id)
    offering = Offering(term_id=term.id, **payload.model_dump())
    db.add(offering)
    db.commit()
    db.refresh(offering)
    return offering


@router.get("/{term_id}/sections", response_model=list[SectionOut])
def list_sections(
    term_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[SectionOut]:
    term = get_term_or_404(db, term_id)
    query = (
        select(Section)
        .join(Offering, Section.offering_id == Offering.id)
        .where(Offering.term_id == term.id)
        .order_by(Section.section_code, Section.id)
    )
    return list(db.execute(query).scalars())


@router.post("/{term_id}/sections", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(
    term_id: str,
    payload: SectionCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> SectionOut:
    term = get_term_or_404(db, term_id)
    ensure_term_unlocked(term)
    _get_offering_in_term(db, term, payload.offering_id)
    _ensure_instructor_exists(db, payload.instructor_id)

    section = Section(**payload.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


@router.put("/{term_id}/sections/{section_id}", response_model=SectionOut)
def update_section(
    term_id: str,
    section_id: str,
    payload: SectionUpdate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> SectionOut:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    ensure_term_unlocked(term)

    data = payload.model_dump(exclude_unset=True)
    _ensure_instructor_exists(db, data.get("instructor_id"))
    for key, value in data.items():
        setattr(section, key, value)
    if section.modality == SectionModality.online:
        db.execute(
            update(MeetingBlock).where(MeetingBlock.section_id == section.id).values(room_id=None)
        )
    db.commit()
    db.refresh(section)
    return section


@router.delete("/{term_id}/sections/{section_id}")
def delete_section(
    term_id: str,
    section_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> dict:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    ensure_term_unlocked(term)

    db.execute(delete(MeetingBlock).where(MeetingBlock.section_id == section.id))
    db.delete(section)
    db.commit()
    return {"success": True}


@router.get("/{term_id}/sections/{section_id}/meeting-blocks", response_model=list[MeetingBlockOut])
def list_meeting_blocks(
    term_id: str,
    section_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[MeetingBlockOut]:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    query = select(MeetingBlock).where(MeetingBlock.section_id == section.id).order_by(MeetingBlock.starts_at)
    return list(db.execute(query).scalars())


@router.post(
    "/{term_id}/sections/{section_id}/meeting-blocks",
    response_model=MeetingBlockOut,
    status_code=status.HTTP_201_CREATED,
)
def create_meeting_block(
    term_id: str,
    section_id: str,
    payload: MeetingBlockCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> MeetingBlockOut:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    ensure_term_unlocked(term)
    room_id = _resolve_room_id(db, section, payload.room_id)

    check = check_class_candidate(
        db,
        term,
        days=payload.days,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        room_id=room_id,
        instructor_id=section.instructor_id,
    )
    raise_on_conflict(check)

    block = MeetingBlock(
        section_id=section.id,
        type=payload.type,
        days=payload.days,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        room_id=room_id,
        notes=payload.notes,
    )
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


@router.put("/{term_id}/sections/{section_id}/meeting-blocks/{block_id}", response_model=MeetingBlockOut)
def update_meeting_block(
    term_id: str,
    section_id: str,
    block_id: str,
    payload: MeetingBlockCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> MeetingBlockOut:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    block = _get_block_in_section(db, section, block_id)
    ensure_term_unlocked(term)
    room_id = _resolve_room_id(db, section, payload.room_id)

    check = check_class_candidate(
        db,
        term,
        days=payload.days,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        room_id=room_id,
        instructor_id=section.instructor_id,
        exclude_block_id=block.id,
    )
    raise_on_conflict(check)

    block.type = payload.type
    block.days = payload.days
    block.starts_at = payload.starts_at
    block.ends_at = payload.ends_at
    block.room_id = room_id
    block.notes = payload.notes
    db.commit()
    db.refresh(block)
    return block


@router.delete("/{term_id}/sections/{section_id}/meeting-blocks/{block_id}")
def delete_meeting_block(
    term_id: str,
    section_id: str,
    block_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> dict:
    term = get_term_or_404(db, term_id)
    section = _get_section_in_term(db, term, section_id)
    block = _get_block_in_section(db, section, block_id)
    ensure_term_unlocked(term)

    db.delete(block)
    db.commit()
    return {"success": True}
