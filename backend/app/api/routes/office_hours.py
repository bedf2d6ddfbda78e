from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db, require_schedulers
from app.core.exceptions import ResourceNotFoundError
from app.core.security import Principal
from app.models.instructor import Instructor
from app.models.office_hour_block import OfficeHourBlock
from app.models.term import Term
from app.schemas.lock import LockStateOut, LockTransitionOut
from app.schemas.schedule import OfficeHourBlockCreate, OfficeHourBlockOut
from app.services.lock_guard import (
    OFFICE_HOURS_SCOPE,
    ensure_office_hours_unlocked,
    get_instructor_lock_state,
    lock_instructor_office_hours,
    unlock_instructor_office_hours,
)
from app.services.schedule_guard import check_office_candidate, raise_on_conflict
from app.services.schedule_snapshot import get_term_or_404

router = APIRouter()

BASE_PATH = "/{term_id}/instructors/{instructor_id}/office-hours"


def _get_active_instructor(db: Session, instructor_id: str) -> Instructor:
    instructor = db.get(Instructor, instructor_id)
    if instructor is None or not instructor.is_active:
        raise ResourceNotFoundError("Instructor", instructor_id)
    return instructor


def _get_block(db: Session, term: Term, instructor: Instructor, block_id: str) -> OfficeHourBlock:
    block = db.get(OfficeHourBlock, block_id)
    if block is None or block.term_id != term.id or block.instructor_id != instructor.id:
        raise ResourceNotFoundError("OfficeHourBlock", block_id)
    return block


@router.get(BASE_PATH, response_model=list[OfficeHourBlockOut])
def list_office_hours(
    term_id: str,
    instructor_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[OfficeHourBlockOut]:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    query = (
        select(OfficeHourBlock)
        .where(OfficeHourBlock.term_id == term.id, OfficeHourBlock.instructor_id == instructor.id)
        .order_by(OfficeHourBlock.starts_at)
    )
    return list(db.execute(query).scalars())


@router.post(BASE_PATH, response_model=OfficeHourBlockOut, status_code=status.HTTP_201_CREATED)
def create_office_hours(
    term_id: str,
    instructor_id: str,
    payload: OfficeHourBlockCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> OfficeHourBlockOut:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    ensure_office_hours_unlocked(db, term.id, instructor.id)

    check = check_office_candidate(
        db,
        term,
        instructor_id=instructor.id,
        days=payload.days,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
    )
    raise_on_conflict(check)

    block = OfficeHourBlock(term_id=term.id, instructor_id=instructor.id, **payload.model_dump())
    db.add(block)
    db.commit()
    db.refresh(block)
    return block


@router.put(BASE_PATH + "/{block_id}", response_model=OfficeHourBlockOut)
def update_office_hours(
    term_id: str,
    instructor_id: str,
    block_id: str,
    payload: OfficeHourBlockCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> OfficeHourBlockOut:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    ensure_office_hours_unlocked(db, term.id, instructor.id)
    block = _get_block(db, term, instructor, block_id)

    check = check_office_candidate(
        db,
        term,
        instructor_id=instructor.id,
        days=payload.days,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        exclude_block_id=block.id,
    )
    raise_on_conflict(check)

    for key, value in payload.model_dump().items():
        setattr(block, key, value)
    db.commit()
    db.refresh(block)
    return block


@router.delete(BASE_PATH + "/{block_id}")
def delete_office_hours(
    term_id: str,
    instructor_id: str,
    block_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> dict:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    ensure_office_hours_unlocked(db, term.id, instructor.id)
    block = _get_block(db, term, instructor, block_id)

    db.delete(block)
    db.commit()
    return {"success": True}


@router.get(BASE_PATH + "/lock", response_model=LockStateOut)
def get_office_hours_lock(
    term_id: str,
    instructor_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> LockStateOut:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    state = get_instructor_lock_state(db, term.id, instructor.id)
    return LockStateOut(
        scope=OFFICE_HOURS_SCOPE,
        locked=state.locked,
        locked_at=state.locked_at,
        locked_by=state.locked_by,
    )


@router.post(BASE_PATH + "/lock", response_model=LockTransitionOut)
def lock_office_hours(
    term_id: str,
    instructor_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> LockTransitionOut:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    transition = lock_instructor_office_hours(db, term.id, instructor.id, principal.id)
    db.commit()
    message = (
        f"Office hours locked for {instructor.name} in term {term.code}."
        if transition.changed
        else f"Office hours are already locked for {instructor.name} in term {term.code}."
    )
    return LockTransitionOut(
        scope=transition.scope,
        locked=transition.state.locked,
        locked_at=transition.state.locked_at,
        locked_by=transition.state.locked_by,
        changed=transition.changed,
        warnings=transition.warnings,
        message=message,
    )


@router.post(BASE_PATH + "/unlock", response_model=LockTransitionOut)
def unlock_office_hours(
    term_id: str,
    instructor_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> LockTransitionOut:
    term = get_term_or_404(db, term_id)
    instructor = _get_active_instructor(db, instructor_id)
    transition = unlock_instructor_office_hours(db, term.id, instructor.id)
    db.commit()
    message = (
        f"Office hours unlocked for {instructor.name} in term {term.code}."
        if transition.changed
        else f"Office hours are already unlocked for {instructor.name} in term {term.code}."
    )
    return LockTransitionOut(
        scope=transition.scope,
        locked=transition.state.locked,
        locked_at=transition.state.locked_at,
        locked_by=transition.state.locked_by,
        changed=transition.changed,
        warnings=transition.warnings,
        message=message,
    )
