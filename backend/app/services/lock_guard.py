from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import OfficeHoursLockedError, ScheduleLockedError
from app.models.instructor_term_lock import InstructorTermLock
from app.models.term import Term
from app.services.readiness import compute_readiness, readiness_warnings
from app.services.schedule_snapshot import load_term_snapshot

logger = logging.getLogger(__name__)

TERM_SCHEDULE_SCOPE = "term_schedule"
OFFICE_HOURS_SCOPE = "instructor_office_hours"


@dataclass(frozen=True)
class LockState:
    locked: bool
    locked_at: datetime | None = None
    locked_by: str | None = None


@dataclass(frozen=True)
class LockTransition:
    scope: str
    state: LockState
    changed: bool
    warnings: list[str] = field(default_factory=list)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_term_unlocked(term: Term) -> None:
    if term.schedule_locked:
        logger.info("Rejected schedule mutation for locked term %s", term.code)
        raise ScheduleLockedError(term.code)


def term_lock_state(term: Term) -> LockState:
    return LockState(
        locked=bool(term.schedule_locked),
        locked_at=term.schedule_locked_at,
        locked_by=term.schedule_locked_by,
    )


def lock_term_schedule(db: Session, term: Term, principal: str | None) -> LockTransition:
    """Lock the term schedule, surfacing readiness problems without refusing."""
    if term.schedule_locked:
        return LockTransition(scope=TERM_SCHEDULE_SCOPE, state=term_lock_state(term), changed=False)

    warnings = readiness_warnings(compute_readiness(load_term_snapshot(db, term.id)))

    term.schedule_locked = True
    term.schedule_locked_at = _now()
    term.schedule_locked_by = principal
    db.flush()

    logger.info("Term %s schedule locked by %s (%d warning(s))", term.code, principal, len(warnings))
    return LockTransition(
        scope=TERM_SCHEDULE_SCOPE,
        state=term_lock_state(term),
        changed=True,
        warnings=warnings,
    )


def unlock_term_schedule(db: Session, term: Term) -> LockTransition:
    if not term.schedule_locked:
        return LockTransition(scope=TERM_SCHEDULE_SCOPE, state=term_lock_state(term), changed=False)

    term.schedule_locked = False
    term.schedule_locked_at = None
    term.schedule_locked_by = None
    db.flush()

    logger.info("Term %s schedule unlocked", term.code)
    return LockTransition(scope=TERM_SCHEDULE_SCOPE, state=term_lock_state(term), changed=True)


def _find_instructor_lock(db: Session, term_id: str, instructor_id: str) -> InstructorTermLock | None:
    return db.execute(
        select(InstructorTermLock).where(
            InstructorTermLock.term_id == term_id,
            InstructorTermLock.instructor_id == instructor_id,
        )
    ).scalar_one_or_none()


def _office_lock_state(lock: InstructorTermLock | None) -> LockState:
    if lock is None:
        return LockState(locked=False)
    return LockState(
        locked=bool(lock.office_hours_locked),
        locked_at=lock.office_hours_locked_at,
        locked_by=lock.office_hours_locked_by,
    )


def get_instructor_lock_state(db: Session, term_id: str, instructor_id: str) -> LockState:
    """Fetch-or-default: a missing lock row reads as unlocked and nothing is written."""
    return _office_lock_state(_find_instructor_lock(db, term_id, instructor_id))


def ensure_instructor_lock(db: Session, term_id: str, instructor_id: str) -> InstructorTermLock:
    """Idempotent upsert of the (term, instructor) lock row."""
    existing = _find_instructor_lock(db, term_id, instructor_id)
    if existing is not None:
        return existing
    try:
        with db.begin_nested():
            lock = InstructorTermLock(term_id=term_id, instructor_id=instructor_id, office_hours_locked=False)
            db.add(lock)
        return lock
    except IntegrityError:
        # Another writer created the row first; the unique constraint guarantees a single row.
        lock = _find_instructor_lock(db, term_id, instructor_id)
        if lock is None:
            raise
        return lock


def ensure_office_hours_unlocked(db: Session, term_id: str, instructor_id: str) -> None:
    if get_instructor_lock_state(db, term_id, instructor_id).locked:
        logger.info("Rejected office-hours mutation for instructor %s in term %s", instructor_id, term_id)
        raise OfficeHoursLockedError(term_id, instructor_id)


def lock_instructor_office_hours(db: Session, term_id: str, instructor_id: str, principal: str | None) -> LockTransition:
    lock = ensure_instructor_lock(db, term_id, instructor_id)
    if lock.office_hours_locked:
        return LockTransition(scope=OFFICE_HOURS_SCOPE, state=_office_lock_state(lock), changed=False)

    lock.office_hours_locked = True
    lock.office_hours_locked_at = _now()
    lock.office_hours_locked_by = principal
    db.flush()

    logger.info("Office hours locked for instructor %s in term %s by %s", instructor_id, term_id, principal)
    return LockTransition(scope=OFFICE_HOURS_SCOPE, state=_office_lock_state(lock), changed=True)


def unlock_instructor_office_hours(db: Session, term_id: str, instructor_id: str) -> LockTransition:
    lock = ensure_instructor_lock(db, term_id, instructor_id)
    if not lock.office_hours_locked:
        return LockTransition(scope=OFFICE_HOURS_SCOPE, state=_office_lock_state(lock), changed=False)

    lock.office_hours_locked = False
    lock.office_hours_locked_at = None
    lock.office_hours_locked_by = None
    db.flush()

    logger.info("Office hours unlocked for instructor %s in term %s", instructor_id, term_id)
    return LockTransition(scope=OFFICE_HOURS_SCOPE, state=_office_lock_state(lock), changed=True)
