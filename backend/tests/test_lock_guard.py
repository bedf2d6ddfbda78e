import pytest
from sqlalchemy import func, select

from app.core.exceptions import OfficeHoursLockedError, ScheduleLockedError
from app.models.instructor import Instructor
from app.models.instructor_term_lock import InstructorTermLock
from app.models.term import Term
from app.services.lock_guard import (
    ensure_instructor_lock,
    ensure_office_hours_unlocked,
    ensure_term_unlocked,
    get_instructor_lock_state,
    lock_instructor_office_hours,
    lock_term_schedule,
    unlock_instructor_office_hours,
    unlock_term_schedule,
)


@pytest.fixture
def term_and_instructor(db_session):
    term = Term(code="FA26", name="Fall 2026", weeks_in_term=15, slot_minutes=15, buffer_minutes=10)
    instructor = Instructor(name="Grace Hopper", email="hopper@example.edu", is_full_time=True)
    db_session.add_all([term, instructor])
    db_session.commit()
    return term, instructor


def _lock_rows(db_session) -> int:
    return db_session.execute(select(func.count()).select_from(InstructorTermLock)).scalar_one()


def test_reading_lock_state_never_creates_a_row(db_session, term_and_instructor):
    term, instructor = term_and_instructor
    state = get_instructor_lock_state(db_session, term.id, instructor.id)
    assert state.locked is False
    ensure_office_hours_unlocked(db_session, term.id, instructor.id)
    assert _lock_rows(db_session) == 0


def test_ensure_instructor_lock_is_idempotent(db_session, term_and_instructor):
    term, instructor = term_and_instructor
    first = ensure_instructor_lock(db_session, term.id, instructor.id)
    second = ensure_instructor_lock(db_session, term.id, instructor.id)
    db_session.commit()
    assert first.id == second.id
    assert _lock_rows(db_session) == 1


def test_office_hours_lock_transitions(db_session, term_and_instructor):
    term, instructor = term_and_instructor

    locked = lock_instructor_office_hours(db_session, term.id, instructor.id, "registrar@example.edu")
    db_session.commit()
    assert locked.changed is True
    assert locked.state.locked is True
    assert locked.state.locked_by == "registrar@example.edu"
    assert locked.state.locked_at is not None

    again = lock_instructor_office_hours(db_session, term.id, instructor.id, "someone-else")
    assert again.changed is False
    assert again.state.locked_by == "registrar@example.edu"

    with pytest.raises(OfficeHoursLockedError) as exc_info:
        ensure_office_hours_unlocked(db_session, term.id, instructor.id)
    assert exc_info.value.status_code == 403
    assert exc_info.value.details["blocked_by_lock"] == "instructor_office_hours"

    unlocked = unlock_instructor_office_hours(db_session, term.id, instructor.id)
    db_session.commit()
    assert unlocked.changed is True
    assert unlocked.state.locked is False
    assert unlocked.state.locked_at is None
    assert unlocked.state.locked_by is None
    assert _lock_rows(db_session) == 1


def test_term_schedule_lock_transitions(db_session, term_and_instructor):
    term, _ = term_and_instructor

    transition = lock_term_schedule(db_session, term, "registrar@example.edu")
    db_session.commit()
    assert transition.changed is True
    assert transition.warnings == []
    assert term.schedule_locked is True

    with pytest.raises(ScheduleLockedError) as exc_info:
        ensure_term_unlocked(term)
    assert exc_info.value.details == {"blocked_by_lock": "term_schedule"}

    assert lock_term_schedule(db_session, term, "registrar@example.edu").changed is False

    released = unlock_term_schedule(db_session, term)
    db_session.commit()
    assert released.changed is True
    assert term.schedule_locked_at is None
    assert term.schedule_locked_by is None
    assert unlock_term_schedule(db_session, term).changed is False
    ensure_term_unlocked(term)
