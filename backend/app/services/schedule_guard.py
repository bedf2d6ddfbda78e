from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.core.exceptions import ScheduleConflictError
from app.models.term import Term
from app.services.conflict_service import CandidateCheck, CandidateKind, ScheduleConflictService
from app.services.schedule_records import ClassBlockRecord
from app.services.schedule_snapshot import load_class_blocks, load_office_blocks

logger = logging.getLogger(__name__)


def _scoped_class_blocks(
    db: Session, term_id: str, *, room_id: str | None, instructor_id: str | None
) -> list[ClassBlockRecord]:
    blocks: dict[str, ClassBlockRecord] = {}
    if room_id:
        blocks.update((block.id, block) for block in load_class_blocks(db, term_id, room_id=room_id))
    if instructor_id:
        blocks.update((block.id, block) for block in load_class_blocks(db, term_id, instructor_id=instructor_id))
    return list(blocks.values())


def check_class_candidate(
    db: Session,
    term: Term,
    *,
    days: list[str],
    starts_at: str,
    ends_at: str,
    room_id: str | None,
    instructor_id: str | None,
    exclude_block_id: str | None = None,
) -> CandidateCheck:
    service = ScheduleConflictService(
        buffer_minutes=term.buffer_minutes,
        class_blocks=_scoped_class_blocks(db, term.id, room_id=room_id, instructor_id=instructor_id),
        office_blocks=load_office_blocks(db, term.id, instructor_id=instructor_id) if instructor_id else [],
    )
    return service.check_candidate_block(
        CandidateKind.class_block,
        days,
        starts_at,
        ends_at,
        room_id=room_id,
        instructor_id=instructor_id,
        exclude_block_id=exclude_block_id,
    )


def check_office_candidate(
    db: Session,
    term: Term,
    *,
    instructor_id: str,
    days: list[str],
    starts_at: str,
    ends_at: str,
    exclude_block_id: str | None = None,
) -> CandidateCheck:
    service = ScheduleConflictService(
        buffer_minutes=term.buffer_minutes,
        class_blocks=load_class_blocks(db, term.id, instructor_id=instructor_id),
        office_blocks=load_office_blocks(db, term.id, instructor_id=instructor_id),
    )
    return service.check_candidate_block(
        CandidateKind.office_block,
        days,
        starts_at,
        ends_at,
        instructor_id=instructor_id,
        exclude_block_id=exclude_block_id,
    )


def raise_on_conflict(check: CandidateCheck) -> None:
    if check.ok:
        return
    logger.info("Rejected %s block write: %s", check.kind.value, check.message)
    raise ScheduleConflictError(check.message, check.as_dict())
