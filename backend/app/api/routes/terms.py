from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db, require_schedulers
from app.core.config import get_settings
from app.core.security import Principal
from app.models.term import Term
from app.schemas.conflict import InstructorConflictOut, RoomConflictOut
from app.schemas.lock import LockTransitionOut
from app.schemas.readiness import (
    InstructionalMinutesOut,
    MeetingBlockIssueOut,
    OfficeHoursComplianceOut,
    ReadinessOut,
    ReadinessSummaryOut,
    SectionIssueOut,
)
from app.schemas.term import TermCreate, TermOut, TermUpdate
from app.services.conflict_service import format_class_label
from app.services.lock_guard import LockTransition, lock_term_schedule, unlock_term_schedule
from app.services.readiness import ReadinessReport, compute_readiness, readiness_warnings
from app.services.schedule_records import ClassBlockRecord
from app.services.schedule_snapshot import get_term_or_404, load_term_snapshot

router = APIRouter()


def _transition_out(transition: LockTransition, message: str) -> LockTransitionOut:
    return LockTransitionOut(
        scope=transition.scope,
        locked=transition.state.locked,
        locked_at=transition.state.locked_at,
        locked_by=transition.state.locked_by,
        changed=transition.changed,
        warnings=transition.warnings,
        message=message,
    )


def _section_id(block) -> str | None:
    return block.section_id if isinstance(block, ClassBlockRecord) else None


def readiness_out(report: ReadinessReport) -> ReadinessOut:
    return ReadinessOut(
        term_id=report.term_id,
        buffer_minutes=report.buffer_minutes,
        summary=ReadinessSummaryOut(
            sections_missing_instructor=len(report.sections_missing_instructor),
            sections_missing_meeting_blocks=len(report.sections_missing_meeting_blocks),
            meeting_blocks_missing_room=len(report.meeting_blocks_missing_room),
            room_conflicts=len(report.room_conflicts),
            instructor_conflicts=len(report.instructor_conflicts),
            minutes_failing=len(report.minutes_failing),
            office_hours_failing=len(report.office_hours_failing),
            ready=report.is_ready,
            warnings=readiness_warnings(report),
        ),
        sections_missing_instructor=[
            SectionIssueOut(section_id=s.id, course_code=s.course_code, section_code=s.section_code)
            for s in report.sections_missing_instructor
        ],
        sections_missing_meeting_blocks=[
            SectionIssueOut(section_id=s.id, course_code=s.course_code, section_code=s.section_code)
            for s in report.sections_missing_meeting_blocks
        ],
        meeting_blocks_missing_room=[
            MeetingBlockIssueOut(block_id=b.id, section_id=b.section_id, label=format_class_label(b))
            for b in report.meeting_blocks_missing_room
        ],
        room_conflicts=[
            RoomConflictOut(
                room_id=pair.room_id,
                room_name=pair.room_name,
                a_block_id=pair.a.id,
                b_block_id=pair.b.id,
                a_label=format_class_label(pair.a),
                b_label=format_class_label(pair.b),
            )
            for pair in report.room_conflicts
        ],
        instructor_conflicts=[
            InstructorConflictOut(
                instructor_id=pair.instructor_id,
                kind=pair.kind,
                a_block_id=pair.a.id,
                b_block_id=pair.b.id,
                a_label=pair.a_label,
                b_label=pair.b_label,
                a_section_id=_section_id(pair.a),
                b_section_id=_section_id(pair.b),
            )
            for pair in report.instructor_conflicts
        ],
        instructional_minutes=[InstructionalMinutesOut.model_validate(row) for row in report.instructional_minutes],
        office_hours_compliance=[
            OfficeHoursComplianceOut.model_validate(row) for row in report.office_hours_compliance
        ],
    )


@router.get("/", response_model=list[TermOut])
def list_terms(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> list[TermOut]:
    return list(db.execute(select(Term).order_by(Term.starts_on.desc(), Term.code)).scalars())


@router.post("/", response_model=TermOut, status_code=status.HTTP_201_CREATED)
def create_term(
    payload: TermCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> TermOut:
    existing = db.execute(select(Term).where(Term.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Term code already exists")
    settings = get_settings()
    data = payload.model_dump()
    for field, default in (
        ("weeks_in_term", settings.default_weeks_in_term),
        ("slot_minutes", settings.default_slot_minutes),
        ("buffer_minutes", settings.default_buffer_minutes),
    ):
        if data[field] is None:
            data[field] = default
    term = Term(**data)
    db.add(term)
    db.commit()
    db.refresh(term)
    return term


@router.get("/{term_id}", response_model=TermOut)
def get_term(
    term_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> TermOut:
    return get_term_or_404(db, term_id)


@router.put("/{term_id}", response_model=TermOut)
def update_term(
    term_id: str,
    payload: TermUpdate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> TermOut:
    term = get_term_or_404(db, term_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(term, key, value)
    db.commit()
    db.refresh(term)
    return term


@router.post("/{term_id}/schedule/lock", response_model=LockTransitionOut)
def lock_schedule(
    term_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> LockTransitionOut:
    term = get_term_or_404(db, term_id)
    transition = lock_term_schedule(db, term, principal.id)
    db.commit()
    if not transition.changed:
        return _transition_out(transition, f"Schedule is already locked for term {term.code}.")
    message = f"Schedule locked for term {term.code}."
    if transition.warnings:
        message += " Warning: " + " | ".join(transition.warnings)
    return _transition_out(transition, message)


@router.post("/{term_id}/schedule/unlock", response_model=LockTransitionOut)
def unlock_schedule(
    term_id: str,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> LockTransitionOut:
    term = get_term_or_404(db, term_id)
    transition = unlock_term_schedule(db, term)
    db.commit()
    if not transition.changed:
        return _transition_out(transition, f"Schedule is already unlocked for term {term.code}.")
    return _transition_out(transition, f"Schedule unlocked for term {term.code}.")


@router.get("/{term_id}/readiness", response_model=ReadinessOut)
def get_readiness(
    term_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> ReadinessOut:
    return readiness_out(compute_readiness(load_term_snapshot(db, term_id)))
