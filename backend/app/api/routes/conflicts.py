from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db
from app.core.exceptions import ResourceNotFoundError
from app.core.security import Principal
from app.models.enums import SectionModality
from app.models.offering import Offering
from app.models.section import Section
from app.schemas.conflict import CandidateCheckOut, CandidateCheckRequest
from app.services.conflict_service import CandidateKind
from app.services.schedule_guard import check_class_candidate, check_office_candidate
from app.services.schedule_snapshot import get_term_or_404

router = APIRouter()


@router.post("/{term_id}/conflicts/check", response_model=CandidateCheckOut)
def check_candidate(
    term_id: str,
    payload: CandidateCheckRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> CandidateCheckOut:
    """Dry-run the write-time conflict check without persisting anything."""
    term = get_term_or_404(db, term_id)

    if payload.kind == CandidateKind.office_block:
        if not payload.instructor_id:
            return CandidateCheckOut(ok=True, message="", conflicts={})
        check = check_office_candidate(
            db,
            term,
            instructor_id=payload.instructor_id,
            days=payload.days,
            starts_at=payload.starts_at,
            ends_at=payload.ends_at,
            exclude_block_id=payload.exclude_block_id,
        )
    else:
        room_id = payload.room_id
        instructor_id = payload.instructor_id
        if payload.section_id:
            section = db.get(Section, payload.section_id)
            offering = db.get(Offering, section.offering_id) if section is not None else None
            if offering is None or offering.term_id != term.id:
                raise ResourceNotFoundError("Section", payload.section_id)
            instructor_id = section.instructor_id
            if section.modality == SectionModality.online:
                room_id = None
        check = check_class_candidate(
            db,
            term,
            days=payload.days,
            starts_at=payload.starts_at,
            ends_at=payload.ends_at,
            room_id=room_id,
            instructor_id=instructor_id,
            exclude_block_id=payload.exclude_block_id,
        )

    return CandidateCheckOut(ok=check.ok, message=check.message, conflicts=check.as_dict())
