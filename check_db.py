from sqlalchemy import select

from app.db.session import SessionLocal
from app.models.term import Term
from app.services.readiness import compute_readiness, readiness_warnings
from app.services.schedule_snapshot import load_term_snapshot

db = SessionLocal()
try:
    terms = db.execute(select(Term).order_by(Term.code)).scalars().all()
    print(f"Terms: {len(terms)}")
    for term in terms:
        state = f"locked by {term.schedule_locked_by} at {term.schedule_locked_at}" if term.schedule_locked else "unlocked"
        print(f"  - {term.code} ({state}, buffer {term.buffer_minutes} min)")
        report = compute_readiness(load_term_snapshot(db, term.id))
        for warning in readiness_warnings(report):
            print(f"      {warning}")
        print(f"      instructional minutes failing: {len(report.minutes_failing)}")
        print(f"      office hours failing: {len(report.office_hours_failing)}")
finally:
    db.close()
