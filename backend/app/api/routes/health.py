from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import Connection

from app.core.config import get_settings
from app.db.bootstrap import REQUIRED_COLUMNS
from app.db.session import engine
from app.models.term import Term

router = APIRouter()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name in missing_tables:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        gaps = sorted(required - existing)
        if gaps:
            missing_columns[table_name] = gaps
    return missing_tables, missing_columns


def _term_lock_counts(connection: Connection) -> dict[str, int]:
    total = connection.execute(select(func.count(Term.id))).scalar_one()
    locked = connection.execute(
        select(func.count(Term.id)).where(Term.schedule_locked.is_(True))
    ).scalar_one()
    return {"terms": int(total), "locked_terms": int(locked)}


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": _utc_now()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    settings = get_settings()
    database = {
        "ok": True,
        "schema_ok": False,
        "missing_tables": [],
        "missing_columns": {},
        "error": None,
    }
    schedule: dict[str, int] | None = None

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            missing_tables, missing_columns = _schema_gaps(connection)
            database["missing_tables"] = missing_tables
            database["missing_columns"] = missing_columns
            database["schema_ok"] = not missing_tables and not missing_columns
            if database["schema_ok"]:
                schedule = _term_lock_counts(connection)
    except Exception as exc:  # pragma: no cover - environment dependent
        database["ok"] = False
        database["error"] = str(exc)

    ready = database["ok"] and database["schema_ok"]
    payload = {
        "status": "ok" if ready else "degraded",
        "timestamp": _utc_now(),
        "database": database,
        "schedule": schedule,
        "defaults": {
            "buffer_minutes": settings.default_buffer_minutes,
            "weeks_in_term": settings.default_weeks_in_term,
            "office_hours_min_minutes_per_week": settings.office_hours_min_minutes_per_week,
            "office_hours_min_distinct_days": settings.office_hours_min_distinct_days,
        },
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
