from __future__ import annotations

import logging

from sqlalchemy import inspect, text

import app.models  # noqa: F401
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "terms": {
        "id",
        "code",
        "weeks_in_term",
        "buffer_minutes",
        "schedule_locked",
        "schedule_locked_at",
        "schedule_locked_by",
    },
    "catalog_courses": {
        "id",
        "code",
        "lecture_hours_per_week",
        "lab_hours_per_week",
        "contact_hours_per_week",
    },
    "meeting_blocks": {"id", "section_id", "days", "starts_at", "ends_at", "room_id"},
    "office_hour_blocks": {"id", "term_id", "instructor_id", "days", "starts_at", "ends_at"},
    "instructor_term_locks": {
        "id",
        "term_id",
        "instructor_id",
        "office_hours_locked",
        "office_hours_locked_at",
        "office_hours_locked_by",
    },
}


def _ensure_term_schedule_lock_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "terms" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("terms")}
        if "schedule_locked" not in column_names:
            default = "false" if connection.dialect.name == "postgresql" else "0"
            connection.execute(
                text(f"ALTER TABLE terms ADD COLUMN schedule_locked BOOLEAN NOT NULL DEFAULT {default}")
            )
        if "schedule_locked_at" not in column_names:
            timestamp_type = "TIMESTAMP WITH TIME ZONE" if connection.dialect.name == "postgresql" else "DATETIME"
            connection.execute(text(f"ALTER TABLE terms ADD COLUMN schedule_locked_at {timestamp_type}"))
        if "schedule_locked_by" not in column_names:
            connection.execute(text("ALTER TABLE terms ADD COLUMN schedule_locked_by VARCHAR(100)"))


def _ensure_course_contact_hours_column() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "catalog_courses" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("catalog_courses")}
        if "contact_hours_per_week" in column_names:
            return
        connection.execute(text("ALTER TABLE catalog_courses ADD COLUMN contact_hours_per_week FLOAT"))


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        # Ensure missing tables are present before additive compatibility patches.
        Base.metadata.create_all(bind=engine)
        _ensure_term_schedule_lock_columns()
        _ensure_course_contact_hours_column()
        _assert_required_columns()
    except Exception as exc:
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
