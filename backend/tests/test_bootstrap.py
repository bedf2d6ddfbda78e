import pytest
from sqlalchemy import create_engine, inspect, text

from app.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_runtime_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(bootstrap, "_ensure_term_schedule_lock_columns", lambda: None)
    monkeypatch.setattr(bootstrap, "_ensure_course_contact_hours_column", lambda: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_columns",
        lambda: _raise_error("missing required schema"),
    )

    with pytest.raises(RuntimeError, match="Runtime schema compatibility bootstrap failed"):
        bootstrap.ensure_runtime_schema_compatibility()


def test_runtime_schema_bootstrap_adds_lock_columns_to_legacy_terms(monkeypatch, tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with engine.begin() as connection:
        connection.execute(
            text(
                "CREATE TABLE terms ("
                "id VARCHAR(36) PRIMARY KEY, code VARCHAR(50) NOT NULL, name VARCHAR(200) NOT NULL, "
                "starts_on DATE, ends_on DATE, weeks_in_term INTEGER NOT NULL DEFAULT 15, "
                "slot_minutes INTEGER NOT NULL DEFAULT 15, buffer_minutes INTEGER NOT NULL DEFAULT 10, "
                "created_at DATETIME, updated_at DATETIME)"
            )
        )
        connection.execute(
            text(
                "CREATE TABLE catalog_courses ("
                "id VARCHAR(36) PRIMARY KEY, code VARCHAR(50) NOT NULL, title VARCHAR(200) NOT NULL, "
                "credits FLOAT NOT NULL DEFAULT 0, lecture_hours_per_week FLOAT, lab_hours_per_week FLOAT, "
                "description TEXT, is_active BOOLEAN NOT NULL DEFAULT 1, created_at DATETIME, updated_at DATETIME)"
            )
        )
    monkeypatch.setattr(bootstrap, "engine", engine)

    bootstrap.ensure_runtime_schema_compatibility()

    inspector = inspect(engine)
    term_columns = {item["name"] for item in inspector.get_columns("terms")}
    course_columns = {item["name"] for item in inspector.get_columns("catalog_courses")}
    assert {"schedule_locked", "schedule_locked_at", "schedule_locked_by"} <= term_columns
    assert "contact_hours_per_week" in course_columns
    assert "instructor_term_locks" in inspector.get_table_names()
    engine.dispose()
