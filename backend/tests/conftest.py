import os
import tempfile

# Point the app-level engine at a throwaway sqlite file before app.* is imported,
# so the lifespan schema bootstrap never reaches for a real database server.
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="term-scheduling-tests-"), "bootstrap.db"),
)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.core.security import PrincipalRole, create_access_token  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def auth_headers(role: PrincipalRole = PrincipalRole.scheduler, subject: str = "registrar@example.edu") -> dict:
    token = create_access_token(subject, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def scheduler_headers():
    return auth_headers(PrincipalRole.scheduler)


@pytest.fixture()
def viewer_headers():
    return auth_headers(PrincipalRole.viewer, subject="viewer@example.edu")


def create_resource(client, path, payload, headers):
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def seed_term(client, headers, *, buffer_minutes=None):
    term_payload = {"code": "FA26", "name": "Fall 2026"}
    if buffer_minutes is not None:
        term_payload["buffer_minutes"] = buffer_minutes
    term = create_resource(client, "/api/terms/", term_payload, headers)
    course = create_resource(
        client,
        "/api/catalog/courses",
        {"code": "MATH 101", "title": "Calculus I", "credits": 3, "lecture_hours_per_week": 3, "lab_hours_per_week": 0},
        headers,
    )
    room = create_resource(client, "/api/catalog/rooms", {"name": "R101", "building": "Science"}, headers)
    ada = create_resource(
        client, "/api/catalog/instructors", {"name": "Ada Lovelace", "email": "ada@example.edu"}, headers
    )
    alan = create_resource(
        client, "/api/catalog/instructors", {"name": "Alan Turing", "email": "alan@example.edu"}, headers
    )
    offering = create_resource(
        client, f"/api/terms/{term['id']}/offerings", {"catalog_course_id": course["id"]}, headers
    )
    return {"term": term, "course": course, "room": room, "ada": ada, "alan": alan, "offering": offering}


def add_section(client, headers, data, section_code, instructor_id=None, modality="IN_PERSON"):
    return create_resource(
        client,
        f"/api/terms/{data['term']['id']}/sections",
        {
            "offering_id": data["offering"]["id"],
            "section_code": section_code,
            "instructor_id": instructor_id,
            "modality": modality,
        },
        headers,
    )


def block_path(data, section):
    return f"/api/terms/{data['term']['id']}/sections/{section['id']}/meeting-blocks"
