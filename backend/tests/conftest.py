"""Pytest fixtures: SQLite database for fast, isolated tests."""
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from confhub.database import Base, get_db, get_session_factory
from confhub.domain import Role
from confhub.main import app

# Import all models so they register with Base.metadata
from confhub.models.profile import Profile                                  # noqa: F401
from confhub.models.event import Event, EventSpeaker                        # noqa: F401
from confhub.models.attendee import EventAttendee                           # noqa: F401
from confhub.models.mic_request import MicRequest                           # noqa: F401
from confhub.models.complaint import Complaint                              # noqa: F401
from confhub.models.notification import Notification, NotificationOutbox    # noqa: F401
from confhub.models.feedback import Feedback                                # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db(session_factory):
    """Yield a database session, closed after the test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(session_factory):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def create_test_profile(db, name: str = "Test User", role: Role = Role.attendee) -> dict:
    """Insert a profile directly (roles are never client-assigned) and return it as a dict."""
    profile = Profile(name=name, email=f"{name.lower().replace(' ', '.')}@example.com", role=role)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return {"id": profile.id, "name": profile.name, "role": profile.role.value}


def auth(profile: dict) -> dict:
    """Headers identifying ``profile`` as the session user."""
    return {"X-User-Id": profile["id"]}


def create_test_event(client: TestClient, staff: dict, title: str = "Tech Summit", **overrides) -> dict:
    """POST /api/events and return response JSON."""
    payload = {
        "title": title,
        "description": "Annual conference",
        "date": "2026-11-20",
        "time": "09:30:00",
        "venue": "Hall A",
        "capacity": 100,
        "speakers": ["Ada Lovelace", "Alan Turing"],
    }
    payload.update(overrides)
    resp = client.post("/api/events/", json=payload, headers=auth(staff))
    assert resp.status_code == 201, resp.text
    return resp.json()


def submit_mic_request(client: TestClient, attendee: dict, event_id: str, reason: str = "Q&A") -> dict:
    resp = client.post("/api/mic-requests/", json={"event_id": event_id, "reason": reason}, headers=auth(attendee))
    assert resp.status_code == 201, resp.text
    return resp.json()


def submit_complaint(
    client: TestClient,
    attendee: dict,
    event_id: str,
    issue_type: str = "Technical Problem",
    description: str = "The projector keeps flickering",
) -> dict:
    resp = client.post(
        "/api/complaints/",
        json={"event_id": event_id, "issue_type": issue_type, "description": description},
        headers=auth(attendee),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()
