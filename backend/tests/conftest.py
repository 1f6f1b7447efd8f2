"""Pytest fixtures: per-test SQLite database, API client, recording email provider."""
import os
import threading
from datetime import datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from app.database import Base, get_db
from app.emails.provider import get_email_provider
from app.main import app

# Import all models so they register with Base.metadata
from app.models.user import User                      # noqa: F401
from app.models.event import Event, Shift             # noqa: F401
from app.models.rsvp import Rsvp
from app.models.carpool import Carpool, CarpoolMember  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"
BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


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

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class RecordingEmailProvider:
    """In-memory provider; addresses in ``fail_for`` raise like a rejected API call."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()
        self._lock = threading.Lock()

    def send(self, message):
        if message.to in self.fail_for:
            raise RuntimeError(f"provider rejected {message.to}")
        with self._lock:
            self.sent.append(message)

    def sent_to(self, address: str):
        return [m for m in self.sent if m.to == address]


@pytest.fixture(scope="function")
def email_provider(client):
    provider = RecordingEmailProvider()
    app.dependency_overrides[get_email_provider] = lambda: provider
    return provider


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth(user: dict) -> dict:
    """Headers the auth gateway would forward for ``user``."""
    return {"X-User-Id": user["user_id"]}


def create_test_user(client: TestClient, name: str = "Test User", role: str = "member",
                     phone_number: str = None) -> dict:
    """Helper: POST /api/users and return response JSON."""
    email = f"{name.lower().replace(' ', '.')}@example.edu"
    resp = client.post("/api/users/", json={
        "name": name,
        "email": email,
        "phone_number": phone_number,
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def create_test_event(client: TestClient, board_user: dict, title: str = "Blood Drive",
                      is_offsite: bool = True) -> dict:
    """Helper: POST /api/events as a board member and return response JSON."""
    start = datetime.now(timezone.utc) + timedelta(days=7)
    resp = client.post("/api/events/", headers=auth(board_user), json={
        "title": title,
        "description": "Volunteer shift",
        "location": "Community Center",
        "start_time_utc": start.isoformat(),
        "end_time_utc": (start + timedelta(hours=3)).isoformat(),
        "is_offsite": is_offsite,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


def seed_rsvp(db, event_id: str, user: dict, minutes: int, needs_ride: bool = False,
              capacity: int = None, self_transport: bool = False) -> str:
    """Insert an RSVP with a controlled creation time; ``capacity`` makes it a driver."""
    rsvp = Rsvp(
        event_id=event_id,
        user_id=user["user_id"],
        needs_ride=needs_ride,
        can_drive=capacity is not None,
        self_transport=self_transport,
        car_type="Civic" if capacity is not None else None,
        car_color="Blue" if capacity is not None else None,
        capacity=capacity,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(rsvp)
    db.commit()
    return rsvp.rsvp_id
