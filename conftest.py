"""
Shared pytest fixtures.

The environment is pointed at a throwaway SQLite database before any
collabspace module is imported, because settings and the engine are
created at import time.
"""
import os
import tempfile

_TEST_DB_DIR = tempfile.mkdtemp(prefix="collabspace-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'collabspace_test.db')}"
os.environ["FIREBASE_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["STREAK_DEFAULT_TIMEZONE"] = "UTC"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from collabspace import crud
from collabspace.database import Base, get_engine, get_session_local
from collabspace.dependencies import get_utc_now
from collabspace.main import app

# A Tuesday morning, far from any DST switch
START = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class Clock:
    """Mutable 'now' shared between a test and the app under test."""

    def __init__(self, now: datetime):
        self.now = now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(autouse=True)
def reset_database():
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = get_session_local()()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    return crud.create_user(db, "user-ada", "ada@example.com", "Ada", state="active")


@pytest.fixture
def other_user(db):
    return crud.create_user(db, "user-grace", "grace@example.com", "Grace", state="active")


@pytest.fixture
def clock():
    return Clock(START)


@pytest.fixture
def client(clock):
    app.dependency_overrides[get_utc_now] = clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user):
    return {"X-User-ID": user.id}
