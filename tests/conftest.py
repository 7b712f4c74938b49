"""
Pytest fixtures for the store, analytics and API tests.
Every test gets its own in-memory SQLite database.
"""
import os
from datetime import datetime, timedelta, timezone

# Must be set before config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SEED_DATABASE", "false")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from broadcaster import get_connection_registry
from config import settings
from database import Base, get_db
from main import app

NOW = datetime(2026, 3, 18, 12, 0, 0)  # a Wednesday


class RecordingRegistry:
    """Stands in for the live ConnectionRegistry and keeps every broadcast."""

    def __init__(self):
        self.events = []

    async def broadcast(self, event_type, data):
        self.events.append((event_type, data))
        return 0


def make_token(user_id, email=None):
    payload = {"id": user_id, "email": email or f"{user_id}@test.example"}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def days_ago(days, hours=0):
    return utcnow() - timedelta(days=days, hours=hours)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def registry():
    return RecordingRegistry()


@pytest.fixture
def client(session_factory, registry):
    """TestClient wired to the per-test database and a recording registry."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_connection_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_report(db):
    """Insert a report directly; keyword overrides win over the defaults."""
    def _make(**overrides):
        fields = {
            "latitude": 11.0168,
            "longitude": 76.9558,
            "decibel_level": 60,
            "noise_category": "medium",
            "noise_source": "Traffic",
            "timestamp": NOW - timedelta(days=1),
        }
        fields.update(overrides)
        report = models.NoiseReport(**fields)
        db.add(report)
        db.commit()
        return report
    return _make


@pytest.fixture
def make_zone(db):
    def _make(**overrides):
        fields = {
            "name": "Coimbatore Public Library",
            "type": "library",
            "latitude": 11.0168,
            "longitude": 76.9558,
            "avg_decibels": 30,
            "amenities": ["WiFi", "AC"],
        }
        fields.update(overrides)
        zone = models.QuietZone(**fields)
        db.add(zone)
        db.commit()
        return zone
    return _make
