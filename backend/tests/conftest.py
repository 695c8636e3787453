"""Shared fixtures: in-memory database, API client and signed test tokens."""

import os

# Settings are read once at import time, so these must be set before app imports.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["AUTH_ISSUER"] = ""
os.environ["AUTH_AUDIENCE"] = "https://api.workoutplanner.test"
os.environ["SEED_EXERCISES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models.base import Base
from app.services.auth_service import create_access_token
from app.services.rate_limiter import rate_limiter

USER_PERMISSIONS = [
    "read:exercises",
    "read:workouts",
    "write:workouts",
    "delete:workouts",
]

ADMIN_PERMISSIONS = [
    "read:users",
    "write:users",
    "delete:users",
    "read:exercises",
    "write:exercises",
    "delete:exercises",
    "read:workouts",
    "write:workouts",
    "delete:workouts",
]


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


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def make_headers(subject, email, permissions=USER_PERMISSIONS, role=None, nickname=None):
    """Authorization headers carrying a freshly signed HS256 token."""
    token = create_access_token(
        subject=subject,
        permissions=permissions,
        email=email,
        role=role,
        extra_claims={"nickname": nickname} if nickname else None,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers():
    return make_headers("auth0|alice", "alice@example.com", nickname="alice")


@pytest.fixture
def bob_headers():
    return make_headers("auth0|bob", "bob@example.com", nickname="bob")


@pytest.fixture
def admin_headers():
    return make_headers(
        "auth0|admin", "admin@example.com", permissions=ADMIN_PERMISSIONS, role="ADMIN",
        nickname="admin",
    )


@pytest.fixture
def make_exercise(client, admin_headers):
    """Create a catalog exercise through the API and return its JSON."""

    def _make(name="Back Squat", type="STRENGTH", muscle="QUADRICEPS", difficulty="INTERMEDIATE"):
        response = client.post(
            "/api/v1/exercises",
            json={
                "name": name,
                "type": type,
                "target_muscle_group": muscle,
                "difficulty_level": difficulty,
            },
            headers=admin_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def make_workout(client, alice_headers):
    """Create a workout for alice (or the given caller) and return its JSON."""

    def _make(name="Leg Day", headers=None, **fields):
        response = client.post(
            "/api/v1/workouts", json={"name": name, **fields}, headers=headers or alice_headers
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make
