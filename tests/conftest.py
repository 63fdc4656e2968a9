"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from evently.database import Base, get_db
from evently.main import app


class AuthHeaders(dict):
    """Dict subclass that also stores the signed-up user's id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].rsplit("/", 1)[0] + "/evently_test"
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    from evently import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def signup(client, email: str, name: str, password: str = "testpass123") -> AuthHeaders:
    """Sign up a user and return bearer headers for them."""
    response = client.post(
        "/api/auth/signup",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return signup(client, "test@example.com", "Test User")


@pytest.fixture
def other_auth_headers(client):
    """A second user, for ownership and RSVP checks."""
    return signup(client, "other@example.com", "Other User")


@pytest.fixture
def event_payload():
    """A valid event creation body."""
    return {
        "title": "Tech Meetup",
        "description": "Talks and networking",
        "date": "2999-06-01",
        "time": "18:00",
        "location": "Innovation Hub, 123 Tech Street",
        "capacity": 2,
        "category": "Technology",
        "image_url": "https://example.com/meetup.jpg",
    }


@pytest.fixture
def create_event(client, event_payload):
    """Factory that creates an event as the given user."""

    def _create(headers, **overrides):
        response = client.post("/api/events", headers=headers, json={**event_payload, **overrides})
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def signup_user(client):
    """Factory that signs up an extra user and returns their headers."""

    def _signup(email: str, name: str = "Guest"):
        return signup(client, email, name)

    return _signup
