"""Pytest configuration and fixtures."""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

from workload_api.config import Settings
from workload_api.database import Base, Database, get_db
from workload_api.main import create_app
from workload_api.models.enums import Role
from workload_api.services.auth import create_access_token, create_user


class AuthHeaders(dict):
    """Dict subclass that also stores the user's id, username and email."""

    def __init__(self, *args, user_id: int | None = None, username=None, email=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/workload", "/workload_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_SETTINGS = Settings(
    database_url=SQLALCHEMY_DATABASE_URL,
    jwt_secret="test-secret",
    environment="test",
    log_level="WARNING",
)

database = Database(SQLALCHEMY_DATABASE_URL)

BASE_DATE = date(2024, 3, 1)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    database.create_all()
    yield
    database.dispose()


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = database.session()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def app():
    """Application built with the test settings."""
    return create_app(TEST_SETTINGS)


@pytest.fixture(scope="function")
def client(app, db):
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


@pytest.fixture
def make_user(db):
    """Factory creating a user directly in the store and returning auth headers."""

    def _make_user(username: str, role: Role = Role.USER, is_active: bool = True) -> AuthHeaders:
        user = create_user(
            db,
            username=username,
            email=f"{username}@example.com",
            password="password123",
            role=role,
            is_active=is_active,
        )
        token = create_access_token(user.id, TEST_SETTINGS)
        return AuthHeaders(
            {"Authorization": f"Bearer {token}"},
            user_id=user.id,
            username=user.username,
            email=user.email,
        )

    return _make_user


@pytest.fixture
def auth_headers(client):
    """Register a regular user through the API and return auth headers with user info."""
    response = client.post(
        "/api/auth/register",
        json={"username": "testuser", "email": "test@example.com", "password": "testpass123"},
    )
    assert response.status_code == 201
    data = response.json()

    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        username=data["user"]["username"],
        email=data["user"]["email"],
    )


@pytest.fixture
def other_headers(make_user):
    """A second regular user."""
    return make_user("otheruser")


@pytest.fixture
def admin_headers(make_user):
    """An administrator."""
    return make_user("admin", role=Role.ADMIN)


@pytest.fixture
def create_entry(client):
    """Factory posting a workload entry and returning the response body."""

    def _create_entry(headers, **overrides) -> dict:
        payload = {
            "project": "Backend API",
            "taskName": "Implement endpoint",
            "taskType": "development",
            "hoursSpent": 4,
            "date": BASE_DATE.isoformat(),
            "status": "planned",
            "priority": "medium",
        }
        payload.update(overrides)
        response = client.post("/api/workload", headers=headers, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create_entry
