"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient

from sprintsync.config import Settings
from sprintsync.database import Base, Database, get_db, init_db
from sprintsync.main import create_app


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and username."""

    def __init__(self, *args, user_id: int | None = None, username: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.username = username


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/sprintsync", "/sprintsync_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

test_settings = Settings(
    database_url=SQLALCHEMY_DATABASE_URL,
    jwt_secret="test-secret",
    bcrypt_rounds=10,
    openai_api_key=None,
    environment="test",
    _env_file=None,
)
test_database = Database(SQLALCHEMY_DATABASE_URL)
app = create_app(test_settings, database=test_database)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        # For PostgreSQL, create the test database
        from sqlalchemy_utils import create_database, database_exists

        # Create test database if it doesn't exist
        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    init_db(test_database)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture
def settings():
    """Settings the test application was built with."""
    return test_settings


@pytest.fixture
def database():
    """The test database handle, for tests that need their own sessions."""
    return test_database


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = test_database.session()

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


def register(client, username: str, password: str = "password123", **extra) -> AuthHeaders:
    """Register a user and return auth headers carrying their id."""
    response = client.post(
        "/api/auth/register", json={"username": username, "password": password, **extra}
    )
    assert response.status_code == 201, response.text
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['token']}"},
        user_id=data["user"]["id"],
        username=username,
    )


@pytest.fixture
def auth_headers(client):
    """Create a regular user and return auth headers with user info."""
    return register(client, "testuser")


@pytest.fixture
def other_headers(client):
    """A second regular user."""
    return register(client, "otheruser")


@pytest.fixture
def admin_headers(client):
    """Create an admin user and return auth headers."""
    return register(client, "admin", "admin123", isAdmin=True)


@pytest.fixture
def register_user(client):
    """Factory fixture registering additional users."""

    def _register(username: str, password: str = "password123", **extra) -> AuthHeaders:
        return register(client, username, password, **extra)

    return _register
