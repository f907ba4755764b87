"""Shared fixtures: an in-memory database, an app and authenticated users."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from taskdesk.config import Settings
from taskdesk.db.session import create_db_engine
from taskdesk.main import create_app
from taskdesk.models.user import User, UserCreate
from taskdesk.services.users import create_user

TEST_PASSWORD = "secret1"


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory database and fast hashing."""
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def db_session(settings: Settings) -> Generator[Session, None, None]:
    """Create a test database session."""
    # Import all models to register them
    from taskdesk.models import Task, User  # noqa: F401

    engine = create_db_engine(settings)
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    engine.dispose()


@pytest.fixture
def test_user(db_session: Session, settings: Settings) -> User:
    """Create a test user."""
    return create_user(
        db_session,
        UserCreate(name="Test User", email="test@example.com", password=TEST_PASSWORD),
        rounds=settings.BCRYPT_ROUNDS,
    )


@pytest.fixture
def other_user(db_session: Session, settings: Settings) -> User:
    """Create a second user to check ownership scoping."""
    return create_user(
        db_session,
        UserCreate(name="Other User", email="other@example.com", password=TEST_PASSWORD),
        rounds=settings.BCRYPT_ROUNDS,
    )


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """HTTP client against a fresh app; the lifespan creates the tables."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client: TestClient):
    """Register through the API and return the response body."""

    def _register(name: str, email: str, password: str = TEST_PASSWORD) -> dict:
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register_user) -> dict[str, str]:
    """Bearer header for a freshly registered user."""
    body = register_user("Ann Lee", "ann@x.com")
    return {"Authorization": f"Bearer {body['token']}"}


@pytest.fixture
def other_headers(register_user) -> dict[str, str]:
    """Bearer header for a second, unrelated user."""
    body = register_user("Bob Ray", "bob@x.com")
    return {"Authorization": f"Bearer {body['token']}"}
