"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from library_management.database import Base, get_db
from library_management.main import app
from library_management.repositories.user_repository import UserRepository
from library_management.models.enums import Role
from library_management.schemas.user import UserCreate
from library_management.services.hashing import CredentialHasher

# Use test database - PostgreSQL when DATABASE_URL is set, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/library", "/library_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpass123"


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

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


@pytest.fixture
def hasher():
    """Bcrypt hasher with the minimum cost, to keep tests fast."""
    return CredentialHasher(CryptContext(schemes=["bcrypt"], bcrypt__rounds=4))


@pytest.fixture
def repository(db, hasher):
    """User repository bound to the test session."""
    return UserRepository(db, hasher, reset_token_hours=24)


@pytest.fixture
def alice(repository):
    """A registered user."""
    return repository.create(
        UserCreate(
            email="alice@mail.com",
            name="Alice",
            phone_number="123",
            password=TEST_PASSWORD,
        )
    )


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


@pytest.fixture
def registered_user(client):
    """Register a user through the API and return its JSON."""
    response = client.post(
        "/api/v1/users",
        json={
            "email": "test@example.com",
            "name": "Test User",
            "phone_number": "555-0100",
            "password": TEST_PASSWORD,
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(client, registered_user):
    """Log the registered user in and return bearer auth headers."""
    return login_headers(client, registered_user["email"])


@pytest.fixture
def other_db(db):
    """A second, independent session on the test database."""
    session = TestingSessionLocal()
    yield session
    session.rollback()
    session.close()


def login_headers(client, email: str, password: str = TEST_PASSWORD) -> dict[str, str]:
    """Log in through the API and return bearer auth headers."""
    response = client.post("/api/v1/users/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, repository):
    """Create an admin account and return its auth headers."""
    repository.create(
        UserCreate(
            email="admin@example.com",
            name="Librarian",
            phone_number="555-0001",
            password=TEST_PASSWORD,
            role=Role.ADMIN,
        )
    )
    return login_headers(client, "admin@example.com")
