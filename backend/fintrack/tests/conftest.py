"""
Shared fixtures: in-memory database, API client and registered users.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import fintrack.models  # noqa: F401
from fintrack.db.base import Base
from fintrack.db.session import get_db
from fintrack.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema per test and a session for direct setup/inspection."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """Test client whose requests use the in-memory database."""
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_user(client, name, email, password="secret123"):
    """
    Register a user and return {id, email, token, headers}.

    The auth cookie set by the response is cleared so later requests
    authenticate only with the headers they pass.
    """
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password}
    )
    assert response.status_code == 201, response.text
    client.cookies.clear()
    body = response.json()
    token = body["access_token"]
    return {
        "id": body["user"]["id"],
        "email": body["user"]["email"],
        "password": password,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


def create_transaction(client, headers, **overrides):
    """Create a transaction for the user behind `headers` and return its data."""
    payload = {
        "kind": "expense",
        "category": "Food",
        "amount": "10.00",
        "description": "Lunch",
        "date": "2024-01-10T12:00:00",
    }
    payload.update(overrides)
    response = client.post("/api/transactions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def alice(client):
    return register_user(client, "Alice", "alice@example.com")


@pytest.fixture
def bob(client):
    return register_user(client, "Bob", "bob@example.com")
