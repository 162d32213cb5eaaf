import os

# Must be set before the app modules read settings and build the engine
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy.exc import OperationalError

from app.api.dependencies import get_password_hasher, get_token_service
from app.core.database import Base, engine, get_db
from app.core.security import PasswordHasher
from app.main import app

# Minimum bcrypt cost keeps the suite fast
fast_hasher = PasswordHasher(CryptContext(schemes=["bcrypt"], bcrypt__rounds=4))

VALID_SIGNUP = {
    "full_name": "Ada Lovelace",
    "email": "ada@example.com",
    "password": "engine1843",
}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    app.dependency_overrides[get_password_hasher] = lambda: fast_hasher
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client, **overrides):
    payload = {**VALID_SIGNUP, **overrides}
    return client.post("/api/v1/auth/signup", json=payload)


@pytest.fixture
def auth_headers(client):
    response = signup(client)
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def broken_db():
    """Make every database call in the request fail like a lost connection"""
    error = OperationalError("SELECT 1", {}, Exception("connection lost"))
    session = MagicMock()
    session.query.side_effect = error
    session.commit.side_effect = error

    def _broken_get_db():
        yield session

    app.dependency_overrides[get_db] = _broken_get_db
    yield session
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def token_for():
    """Issue a token for an arbitrary user id with the app's token service"""
    return lambda user_id: get_token_service().issue(user_id)
