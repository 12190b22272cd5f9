"""Pytest configuration and fixtures."""

import asyncio
import os
import secrets
from pathlib import Path

import pytest

# Generate a unique test secret for this test run to prevent token forgery
_TEST_JWT_SECRET = f"test-only-{secrets.token_urlsafe(32)}"

# For unit tests, set mock values ONLY if not running integration tests
if not os.environ.get("RUN_INTEGRATION"):
    os.environ.setdefault("ACCESS_TOKEN", _TEST_JWT_SECRET)
    os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")
    os.environ.setdefault("ENVIRONMENT", "development")
else:
    # For integration tests, load from .env
    from dotenv import load_dotenv

    load_dotenv(Path(__file__).parent.parent / ".env", override=True)

from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

from findjobs.auth import AUTH_COOKIE_NAME, create_access_token  # noqa: E402
from findjobs.config import get_settings  # noqa: E402
from findjobs.database import ensure_indexes, get_db  # noqa: E402
from findjobs.main import app  # noqa: E402


@pytest.fixture
def db():
    """Fresh in-memory job board database with production indexes."""
    database = AsyncMongoMockClient()["find-jobs-test"]
    asyncio.run(ensure_indexes(database))
    return database


@pytest.fixture
def client(db):
    """Create a test client backed by the in-memory database."""
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_token():
    """Factory for auth tokens signed with the test secret."""
    def _make(email: str, **extra) -> str:
        return create_access_token({"email": email, **extra}, get_settings())
    return _make


@pytest.fixture
def login(client, make_token):
    """Put an auth cookie for ``email`` on the test client."""
    def _login(email: str) -> None:
        client.cookies.set(AUTH_COOKIE_NAME, make_token(email))
    return _login


@pytest.fixture
def job_payload():
    """A valid job posting owned by a@x.com."""
    def _payload(**overrides) -> dict:
        payload = {
            "job_title": "Logo Design",
            "category": "design",
            "deadline": "2024-01-01",
            "description": "A clean logo for a bakery",
            "min_price": 50,
            "max_price": 150,
            "buyer": {"email": "a@x.com", "name": "Alice"},
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def bid_payload():
    """A valid bid from b@x.com on a job owned by a@x.com."""
    def _payload(**overrides) -> dict:
        payload = {
            "email": "b@x.com",
            "jobId": "65a1f0c2e4b0a1b2c3d4e5f6",
            "price": 120,
            "comment": "I can do this in two days",
            "job_title": "Logo Design",
            "buyer": {"email": "a@x.com"},
        }
        payload.update(overrides)
        return payload
    return _payload
