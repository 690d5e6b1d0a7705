"""
Shared fixtures.

The Motor database dependency is replaced by an in-memory mongomock-motor
database, fresh for every test. ``client`` keeps cookies between calls, so
signing in once authenticates the requests that follow.
"""

import os

os.environ["MONGODB_URL"] = "mongodb://localhost:27017/projectboard_test"
os.environ["SESSION_SECRET_KEY"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from projectboard.db.mongodb import get_database
from projectboard.main import create_app
from projectboard.models.users import UserCreate
from projectboard.services import users as user_service

CREDENTIALS = {"username": "username", "password": "password"}


@pytest.fixture
def database():
    return AsyncMongoMockClient()["projectboard_test"]


@pytest.fixture
def app(database):
    app = create_app()

    async def _override_get_database():
        return database

    app.dependency_overrides[get_database] = _override_get_database
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def user(database):
    """A stored local user matching ``CREDENTIALS``."""
    return await user_service.create_user(
        UserCreate(
            firstName="Full",
            lastName="Name",
            email="full.name@projectboard.io",
            **CREDENTIALS,
        ),
        database,
    )


@pytest.fixture
def credentials():
    return dict(CREDENTIALS)


@pytest_asyncio.fixture
async def signed_in(client, user, credentials):
    response = await client.post("/auth/signin", json=credentials)
    assert response.status_code == 200
    return user


@pytest.fixture
def project_payload(user):
    """Body sent by clients, including fields the server must ignore."""
    return {
        "title": "Project Name",
        "description": "desc",
        "industry": "test ind",
        "referred": "",
        "created": 1700000000000,
        "user": str(user.id),
    }
