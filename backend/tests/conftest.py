import asyncio
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from motormingle.config import reset_server_config
from motormingle.main import app
from motormingle.mongo import get_mongo_db
from motormingle.services.access import issue_token


@pytest.fixture
def mdb():
    # fresh database per test
    return AsyncMongoMockClient()[f"carCollection_{uuid4().hex}"]


@pytest.fixture
def client(mdb):
    async def _mongo_override():
        return mdb

    app.dependency_overrides[get_mongo_db] = _mongo_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def run():
    """Run a store coroutine from a sync test."""

    def _run(coro):
        return asyncio.run(coro)

    return _run


@pytest.fixture
def auth_headers():
    def _headers(email="buyer@example.com"):
        return {"Authorization": f"Bearer {issue_token({'email': email})}"}

    return _headers


@pytest.fixture(autouse=True)
def _clean_server_config():
    reset_server_config()
    yield
    reset_server_config()
