# tests/conftest.py
import os
import sys

# Deterministic settings, read by src.config at import time
os.environ["CLERK_JWT_KEY"] = "test-session-secret"
os.environ["CLERK_JWT_ALGORITHM"] = "HS256"
os.environ["CLERK_AUTHORIZED_PARTIES"] = ""
os.environ["IK_PUBLIC_KEY"] = "public_test"
os.environ["IK_SECRET_KEY"] = "private_test"
os.environ["IK_ENDPOINT"] = "https://media.example.com/test"

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from server import app
from src.database.models.user_chats import UserChats
from src.database.mongo import async_mongo_manager

TEST_DATABASE = "chats_test"


@pytest_asyncio.fixture(autouse=True)
async def _db_connection():
    """Bind a fresh in-memory MongoDB to the manager for each test.

    Every test starts from empty collections, so nothing needs cleaning up.
    """
    client = AsyncMongoMockClient()
    async_mongo_manager.use_database(client[TEST_DATABASE])
    await UserChats.ensure_indexes()

    try:
        yield async_mongo_manager.database
    finally:
        await async_mongo_manager.close()


@pytest_asyncio.fixture
async def async_client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
