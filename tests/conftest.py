"""Shared pytest fixtures for store, service and HTTP tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortener.dependencies import get_store
from shortener.main import app
from shortener.routes import RESERVED_CODES
from shortener.store import MappingStore


@pytest.fixture
def store() -> MappingStore:
    return MappingStore(reserved_codes=RESERVED_CODES)


@pytest_asyncio.fixture(scope="function")
async def client(store: MappingStore) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
