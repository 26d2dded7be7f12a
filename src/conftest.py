import contextlib

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.config.database import engine
from src.main import app
from src.models.base import BaseModel
from src.rsvps.repository import orm_models  # noqa: F401  registers the tables


@pytest_asyncio.fixture
async def db():
    """Create every table in the test database, and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)


@pytest.fixture
def client_factory():
    """Build a test client with some dependencies overridden.

    Usage::

        async with client_factory({get_x: lambda: fake_x}) as client:
            ...
    """

    @contextlib.asynccontextmanager
    async def _factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return _factory


@pytest_asyncio.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac
