"""Shared test fixtures.

Unit tests use the in-memory repository; endpoint tests drive the FastAPI
app through httpx.AsyncClient with an explicit ASGITransport. The app is
imported lazily so that domain/infrastructure tests do not load it.
"""

from __future__ import annotations

import os
from typing import Any, AsyncIterator, Iterator, cast

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from infrastructure.user.in_memory_user_repository import InMemoryUserRepository


@pytest.fixture(autouse=True)
def _restore_environ() -> Iterator[None]:
    """Undo os.environ changes (e.g. from load_dotenv) after each test."""
    saved = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture
def repository() -> InMemoryUserRepository:
    """Fresh in-memory repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def app(repository: InMemoryUserRepository) -> Any:
    """FastAPI application wired to the in-memory repository."""
    from app import create_app

    return create_app(repository)


@pytest_asyncio.fixture
async def client(app: Any) -> AsyncIterator[AsyncClient]:
    """Async HTTP client for REST tests.

    ASGITransport does not run the lifespan: the repository is injected
    through create_app instead.
    """
    transport = ASGITransport(app=cast(Any, app))
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
