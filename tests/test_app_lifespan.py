"""Tests for FastAPI lifespan context manager and process entry point.

Tests verify:
- The repository is built from the environment when none is injected
- An injected repository is used as-is and not closed
- An unreachable store is logged but does not stop startup
- Missing store configuration is fatal
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from app import create_app, lifespan, main
from domain.user.core.exceptions.user_errors import RepositoryError
from infrastructure.config import ConfigurationError
from infrastructure.user.in_memory_user_repository import InMemoryUserRepository


class TestLifespanContextManager:
    """Test suite for FastAPI lifespan context manager."""

    @pytest.mark.asyncio
    async def test_builds_repository_from_environment(self, monkeypatch):
        """
        GIVEN: USER_REPOSITORY=inmemory and no injected repository
        WHEN: Lifespan context manager is entered
        THEN: An in-memory repository is attached and released on exit
        """
        monkeypatch.setenv("USER_REPOSITORY", "inmemory")
        app = create_app()

        async with lifespan(app):
            assert isinstance(app.state.user_repository, InMemoryUserRepository)

        assert app.state.user_repository is None

    @pytest.mark.asyncio
    async def test_injected_repository_is_kept(self):
        repository = InMemoryUserRepository()
        repository.close = AsyncMock()  # type: ignore[method-assign]
        app = create_app(repository)

        async with lifespan(app):
            assert app.state.user_repository is repository

        assert app.state.user_repository is repository
        repository.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreachable_store_is_not_fatal(self, caplog):
        repository = InMemoryUserRepository()
        repository.ping = AsyncMock(side_effect=RepositoryError("connection refused"))  # type: ignore[method-assign]
        app = create_app(repository)

        with caplog.at_level(logging.INFO, logger="startup"):
            async with lifespan(app):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert "lifespan.store_unreachable error=connection refused" in messages
        assert "lifespan.ready" in messages

    @pytest.mark.asyncio
    async def test_connected_store_is_logged(self, caplog):
        app = create_app(InMemoryUserRepository())

        with caplog.at_level(logging.INFO, logger="startup"):
            async with lifespan(app):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert "lifespan.store_connected repository=InMemoryUserRepository" in messages

    @pytest.mark.asyncio
    async def test_missing_uri_is_fatal(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "mongodb")
        monkeypatch.delenv("MONGODB_URI", raising=False)
        app = create_app()

        with pytest.raises(ConfigurationError):
            async with lifespan(app):
                pass


class TestMain:
    def test_exits_when_uri_missing(self, monkeypatch, caplog):
        monkeypatch.setenv("USER_REPOSITORY", "mongodb")
        monkeypatch.delenv("MONGODB_URI", raising=False)

        with patch("app.uvicorn.run") as run, pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        run.assert_not_called()
        assert any("MONGODB_URI" in r.getMessage() for r in caplog.records)

    def test_serves_on_configured_port(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "inmemory")
        monkeypatch.setenv("PORT", "4000")
        monkeypatch.setenv("HOST", "127.0.0.1")

        with patch("app.uvicorn.run") as run:
            main()

        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 4000

    def test_default_port_is_3000(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "inmemory")
        monkeypatch.delenv("PORT", raising=False)

        with patch("app.uvicorn.run") as run:
            main()

        assert run.call_args.kwargs["port"] == 3000
