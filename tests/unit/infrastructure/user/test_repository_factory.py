"""Unit tests for user repository factory.

Tests environment-based repository selection.
"""

import pytest

from infrastructure.config import ConfigurationError
from infrastructure.user.in_memory_user_repository import InMemoryUserRepository
from infrastructure.user.mongo_user_repository import MongoUserRepository
from infrastructure.user.repository_factory import create_user_repository


class TestUserRepositoryFactory:
    """Test create_user_repository() factory function."""

    def test_explicit_inmemory_selection(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "inmemory")
        repo = create_user_repository()
        assert isinstance(repo, InMemoryUserRepository)

    def test_case_insensitive_selection(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "InMemory")
        assert isinstance(create_user_repository(), InMemoryUserRepository)

    def test_default_is_mongodb_and_requires_uri(self, monkeypatch):
        monkeypatch.delenv("USER_REPOSITORY", raising=False)
        monkeypatch.delenv("MONGODB_URI", raising=False)

        with pytest.raises(ConfigurationError, match="MONGODB_URI"):
            create_user_repository()

    def test_mongodb_creates_mongo_repository(self, monkeypatch):
        """Motor connects lazily, so no server is needed to build it."""
        monkeypatch.setenv("USER_REPOSITORY", "mongodb")
        monkeypatch.setenv("MONGODB_URI", "mongodb://localhost:27017")
        monkeypatch.setenv("MONGODB_DATABASE", "clicker_test")

        repo = create_user_repository()

        assert isinstance(repo, MongoUserRepository)
        assert repo.collection.name == "users"
        repo.client.close()

    def test_invalid_backend_raises(self, monkeypatch):
        monkeypatch.setenv("USER_REPOSITORY", "redis")

        with pytest.raises(ConfigurationError, match="Invalid USER_REPOSITORY"):
            create_user_repository()
