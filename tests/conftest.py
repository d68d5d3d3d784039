import pytest
from unittest.mock import AsyncMock, MagicMock

from firegit import FireGit, MemoryStore


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def db(memory_store):
    """Database on an in-memory store, rooted at ``data/``."""
    return FireGit(owner="test-owner", repo="test-repo", base_path="data", store=memory_store)


@pytest.fixture
def mock_store():
    """Store whose calls are AsyncMocks, for failure injection."""
    store = MagicMock()
    store.read = AsyncMock()
    store.write = AsyncMock(return_value="new-sha")
    store.remove = AsyncMock()
    store.list = AsyncMock()
    store.aclose = AsyncMock()
    return store


@pytest.fixture
def mock_db(mock_store):
    return FireGit(owner="test-owner", repo="test-repo", base_path="data", store=mock_store)
