"""
Fixtures for live integration tests against a real GitHub repository
(see ``live_env`` for the variables that enable them).

Each test writes under its own ``firegit-tests/<uuid>`` base path, which is
emptied again afterwards.
"""

import uuid
import warnings

import pytest
import pytest_asyncio

from firegit import FireGit, GitHubContentsStore, NotFoundError
from firegit.enums import EntryType

from .live_env import BRANCH, OWNER, REPO, TOKEN


@pytest.fixture()
def base_path():
    return f"firegit-tests/{uuid.uuid4()}"


@pytest_asyncio.fixture()
async def github_store():
    """Function-scoped so each test gets a client bound to its own event loop."""
    store = GitHubContentsStore(OWNER, REPO, token=TOKEN)
    yield store
    await store.aclose()


@pytest_asyncio.fixture()
async def live_db(github_store, base_path):
    db = FireGit(OWNER, REPO, branch=BRANCH, base_path=base_path, store=github_store)
    yield db
    try:
        await _remove_tree(github_store, base_path)
    except Exception as exc:  # noqa: BLE001
        # A cleanup failure must not turn a passing test into an error.
        warnings.warn(f"[conftest] cleanup of '{base_path}' failed: {exc}", stacklevel=1)


async def _remove_tree(store, path):
    """Delete every file below ``path``, depth first."""
    try:
        entries = await store.list(path, BRANCH)
    except NotFoundError:
        return
    for entry in entries:
        if entry.type == EntryType.DIR:
            await _remove_tree(store, entry.path)
        elif entry.type == EntryType.FILE:
            await store.remove(entry.path, "Clean up firegit test data", BRANCH, entry.sha)
