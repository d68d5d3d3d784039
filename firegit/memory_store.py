"""
In-memory versioned store for tests and local development.

Implements the same contract as :class:`~firegit.github_client.GitHubContentsStore`:

* version tokens are git blob SHA-1s of the content,
* writes and deletes are checked against the expected token,
* directories exist implicitly while they hold at least one file.

All data is lost when the object is garbage collected.
"""

import asyncio
import hashlib
import logging
from collections import defaultdict
from typing import Dict, List, NamedTuple, Optional

from .enums import EntryType
from .errors import ConflictError, NotFoundError, PathIsFileError, StoreError
from .models import ListingEntry, StoredFile

logger = logging.getLogger(__name__)


def blob_sha(content: bytes) -> str:
    """Hash ``content`` the way git hashes a blob object."""
    header = f"blob {len(content)}\0".encode("ascii")
    return hashlib.sha1(header + content).hexdigest()


class Commit(NamedTuple):
    ref: str
    path: str
    message: str


class MemoryStore:
    """
    Dictionary-backed store, one namespace per branch.

    Mutations are serialized with an :class:`asyncio.Lock` so the version check
    and the update happen atomically, as they do on the real backend.

    Example:
        >>> store = MemoryStore()
        >>> token = await store.write("users/1.json", b"{}", "Create", "main")
        >>> (await store.read("users/1.json", "main")).version_token == token
        True
    """

    def __init__(self):
        self._branches: Dict[str, Dict[str, bytes]] = defaultdict(dict)
        self._lock = asyncio.Lock()
        self.commits: List[Commit] = []

    def _files(self, ref: str) -> Dict[str, bytes]:
        return self._branches[ref]

    async def read(self, path: str, ref: str) -> StoredFile:
        files = self._files(ref)
        if path not in files:
            raise NotFoundError(path)
        content = files[path]
        return StoredFile(path=path, content=content, version_token=blob_sha(content))

    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        ref: str,
        expected_version: Optional[str] = None,
    ) -> str:
        async with self._lock:
            files = self._files(ref)
            current = files.get(path)
            if current is None and any(name.startswith(f"{path}/") for name in files):
                raise StoreError(f"'{path}' is a directory", path=path, status_code=422)
            if expected_version is None and current is not None:
                raise ConflictError(f"'{path}' already exists; a version token is required", path=path)
            if expected_version is not None and (
                current is None or blob_sha(current) != expected_version
            ):
                logger.warning(f"Version conflict on '{path}': expected {expected_version}")
                raise ConflictError(f"'{path}' does not match {expected_version}", path=path)

            files[path] = bytes(content)
            self.commits.append(Commit(ref, path, message))
            logger.debug(f"Memory write: {path}@{ref}")
            return blob_sha(files[path])

    async def remove(self, path: str, message: str, ref: str, expected_version: str) -> None:
        async with self._lock:
            files = self._files(ref)
            current = files.get(path)
            if current is None:
                raise NotFoundError(path)
            if blob_sha(current) != expected_version:
                logger.warning(f"Version conflict on '{path}': expected {expected_version}")
                raise ConflictError(f"'{path}' does not match {expected_version}", path=path)
            del files[path]
            self.commits.append(Commit(ref, path, message))
            logger.debug(f"Memory remove: {path}@{ref}")

    async def list(self, path: str, ref: str) -> List[ListingEntry]:
        files = self._files(ref)
        if path in files:
            raise PathIsFileError(path)

        prefix = f"{path}/" if path else ""
        entries: Dict[str, ListingEntry] = {}
        for name in sorted(files):
            if not name.startswith(prefix):
                continue
            child, _, rest = name[len(prefix):].partition("/")
            if child in entries:
                continue
            if rest:
                entries[child] = ListingEntry(name=child, path=f"{prefix}{child}", type=EntryType.DIR)
            else:
                entries[child] = ListingEntry(
                    name=child, path=name, type=EntryType.FILE, sha=blob_sha(files[name])
                )
        if not entries:
            raise NotFoundError(path)
        return sorted(entries.values(), key=lambda entry: entry.name)

    async def aclose(self) -> None:
        pass
