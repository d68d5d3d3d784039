"""
Protocol every backing store client implements.

Paths are storage paths (already prefixed with the database base path) and
``ref`` is the branch name. Version tokens are opaque strings identifying the
exact content stored at a path.
"""

from typing import List, Optional, Protocol, runtime_checkable

from .models import ListingEntry, StoredFile


@runtime_checkable
class VersionedStore(Protocol):
    async def read(self, path: str, ref: str) -> StoredFile:
        """Return the file at ``path``. Raises ``NotFoundError`` when absent."""
        ...

    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        ref: str,
        expected_version: Optional[str] = None,
    ) -> str:
        """
        Create or replace the file at ``path`` and return its new version token.

        When ``expected_version`` is given the write only succeeds if it still
        matches the stored version; without it the write only succeeds if the
        path is empty. Otherwise raises ``ConflictError``.
        """
        ...

    async def remove(self, path: str, message: str, ref: str, expected_version: str) -> None:
        """Delete the file at ``path``. Raises ``NotFoundError`` or ``ConflictError``."""
        ...

    async def list(self, path: str, ref: str) -> List[ListingEntry]:
        """
        List the directory at ``path``.

        Raises ``NotFoundError`` when nothing is stored there and
        ``PathIsFileError`` when the path holds a single file.
        """
        ...

    async def aclose(self) -> None:
        ...
