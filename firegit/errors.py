"""
Exception types raised by firegit.

Caller-facing errors:

* :class:`InvalidPathError` - malformed collection or document path.
* :class:`NotACollectionError` - a collection path points at a single file.
* :class:`ConflictError` - the optimistic version check failed.
* :class:`CorruptDocumentError` - stored content is not valid JSON.
* :class:`DocumentReadError`, :class:`DocumentWriteError`,
  :class:`DocumentDeleteError`, :class:`CollectionReadError` - store
  failures not classified above, with the original ``cause`` attached.

Store-level errors (raised by store clients, classified by the engines):

* :class:`StoreError` and its subclasses :class:`NotFoundError` and
  :class:`PathIsFileError`.
"""

from typing import Optional


class FireGitError(Exception):
    """
    Base class for every firegit error.

    Attributes
    ----------
    message :
        Human readable description.
    path :
        Document, collection or storage path involved, when known.
    cause :
        The underlying exception, when this error wraps another one.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


class ConfigurationError(FireGitError):
    """Database configuration is missing or invalid."""


class InvalidPathError(FireGitError):
    """A collection or document path is malformed."""


class NotACollectionError(FireGitError):
    """The collection path exists but is a single file."""


class ConflictError(FireGitError):
    """The expected version token is stale; re-read and retry."""


class CorruptDocumentError(FireGitError):
    """Stored document content could not be decoded as JSON."""


class DocumentReadError(FireGitError):
    pass


class DocumentWriteError(FireGitError):
    pass


class DocumentDeleteError(FireGitError):
    pass


class CollectionReadError(FireGitError):
    pass


# --------------------------------------------------------------------------- #
# Store level                                                                 #
# --------------------------------------------------------------------------- #


class StoreError(FireGitError):
    """A backing store call failed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, path=path, cause=cause)
        self.status_code = status_code


class NotFoundError(StoreError):
    """Nothing is stored at the requested path."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        super().__init__(f"Nothing found at '{path}'", path=path, cause=cause, status_code=404)


class PathIsFileError(StoreError):
    """A directory listing was requested for a path holding a single file."""

    def __init__(self, path: str):
        super().__init__(f"Expected a directory but found a file at '{path}'", path=path)


__all__ = [
    "FireGitError",
    "ConfigurationError",
    "InvalidPathError",
    "NotACollectionError",
    "ConflictError",
    "CorruptDocumentError",
    "DocumentReadError",
    "DocumentWriteError",
    "DocumentDeleteError",
    "CollectionReadError",
    "StoreError",
    "NotFoundError",
    "PathIsFileError",
]
