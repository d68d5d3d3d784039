# firegit/__init__.py
from .collection import CollectionReference
from .config import DatabaseConfig
from .database import FireGit
from .document import DocumentReference
from .enums import DocumentOperation, EntryType
from .errors import (
    CollectionReadError,
    ConfigurationError,
    ConflictError,
    CorruptDocumentError,
    DocumentDeleteError,
    DocumentReadError,
    DocumentWriteError,
    FireGitError,
    InvalidPathError,
    NotACollectionError,
    NotFoundError,
    PathIsFileError,
    StoreError,
)
from .github_client import GitHubContentsStore
from .memory_store import MemoryStore
from .models import CollectionSnapshot, DocumentSnapshot, JsonValue, ListingEntry, StoredFile
from .store import VersionedStore

__all__ = [
    "FireGit",
    "DatabaseConfig",
    "CollectionReference",
    "DocumentReference",
    "CollectionSnapshot",
    "DocumentSnapshot",
    "JsonValue",
    "ListingEntry",
    "StoredFile",
    "VersionedStore",
    "GitHubContentsStore",
    "MemoryStore",
    "DocumentOperation",
    "EntryType",
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
