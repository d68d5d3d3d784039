import json
import logging
from typing import TYPE_CHECKING, Optional

from .enums import DocumentOperation
from .errors import (
    CorruptDocumentError,
    DocumentDeleteError,
    DocumentReadError,
    DocumentWriteError,
    NotFoundError,
    StoreError,
)
from .models import DocumentSnapshot, JsonValue, StoredFile
from .paths import (
    document_storage_path,
    join_path,
    validate_collection_path,
    validate_document_id,
)

if TYPE_CHECKING:
    from .collection import CollectionReference
    from .database import FireGit

logger = logging.getLogger(__name__)


def merge_fields(existing: JsonValue, incoming: JsonValue) -> JsonValue:
    """
    Shallow top-level merge used by ``set(..., merge=True)``.

    Keys of ``incoming`` override keys of ``existing`` when both are JSON
    objects; nested values are never merged. Any other combination is a full
    replacement by ``incoming``.
    """
    if isinstance(existing, dict) and isinstance(incoming, dict):
        return {**existing, **incoming}
    return incoming


def encode_document(data: JsonValue) -> bytes:
    # Strict JSON: NaN/Infinity and non-serializable values raise before any write.
    return (json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False) + "\n").encode("utf-8")


class DocumentReference:
    """
    Handle to a single JSON document stored at
    ``{base_path}/{collection_path}/{id}.json``.

    Handles are cheap value objects; creating one performs no I/O. Every
    mutation reads the current version token first and passes it to the store,
    so a concurrent change between the read and the write surfaces as a
    :class:`~firegit.errors.ConflictError` instead of being overwritten.
    """

    def __init__(self, db: "FireGit", collection_path: str, doc_id: str):
        self._db = db
        self._collection_path = validate_collection_path(collection_path)
        self._id = validate_document_id(doc_id)

    # --------------------------------------------------------------------------
    # Identity
    # --------------------------------------------------------------------------
    @property
    def id(self) -> str:
        return self._id

    @property
    def collection_path(self) -> str:
        return self._collection_path

    @property
    def path(self) -> str:
        return join_path(self.collection_path, self.id)

    @property
    def storage_path(self) -> str:
        return document_storage_path(self._db.config.base_path, self.collection_path, self.id)

    @property
    def parent(self) -> "CollectionReference":
        from .collection import CollectionReference

        return CollectionReference(self._db, self.collection_path)

    def collection(self, name: str) -> "CollectionReference":
        """Return a sub-collection nested under this document."""
        from .collection import CollectionReference

        return CollectionReference(self._db, join_path(self.path, name))

    def __eq__(self, other):
        if not isinstance(other, DocumentReference):
            return NotImplemented
        return self._db is other._db and self.path == other.path

    def __hash__(self) -> int:
        return hash(("document", self.path))

    def __repr__(self) -> str:
        return f"DocumentReference({self.path!r})"

    # --------------------------------------------------------------------------
    # Internal helpers
    # --------------------------------------------------------------------------
    async def _read_current(self) -> Optional[StoredFile]:
        """Return the stored file, or ``None`` when the document does not exist."""
        try:
            return await self._db.store.read(self.storage_path, self._db.config.branch)
        except NotFoundError:
            return None

    def _decode(self, stored: StoredFile) -> JsonValue:
        try:
            return json.loads(stored.content.decode("utf-8"))
        except ValueError as exc:
            raise CorruptDocumentError(
                f"Document '{self.path}' does not hold valid JSON: {exc}",
                path=self.path,
                cause=exc,
            ) from exc

    # --------------------------------------------------------------------------
    # Read
    # --------------------------------------------------------------------------
    async def get(self) -> DocumentSnapshot:
        """
        Read the document. A missing document is a snapshot with
        ``exists=False``, not an error.
        """
        try:
            stored = await self._read_current()
        except StoreError as exc:
            raise DocumentReadError(
                f"Failed to get document '{self.path}': {exc.message}",
                path=self.path,
                cause=exc,
            ) from exc

        if stored is None:
            return DocumentSnapshot(id=self.id, exists=False, data=None, path=self.path)
        return DocumentSnapshot(id=self.id, exists=True, data=self._decode(stored), path=self.path)

    async def exists(self) -> bool:
        return (await self.get()).exists

    # --------------------------------------------------------------------------
    # Write
    # --------------------------------------------------------------------------
    async def set(self, data: JsonValue, merge: bool = False) -> "DocumentReference":
        """
        Write ``data`` to the document.

        With ``merge=True`` the top-level fields of ``data`` are merged into the
        existing object; otherwise the document is overwritten. Raises
        :class:`~firegit.errors.ConflictError` when the document changed since
        it was read here, and :class:`~firegit.errors.DocumentWriteError` for
        other store failures.
        """
        branch = self._db.config.branch
        try:
            current = await self._read_current()
        except StoreError as exc:
            raise DocumentWriteError(
                f"Failed to set document '{self.path}': {exc.message}",
                path=self.path,
                cause=exc,
            ) from exc

        content = data
        if merge and current is not None:
            content = merge_fields(self._decode(current), data)

        operation = DocumentOperation.CREATE if current is None else DocumentOperation.UPDATE
        try:
            await self._db.store.write(
                self.storage_path,
                encode_document(content),
                operation.commit_message(self.id, self.collection_path),
                branch,
                expected_version=current.version_token if current is not None else None,
            )
        except StoreError as exc:
            raise DocumentWriteError(
                f"Failed to set document '{self.path}': {exc.message}",
                path=self.path,
                cause=exc,
            ) from exc

        logger.debug(f"Set: {self.path} op={operation} merge={merge}")
        return self

    async def update(self, data: JsonValue) -> "DocumentReference":
        """Merge ``data`` into the document; behaves as ``set`` when it does not exist."""
        return await self.set(data, merge=True)

    async def delete(self) -> bool:
        """
        Delete the document. Deleting a document that does not exist succeeds.
        """
        try:
            current = await self._read_current()
            if current is None:
                logger.debug(f"Delete: {self.path} already absent")
                return True
            await self._db.store.remove(
                self.storage_path,
                DocumentOperation.DELETE.commit_message(self.id, self.collection_path),
                self._db.config.branch,
                current.version_token,
            )
        except NotFoundError:
            # Removed by someone else between the read and the delete.
            return True
        except StoreError as exc:
            raise DocumentDeleteError(
                f"Failed to delete document '{self.path}': {exc.message}",
                path=self.path,
                cause=exc,
            ) from exc

        logger.debug(f"Delete: {self.path}")
        return True
