import asyncio
import logging
import uuid
from typing import TYPE_CHECKING, List, Optional

from .document import DocumentReference
from .errors import (
    CollectionReadError,
    NotACollectionError,
    NotFoundError,
    PathIsFileError,
    StoreError,
)
from .models import CollectionSnapshot, JsonValue
from .paths import (
    collection_storage_path,
    document_id_from_filename,
    resolve_document_path,
    validate_collection_path,
)

if TYPE_CHECKING:
    from .database import FireGit

logger = logging.getLogger(__name__)


def generate_document_id() -> str:
    return str(uuid.uuid4())


class CollectionReference:
    """
    Handle to a directory of JSON documents.

    Example:
        users = db.collection("users")
        alice = await users.add({"name": "Alice"})
        snapshot = await users.get()
    """

    def __init__(self, db: "FireGit", path: str):
        self._db = db
        self._path = validate_collection_path(path)

    @property
    def path(self) -> str:
        return self._path

    @property
    def id(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def storage_path(self) -> str:
        return collection_storage_path(self._db.config.base_path, self.path)

    @property
    def parent(self) -> Optional[DocumentReference]:
        """The document this sub-collection is nested under, ``None`` at the top level."""
        segments = self.path.split("/")
        if len(segments) < 3 or len(segments) % 2 == 0:
            return None
        collection_path, doc_id = resolve_document_path("/".join(segments[:-1]))
        return DocumentReference(self._db, collection_path, doc_id)

    def doc(self, doc_id: Optional[str] = None) -> DocumentReference:
        """Return a handle for ``doc_id``, generating a random id when omitted."""
        if doc_id is None:
            doc_id = generate_document_id()
        return DocumentReference(self._db, self.path, doc_id)

    def __eq__(self, other):
        if not isinstance(other, CollectionReference):
            return NotImplemented
        return self._db is other._db and self.path == other.path

    def __hash__(self) -> int:
        return hash(("collection", self.path))

    def __repr__(self) -> str:
        return f"CollectionReference({self.path!r})"

    # --------------------------------------------------------------------------
    # Operations
    # --------------------------------------------------------------------------
    async def add(self, data: JsonValue) -> DocumentReference:
        """Create a document with a random id and return its handle."""
        doc_ref = self.doc(generate_document_id())
        await doc_ref.set(data)
        logger.debug(f"Add: {doc_ref.path}")
        return doc_ref

    async def list_documents(self) -> List[DocumentReference]:
        """
        Return handles for every document in the collection, in listing order,
        without reading their contents.
        """
        try:
            entries = await self._db.store.list(self.storage_path, self._db.config.branch)
        except NotFoundError:
            return []
        except PathIsFileError as exc:
            raise NotACollectionError(
                f"Expected a collection but found a file at '{self.path}'",
                path=self.path,
                cause=exc,
            ) from exc
        except StoreError as exc:
            raise CollectionReadError(
                f"Failed to get collection '{self.path}': {exc.message}",
                path=self.path,
                cause=exc,
            ) from exc

        doc_ids = [
            document_id_from_filename(entry.name) for entry in entries if entry.is_file
        ]
        return [self.doc(doc_id) for doc_id in doc_ids if doc_id is not None]

    async def get(self) -> CollectionSnapshot:
        """
        Read every document of the collection.

        Documents are fetched concurrently; if any fetch fails the whole call
        fails with that error once it is raised. A collection that does not
        exist is empty.
        """
        doc_refs = await self.list_documents()
        docs = await asyncio.gather(*(doc_ref.get() for doc_ref in doc_refs))
        logger.debug(f"Get collection: {self.path} docs={len(docs)}")
        return CollectionSnapshot(docs=list(docs), empty=len(docs) == 0)
