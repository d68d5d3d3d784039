"""
Pure helpers mapping collection and document paths to storage paths.

A document path alternates collection segments and document ids
(``users/123/posts/456``); its last segment is the document id and the rest
is the owning collection. A document is stored at
``{base_path}/{collection_path}/{id}.json``.
"""

from typing import List, NamedTuple, Optional

from .errors import InvalidPathError

DOCUMENT_SUFFIX = ".json"


class ResolvedDocumentPath(NamedTuple):
    collection_path: str
    id: str


def _segments(path: str) -> List[str]:
    if not isinstance(path, str) or not path:
        raise InvalidPathError("Path must be a non-empty string.", path=path)
    segments = path.split("/")
    if any(not segment for segment in segments):
        raise InvalidPathError(f"Path '{path}' contains an empty segment.", path=path)
    return segments


def resolve_document_path(path: str) -> ResolvedDocumentPath:
    """
    Split a document path into its collection path and document id.

    Raises :class:`InvalidPathError` unless the path has an even number
    (at least two) of non-empty segments.
    """
    segments = _segments(path)
    if len(segments) % 2 != 0:
        raise InvalidPathError(
            f"Invalid document path '{path}'. Should be collection/doc/collection/doc/...",
            path=path,
        )
    return ResolvedDocumentPath("/".join(segments[:-1]), segments[-1])


def validate_collection_path(path: str) -> str:
    _segments(path)
    return path


def validate_document_id(doc_id: str) -> str:
    if not isinstance(doc_id, str) or not doc_id or "/" in doc_id:
        raise InvalidPathError(f"Invalid document id {doc_id!r}.", path=doc_id)
    return doc_id


def join_path(*parts: str) -> str:
    """Join path parts with ``/``, skipping empty ones (an empty base path)."""
    return "/".join(part for part in parts if part)


def collection_storage_path(base_path: str, collection_path: str) -> str:
    return join_path(base_path, collection_path)


def document_storage_path(base_path: str, collection_path: str, doc_id: str) -> str:
    return join_path(base_path, collection_path, f"{doc_id}{DOCUMENT_SUFFIX}")


def document_id_from_filename(name: str) -> Optional[str]:
    """Recover a document id from a listed file name, ``None`` for other files."""
    if not name.endswith(DOCUMENT_SUFFIX):
        return None
    doc_id = name[: -len(DOCUMENT_SUFFIX)]
    return doc_id or None
