from typing import Any, Dict, List, Optional, Union

from .enums import EntryType
from .pydantic_compat import BaseModel, Field, PydanticVersion, get_model_config


# Document bodies are plain JSON values with no schema.
JsonValue = Union[Dict[str, "JsonValue"], List["JsonValue"], str, int, float, bool, None]
JsonObject = Dict[str, JsonValue]


class _FrozenModel(BaseModel):
    if PydanticVersion >= 2:
        model_config = get_model_config(frozen=True)
    else:
        class Config:
            allow_mutation = False


# --------------------------------------------------------------------------
# Store-side values
# --------------------------------------------------------------------------
class StoredFile(_FrozenModel):
    """Raw file content together with the version token it was read at."""

    path: str
    content: bytes
    version_token: str


class ListingEntry(_FrozenModel):
    """One entry of a directory listing."""

    name: str
    path: str
    type: EntryType
    sha: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.type == EntryType.FILE


# --------------------------------------------------------------------------
# Read-side views returned to callers
# --------------------------------------------------------------------------
class DocumentSnapshot(_FrozenModel):
    """
    Point-in-time view of a single document.

    ``data`` is ``None`` when the document does not exist. The version token
    observed during the read is deliberately not part of the snapshot.
    """

    id: str
    exists: bool
    # Typed as Any so JSON scalars are never coerced during validation.
    data: Optional[Any] = None
    path: str

    def to_dict(self) -> Optional[JsonValue]:
        return self.data


class CollectionSnapshot(_FrozenModel):
    """Documents of one collection, in the order the store listed them."""

    docs: List[DocumentSnapshot] = Field(default_factory=list)
    empty: bool = True

    @property
    def size(self) -> int:
        return len(self.docs)
