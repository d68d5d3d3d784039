from enum import Enum


class EntryType(str, Enum):
    """Kinds of entries a repository directory listing can hold."""
    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    SUBMODULE = "submodule"


class DocumentOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"

    def commit_message(self, doc_id: str, collection_path: str) -> str:
        if self is DocumentOperation.DELETE:
            return f"Delete document '{doc_id}' from '{collection_path}'"
        return f"{self.value.capitalize()} document '{doc_id}' in '{collection_path}'"

    def __str__(self):
        return self.value
