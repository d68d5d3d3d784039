import logging
from typing import Optional

from .collection import CollectionReference
from .config import DEFAULT_BRANCH, DatabaseConfig
from .document import DocumentReference
from .github_client import GitHubContentsStore
from .paths import join_path, resolve_document_path
from .store import VersionedStore

logger = logging.getLogger(__name__)


class FireGit:
    """
    Firestore-like document database stored as JSON files in a GitHub
    repository.

    Collection and document handles created here keep a reference back to
    this object to reach the shared store client and configuration; they do
    not own either.

    Example
    -------
    >>> db = FireGit(owner="octo", repo="data", base_path="db")
    >>> await db.doc("users/alice").set({"name": "Alice"})
    >>> snapshot = await db.collection("users").get()
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        branch: str = DEFAULT_BRANCH,
        base_path: str = "",
        store: Optional[VersionedStore] = None,
        token: Optional[str] = None,
    ):
        """
        Parameters
        ----------
        owner, repo :
            Repository holding the database.
        branch :
            Branch read from and committed to.
        base_path :
            Directory prefix for every collection; surrounding slashes are
            ignored and an empty string means the repository root.
        store :
            Backing store client. When *None*, a :class:`GitHubContentsStore`
            is created for ``owner/repo``.
        token :
            GitHub token for the default store; falls back to ``GITHUB_TOKEN``.
        """
        self.config = DatabaseConfig(
            owner=owner,
            repo=repo,
            branch=branch or DEFAULT_BRANCH,
            base_path=(base_path or "").strip("/"),
        )
        self.store: VersionedStore = (
            store if store is not None else GitHubContentsStore(owner, repo, token=token)
        )
        logger.debug(
            f"FireGit: {owner}/{repo}@{self.config.branch} base_path={self.config.base_path!r}"
        )

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfig,
        store: Optional[VersionedStore] = None,
        token: Optional[str] = None,
    ) -> "FireGit":
        return cls(
            owner=config.owner,
            repo=config.repo,
            branch=config.branch,
            base_path=config.base_path,
            store=store,
            token=token,
        )

    @classmethod
    def from_env(cls, store: Optional[VersionedStore] = None) -> "FireGit":
        """Build a database from ``FIREGIT_*`` variables (see :meth:`DatabaseConfig.from_env`)."""
        return cls.from_config(DatabaseConfig.from_env(), store=store)

    # --------------------------------------------------------------------------
    # Handles
    # --------------------------------------------------------------------------
    def collection(self, collection_path: str) -> CollectionReference:
        return CollectionReference(self, collection_path)

    def doc(self, document_path: str) -> DocumentReference:
        """
        Return a handle for a full document path such as ``users/123`` or
        ``users/123/posts/456``.
        """
        collection_path, doc_id = resolve_document_path(document_path)
        return self.collection(collection_path).doc(doc_id)

    def full_path(self, path: str) -> str:
        """Prefix ``path`` with the configured base path."""
        return join_path(self.config.base_path, path)

    # --------------------------------------------------------------------------
    # Lifecycle
    # --------------------------------------------------------------------------
    async def aclose(self) -> None:
        await self.store.aclose()

    async def __aenter__(self) -> "FireGit":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
