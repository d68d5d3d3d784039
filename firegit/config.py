import logging
import os

from .errors import ConfigurationError
from .pydantic_compat import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = "main"


class DatabaseConfig(BaseModel):
    """
    Location of a document database inside a GitHub repository.

    Parameters
    ----------
    owner :
        Repository owner (user or organization).
    repo :
        Repository name.
    branch :
        Branch every read and commit is made against.
    base_path :
        Directory inside the repository that holds all collections. Empty
        string means the repository root.
    """

    owner: str
    repo: str
    branch: str = Field(default=DEFAULT_BRANCH)
    base_path: str = Field(default="")

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """
        Build a configuration from ``FIREGIT_*`` environment variables.

        ``FIREGIT_OWNER`` and ``FIREGIT_REPO`` are required; ``FIREGIT_BRANCH``
        and ``FIREGIT_BASE_PATH`` fall back to their defaults when unset or
        empty.
        """
        owner = os.environ.get("FIREGIT_OWNER", "").strip()
        repo = os.environ.get("FIREGIT_REPO", "").strip()
        if not owner or not repo:
            raise ConfigurationError(
                "FIREGIT_OWNER and FIREGIT_REPO must be set to configure the database."
            )
        branch = os.environ.get("FIREGIT_BRANCH", "").strip() or DEFAULT_BRANCH
        base_path = os.environ.get("FIREGIT_BASE_PATH", "").strip().strip("/")
        logger.debug(f"Config from env: {owner}/{repo}@{branch} base_path={base_path!r}")
        return cls(owner=owner, repo=repo, branch=branch, base_path=base_path)
