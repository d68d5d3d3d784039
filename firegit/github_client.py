import base64
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .enums import EntryType
from .errors import ConflictError, NotFoundError, PathIsFileError, StoreError
from .models import ListingEntry, StoredFile

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"


class GitHubContentsStore:
    """
    Versioned file store backed by the GitHub **Contents API** of one
    repository, built on an :class:`httpx.AsyncClient`.

    Version tokens are git blob SHAs: GitHub rejects a write or delete whose
    ``sha`` no longer matches the file on the branch, which is what makes the
    document engine's optimistic concurrency work.

    The same object can talk to:

    * **api.github.com** - default when neither ``api_url`` nor
      ``GITHUB_API_URL`` is set.
    * **A GitHub Enterprise server or local fake** - pass ``api_url`` or call
      :meth:`use_api_url`.
    * **An in-process transport** - pass an ``httpx`` transport (for example
      :class:`httpx.MockTransport`) so unit tests never touch the network.
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Parameters
        ----------
        owner :
            Repository owner (user or organization).
        repo :
            Repository name.
        token :
            Personal access or app token; falls back to ``GITHUB_TOKEN``.
            Anonymous access only works for reads of public repositories.
        api_url :
            REST API root; falls back to ``GITHUB_API_URL`` and then to
            ``https://api.github.com``.
        timeout :
            Per-request timeout in seconds.
        transport :
            Optional ``httpx`` transport used instead of the network.
        """
        self.owner = owner
        self.repo = repo
        self.token = token or os.environ.get("GITHUB_TOKEN") or None
        self.api_url = api_url or os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL
        self.timeout = timeout
        self._transport = transport

        self.client: httpx.AsyncClient = self._init_client()

    # --------------------------------------------------------------------- #
    # Internal helpers                                                      #
    # --------------------------------------------------------------------- #

    def _init_client(self) -> httpx.AsyncClient:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        logger.info(f"GitHub store for {self.owner}/{self.repo} using {self.api_url}")
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{quote(path, safe='/')}"

    async def _request(self, method: str, url: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise StoreError(f"Network error talking to GitHub: {exc}", path=path, cause=exc) from exc
        self._raise_for_status(response, path)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        if response.status_code < 400:
            return
        try:
            message = response.json().get("message", response.text)
        except (ValueError, AttributeError):
            message = response.text

        if response.status_code == 404:
            raise NotFoundError(path)
        if response.status_code == 409 or (
            response.status_code == 422 and "sha" in message.lower()
        ):
            logger.warning(f"Version conflict on '{path}': {message}")
            raise ConflictError(f"Version conflict on '{path}': {message}", path=path)
        raise StoreError(
            f"GitHub returned {response.status_code} for '{path}': {message}",
            path=path,
            status_code=response.status_code,
        )

    async def _read_blob(self, path: str, sha: str) -> bytes:
        # Files above 1 MB come back from the contents endpoint without a body.
        url = f"/repos/{self.owner}/{self.repo}/git/blobs/{sha}"
        blob = (await self._request("GET", url, path)).json()
        return base64.b64decode(blob.get("content", ""))

    # --------------------------------------------------------------------- #
    # VersionedStore                                                        #
    # --------------------------------------------------------------------- #

    async def read(self, path: str, ref: str) -> StoredFile:
        logger.debug(f"GitHub read: {path}@{ref}")
        response = await self._request("GET", self._contents_url(path), path, params={"ref": ref})
        data = response.json()
        if isinstance(data, list) or data.get("type") != EntryType.FILE.value:
            raise StoreError(f"Expected a file at '{path}'", path=path)

        sha = data["sha"]
        if data.get("encoding") == "base64":
            content = base64.b64decode(data.get("content", ""))
        else:
            content = await self._read_blob(path, sha)
        return StoredFile(path=path, content=content, version_token=sha)

    async def write(
        self,
        path: str,
        content: bytes,
        message: str,
        ref: str,
        expected_version: Optional[str] = None,
    ) -> str:
        logger.debug(f"GitHub write: {path}@{ref} expected={expected_version}")
        body: Dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
            "branch": ref,
        }
        if expected_version:
            body["sha"] = expected_version
        response = await self._request("PUT", self._contents_url(path), path, json=body)
        return response.json()["content"]["sha"]

    async def remove(self, path: str, message: str, ref: str, expected_version: str) -> None:
        logger.debug(f"GitHub remove: {path}@{ref} expected={expected_version}")
        body = {"message": message, "sha": expected_version, "branch": ref}
        await self._request("DELETE", self._contents_url(path), path, json=body)

    async def list(self, path: str, ref: str) -> List[ListingEntry]:
        logger.debug(f"GitHub list: {path}@{ref}")
        response = await self._request("GET", self._contents_url(path), path, params={"ref": ref})
        data = response.json()
        if not isinstance(data, list):
            raise PathIsFileError(path)
        return [
            ListingEntry(
                name=item["name"],
                path=item["path"],
                type=EntryType(item["type"]),
                sha=item.get("sha"),
            )
            for item in data
        ]

    # --------------------------------------------------------------------- #
    # Public utility methods                                                #
    # --------------------------------------------------------------------- #

    async def use_api_url(self, api_url: str):
        """
        Point the store at another REST API root and recreate the client.

        Parameters
        ----------
        api_url :
            For example ``"https://github.example.com/api/v3"`` or the address
            of a local fake.
        """
        await self.client.aclose()
        self.api_url = api_url
        self.client = self._init_client()

    async def aclose(self) -> None:
        await self.client.aclose()
