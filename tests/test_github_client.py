"""
GitHubContentsStore against an in-process fake of the Contents API
(``httpx.MockTransport``), plus the database running on top of it.
"""

import base64
import json

import httpx
import pytest

from firegit import (
    ConflictError,
    EntryType,
    FireGit,
    GitHubContentsStore,
    NotACollectionError,
    NotFoundError,
    PathIsFileError,
    StoreError,
)
from firegit.memory_store import blob_sha

OWNER, REPO = "octo", "data"
CONTENTS_PREFIX = f"/repos/{OWNER}/{REPO}/contents/"


class FakeGitHub:
    """Tiny dict-backed fake of the contents endpoints of one repository."""

    def __init__(self):
        self.files = {}
        self.requests = []

    def _json(self, status, body):
        return httpx.Response(status, json=body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(CONTENTS_PREFIX):]
        if request.method == "GET":
            return self._get(path)
        body = json.loads(request.content)
        current = self.files.get(path)
        if request.method == "PUT":
            if current is not None and body.get("sha") is None:
                return self._json(422, {"message": "Invalid request.\n\n\"sha\" wasn't supplied."})
            if body.get("sha") is not None and (current is None or blob_sha(current) != body["sha"]):
                return self._json(409, {"message": f"{path} does not match {body['sha']}"})
            self.files[path] = base64.b64decode(body["content"])
            return self._json(200 if current else 201, {"content": {"sha": blob_sha(self.files[path])}})
        if request.method == "DELETE":
            if current is None:
                return self._json(404, {"message": "Not Found"})
            if blob_sha(current) != body["sha"]:
                return self._json(409, {"message": f"{path} does not match {body['sha']}"})
            del self.files[path]
            return self._json(200, {"commit": {}})
        return self._json(405, {"message": "Method Not Allowed"})

    def _get(self, path):
        if path in self.files:
            content = self.files[path]
            return self._json(200, {
                "type": "file",
                "name": path.rsplit("/", 1)[-1],
                "path": path,
                "sha": blob_sha(content),
                "encoding": "base64",
                "content": base64.encodebytes(content).decode("ascii"),
            })
        prefix = f"{path}/"
        children = {}
        for name in sorted(self.files):
            if name.startswith(prefix):
                child, _, rest = name[len(prefix):].partition("/")
                children.setdefault(child, {
                    "type": "dir" if rest else "file",
                    "name": child,
                    "path": f"{prefix}{child}",
                    "sha": None if rest else blob_sha(self.files[name]),
                })
        if not children:
            return self._json(404, {"message": "Not Found"})
        return self._json(200, list(children.values()))


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def github_store(fake_github):
    return GitHubContentsStore(
        OWNER,
        REPO,
        token="test-token",
        api_url="https://api.github.test",
        transport=httpx.MockTransport(fake_github),
    )


# ===========================================================================
# Store contract
# ===========================================================================
class TestGitHubContentsStore:
    @pytest.mark.asyncio
    async def test_write_then_read(self, github_store, fake_github):
        token = await github_store.write("db/users/a.json", b'{"a": 1}', "Create", "main")
        stored = await github_store.read("db/users/a.json", "main")

        assert stored.content == b'{"a": 1}'
        assert stored.version_token == token == blob_sha(b'{"a": 1}')

        put = fake_github.requests[0]
        assert put.method == "PUT"
        assert put.url.path == f"{CONTENTS_PREFIX}db/users/a.json"
        assert put.headers["Authorization"] == "Bearer test-token"
        assert put.headers["Accept"] == "application/vnd.github+json"
        assert json.loads(put.content) == {
            "message": "Create",
            "content": base64.b64encode(b'{"a": 1}').decode("ascii"),
            "branch": "main",
        }
        assert fake_github.requests[1].url.params["ref"] == "main"

    @pytest.mark.asyncio
    async def test_read_missing_raises_not_found(self, github_store):
        with pytest.raises(NotFoundError):
            await github_store.read("db/users/nobody.json", "main")

    @pytest.mark.asyncio
    async def test_stale_sha_conflicts(self, github_store):
        first = await github_store.write("a.json", b"1", "Create", "main")
        await github_store.write("a.json", b"2", "Update", "main", expected_version=first)

        with pytest.raises(ConflictError):
            await github_store.write("a.json", b"3", "Update", "main", expected_version=first)
        with pytest.raises(ConflictError):
            await github_store.remove("a.json", "Delete", "main", first)

    @pytest.mark.asyncio
    async def test_create_over_existing_file_conflicts(self, github_store):
        await github_store.write("a.json", b"1", "Create", "main")
        with pytest.raises(ConflictError):
            await github_store.write("a.json", b"2", "Create", "main")

    @pytest.mark.asyncio
    async def test_remove(self, github_store, fake_github):
        token = await github_store.write("a.json", b"1", "Create", "main")
        await github_store.remove("a.json", "Delete", "main", token)

        delete = fake_github.requests[-1]
        assert delete.method == "DELETE"
        assert json.loads(delete.content) == {"message": "Delete", "sha": token, "branch": "main"}
        with pytest.raises(NotFoundError):
            await github_store.remove("a.json", "Delete", "main", token)

    @pytest.mark.asyncio
    async def test_list(self, github_store):
        await github_store.write("db/users/a.json", b"{}", "seed", "main")
        await github_store.write("db/users/x/y.json", b"{}", "seed", "main")

        entries = await github_store.list("db/users", "main")

        assert [(entry.name, entry.type) for entry in entries] == [
            ("a.json", EntryType.FILE),
            ("x", EntryType.DIR),
        ]
        with pytest.raises(PathIsFileError):
            await github_store.list("db/users/a.json", "main")
        with pytest.raises(NotFoundError):
            await github_store.list("db/nothing", "main")

    @pytest.mark.asyncio
    async def test_large_file_is_read_from_blob(self):
        def handler(request):
            if "/git/blobs/" in request.url.path:
                assert request.url.path == f"/repos/{OWNER}/{REPO}/git/blobs/abc"
                return httpx.Response(200, json={"encoding": "base64", "content": base64.b64encode(b"big").decode()})
            return httpx.Response(200, json={"type": "file", "sha": "abc", "encoding": "none", "content": ""})

        store = GitHubContentsStore(OWNER, REPO, transport=httpx.MockTransport(handler))
        stored = await store.read("big.json", "main")
        assert stored.content == b"big"
        assert stored.version_token == "abc"

    @pytest.mark.asyncio
    async def test_read_of_directory_is_a_store_error(self, github_store):
        await github_store.write("db/users/a.json", b"{}", "seed", "main")
        with pytest.raises(StoreError):
            await github_store.read("db/users", "main")

    @pytest.mark.asyncio
    async def test_server_errors_keep_status_code(self):
        store = GitHubContentsStore(
            OWNER,
            REPO,
            transport=httpx.MockTransport(
                lambda request: httpx.Response(403, json={"message": "API rate limit exceeded"})
            ),
        )
        with pytest.raises(StoreError) as exc_info:
            await store.read("a.json", "main")
        assert exc_info.value.status_code == 403
        assert "rate limit" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_network_errors_become_store_errors(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        store = GitHubContentsStore(OWNER, REPO, transport=httpx.MockTransport(handler))
        with pytest.raises(StoreError) as exc_info:
            await store.list("db", "main")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_paths_are_url_quoted(self, github_store, fake_github):
        await github_store.write("db/my docs/a b.json", b"{}", "seed", "main")
        assert fake_github.requests[0].url.raw_path.decode() == f"{CONTENTS_PREFIX}db/my%20docs/a%20b.json"

    @pytest.mark.asyncio
    async def test_api_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_API_URL", "https://github.example.com/api/v3")
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        store = GitHubContentsStore(OWNER, REPO)
        try:
            assert str(store.client.base_url).startswith("https://github.example.com/api/v3")
            assert store.client.headers["Authorization"] == "Bearer env-token"
        finally:
            await store.aclose()

    @pytest.mark.asyncio
    async def test_use_api_url(self, github_store):
        await github_store.use_api_url("https://other.example.com")
        assert github_store.api_url == "https://other.example.com"
        assert str(github_store.client.base_url).startswith("https://other.example.com")
        await github_store.aclose()


# ===========================================================================
# Database on top of the GitHub store
# ===========================================================================
class TestFireGitOverGitHub:
    @pytest.mark.asyncio
    async def test_document_lifecycle(self, github_store, fake_github):
        async with FireGit(OWNER, REPO, base_path="db", store=github_store) as db:
            users = db.collection("users")
            alice = await users.add({"name": "Alice", "age": 30})
            await alice.update({"age": 31})
            await db.doc("users/bob").set({"name": "Bob"})
            fake_github.files["db/users/notes.txt"] = b"not a document"

            snapshot = await users.get()
            assert sorted(doc.id for doc in snapshot.docs) == sorted([alice.id, "bob"])
            assert (await alice.get()).data == {"name": "Alice", "age": 31}

            messages = [json.loads(r.content)["message"] for r in fake_github.requests if r.method == "PUT"]
            assert messages == [
                f"Create document '{alice.id}' in 'users'",
                f"Update document '{alice.id}' in 'users'",
                "Create document 'bob' in 'users'",
            ]

            assert await alice.delete() is True
            assert await alice.delete() is True
            assert [doc.id for doc in (await users.get()).docs] == ["bob"]

    @pytest.mark.asyncio
    async def test_file_in_place_of_collection(self, github_store, fake_github):
        fake_github.files["db/settings"] = b"{}"
        db = FireGit(OWNER, REPO, base_path="db", store=github_store)
        with pytest.raises(NotACollectionError):
            await db.collection("settings").get()
        assert (await db.collection("missing").get()).empty is True
