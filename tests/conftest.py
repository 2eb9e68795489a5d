"""Pytest fixtures: an in-memory GitHub behind httpx.MockTransport."""
import base64
import hashlib
import json
from functools import partial

import httpx
import pytest
from gh import GitHubClient

GOOD_TOKEN = "good-token"


class FakeGitHub:
    """Just enough of the GitHub REST API for picbed."""

    def __init__(self, login: str = "octocat", token: str = GOOD_TOKEN):
        self.login = login
        self.token = token
        self.repos: set[tuple[str, str]] = set()
        self.files: dict[tuple[str, str, str], dict] = {}
        self.requests: list[httpx.Request] = []
        self.network_down = False
        self.reject_puts: tuple[int, str] | None = None
        self.reject_creates: tuple[int, str] | None = None
        self.broken_listings = False

    # ---- helpers for tests ----

    def add_file(self, owner: str, repo: str, path: str, content: bytes = b"data") -> dict:
        self.repos.add((owner, repo))
        entry = {
            "name": path.rsplit("/", 1)[-1],
            "path": path,
            "sha": hashlib.sha1(content).hexdigest(),
            "size": len(content),
            "type": "file",
            "download_url": f"https://raw.githubusercontent.com/{owner}/{repo}/main/{path}",
        }
        self.files[(owner, repo, path)] = entry
        return entry

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        return [
            (r.method, r.url.path)
            for r in self.requests
            if method is None or r.method == method
        ]

    # ---- transport ----

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_down:
            raise httpx.ConnectError("network down", request=request)
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"message": "Bad credentials"})

        parts = request.url.path.strip("/").split("/")
        body = json.loads(request.content) if request.content else {}

        if parts == ["user"] and request.method == "GET":
            return httpx.Response(200, json={"login": self.login, "id": 1})
        if parts == ["user", "repos"] and request.method == "POST":
            return self._create_repo(body)
        if len(parts) == 3 and parts[0] == "repos" and request.method == "GET":
            if (parts[1], parts[2]) in self.repos:
                return httpx.Response(200, json={"full_name": f"{parts[1]}/{parts[2]}"})
            return httpx.Response(404, json={"message": "Not Found"})
        if len(parts) >= 4 and parts[0] == "repos" and parts[3] == "contents":
            owner, repo, path = parts[1], parts[2], "/".join(parts[4:])
            if (owner, repo) not in self.repos:
                return httpx.Response(404, json={"message": "Not Found"})
            if request.method == "GET":
                return self._get_contents(owner, repo, path)
            if request.method == "PUT":
                return self._put(owner, repo, path, body)
            if request.method == "DELETE":
                return self._delete(owner, repo, path, body)
        return httpx.Response(404, json={"message": "Not Found"})

    def _create_repo(self, body: dict) -> httpx.Response:
        if self.reject_creates:
            status, text = self.reject_creates
            return httpx.Response(status, text=text)
        if (self.login, body["name"]) in self.repos:
            return httpx.Response(422, json={"message": "name already exists on this account"})
        self.repos.add((self.login, body["name"]))
        return httpx.Response(201, json={"name": body["name"], "auto_init": body.get("auto_init")})

    def _get_contents(self, owner: str, repo: str, path: str) -> httpx.Response:
        if self.broken_listings:
            return httpx.Response(500, json={"message": "Server Error"})
        if (owner, repo, path) in self.files:
            return httpx.Response(200, json=self.files[(owner, repo, path)])
        prefix = f"{path}/" if path else ""
        children = [
            entry
            for (o, r, p), entry in self.files.items()
            if o == owner and r == repo and p.startswith(prefix) and "/" not in p[len(prefix):]
        ]
        if path and not children:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json=children)

    def _put(self, owner: str, repo: str, path: str, body: dict) -> httpx.Response:
        if self.reject_puts:
            status, text = self.reject_puts
            return httpx.Response(status, text=text)
        if (owner, repo, path) in self.files and "sha" not in body:
            return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
        content = base64.b64decode(body["content"])
        entry = self.add_file(owner, repo, path, content)
        return httpx.Response(201, json={"content": entry, "commit": {"sha": "c0ffee"}})

    def _delete(self, owner: str, repo: str, path: str, body: dict) -> httpx.Response:
        entry = self.files.get((owner, repo, path))
        if entry is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if body.get("sha") != entry["sha"]:
            return httpx.Response(409, json={"message": f"{path} does not match {body.get('sha')}"})
        del self.files[(owner, repo, path)]
        return httpx.Response(200, json={"commit": {"sha": "dead"}})


@pytest.fixture
def fake_github():
    return FakeGitHub()


@pytest.fixture
def client_factory(fake_github):
    return partial(GitHubClient, transport=httpx.MockTransport(fake_github.handler))


@pytest.fixture
def client(client_factory):
    return client_factory(GOOD_TOKEN)
