"""Shared test fixtures.

``FakeGitHub`` is an in-memory stand-in for the Contents and Git Trees
endpoints, mounted on ``httpx.MockTransport`` so the real client code runs
end to end without a network.
"""

from __future__ import annotations

import base64
import hashlib
import json
import posixpath
from collections.abc import Iterator
from typing import Any

import httpx
import pytest

from github_storage.domain.value_objects import ClientConfig
from github_storage.infrastructure.github_contents_client import GitHubContentsClient
from github_storage.services.github_adapter import GitHubAdapter

TOKEN = "test-token"
REPOSITORY = "octo/storage"
BRANCH = "master"


def blob_sha(content: bytes) -> str:
    """Git's object id for a blob."""
    return hashlib.sha1(b"blob %d\0" % len(content) + content).hexdigest()


class FakeGitHub:
    """Minimal model of one branch of a repository behind the REST API."""

    def __init__(self, repository: str = REPOSITORY, branch: str = BRANCH) -> None:
        self.repository = repository
        self.branch = branch
        self.files: dict[str, bytes] = {}
        self.symlinks: dict[str, str] = {}
        self.submodules: set[str] = set()
        self.overrides: dict[str, Any] = {}
        self.failures: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []
        self.commits = 0

    # ── Setup helpers ───────────────────────────────────────────────────

    def add_file(self, path: str, content: bytes | str) -> str:
        raw = content.encode("utf-8") if isinstance(content, str) else content
        self.files[path] = raw
        return blob_sha(raw)

    def fail(self, method: str, path: str, status: int) -> None:
        """Answer every *method* request for *path* with *status*."""
        self.failures[(method, path)] = status

    def requests_for(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    # ── Tree model ──────────────────────────────────────────────────────

    def _leaves(self) -> list[str]:
        return sorted([*self.files, *self.symlinks, *self.submodules])

    def _directories(self) -> set[str]:
        dirs = {""}
        for leaf in self._leaves():
            parent = posixpath.dirname(leaf)
            while parent:
                dirs.add(parent)
                parent = posixpath.dirname(parent)
        return dirs

    def _children(self, directory: str) -> list[str]:
        leaves = [p for p in self._leaves() if posixpath.dirname(p) == directory]
        subdirs = [d for d in self._directories() if d and posixpath.dirname(d) == directory]
        return sorted(leaves + subdirs)

    def _sha(self, path: str) -> str:
        if path in self.files:
            return blob_sha(self.files[path])
        if path in self.symlinks:
            return blob_sha(self.symlinks[path].encode())
        if path in self.submodules:
            return hashlib.sha1(f"commit:{path}".encode()).hexdigest()
        listing = ",".join(f"{c}={self._sha(c)}" for c in self._children(path))
        return hashlib.sha1(f"tree:{path}:{listing}".encode()).hexdigest()

    def _node(self, path: str) -> dict[str, Any]:
        if path in self.files:
            kind, size = "file", len(self.files[path])
        elif path in self.symlinks:
            kind, size = "symlink", len(self.symlinks[path])
        elif path in self.submodules:
            kind, size = "submodule", 0
        else:
            kind, size = "dir", 0
        return {
            "name": posixpath.basename(path),
            "path": path,
            "sha": self._sha(path),
            "size": size,
            "type": kind,
        }

    # ── Request handling ────────────────────────────────────────────────

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"message": "Bad credentials"})

        prefix = f"/repos/{self.repository}/"
        url_path = request.url.path
        if not url_path.startswith(prefix):
            return httpx.Response(404, json={"message": "Not Found"})
        rest = url_path[len(prefix):]

        if rest.startswith("contents"):
            path = rest[len("contents"):].strip("/")
            status = self.failures.get((request.method, path))
            if status is not None:
                return httpx.Response(status, json={"message": "Injected failure"})
            if request.method == "GET":
                if request.url.params.get("ref") != self.branch:
                    return httpx.Response(404, json={"message": "No commit found for the ref"})
                return self._get_contents(path)
            body = json.loads(request.content)
            if body.get("branch") != self.branch:
                return httpx.Response(404, json={"message": "Branch not found"})
            if request.method == "PUT":
                return self._put_contents(path, body)
            if request.method == "DELETE":
                return self._delete_contents(path, body)

        if rest.startswith("git/trees/") and request.method == "GET":
            return self._get_tree(rest[len("git/trees/"):], request.url.params.get("recursive"))

        return httpx.Response(404, json={"message": "Not Found"})

    def _get_contents(self, path: str) -> httpx.Response:
        if path in self.overrides:
            return httpx.Response(200, json=self.overrides[path])
        if path in self.files:
            payload = self._node(path)
            payload["content"] = base64.encodebytes(self.files[path]).decode("ascii")
            payload["encoding"] = "base64"
            return httpx.Response(200, json=payload)
        if path in self.symlinks:
            return httpx.Response(200, json={**self._node(path), "target": self.symlinks[path]})
        if path in self.submodules:
            return httpx.Response(200, json=self._node(path))
        if path in self._directories():
            return httpx.Response(200, json=[self._node(c) for c in self._children(path)])
        return httpx.Response(404, json={"message": "Not Found"})

    def _put_contents(self, path: str, body: dict[str, Any]) -> httpx.Response:
        if path in self.files:
            if "sha" not in body:
                return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
            if body["sha"] != self._sha(path):
                return httpx.Response(409, json={"message": f"{path} does not match {body['sha']}"})
        created = path not in self.files
        self.files[path] = base64.b64decode(body["content"])
        self.commits += 1
        return httpx.Response(
            201 if created else 200,
            json={
                "content": self._node(path),
                "commit": {"sha": f"{self.commits:040x}", "message": body["message"]},
            },
        )

    def _delete_contents(self, path: str, body: dict[str, Any]) -> httpx.Response:
        if path not in self.files:
            return httpx.Response(404, json={"message": "Not Found"})
        if body.get("sha") != self._sha(path):
            return httpx.Response(409, json={"message": f"{path} does not match {body.get('sha')}"})
        del self.files[path]
        self.commits += 1
        return httpx.Response(
            200,
            json={
                "content": None,
                "commit": {"sha": f"{self.commits:040x}", "message": body["message"]},
            },
        )

    def _get_tree(self, reference: str, recursive: str | None) -> httpx.Response:
        if reference == self.branch:
            root = ""
        else:
            matches = [d for d in self._directories() if self._sha(d) == reference]
            if not matches:
                return httpx.Response(404, json={"message": "Not Found"})
            root = matches[0]

        if recursive:
            descendants = [
                p
                for p in sorted(self._directories() | set(self._leaves()))
                if p and (not root or p.startswith(f"{root}/"))
            ]
        else:
            descendants = self._children(root)

        tree = []
        for path in descendants:
            node = self._node(path)
            relative = path[len(root) + 1:] if root else path
            if node["type"] == "dir":
                tree.append({"path": relative, "mode": "040000", "type": "tree", "sha": node["sha"]})
            elif node["type"] == "submodule":
                tree.append({"path": relative, "mode": "160000", "type": "commit", "sha": node["sha"]})
            else:
                tree.append({
                    "path": relative,
                    "mode": "100644",
                    "type": "blob",
                    "sha": node["sha"],
                    "size": node["size"],
                })
        return httpx.Response(200, json={"sha": self._sha(root), "tree": tree, "truncated": False})


@pytest.fixture
def fake_github() -> FakeGitHub:
    """An empty fake repository on branch ``master``."""
    return FakeGitHub()


@pytest.fixture
def http_client(fake_github: FakeGitHub) -> Iterator[httpx.Client]:
    with httpx.Client(transport=httpx.MockTransport(fake_github.handle)) as client:
        yield client


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig.create(token=TOKEN, repository=REPOSITORY, branch=BRANCH)


@pytest.fixture
def github_client(client_config: ClientConfig, http_client: httpx.Client) -> GitHubContentsClient:
    return GitHubContentsClient(client_config, http_client)


@pytest.fixture
def adapter(github_client: GitHubContentsClient) -> GitHubAdapter:
    return GitHubAdapter(github_client)
