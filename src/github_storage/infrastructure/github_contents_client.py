"""GitHub Contents/Trees API client — implements the RepositoryClient port."""

from __future__ import annotations

import base64
import logging
import posixpath
from datetime import datetime, timezone
from typing import Any, BinaryIO, Mapping
from urllib.parse import quote

import httpx

from github_storage.domain.entities import Directory, Entry, File
from github_storage.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    DecodeError,
    PathNotFoundError,
    RateLimitError,
    SymlinkDepthExceededError,
    TransportError,
    UnknownEntryTypeError,
    UnsupportedEntryError,
)
from github_storage.domain.value_objects import ClientConfig

logger = logging.getLogger(__name__)

_USER_AGENT = "github-storage/1.0"

DEFAULT_MAX_SYMLINK_DEPTH = 8

# Remote type tags
TYPE_DIRECTORY = "dir"
TYPE_TREE = "tree"


def _entry_from_node(node: Any, base: str = "") -> Entry:
    """Map a listing node to an entry; ``tree``/``dir`` nodes become directories."""
    if not isinstance(node, dict) or not isinstance(node.get("path"), str):
        raise DecodeError(f"Unexpected tree node: {node!r}")
    path = posixpath.join(base, node["path"]) if base else node["path"]
    payload = {**node, "path": path}
    name = posixpath.basename(path)
    if node.get("type") in (TYPE_TREE, TYPE_DIRECTORY):
        return Directory.from_payload(payload, name=name)
    return File.from_payload(payload, name=name)


class GitHubContentsClient:
    """Concrete RepositoryClient backed by the GitHub v3 REST API.

    The HTTP client is injected and never closed here; its owner decides
    its lifetime.  Every request is scoped to ``config.branch``.
    """

    def __init__(
        self,
        config: ClientConfig,
        client: httpx.Client,
        max_symlink_depth: int = DEFAULT_MAX_SYMLINK_DEPTH,
    ) -> None:
        self._config = config
        self._client = client
        self._max_symlink_depth = max_symlink_depth
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": _USER_AGENT,
        }
        if config.token:
            self._api_headers["Authorization"] = f"Bearer {config.token}"

    # ── Public operations ───────────────────────────────────────────────

    def read(self, path: str) -> Entry:
        """GET /repos/{repo}/contents/{path} → File or Directory."""
        return self._read(path, depth=0)

    def upload(
        self,
        path: str,
        contents: str | bytes,
        commit_message: str,
        update: bool = False,
    ) -> dict[str, Any]:
        """PUT /repos/{repo}/contents/{path} → raw commit/content payload.

        Updates must carry the current blob SHA, so they re-read the path
        first.
        """
        raw = contents.encode("utf-8") if isinstance(contents, str) else contents
        body: dict[str, Any] = {
            "content": base64.b64encode(raw).decode("ascii"),
            "message": commit_message,
        }
        if update:
            body["sha"] = self.read(path).hash

        logger.info(
            "%s %s on %s@%s (%d bytes)",
            "Updating" if update else "Creating",
            path,
            self._config.repository,
            self._config.branch,
            len(raw),
        )
        data = self._request("PUT", self.contents_url(path), body=body)
        if not isinstance(data, dict):
            raise DecodeError(f"Unexpected upload response for '{path}': {data!r}")
        return data

    def upload_stream(
        self,
        path: str,
        stream: BinaryIO,
        commit_message: str,
        update: bool = False,
    ) -> dict[str, Any]:
        """Read *stream* to the end and upload the result."""
        if not callable(getattr(stream, "read", None)):
            raise TypeError(
                f"Argument must be a readable stream, {type(stream).__name__} given."
            )
        return self.upload(path, stream.read(), commit_message, update)

    def delete(self, file: File, commit_message: str) -> None:
        """DELETE /repos/{repo}/contents/{path} with the file's SHA."""
        logger.info(
            "Deleting %s on %s@%s", file.path, self._config.repository, self._config.branch
        )
        self._request(
            "DELETE",
            self.contents_url(file.path),
            body={"message": commit_message, "sha": file.hash},
        )

    def tree(self, path: str, recursive: bool = False) -> list[Entry]:
        """List *path*.

        Non-recursive listings come from the Contents API (immediate children
        only).  Recursive listings use the Git Trees API with ``recursive=1``
        and are flattened; node paths are re-rooted under *path*.
        """
        path = path.strip("/")

        if not recursive:
            data = self._request("GET", self.contents_url(path))
            if isinstance(data, dict):
                raise UnsupportedEntryError(f"'{path}' is a file, not a directory")
            if not isinstance(data, list):
                raise DecodeError(f"Unexpected listing for '{path}': {data!r}")
            return [_entry_from_node(node) for node in data]

        reference = self._tree_reference(path)
        data = self._request("GET", self.tree_url(reference), params={"recursive": "1"})
        if not isinstance(data, dict) or not isinstance(data.get("tree", []), list):
            raise DecodeError(f"Unexpected tree response for '{path}': {data!r}")
        if data.get("truncated"):
            logger.warning("Tree listing for '%s' was truncated by GitHub", path or "/")
        return [_entry_from_node(node, base=path) for node in data.get("tree", [])]

    # ── URL building ────────────────────────────────────────────────────

    def contents_url(self, path: str) -> str:
        encoded = quote(path.strip("/"), safe="/")
        return f"{self._repo_url()}/contents/{encoded}"

    def tree_url(self, reference: str) -> str:
        return f"{self._repo_url()}/git/trees/{quote(reference, safe='/')}"

    def _repo_url(self) -> str:
        return f"{self._config.base_url}/repos/{self._config.repository.full_name}"

    # ── Internals ───────────────────────────────────────────────────────

    def _read(self, path: str, depth: int) -> Entry:
        data = self._request("GET", self.contents_url(path))

        # Directories come back as a bare array of child entries
        if isinstance(data, list):
            if not data:
                raise DecodeError(f"Empty directory listing for '{path}'")
            return Directory.from_payload(data[0])
        if not isinstance(data, dict):
            raise DecodeError(f"Unexpected contents response for '{path}': {data!r}")

        entry_type = data.get("type")
        match entry_type:
            case "file":
                return File.from_payload(data)
            case "symlink":
                target = data.get("target")
                if not isinstance(target, str):
                    raise DecodeError(f"Symlink '{path}' has no target")
                if depth >= self._max_symlink_depth:
                    raise SymlinkDepthExceededError(
                        f"More than {self._max_symlink_depth} symlinks followed from '{path}'"
                    )
                logger.debug("Following symlink %s -> %s", path, target)
                return self._read(target, depth + 1)
            case "submodule":
                raise UnsupportedEntryError(f"'{path}' is a git submodule")
            case _:
                raise UnknownEntryTypeError(str(entry_type))

    def _tree_reference(self, path: str) -> str:
        """Resolve the Trees API reference for *path*.

        The repository root is addressed by branch name.  A subdirectory is
        looked up in its parent's listing, since reading the directory itself
        only yields its first child.
        """
        if not path:
            return self._config.branch

        parent = posixpath.dirname(path)
        listing = self._request("GET", self.contents_url(parent))
        if isinstance(listing, list):
            for node in listing:
                if not isinstance(node, dict) or node.get("path") != path:
                    continue
                if node.get("type") != TYPE_DIRECTORY:
                    raise UnsupportedEntryError(f"'{path}' is a file, not a directory")
                return Directory.from_payload(node).hash
        raise PathNotFoundError(f"Directory not found: {path}", status_code=404)

    def _request(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> Any:
        """Perform a GitHub API request with error translation.

        ``ref`` is always the first query parameter; mutating requests carry
        ``branch`` beneath the caller's fields.
        """
        query = {"ref": self._config.branch, **(params or {})}
        payload = None
        if method != "GET" and body is not None:
            payload = {"branch": self._config.branch, **body}

        logger.debug("Request: %s %s", method, url)
        try:
            resp = self._client.request(
                method, url, headers=self._api_headers, params=query, json=payload
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error during {method} {url}: {exc}") from exc
        logger.debug("Response: %s %s (status=%d)", method, url, resp.status_code)

        self._raise_for_status(resp, method, url)

        try:
            return resp.json()
        except ValueError as exc:
            raise DecodeError(
                f"GitHub API returned a non-JSON body for {method} {url}"
            ) from exc

    @staticmethod
    def _raise_for_status(resp: httpx.Response, method: str, url: str) -> None:
        status = resp.status_code
        if resp.is_success:
            return

        if status == 404:
            raise PathNotFoundError(f"Not found: {method} {url}", status_code=status)

        if status in (401, 403):
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if status == 403 and remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise RateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}.",
                    status_code=status,
                )
            raise AccessDeniedError(
                f"Access denied for {method} {url} (HTTP {status}).", status_code=status
            )

        if status == 429:
            raise RateLimitError("GitHub API rate limit exceeded (HTTP 429).", status_code=status)

        if status in (409, 422):
            raise ConflictError(
                f"GitHub API rejected {method} {url} (HTTP {status}): {resp.text}",
                status_code=status,
            )

        raise TransportError(
            f"GitHub API returned HTTP {status} for {method} {url}", status_code=status
        )
