"""Domain exception hierarchy.

The repository client raises the ``RepositoryClientError`` family; the
filesystem adapter catches that family at the boundary of every public
operation and converts it into the filesystem contract's failure sentinel.
"""

from __future__ import annotations


class GitHubStorageError(Exception):
    """Base exception for the entire package."""


# ── Configuration ───────────────────────────────────────────────────────────


class InvalidRepositoryError(GitHubStorageError):
    """The repository identifier is not of the form ``owner/name``."""


# ── Filesystem contract ─────────────────────────────────────────────────────


class UnsupportedOperationError(GitHubStorageError):
    """The remote store has no equivalent for the requested operation."""


# ── Repository client ───────────────────────────────────────────────────────


class RepositoryClientError(GitHubStorageError):
    """Any failure raised by the repository client."""


class TransportError(RepositoryClientError):
    """Network failure or non-success HTTP status from the GitHub API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PathNotFoundError(TransportError):
    """The path does not exist on the configured branch (404)."""


class AccessDeniedError(TransportError):
    """The token is missing, invalid or lacks permission (401 / 403)."""


class RateLimitError(TransportError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class ConflictError(TransportError):
    """The content hash sent with a mutation is stale or missing (409 / 422)."""


class DecodeError(RepositoryClientError):
    """The response body does not have the expected shape."""


class UnsupportedEntryError(RepositoryClientError):
    """The entry exists but cannot be represented as a file (e.g. a submodule)."""


class UnknownEntryTypeError(RepositoryClientError):
    """The remote reported an entry type this package does not know."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Entry has unknown type '{type_name}'")
        self.type_name = type_name


class SymlinkDepthExceededError(RepositoryClientError):
    """Too many symlinks were followed while resolving a path."""
