"""Port: repository client — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Any, BinaryIO, Protocol

from github_storage.domain.entities import Entry, File


class RepositoryClient(Protocol):
    """Abstract contract for reading and committing repository content."""

    def read(self, path: str) -> Entry:
        """Return the entry at *path*, following symlinks."""
        ...

    def upload(
        self, path: str, contents: str | bytes, commit_message: str, update: bool = False
    ) -> dict[str, Any]:
        """Commit *contents* to *path*; return the raw API response."""
        ...

    def upload_stream(
        self, path: str, stream: BinaryIO, commit_message: str, update: bool = False
    ) -> dict[str, Any]:
        """Drain *stream* and commit it to *path*."""
        ...

    def delete(self, file: File, commit_message: str) -> None:
        """Delete *file*, using its hash as the concurrency precondition."""
        ...

    def tree(self, path: str, recursive: bool = False) -> list[Entry]:
        """List the children of *path*, or every descendant when *recursive*."""
        ...
