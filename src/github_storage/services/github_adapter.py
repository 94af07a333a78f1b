"""GitHub filesystem adapter — implements the Filesystem port.

The adapter speaks the vocabulary of a generic hierarchical filesystem and
composes :class:`RepositoryClient` calls to get there.  GitHub has no notion
of moving a file, of a directory on its own, or of a timestamp, so several
operations are emulated:

* ``rename`` is a create followed by a delete (not atomic),
* ``delete_dir`` deletes every file directly inside the directory,
* ``create_dir`` commits an empty ``.gitkeep`` placeholder.

Every public operation collapses client failures into the contract's
sentinel (``False``, ``[]``, ``0`` or ``""``).  The underlying exception is
logged and kept on :attr:`GitHubAdapter.last_error`.
"""

from __future__ import annotations

import logging
import posixpath
from typing import BinaryIO, Literal, NoReturn

from github_storage.domain.entities import Directory, Entry, File
from github_storage.domain.exceptions import (
    RepositoryClientError,
    UnsupportedEntryError,
    UnsupportedOperationError,
)
from github_storage.domain.ports.filesystem import (
    FileRecord,
    MetadataRecord,
    StreamRecord,
    WriteConfig,
)
from github_storage.domain.ports.repository_client import RepositoryClient
from github_storage.services.mime_type import detect_by_filename
from github_storage.services.path_prefix import PathPrefixer

logger = logging.getLogger(__name__)

PLACEHOLDER_NAME = ".gitkeep"


class GitHubAdapter:
    """Filesystem backed by one branch of a GitHub repository.

    Parameters
    ----------
    client:
        Repository client used for every remote round-trip.
    prefix:
        Root offset prepended to every path passed to the adapter.
    """

    def __init__(self, client: RepositoryClient, prefix: str = "") -> None:
        self._client = client
        self._prefixer = PathPrefixer(prefix)
        self.last_error: RepositoryClientError | None = None

    # ── Writing ─────────────────────────────────────────────────────────

    def write(
        self, path: str, contents: str | bytes, config: WriteConfig | None = None
    ) -> File | Literal[False]:
        """Create *path* and return the committed file."""
        return self._upload(path, contents, config, update=False)

    def write_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig | None = None
    ) -> File | Literal[False]:
        return self._upload_stream(path, stream, config, update=False)

    def update(
        self, path: str, contents: str | bytes, config: WriteConfig | None = None
    ) -> File | Literal[False]:
        """Replace the content of an existing *path*."""
        return self._upload(path, contents, config, update=True)

    def update_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig | None = None
    ) -> File | Literal[False]:
        return self._upload_stream(path, stream, config, update=True)

    def rename(self, path: str, new_path: str) -> bool:
        """Copy *path* to *new_path*, then delete *path*.

        A failure after the upload leaves both paths in the repository.
        """
        self.last_error = None
        source = self._prefixer.apply(path)
        target = self._prefixer.apply(new_path)
        try:
            file = self._read_file(source)
            self._client.upload(
                target, file.decoded_contents(), f"Create {posixpath.basename(target)}"
            )
            self._client.delete(file, f"Delete {file.name}")
        except RepositoryClientError as exc:
            return self._fail("rename", source, exc)
        return True

    def copy(self, path: str, new_path: str) -> bool:
        self.last_error = None
        source = self._prefixer.apply(path)
        target = self._prefixer.apply(new_path)
        try:
            file = self._read_file(source)
            self._client.upload(
                target, file.decoded_contents(), f"Create {posixpath.basename(target)}"
            )
        except RepositoryClientError as exc:
            return self._fail("copy", source, exc)
        return True

    def delete(self, path: str) -> bool:
        self.last_error = None
        location = self._prefixer.apply(path)
        try:
            file = self._read_file(location)
            self._client.delete(file, f"Delete {file.name}")
        except RepositoryClientError as exc:
            return self._fail("delete", location, exc)
        return True

    def delete_dir(self, dirname: str) -> bool:
        """Delete every file directly inside *dirname*.

        Directories vanish from the repository once they hold no files, so
        they are never deleted themselves.  Deletes already made are kept
        when a later one fails.
        """
        self.last_error = None
        location = self._prefixer.apply(dirname)
        try:
            entries = self._client.tree(location)
        except RepositoryClientError as exc:
            return self._fail("delete_dir", location, exc)

        status = True
        for entry in entries:
            match entry:
                case Directory():
                    continue
                case File():
                    try:
                        self._client.delete(entry, f"Delete {entry.name}")
                    except RepositoryClientError as exc:
                        status = self._fail("delete_dir", entry.path, exc)
        return status

    def create_dir(self, dirname: str, config: WriteConfig | None = None) -> bool:
        """Commit an empty placeholder so that *dirname* exists."""
        placeholder = f"{dirname.rstrip('/')}/{PLACEHOLDER_NAME}"
        return self.write(placeholder, "", config) is not False

    # ── Reading ─────────────────────────────────────────────────────────

    def has(self, path: str) -> bool:
        """Whether *path* can be read.

        Every client failure counts as "does not exist", network errors
        included; ``last_error`` tells them apart.
        """
        self.last_error = None
        location = self._prefixer.apply(path)
        try:
            self._client.read(location)
        except RepositoryClientError as exc:
            return self._fail("has", location, exc, level=logging.DEBUG)
        return True

    def read(self, path: str) -> FileRecord | Literal[False]:
        self.last_error = None
        location = self._prefixer.apply(path)
        try:
            file = self._read_file(location)
            contents = file.decoded_contents()
        except RepositoryClientError as exc:
            return self._fail("read", location, exc)
        return {
            "type": "file",
            "path": file.path,
            "contents": contents,
            "size": file.size,
            "hash": file.hash,
        }

    def read_stream(self, path: str) -> StreamRecord | Literal[False]:
        self.last_error = None
        location = self._prefixer.apply(path)
        try:
            file = self._read_file(location)
            stream = file.open_stream()
        except RepositoryClientError as exc:
            return self._fail("read_stream", location, exc)
        return {
            "type": "file",
            "path": file.path,
            "stream": stream,
            "size": file.size,
            "hash": file.hash,
        }

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Entry]:
        """List *directory*; an unreachable directory lists as empty."""
        self.last_error = None
        location = self._prefixer.apply(directory)
        try:
            return self._client.tree(location, recursive)
        except RepositoryClientError as exc:
            self._fail("list_contents", location, exc)
            return []

    # ── Metadata ────────────────────────────────────────────────────────

    def get_metadata(self, path: str) -> MetadataRecord | Literal[False]:
        self.last_error = None
        location = self._prefixer.apply(path)
        try:
            file = self._read_file(location)
        except RepositoryClientError as exc:
            return self._fail("get_metadata", location, exc)
        return {
            "mimetype": detect_by_filename(file.path),
            "size": file.size,
        }

    def get_size(self, path: str) -> int:
        metadata = self.get_metadata(path)
        return metadata["size"] if metadata else 0

    def get_mimetype(self, path: str) -> str:
        metadata = self.get_metadata(path)
        return metadata["mimetype"] if metadata else ""

    def get_timestamp(self, path: str) -> NoReturn:
        raise UnsupportedOperationError("GitHub API does not support timestamps.")

    def get_visibility(self, path: str) -> NoReturn:
        raise UnsupportedOperationError("GitHub API does not support visibility.")

    def set_visibility(self, path: str, visibility: str) -> NoReturn:
        raise UnsupportedOperationError("GitHub API does not support visibility.")

    # ── Internals ───────────────────────────────────────────────────────

    def _upload(
        self,
        path: str,
        contents: str | bytes,
        config: WriteConfig | None,
        update: bool,
    ) -> File | Literal[False]:
        self.last_error = None
        location = self._prefixer.apply(path)
        message = self._commit_message(config, "Update" if update else "Create", location)
        try:
            self._client.upload(location, contents, message, update)
            return self._read_file(location)
        except RepositoryClientError as exc:
            return self._fail("update" if update else "write", location, exc)

    def _upload_stream(
        self,
        path: str,
        stream: BinaryIO,
        config: WriteConfig | None,
        update: bool,
    ) -> File | Literal[False]:
        self.last_error = None
        location = self._prefixer.apply(path)
        message = self._commit_message(config, "Update" if update else "Create", location)
        try:
            self._client.upload_stream(location, stream, message, update)
            return self._read_file(location)
        except RepositoryClientError as exc:
            return self._fail("update_stream" if update else "write_stream", location, exc)

    def _read_file(self, location: str) -> File:
        entry = self._client.read(location)
        if not isinstance(entry, File):
            raise UnsupportedEntryError(f"'{location}' is a directory, not a file")
        return entry

    @staticmethod
    def _commit_message(config: WriteConfig | None, verb: str, location: str) -> str:
        if config and config.get("message"):
            return str(config["message"])
        return f"{verb} {posixpath.basename(location)}"

    def _fail(
        self,
        operation: str,
        location: str,
        exc: RepositoryClientError,
        level: int = logging.WARNING,
    ) -> Literal[False]:
        self.last_error = exc
        logger.log(
            level, "%s failed for '%s': %s: %s", operation, location, type(exc).__name__, exc
        )
        return False
