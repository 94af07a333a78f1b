"""Port: generic hierarchical filesystem.

Failure is reported through sentinels rather than exceptions: ``False`` for
operations returning a record or a flag, ``[]`` for listings, ``0`` / ``""``
for the scalar metadata getters.  Operations the backend cannot support at
all raise :class:`~github_storage.domain.exceptions.UnsupportedOperationError`.
"""

from __future__ import annotations

from typing import Any, BinaryIO, Literal, Mapping, Protocol, TypedDict

from github_storage.domain.entities import Entry, File


class FileRecord(TypedDict):
    """Result of ``read``."""

    type: str
    path: str
    contents: bytes
    size: int
    hash: str


class StreamRecord(TypedDict):
    """Result of ``read_stream``."""

    type: str
    path: str
    stream: BinaryIO
    size: int
    hash: str


class MetadataRecord(TypedDict):
    """Result of ``get_metadata``."""

    mimetype: str
    size: int


WriteConfig = Mapping[str, Any]


class Filesystem(Protocol):
    """Abstract contract every storage adapter implements."""

    def write(
        self, path: str, contents: str | bytes, config: WriteConfig | None = None
    ) -> File | Literal[False]: ...

    def write_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig | None = None
    ) -> File | Literal[False]: ...

    def update(
        self, path: str, contents: str | bytes, config: WriteConfig | None = None
    ) -> File | Literal[False]: ...

    def update_stream(
        self, path: str, stream: BinaryIO, config: WriteConfig | None = None
    ) -> File | Literal[False]: ...

    def rename(self, path: str, new_path: str) -> bool: ...

    def copy(self, path: str, new_path: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def delete_dir(self, dirname: str) -> bool: ...

    def create_dir(self, dirname: str, config: WriteConfig | None = None) -> bool: ...

    def has(self, path: str) -> bool: ...

    def read(self, path: str) -> FileRecord | Literal[False]: ...

    def read_stream(self, path: str) -> StreamRecord | Literal[False]: ...

    def list_contents(self, directory: str = "", recursive: bool = False) -> list[Entry]: ...

    def get_metadata(self, path: str) -> MetadataRecord | Literal[False]: ...

    def get_size(self, path: str) -> int: ...

    def get_mimetype(self, path: str) -> str: ...

    def get_timestamp(self, path: str) -> int: ...

    def get_visibility(self, path: str) -> str: ...

    def set_visibility(self, path: str, visibility: str) -> bool: ...
