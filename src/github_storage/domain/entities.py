"""Domain entities — read-only snapshots of repository entries.

An entry is either a :class:`File` or a :class:`Directory`.  Both are frozen
and built fresh from each API response; nothing is pooled or refreshed.
"""

from __future__ import annotations

import base64
import binascii
import io
import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, ClassVar, Mapping, Union

from github_storage.domain.exceptions import DecodeError


class EntryType(str, Enum):
    """Discriminant shared by every entry variant."""

    FILE = "file"
    DIRECTORY = "dir"


def _require(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise DecodeError(f"Entry payload is missing a string '{key}' field: {dict(data)!r}")
    return value


def _name_for(data: Mapping[str, Any], path: str, name: str | None) -> str:
    if name is not None:
        return name
    raw = data.get("name")
    if isinstance(raw, str) and raw:
        return raw
    return posixpath.basename(path.rstrip("/"))


@dataclass(frozen=True, slots=True)
class File:
    """A blob on the configured branch.

    ``contents`` stays base64-encoded exactly as GitHub delivered it; the
    decoded bytes are derived on demand.
    """

    type: ClassVar[EntryType] = EntryType.FILE

    name: str
    path: str
    hash: str
    size: int = 0
    contents: str = ""

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], name: str | None = None) -> File:
        """Build a file from a Contents or Trees API node."""
        path = _require(data, "path")
        sha = _require(data, "sha")
        size = data.get("size", 0)
        if isinstance(size, bool) or not isinstance(size, int) or size < 0:
            raise DecodeError(f"Invalid size {size!r} for '{path}'")
        # Empty files come back without a content field
        contents = data.get("content") or ""
        return cls(
            name=_name_for(data, path, name),
            path=path,
            hash=sha,
            size=size,
            contents=contents,
        )

    def decoded_contents(self) -> bytes:
        try:
            return base64.b64decode(self.contents)
        except binascii.Error as exc:
            raise DecodeError(f"Content of '{self.path}' is not valid base64") from exc

    def decoded_text(self, encoding: str = "utf-8") -> str:
        return self.decoded_contents().decode(encoding)

    def open_stream(self) -> BinaryIO:
        """Return a new in-memory stream positioned at the start of the content."""
        return io.BytesIO(self.decoded_contents())


@dataclass(frozen=True, slots=True)
class Directory:
    """A tree node.  Directories only exist while they contain files."""

    type: ClassVar[EntryType] = EntryType.DIRECTORY

    name: str
    path: str
    hash: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], name: str | None = None) -> Directory:
        path = _require(data, "path")
        return cls(
            name=_name_for(data, path, name),
            path=path,
            hash=_require(data, "sha"),
        )


Entry = Union[File, Directory]
