"""Path prefixing — a fixed root offset applied to every adapter path."""

from __future__ import annotations


class PathPrefixer:
    """Maps adapter-relative paths to repository paths."""

    def __init__(self, prefix: str = "") -> None:
        prefix = prefix.strip("/")
        self._prefix = f"{prefix}/" if prefix else ""

    @property
    def prefix(self) -> str:
        return self._prefix

    def apply(self, path: str) -> str:
        return self._prefix + path.lstrip("/")

