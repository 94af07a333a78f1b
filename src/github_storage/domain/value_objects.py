"""Value objects — self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from github_storage.domain.exceptions import InvalidRepositoryError

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_BRANCH = "master"

_REPOSITORY_RE = re.compile(r"^(?P<owner>[A-Za-z0-9\-_.]+)/(?P<name>[A-Za-z0-9\-_.]+)$")


@dataclass(frozen=True, slots=True)
class RepositoryName:
    """Validated ``owner/name`` repository identifier."""

    owner: str
    name: str

    @classmethod
    def from_string(cls, value: str) -> RepositoryName:
        """Parse and validate an ``owner/name`` string."""
        value = value.strip()
        match = _REPOSITORY_RE.match(value)
        if not match:
            raise InvalidRepositoryError(
                f"Invalid repository: '{value}'. Expected format: <owner>/<name>"
            )
        return cls(owner=match["owner"], name=match["name"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Everything a client needs to address one branch of one repository.

    Every request issued with this configuration is scoped to ``branch``.
    """

    token: str
    repository: RepositoryName
    branch: str = DEFAULT_BRANCH
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def create(
        cls,
        token: str,
        repository: str,
        branch: str = DEFAULT_BRANCH,
        base_url: str | None = None,
    ) -> ClientConfig:
        """Build a config from plain strings, validating the repository."""
        return cls(
            token=token,
            repository=RepositoryName.from_string(repository),
            branch=branch,
            base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
        )
