"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from github_storage.domain.value_objects import DEFAULT_BASE_URL, DEFAULT_BRANCH, ClientConfig


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr
    github_repository: str
    github_branch: str = DEFAULT_BRANCH
    github_api_url: str = DEFAULT_BASE_URL
    path_prefix: str = ""
    http_timeout: float = 30.0
    log_level: str = "INFO"

    def client_config(self) -> ClientConfig:
        """Build the immutable client configuration from these settings."""
        return ClientConfig.create(
            token=self.github_token.get_secret_value(),
            repository=self.github_repository,
            branch=self.github_branch,
            base_url=self.github_api_url,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
