"""
Configuration and settings for the DevConnector API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Serving
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    # Built client bundle served at "/" when set (production).
    client_build_dir: Optional[str] = Field(default=None)

    # Document store (any SQLAlchemy URL; unset means in-memory)
    database_url: Optional[str] = Field(default=None)

    # Auth tokens
    jwt_secret: str = Field(default="devconnector-development-signing-secret")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expires_seconds: int = Field(default=360000)

    # GitHub
    github_api_url: str = Field(default="https://api.github.com")
    github_client_id: Optional[str] = Field(default=None)
    github_client_secret: Optional[str] = Field(default=None)

    # Pusher broadcast
    pusher_app_id: Optional[str] = Field(default=None)
    pusher_key: Optional[str] = Field(default=None)
    pusher_secret: Optional[str] = Field(default=None)
    pusher_cluster: str = Field(default="us2")
    broadcast_channel: str = Field(default="posts")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    @property
    def pusher_configured(self) -> bool:
        return bool(self.pusher_app_id and self.pusher_key and self.pusher_secret)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
