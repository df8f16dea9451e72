"""Settings for mcpdeck.

Created: 2026-10-12

Values come from the environment (``MCPDECK_`` prefix) or an ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MCPDECK_",
        env_file=".env",
        extra="ignore",
    )

    # Host application API (tool listing + MCP server config endpoints)
    api_base_url: str = "http://localhost:61990"
    request_timeout: float = Field(default=30.0, gt=0)

    # Transport assigned to url-based servers that don't name one
    default_transport: str = "sse"

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".mcpdeck")
    # Relative paths in server commands/args resolve against this directory
    scripts_dir: Path | None = None

    log_level: str = "INFO"

    def resolved_scripts_dir(self) -> Path:
        return self.scripts_dir or (self.config_dir / "scripts")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def get_config_dir() -> Path:
    """Get/create the config directory."""
    d = get_settings().config_dir
    d.mkdir(parents=True, exist_ok=True)
    return d
