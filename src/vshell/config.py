"""Configuration management for vshell."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Profile = Literal["linux", "windows"]
LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="VSHELL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Session
    profile: Profile = Field(default="linux", description="Initial OS profile")
    username: str = Field(default="portfolio", description="User name shown in the prompt")
    hostname: str = Field(default="thalison", description="Host name shown in the prompt")
    home_directory: str = Field(default="/Desktop", description="Starting directory of a new session")

    # History
    history_max_size: int = Field(default=1000, ge=1, description="Maximum number of history entries per profile")
    history_namespace: str = Field(default="terminal-command-history", description="History key prefix")
    home: Path = Field(default=Path.home() / ".vshell", description="Directory for persisted state")
    history_file: Path | None = Field(default=None, description="Override path of the history JSON file")

    # Autocomplete and editor
    suggestion_limit: int = Field(default=20, ge=1, description="Maximum suggestions returned per request")
    editor_undo_depth: int = Field(default=20, ge=1, description="Maximum undo entries kept by the editor")
    editor_viewport_height: int = Field(default=25, ge=1, description="Visible lines in the editor")

    # Filesystem
    filesystem_seed: Path | None = Field(default=None, description="JSON file describing the initial tree")

    log_level: LogLevel = Field(default="INFO", description="Log level")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    def resolve_history_file(self) -> Path:
        if self.history_file is not None:
            return self.history_file.expanduser()
        return self.home.expanduser() / "history.json"


def get_settings(**overrides: Any) -> Settings:
    """Build settings from the environment, applying explicit overrides.

    ``None`` overrides are ignored so CLI options can be passed straight through.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
