"""Application-level exception types for vshell."""

from __future__ import annotations


class VShellError(Exception):
    """Base exception for vshell."""


class ConfigurationError(VShellError):
    """Base exception for configuration and startup validation errors."""


class UnknownProfileError(ConfigurationError):
    """Raised when an OS profile has no registered command set."""

    def __init__(self, profile: str) -> None:
        super().__init__(f"unknown os profile: {profile}")
        self.profile = profile


class FilesystemSeedError(ConfigurationError):
    """Raised when a filesystem seed file cannot be read or validated."""
