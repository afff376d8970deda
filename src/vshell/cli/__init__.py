"""Command line interface for vshell."""

from .app import app

__all__ = ["app"]
