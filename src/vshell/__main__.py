"""vshell CLI bootstrap."""

from __future__ import annotations

from vshell.cli import app

if __name__ == "__main__":
    app()
