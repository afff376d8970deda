"""Built-in commands and the per-profile registry."""

from .registry import PROFILE_COMMANDS, CommandRegistry

__all__ = ["PROFILE_COMMANDS", "CommandRegistry"]
