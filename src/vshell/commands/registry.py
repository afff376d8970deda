"""Per-profile command registry."""

from __future__ import annotations

import inspect
import time
from collections.abc import Callable, Mapping

from loguru import logger

from vshell.commands.editor import editor_commands
from vshell.commands.linux import linux_commands
from vshell.commands.shared import network_commands, shared_commands
from vshell.commands.windows import windows_commands
from vshell.config import Profile
from vshell.errors import UnknownProfileError
from vshell.types import CommandContext, CommandDefinition, CommandResult

CommandGroup = Callable[[], list[CommandDefinition]]

PROFILE_COMMANDS: Mapping[str, tuple[CommandGroup, ...]] = {
    "linux": (shared_commands, linux_commands, network_commands, editor_commands),
    "windows": (shared_commands, windows_commands, editor_commands),
}


def _shorten_text(text: str, width: int = 30, placeholder: str = "...") -> str:
    if len(text) <= width:
        return text
    available = width - len(placeholder)
    if available <= 0:
        return placeholder
    return text[:available] + placeholder


class CommandRegistry:
    """Commands and aliases for one OS profile.

    Lookups resolve aliases before direct names. ``switch_os`` drops the current
    tables and rebuilds them from ``PROFILE_COMMANDS``.
    """

    def __init__(self, profile: Profile, groups: Mapping[str, tuple[CommandGroup, ...]] | None = None) -> None:
        self._groups = groups if groups is not None else PROFILE_COMMANDS
        self._commands: dict[str, CommandDefinition] = {}
        self._aliases: dict[str, str] = {}
        self.profile: Profile = profile
        self._build(profile)

    def _build(self, profile: Profile) -> None:
        groups = self._groups.get(profile)
        if groups is None:
            raise UnknownProfileError(profile)

        self._commands = {}
        self._aliases = {}
        for group in groups:
            for command in group():
                self.register(command)
        self.profile = profile
        logger.debug("registry.build profile={} commands={}", profile, len(self._commands))

    def register(self, command: CommandDefinition) -> None:
        self._commands[command.name] = CommandDefinition(
            name=command.name,
            description=command.description,
            usage=command.usage,
            handler=self._wrap_handler(command),
            aliases=command.aliases,
            autocomplete=command.autocomplete,
        )
        for alias in command.aliases:
            self._aliases[alias] = command.name

    def switch_os(self, profile: Profile) -> None:
        self._build(profile)

    def get_command(self, name: str) -> CommandDefinition | None:
        target = self._aliases.get(name)
        if target is not None:
            return self._commands.get(target)
        return self._commands.get(name)

    def has_command(self, name: str) -> bool:
        return name in self._commands or name in self._aliases

    def all_commands(self) -> list[CommandDefinition]:
        return list(self._commands.values())

    def all_command_names(self) -> list[str]:
        return [*self._commands, *self._aliases]

    def get_command_suggestions(self, partial: str) -> list[str]:
        lowered = partial.lower()
        return sorted({name for name in self.all_command_names() if name.lower().startswith(lowered)})

    def get_argument_suggestions(
        self, name: str, partial: str, args: list[str], context: CommandContext
    ) -> list[str]:
        command = self.get_command(name)
        if command is None or command.autocomplete is None:
            return []
        try:
            return list(command.autocomplete(partial, args, context))
        except Exception:
            logger.opt(exception=True).warning("registry.autocomplete.error name={}", name)
            return []

    def get_usage(self, name: str) -> str | None:
        command = self.get_command(name)
        return command.usage if command is not None else None

    def get_description(self, name: str) -> str | None:
        command = self.get_command(name)
        return command.description if command is not None else None

    def _log_command_call(self, name: str, args: list[str], context: CommandContext) -> None:
        rendered = ", ".join(_shorten_text(repr(arg)) for arg in args)
        logger.info(
            "command.call.start name={} profile={} cwd={} [ {} ]",
            name,
            context.profile,
            context.current_directory,
            rendered,
        )

    def _wrap_handler(self, command: CommandDefinition):
        original = command.handler

        async def _handler(args: list[str], context: CommandContext) -> CommandResult:
            self._log_command_call(command.name, args, context)
            start = time.monotonic()
            try:
                result = original(args, context)
                if inspect.isawaitable(result):
                    result = await result
                return result
            except Exception:
                logger.exception("command.call.error name={}", command.name)
                raise
            finally:
                duration = time.monotonic() - start
                logger.info("command.call.end name={} duration={:.3f}ms", command.name, duration * 1000)

        return _handler
