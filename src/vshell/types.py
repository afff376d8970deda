"""Shared value types for the shell core."""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from vshell.config import Profile
from vshell.vfs import VirtualFileSystemItem

OutputKind = Literal["input", "output", "error", "success", "warning", "info"]


@dataclass(frozen=True)
class BoolFlag:
    """A flag given without a value (``-l``, ``--verbose``)."""


@dataclass(frozen=True)
class ValueFlag:
    """A flag that carries a value (``--name=value`` or ``-n value``)."""

    value: str


Flag = BoolFlag | ValueFlag


def flag_value(flag: Flag) -> bool | str:
    match flag:
        case ValueFlag(value=value):
            return value
        case BoolFlag():
            return True


@dataclass(frozen=True)
class ParsedCommandLine:
    """One submitted line split into command, positional args and flags."""

    command: str
    args: tuple[str, ...] = ()
    flags: Mapping[str, Flag] = field(default_factory=dict)
    raw: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.command

    def flag_values(self) -> dict[str, bool | str]:
        return {name: flag_value(flag) for name, flag in self.flags.items()}


@dataclass(frozen=True)
class EditorRequest:
    """Payload asking the session to open the modal editor."""

    filename: str | None
    directory: str


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command invocation. Drives every session state change."""

    success: bool
    output: str = ""
    error: str | None = None
    clear: bool = False
    new_directory: str | None = None
    exit: bool = False
    kind: OutputKind = "output"
    editor: EditorRequest | None = None


CreateFile = Callable[[str, str, str], bool]
CreateFolder = Callable[[str, str], bool]
RemoveItem = Callable[[str], bool]


@dataclass(frozen=True)
class CommandContext:
    """Read-mostly snapshot handed to every command invocation."""

    current_directory: str
    profile: Profile
    filesystem: Sequence[VirtualFileSystemItem]
    username: str = "portfolio"
    hostname: str = "thalison"
    environment: Mapping[str, str] = field(default_factory=dict)
    history: tuple[str, ...] = ()
    flags: Mapping[str, Flag] = field(default_factory=dict)
    raw: str = ""
    commands: tuple[CommandDefinition, ...] = ()
    create_file: CreateFile | None = None
    create_folder: CreateFolder | None = None
    remove_item: RemoveItem | None = None


CommandHandler = Callable[[list[str], CommandContext], CommandResult | Awaitable[CommandResult]]
ArgumentCompleter = Callable[[str, list[str], CommandContext], list[str]]


@dataclass(frozen=True)
class CommandDefinition:
    """A named command with its aliases, help text and handler."""

    name: str
    description: str
    usage: str
    handler: CommandHandler
    aliases: tuple[str, ...] = ()
    autocomplete: ArgumentCompleter | None = None


@dataclass(frozen=True)
class OutputLine:
    """A rendered line in the session's output buffer."""

    content: str
    kind: OutputKind = "output"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
