"""Helpers shared by command implementations."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from vshell import vfs
from vshell.types import ArgumentCompleter, CommandContext, CommandResult, OutputKind, ValueFlag

_DOS_SWITCH = re.compile(r"^/[A-Za-z?]$")


def ok(output: str = "", *, kind: OutputKind = "output") -> CommandResult:
    return CommandResult(success=True, output=output, kind=kind)


def fail(error: str, *, output: str = "") -> CommandResult:
    return CommandResult(success=False, output=output, error=error, kind="error")


def plural(count: int, singular: str, suffix: str = "s", plural_form: str | None = None) -> str:
    if count == 1:
        return singular
    return plural_form if plural_form is not None else singular + suffix


def has_switch(context: CommandContext, *names: str) -> bool:
    return any(name in context.flags for name in names)


def flag_operands(context: CommandContext, *names: str) -> list[str]:
    """Values the parser attached to boolean switches.

    ``cp -r src dest`` parses as ``{r: "src"}`` plus ``["dest"]``; commands whose
    switches never take a value hand such values back as operands.
    """

    operands: list[str] = []
    for name in names:
        flag = context.flags.get(name)
        if isinstance(flag, ValueFlag):
            operands.append(flag.value)
    return operands


def operands(args: list[str], context: CommandContext, *switches: str) -> list[str]:
    return [*flag_operands(context, *switches), *args]


def split_dos_switches(args: list[str]) -> tuple[list[str], list[str]]:
    """Separate DOS-style ``/x`` switches from path operands."""
    switches = [arg for arg in args if _DOS_SWITCH.match(arg)]
    paths = [arg for arg in args if not _DOS_SWITCH.match(arg)]
    return switches, paths


def path_completer(*, directories: bool | None = None) -> ArgumentCompleter:
    """Build a completer over the virtual filesystem.

    ``directories=True`` keeps only folders, ``False`` only files.
    """

    def _complete(partial: str, _args: list[str], context: CommandContext) -> list[str]:
        matches = vfs.path_completions(context.filesystem, context.current_directory, partial)
        if directories is None:
            return matches
        return [match for match in matches if match.endswith("/") == directories]

    return _complete


def split_target(context: CommandContext, target: str) -> tuple[str, str]:
    """Resolve ``target`` and return its parent directory and final name."""
    path = vfs.resolve(context.current_directory, target)
    return vfs.parent_of(path), vfs.basename(path)


def copy_item(context: CommandContext, item: vfs.VirtualFileSystemItem, parent: str, name: str) -> bool:
    """Recreate ``item`` (and its subtree) under ``parent`` using the context mutators."""
    if item.is_directory:
        if context.create_folder is None or not context.create_folder(parent, name):
            return False
        destination = vfs.resolve(parent, name)
        return all(copy_item(context, child, destination, child.name) for child in list(item.children))
    if context.create_file is None:
        return False
    return context.create_file(parent, name, item.content or "")


TransferFailure = Literal["missing_source", "missing_parent", "same_file", "into_itself", "target_is_directory"]


@dataclass(frozen=True)
class Transfer:
    """A resolved copy or move of one source item."""

    source: vfs.VirtualFileSystemItem
    parent: str
    name: str

    @property
    def target(self) -> str:
        return vfs.resolve(self.parent, self.name)


def plan_transfer(context: CommandContext, source: str, destination: str) -> Transfer | TransferFailure:
    """Work out where ``source`` lands when copied or moved to ``destination``.

    A destination naming an existing folder receives the source under its own name.
    """

    source_item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, source))
    if source_item is None:
        return "missing_source"

    destination_path = vfs.resolve(context.current_directory, destination)
    if vfs.is_directory(context.filesystem, destination_path):
        parent, name = destination_path, source_item.name
    else:
        parent, name = vfs.parent_of(destination_path), vfs.basename(destination_path)
        if not vfs.is_directory(context.filesystem, parent):
            return "missing_parent"

    transfer = Transfer(source=source_item, parent=parent, name=name)
    if transfer.target == source_item.path:
        return "same_file"
    if source_item.is_directory and vfs.is_subdirectory(source_item.path, transfer.target):
        return "into_itself"
    if vfs.is_directory(context.filesystem, transfer.target):
        return "target_is_directory"
    return transfer


def apply_transfer(context: CommandContext, transfer: Transfer, *, move: bool) -> bool:
    """Copy the planned item into place, replacing an existing file, then drop the source on move."""
    if vfs.exists(context.filesystem, transfer.target):
        if context.remove_item is None or not context.remove_item(transfer.target):
            return False
    if not copy_item(context, transfer.source, transfer.parent, transfer.name):
        return False
    if move:
        return context.remove_item is not None and context.remove_item(transfer.source.path)
    return True
