"""The command that hands the session over to the modal editor."""

from __future__ import annotations

from vshell.commands.base import fail, path_completer
from vshell.types import CommandContext, CommandDefinition, CommandResult, EditorRequest

_complete_files = path_completer(directories=False)


def _vim(args: list[str], context: CommandContext) -> CommandResult:
    filename = args[0] if args else None
    if filename is not None and (".." in filename or filename.startswith("/")):
        return fail(f'vim: "{filename}": Invalid filename')
    return CommandResult(
        success=True,
        kind="info",
        editor=EditorRequest(filename=filename, directory=context.current_directory),
    )


def _complete(partial: str, args: list[str], context: CommandContext) -> list[str]:
    if args:
        return []
    return [match for match in _complete_files(partial, args, context) if "/" not in match][:10]


def editor_commands() -> list[CommandDefinition]:
    return [
        CommandDefinition(
            "vim", "Open vim text editor", "vim [filename]", _vim, aliases=("vi",), autocomplete=_complete
        ),
    ]
