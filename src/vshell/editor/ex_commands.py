"""Colon commands (``:w``, ``:q`` ...) for the editor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vshell.editor.engine import Editor

ExHandler = Callable[["Editor", list[str]], None]

NOT_SAVED = "E37: No write since last change (add ! to override)"
ARGUMENT_REQUIRED = "E471: Argument required"

HELP_LINES = [
    "=== Vim Help ===",
    "",
    "Normal Mode Commands:",
    "  h, j, k, l    - Move cursor left, down, up, right",
    "  w, b, e       - Word movements",
    "  0, $          - Beginning/end of line",
    "  gg, G         - First/last line",
    "  i, a, o, O    - Enter insert mode",
    "  x             - Delete character",
    "  dd            - Delete line",
    "  yy            - Yank (copy) line",
    "  p, P          - Put (paste)",
    "  u             - Undo",
    "  Ctrl+r        - Redo",
    "  /, n, N       - Search, next, previous",
    "  v             - Enter visual mode",
    "  :             - Enter command mode",
    "",
    "Command Mode:",
    "  :w            - Write (save) file",
    "  :q            - Quit",
    "  :wq           - Write and quit",
    "  :q!           - Force quit",
    "  :e <file>     - Edit file",
    "  :set number   - Show line numbers",
    "  :help         - Show this help",
    "",
    "Press : to enter command mode, then type a command.",
]


@dataclass(frozen=True)
class ExCommand:
    name: str
    description: str
    handler: ExHandler
    aliases: tuple[str, ...] = ()


def _write(editor: Editor, args: list[str]) -> None:
    editor.write_file(args[0] if args else None)


def _quit(editor: Editor, args: list[str]) -> None:
    editor.quit()


def _force_quit(editor: Editor, args: list[str]) -> None:
    editor.quit(force=True)


def _write_quit(editor: Editor, args: list[str]) -> None:
    if editor.write_file(args[0] if args else None):
        editor.quit()


def _edit(editor: Editor, args: list[str]) -> None:
    if editor.state.modified:
        editor.error(NOT_SAVED)
        return
    if not args:
        editor.error(ARGUMENT_REQUIRED)
        return
    editor.load_file(args[0])


def _set(editor: Editor, args: list[str]) -> None:
    if not args:
        editor.error(ARGUMENT_REQUIRED)
        return
    option = args[0]
    if option in ("number", "nu"):
        editor.set_line_numbers(True)
    elif option in ("nonumber", "nonu"):
        editor.set_line_numbers(False)
    elif option in ("number!", "nu!", "invnumber", "invnu"):
        editor.set_line_numbers(not editor.state.show_line_numbers)
    else:
        editor.error(f"E518: Unknown option: {option}")


def _help(editor: Editor, args: list[str]) -> None:
    editor.show_text(list(HELP_LINES), "[Help]", "Help loaded")


EX_COMMANDS: tuple[ExCommand, ...] = (
    ExCommand("write", "Write the buffer to a file", _write, ("w",)),
    ExCommand("quit", "Quit unless there are unsaved changes", _quit, ("q",)),
    ExCommand("quit!", "Quit and discard changes", _force_quit, ("q!",)),
    ExCommand("wq", "Write and quit", _write_quit, ("x",)),
    ExCommand("edit", "Open another file", _edit, ("e",)),
    ExCommand("set", "Change an editor option", _set, ("se",)),
    ExCommand("help", "Show editor help", _help, ("h",)),
)

_LOOKUP = {name: command for command in EX_COMMANDS for name in (command.name, *command.aliases)}


def find_ex_command(name: str) -> ExCommand | None:
    return _LOOKUP.get(name)


def execute_ex_command(editor: Editor, text: str) -> None:
    parts = text.split()
    if not parts:
        return
    command = find_ex_command(parts[0])
    if command is None:
        editor.error(f"E492: Not an editor command: {text.strip()}")
        return
    command.handler(editor, parts[1:])
