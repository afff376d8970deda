"""Modal line editor driven by key names.

Keys are plain strings: single printable characters, named keys (``Enter``,
``Escape``, ``Backspace``, ``Delete``, ``Tab``, ``ArrowLeft`` ... ``PageDown``,
``Home``, ``End``) and control chords written as ``ctrl+<letter>``.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from loguru import logger

from vshell.editor.ex_commands import execute_ex_command
from vshell.editor.history import BufferDiff, UndoHistory, VimChange
from vshell.editor.state import (
    CommandLineMode,
    EditorState,
    InsertMode,
    MessageType,
    NormalMode,
    Position,
    VisualMode,
)

SaveCallback = Callable[[str, str], bool]
LoadCallback = Callable[[str], str]
ExitCallback = Callable[[], None]

_WORD = re.compile(r"\w")
_PENDING_OPERATORS = frozenset("gdy")


def _char_class(char: str) -> int:
    if char.isspace():
        return 0
    return 1 if _WORD.match(char) else 2


def _word_starts(line: str) -> list[int]:
    return [
        idx
        for idx, char in enumerate(line)
        if _char_class(char) and (idx == 0 or _char_class(line[idx - 1]) != _char_class(char))
    ]


def _word_ends(line: str) -> list[int]:
    last = len(line) - 1
    return [
        idx
        for idx, char in enumerate(line)
        if _char_class(char) and (idx == last or _char_class(line[idx + 1]) != _char_class(char))
    ]


def _is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def _plural_lines(count: int) -> str:
    return f"{count} line yanked" if count == 1 else f"{count} lines yanked"


class Editor:
    """A vim-flavoured editor over a list of lines.

    ``save(filename, content)`` returns whether the write succeeded;
    ``load(filename)`` returns the file content or raises ``OSError``.
    ``on_exit`` fires once when the editor quits.
    """

    def __init__(
        self,
        *,
        filename: str | None = None,
        directory: str = "/",
        save: SaveCallback | None = None,
        load: LoadCallback | None = None,
        on_exit: ExitCallback | None = None,
        undo_depth: int = 20,
        viewport_height: int = 25,
    ) -> None:
        self.state = EditorState(directory=directory, viewport_height=viewport_height)
        self.history = UndoHistory(undo_depth)
        self.exited = False
        self._save = save
        self._load = load
        self._on_exit = on_exit
        self._pending = ""
        self._written = False
        if filename:
            self.load_file(filename)

    @property
    def mode(self) -> str:
        return self.state.mode.name

    # status line

    def message(self, text: str, message_type: MessageType = "info") -> None:
        self.state.message = text
        self.state.message_type = message_type

    def error(self, text: str) -> None:
        self.message(text, "error")

    # file operations used by colon commands

    def load_file(self, filename: str) -> None:
        try:
            if self._load is None:
                raise FileNotFoundError(filename)
            content = self._load(filename)
        except OSError:
            self._replace_buffer([""], filename)
            self.message(f'"{filename}" [New File]')
            logger.debug("editor.open file={} new=true", filename)
            return

        lines = content.split("\n")
        self._replace_buffer(lines, filename)
        self.message(f'"{filename}" {len(lines)}L, {len(content)}C')
        logger.debug("editor.open file={} lines={}", filename, len(lines))

    def write_file(self, filename: str | None = None) -> bool:
        target = filename or self.state.filename
        if not target:
            self.error("E32: No file name")
            return False

        content = self.state.content()
        if self._save is None or not self._save(target, content):
            self.error(f"E212: Can't open file for writing: {target}")
            return False

        self.state.filename = target
        self.state.modified = False
        self._written = True
        self.message(f'"{target}" {len(self.state.buffer)}L, {len(content)}C written')
        logger.info("editor.write file={} chars={}", target, len(content))
        return True

    def quit(self, *, force: bool = False) -> bool:
        if self.state.modified and not force:
            self.error("E37: No write since last change (add ! to override)")
            return False
        self.exited = True
        logger.debug("editor.exit file={} modified={}", self.state.filename, self.state.modified)
        if self._on_exit is not None:
            self._on_exit()
        return True

    def show_text(self, lines: list[str], title: str, message: str) -> None:
        self._replace_buffer(lines, title)
        self.message(message)

    def set_line_numbers(self, enabled: bool) -> None:
        self.state.show_line_numbers = enabled
        self.message("Line numbers enabled" if enabled else "Line numbers disabled")

    def _replace_buffer(self, lines: list[str], filename: str | None) -> None:
        self.state.buffer = lines or [""]
        self.state.filename = filename
        self.state.cursor = Position()
        self.state.modified = False
        self.state.scroll_offset = 0
        self.state.mode = NormalMode()
        self.history.clear()

    # key dispatch

    def handle_key(self, key: str) -> None:
        if self.exited:
            return
        match self.state.mode:
            case NormalMode():
                self._normal_key(key)
            case InsertMode():
                self._insert_key(key)
            case VisualMode():
                self._visual_key(key)
            case CommandLineMode():
                self._command_line_key(key)
        self._clamp_cursor()
        self._follow_cursor()

    def feed(self, keys: list[str]) -> None:
        for key in keys:
            if self.exited:
                break
            self.handle_key(key)

    def _normal_key(self, key: str) -> None:
        pending, self._pending = self._pending, ""
        if pending and key == pending:
            if key == "g":
                self._move(0, 0)
            elif key == "d":
                self._delete_line()
            else:
                self._yank_line()
            return
        if key in _PENDING_OPERATORS:
            self._pending = key
            return

        target = self._motion(key)
        if target is not None:
            self._move(target.line, target.column)
            return

        cursor = self.state.cursor
        line = self.state.current_line
        match key:
            case "i":
                self._begin_insert()
            case "I":
                self._begin_insert(Position(cursor.line, 0))
            case "a":
                self._begin_insert(Position(cursor.line, min(cursor.column + 1, len(line))))
            case "A":
                self._begin_insert(Position(cursor.line, len(line)))
            case "o" | "O":
                self._open_line(below=key == "o")
            case "x":
                self._delete_char()
            case "p" | "P":
                self._put(after=key == "p")
            case "u":
                self.undo()
            case "ctrl+r":
                self.redo()
            case "v":
                self.state.mode = VisualMode(anchor=cursor)
            case ":":
                self.message("")
                self.state.mode = CommandLineMode()
            case "/":
                self.message("")
                self.state.mode = CommandLineMode(prompt="/")
            case "n":
                self._search_step(forward=True)
            case "N":
                self._search_step(forward=False)

    def _insert_key(self, key: str) -> None:
        buffer = list(self.state.buffer)
        cursor = self.state.cursor
        line = buffer[cursor.line]
        col = cursor.column

        match key:
            case "Escape" | "ctrl+c":
                self._end_insert()
            case "Enter":
                buffer[cursor.line : cursor.line + 1] = [line[:col], line[col:]]
                self._edit(buffer, Position(cursor.line + 1, 0))
            case "Backspace" | "ctrl+h":
                if col > 0:
                    buffer[cursor.line] = line[: col - 1] + line[col:]
                    self._edit(buffer, Position(cursor.line, col - 1))
                elif cursor.line > 0:
                    previous = buffer[cursor.line - 1]
                    buffer[cursor.line - 1 : cursor.line + 1] = [previous + line]
                    self._edit(buffer, Position(cursor.line - 1, len(previous)))
            case "Delete":
                if col < len(line):
                    buffer[cursor.line] = line[:col] + line[col + 1 :]
                    self._edit(buffer, cursor)
                elif cursor.line < len(buffer) - 1:
                    buffer[cursor.line : cursor.line + 2] = [line + buffer[cursor.line + 1]]
                    self._edit(buffer, cursor)
            case "Tab":
                buffer[cursor.line] = line[:col] + "  " + line[col:]
                self._edit(buffer, Position(cursor.line, col + 2))
            case "ctrl+u":
                buffer[cursor.line] = line[col:]
                self._edit(buffer, Position(cursor.line, 0))
            case "ctrl+w":
                start = col
                while start > 0 and line[start - 1].isspace():
                    start -= 1
                while start > 0 and not line[start - 1].isspace():
                    start -= 1
                buffer[cursor.line] = line[:start] + line[col:]
                self._edit(buffer, Position(cursor.line, start))
            case "ArrowLeft":
                if col > 0:
                    self._move(cursor.line, col - 1)
                elif cursor.line > 0:
                    self._move(cursor.line - 1, len(buffer[cursor.line - 1]))
            case "ArrowRight":
                if col < len(line):
                    self._move(cursor.line, col + 1)
                elif cursor.line < len(buffer) - 1:
                    self._move(cursor.line + 1, 0)
            case "ArrowUp":
                self._move(cursor.line - 1, col)
            case "ArrowDown":
                self._move(cursor.line + 1, col)
            case "Home":
                self._move(cursor.line, 0)
            case "End":
                self._move(cursor.line, len(line))
            case "PageUp":
                self._move(cursor.line - self.state.viewport_height, col)
            case "PageDown":
                self._move(cursor.line + self.state.viewport_height, col)
            case _ if _is_printable(key):
                buffer[cursor.line] = line[:col] + key + line[col:]
                self._edit(buffer, Position(cursor.line, col + 1))

    def _visual_key(self, key: str) -> None:
        target = self._motion(key)
        if target is not None:
            self._move(target.line, target.column)
            return

        selection = self.state.selection
        assert selection is not None
        start, end = selection.ordered()
        match key:
            case "d" | "x":
                self.state.register = self._selected_text(start, end)
                self.state.register_linewise = False
                self.state.mode = NormalMode()
                self._delete_range(start, end)
            case "y":
                self.state.register = self._selected_text(start, end)
                self.state.register_linewise = False
                self.state.mode = NormalMode()
                self.state.cursor = start
                self.message(_plural_lines(end.line - start.line + 1))
            case "Escape" | "v" | "ctrl+c":
                self.state.mode = NormalMode()
            case "i":
                self._begin_insert()
            case ":":
                self.state.mode = CommandLineMode()

    def _command_line_key(self, key: str) -> None:
        mode = self.state.mode
        assert isinstance(mode, CommandLineMode)
        match key:
            case "Escape" | "ctrl+c":
                self.state.mode = NormalMode()
            case "Enter":
                self.state.mode = NormalMode()
                if mode.prompt == "/":
                    self.search(mode.text)
                elif mode.text.strip():
                    self._run_ex_command(mode.text)
            case "Backspace" | "Delete":
                if not mode.text:
                    self.state.mode = NormalMode()
                else:
                    self.state.mode = CommandLineMode(text=mode.text[:-1], prompt=mode.prompt)
            case _ if _is_printable(key):
                self.state.mode = CommandLineMode(text=mode.text + key, prompt=mode.prompt)

    def _run_ex_command(self, text: str) -> None:
        try:
            execute_ex_command(self, text)
        except Exception as exc:
            logger.opt(exception=True).warning("editor.command.error command={}", text)
            self.error(f"Command error: {exc}")

    # motions

    def _motion(self, key: str) -> Position | None:
        cursor = self.state.cursor
        line = self.state.current_line
        last_column = max(0, len(line) - 1)
        height = self.state.viewport_height
        match key:
            case "h" | "ArrowLeft":
                return Position(cursor.line, cursor.column - 1)
            case "l" | "ArrowRight":
                return Position(cursor.line, min(cursor.column + 1, last_column))
            case "j" | "ArrowDown":
                return Position(cursor.line + 1, cursor.column)
            case "k" | "ArrowUp":
                return Position(cursor.line - 1, cursor.column)
            case "w":
                return Position(cursor.line, next((i for i in _word_starts(line) if i > cursor.column), last_column))
            case "b":
                starts = [i for i in _word_starts(line) if i < cursor.column]
                return Position(cursor.line, starts[-1] if starts else 0)
            case "e":
                return Position(cursor.line, next((i for i in _word_ends(line) if i > cursor.column), last_column))
            case "0" | "Home":
                return Position(cursor.line, 0)
            case "$" | "End":
                return Position(cursor.line, last_column)
            case "G":
                last = len(self.state.buffer) - 1
                return Position(last, max(0, len(self.state.buffer[last]) - 1))
            case "ctrl+f" | "PageDown":
                return Position(cursor.line + height, cursor.column)
            case "ctrl+b" | "PageUp":
                return Position(cursor.line - height, cursor.column)
        return None

    def _move(self, line: int, column: int) -> None:
        line = max(0, min(line, len(self.state.buffer) - 1))
        column = max(0, min(column, len(self.state.buffer[line])))
        self.state.cursor = Position(line, column)

    def _clamp_cursor(self) -> None:
        self._move(self.state.cursor.line, self.state.cursor.column)

    def _follow_cursor(self) -> None:
        line = self.state.cursor.line
        height = max(1, self.state.viewport_height)
        if line < self.state.scroll_offset:
            self.state.scroll_offset = line
        elif line >= self.state.scroll_offset + height:
            self.state.scroll_offset = line - height + 1

    # edits

    def _edit(self, buffer: list[str], cursor: Position) -> None:
        """Replace the buffer. Outside insert mode the change is recorded for undo."""
        before_buffer = self.state.buffer
        before_cursor = self.state.cursor
        before_modified = self.state.modified

        self.state.buffer = buffer or [""]
        self.state.cursor = cursor
        self._clamp_cursor()
        if isinstance(self.state.mode, InsertMode):
            self.state.modified = True
            return

        diff = BufferDiff.between(before_buffer, self.state.buffer)
        if diff is None:
            return
        self.state.modified = True
        self.history.push(VimChange(diff, before_cursor, self.state.cursor, before_modified, True))

    def _begin_insert(self, cursor: Position | None = None) -> None:
        self.state.mode = InsertMode(
            origin_buffer=tuple(self.state.buffer),
            origin_cursor=self.state.cursor,
            origin_modified=self.state.modified,
        )
        if cursor is not None:
            self._move(cursor.line, cursor.column)

    def _end_insert(self) -> None:
        mode = self.state.mode
        assert isinstance(mode, InsertMode)
        self.state.mode = NormalMode()
        diff = BufferDiff.between(mode.origin_buffer, self.state.buffer)
        if diff is None:
            self.state.modified = mode.origin_modified
            return
        self.history.push(VimChange(diff, mode.origin_cursor, self.state.cursor, mode.origin_modified, True))

    def _open_line(self, *, below: bool) -> None:
        self._begin_insert()
        at = self.state.cursor.line + (1 if below else 0)
        buffer = list(self.state.buffer)
        buffer.insert(at, "")
        self._edit(buffer, Position(at, 0))

    def _delete_char(self) -> None:
        cursor = self.state.cursor
        line = self.state.current_line
        if cursor.column >= len(line):
            return
        self.state.register = line[cursor.column]
        self.state.register_linewise = False
        buffer = list(self.state.buffer)
        buffer[cursor.line] = line[: cursor.column] + line[cursor.column + 1 :]
        self._edit(buffer, cursor)

    def _delete_line(self) -> None:
        cursor = self.state.cursor
        self.state.register = self.state.current_line
        self.state.register_linewise = True
        buffer = list(self.state.buffer)
        del buffer[cursor.line]
        self._edit(buffer, Position(min(cursor.line, max(0, len(buffer) - 1)), 0))

    def _yank_line(self) -> None:
        self.state.register = self.state.current_line
        self.state.register_linewise = True
        self.message(_plural_lines(1))

    def _put(self, *, after: bool) -> None:
        text = self.state.register
        if not text and not self.state.register_linewise:
            self.message("Nothing to put", "warning")
            return

        cursor = self.state.cursor
        buffer = list(self.state.buffer)
        pieces = text.split("\n")
        if self.state.register_linewise:
            at = cursor.line + (1 if after else 0)
            buffer[at:at] = pieces
            self._edit(buffer, Position(at, 0))
            return

        line = buffer[cursor.line]
        col = min(cursor.column + 1, len(line)) if after and line else cursor.column
        head, tail = line[:col], line[col:]
        if len(pieces) == 1:
            buffer[cursor.line] = head + text + tail
            self._edit(buffer, Position(cursor.line, col + len(text) - 1))
            return
        buffer[cursor.line : cursor.line + 1] = [head + pieces[0], *pieces[1:-1], pieces[-1] + tail]
        self._edit(buffer, Position(cursor.line + len(pieces) - 1, max(0, len(pieces[-1]) - 1)))

    def _selected_text(self, start: Position, end: Position) -> str:
        buffer = self.state.buffer
        if start.line == end.line:
            return buffer[start.line][start.column : end.column + 1]
        return "\n".join(
            [
                buffer[start.line][start.column :],
                *buffer[start.line + 1 : end.line],
                buffer[end.line][: end.column + 1],
            ]
        )

    def _delete_range(self, start: Position, end: Position) -> None:
        buffer = list(self.state.buffer)
        joined = buffer[start.line][: start.column] + buffer[end.line][end.column + 1 :]
        buffer[start.line : end.line + 1] = [joined]
        self._edit(buffer, start)

    # undo / redo

    def undo(self) -> None:
        change = self.history.undo()
        if change is None:
            self.message("Already at oldest change", "warning")
            return
        self._apply(change)

    def redo(self) -> None:
        change = self.history.redo()
        if change is None:
            self.message("Already at newest change", "warning")
            return
        self._apply(change)

    def _apply(self, change: VimChange) -> None:
        self.state.buffer = change.diff.apply(self.state.buffer) or [""]
        self.state.cursor = change.cursor_after
        # flags recorded before a write no longer describe the file on disk
        self.state.modified = True if self._written else change.modified_after
        self._clamp_cursor()

    # search

    def _matches(self, pattern: str) -> list[Position]:
        found: list[Position] = []
        for number, line in enumerate(self.state.buffer):
            start = line.find(pattern)
            while start != -1:
                found.append(Position(number, start))
                start = line.find(pattern, start + 1)
        return found

    def search(self, pattern: str) -> None:
        pattern = pattern or self.state.search_pattern
        if not pattern:
            self.error("E35: No previous regular expression")
            return
        self.state.search_pattern = pattern
        self._search_step(forward=True, echo=f"/{pattern}")

    def _search_step(self, *, forward: bool, echo: str | None = None) -> None:
        pattern = self.state.search_pattern
        if not pattern:
            self.error("E35: No previous regular expression")
            return

        results = self._matches(pattern)
        self.state.search_results = results
        if not results:
            self.state.search_index = -1
            self.error(f"E486: Pattern not found: {pattern}")
            return

        cursor = self.state.cursor
        wrapped = False
        if forward:
            index = next((i for i, pos in enumerate(results) if pos > cursor), None)
            if index is None:
                index, wrapped = 0, True
        else:
            before = [i for i, pos in enumerate(results) if pos < cursor]
            index = before[-1] if before else len(results) - 1
            wrapped = not before

        self.state.search_index = index
        self.state.cursor = results[index]
        if wrapped:
            edge = "search hit BOTTOM, continuing at TOP" if forward else "search hit TOP, continuing at BOTTOM"
            self.message(edge, "warning")
        else:
            self.message(echo or ("/" if forward else "?") + pattern)
