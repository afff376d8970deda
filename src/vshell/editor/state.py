"""Editor state. Each mode carries only the fields that mode needs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MessageType = Literal["info", "warning", "error"]


@dataclass(frozen=True, order=True)
class Position:
    line: int = 0
    column: int = 0


@dataclass(frozen=True)
class Selection:
    start: Position
    end: Position

    def ordered(self) -> tuple[Position, Position]:
        return (self.start, self.end) if self.start <= self.end else (self.end, self.start)


@dataclass(frozen=True)
class NormalMode:
    name: Literal["normal"] = "normal"


@dataclass(frozen=True)
class InsertMode:
    """Insert session. ``origin_*`` is the state the whole session undoes back to."""

    origin_buffer: tuple[str, ...]
    origin_cursor: Position
    origin_modified: bool = False
    name: Literal["insert"] = "insert"


@dataclass(frozen=True)
class VisualMode:
    anchor: Position
    name: Literal["visual"] = "visual"


@dataclass(frozen=True)
class CommandLineMode:
    """Colon command line, or a search line when ``prompt`` is ``/``."""

    text: str = ""
    prompt: Literal[":", "/"] = ":"
    name: Literal["command"] = "command"


EditorMode = NormalMode | InsertMode | VisualMode | CommandLineMode


@dataclass
class EditorState:
    buffer: list[str] = field(default_factory=lambda: [""])
    cursor: Position = field(default_factory=Position)
    mode: EditorMode = field(default_factory=NormalMode)
    filename: str | None = None
    directory: str = "/"
    modified: bool = False
    register: str = ""
    register_linewise: bool = False
    search_pattern: str = ""
    search_results: list[Position] = field(default_factory=list)
    search_index: int = -1
    message: str = ""
    message_type: MessageType = "info"
    show_line_numbers: bool = True
    scroll_offset: int = 0
    viewport_height: int = 25

    @property
    def selection(self) -> Selection | None:
        if isinstance(self.mode, VisualMode):
            return Selection(self.mode.anchor, self.cursor)
        return None

    @property
    def command_line(self) -> str:
        if isinstance(self.mode, CommandLineMode):
            return self.mode.prompt + self.mode.text
        return ""

    @property
    def current_line(self) -> str:
        return self.buffer[self.cursor.line]

    def content(self) -> str:
        return "\n".join(self.buffer)
