"""Terminal rendering and line input for the interactive shell."""

from __future__ import annotations

import threading
from collections.abc import Iterable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape

from vshell.core.session import ShellSession
from vshell.editor.engine import Editor
from vshell.types import OutputKind, OutputLine

TOGGLE_PROFILE = "\x0f"
CLEAR_SCREEN = "\x0c"

KIND_STYLES: dict[OutputKind, str] = {
    "input": "bold cyan",
    "output": "",
    "error": "red",
    "success": "green",
    "warning": "yellow",
    "info": "blue",
}


class SessionCompleter(Completer):
    """prompt_toolkit completer backed by the session's autocomplete engine."""

    def __init__(self, session: ShellSession) -> None:
        self._session = session

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        text = document.text_before_cursor
        result = self._session.autocomplete.generate_suggestions(text, len(text))
        word = "" if not text or text[-1].isspace() else text.split()[-1]
        for candidate in result.completions:
            yield Completion(candidate, start_position=-len(word))


class Renderer:
    """Rich output plus a prompt_toolkit line reader."""

    def __init__(self, session: ShellSession, console: Console | None = None) -> None:
        self.console = console or Console()
        self._print_lock = threading.Lock()
        self._prompt_session: PromptSession[str] = PromptSession(
            completer=SessionCompleter(session),
            key_bindings=self._key_bindings(),
        )
        self._key_session: PromptSession[str] = PromptSession()

    @staticmethod
    def _key_bindings() -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add("c-o")
        def _toggle_profile(event) -> None:
            event.app.exit(result=TOGGLE_PROFILE)

        @bindings.add("c-l")
        def _clear(event) -> None:
            event.app.exit(result=CLEAR_SCREEN)

        return bindings

    def line(self, line: OutputLine) -> None:
        style = KIND_STYLES[line.kind]
        text = escape(line.content)
        self._print(f"[{style}]{text}[/{style}]" if style else text)

    def lines(self, lines: Iterable[OutputLine], *, include_input: bool = False) -> None:
        for line in lines:
            if line.kind == "input" and not include_input:
                continue
            self.line(line)

    def clear(self) -> None:
        self.console.clear()

    def editor(self, editor: Editor) -> None:
        state = editor.state
        top = state.scroll_offset
        visible = state.buffer[top : top + state.viewport_height]
        width = len(str(len(state.buffer)))
        self._print(f"[bold]{escape(state.filename or '[No Name]')}[/bold]" + (" [+]" if state.modified else ""))
        for offset, text in enumerate(visible):
            number = top + offset
            gutter = f"[dim]{number + 1:>{width}}[/dim] " if state.show_line_numbers else ""
            if number == state.cursor.line:
                self._print(f"{gutter}[reverse]{escape(text) or ' '}[/reverse]")
            else:
                self._print(f"{gutter}{escape(text)}")
        for _ in range(state.viewport_height - len(visible)):
            self._print("[blue]~[/blue]")

        status = f"-- {editor.mode.upper()} --  {state.cursor.line + 1},{state.cursor.column + 1}"
        self._print(f"[bold]{status}[/bold]")
        if state.message:
            self._print(f"[{KIND_STYLES[state.message_type]}]{escape(state.message)}[/]")

    async def read_line(self, prompt: str) -> str:
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async(prompt)

    async def read_keys(self, editor: Editor) -> str:
        prompt = editor.state.command_line or "keys> "
        with patch_stdout(raw=True):
            return await self._key_session.prompt_async(prompt)

    def _print(self, message: str) -> None:
        with self._print_lock:
            self.console.print(message, highlight=False)
