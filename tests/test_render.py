import io

import pytest
from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document
from rich.console import Console

from vshell.cli.render import Renderer, SessionCompleter
from vshell.core.session import ShellSession
from vshell.editor.engine import Editor
from vshell.types import OutputLine


@pytest.fixture
def renderer(monkeypatch: pytest.MonkeyPatch, session: ShellSession) -> Renderer:
    monkeypatch.setattr("vshell.cli.render.PromptSession", lambda **kwargs: None)
    return Renderer(session, console=Console(file=io.StringIO(), width=80))


def _printed(renderer: Renderer) -> list[str]:
    return [line.rstrip() for line in renderer.console.file.getvalue().splitlines()]


def test_lines_skip_input_and_keep_brackets(renderer: Renderer) -> None:
    renderer.lines([OutputLine("ls", "input"), OutputLine("boom", "error"), OutputLine("[x] done")])

    assert _printed(renderer) == ["boom", "[x] done"]


def test_lines_can_include_input(renderer: Renderer) -> None:
    renderer.lines([OutputLine("$ ls", "input")], include_input=True)

    assert _printed(renderer) == ["$ ls"]


def test_editor_frame(renderer: Renderer) -> None:
    editor = Editor(viewport_height=3)
    editor.feed(["i", "h", "i"])

    renderer.editor(editor)

    assert _printed(renderer) == ["[No Name] [+]", "1 hi", "~", "~", "-- INSERT --  1,3"]


def test_completer_replaces_current_word(session: ShellSession) -> None:
    completer = SessionCompleter(session)

    commands = list(completer.get_completions(Document("pw"), CompleteEvent()))
    paths = list(completer.get_completions(Document("ls /D"), CompleteEvent()))

    assert [(c.text, c.start_position) for c in commands] == [("pwd", -2)]
    assert [c.text for c in paths] == ["/Desktop/", "/Documents/"]
    assert {c.start_position for c in paths} == {-2}
