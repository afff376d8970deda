from vshell.editor.engine import Editor
from vshell.editor.ex_commands import EX_COMMANDS, HELP_LINES, execute_ex_command, find_ex_command
from vshell.editor.keys import parse_keys


def _run(editor: Editor, command: str) -> None:
    editor.feed(parse_keys(f":{command}<CR>"))


def _editor(files: dict[str, str], filename: str | None = None, *, writable: bool = True) -> Editor:
    def save(name: str, content: str) -> bool:
        if writable:
            files[name] = content
        return writable

    def load(name: str) -> str:
        if name not in files:
            raise FileNotFoundError(name)
        return files[name]

    return Editor(filename=filename, save=save, load=load)


def test_aliases_resolve_to_the_same_command() -> None:
    assert find_ex_command("w") is find_ex_command("write")
    assert find_ex_command("x") is find_ex_command("wq")
    assert find_ex_command("nope") is None
    assert len({command.name for command in EX_COMMANDS}) == len(EX_COMMANDS)


def test_write_needs_a_file_name() -> None:
    editor = _editor({})
    _run(editor, "w")

    assert editor.state.message == "E32: No file name"
    assert editor.state.message_type == "error"


def test_write_to_named_file() -> None:
    files: dict[str, str] = {}
    editor = _editor(files)
    editor.feed(parse_keys("ihello<Esc>"))

    _run(editor, "w out.txt")

    assert files == {"out.txt": "hello"}
    assert editor.state.filename == "out.txt"
    assert editor.state.message == '"out.txt" 1L, 5C written'
    assert editor.state.modified is False


def test_failed_write_reports_and_keeps_editor_open() -> None:
    editor = _editor({}, "locked.txt", writable=False)
    editor.feed(parse_keys("ix<Esc>"))

    _run(editor, "wq")

    assert editor.state.message == "E212: Can't open file for writing: locked.txt"
    assert editor.exited is False
    assert editor.state.modified is True


def test_x_writes_and_quits() -> None:
    files = {"a.txt": "old"}
    editor = _editor(files, "a.txt")
    editor.feed(parse_keys("Anew<Esc>"))

    _run(editor, "x")

    assert files["a.txt"] == "oldnew"
    assert editor.exited is True


def test_edit_switches_file_when_clean() -> None:
    files = {"a.txt": "alpha", "b.txt": "beta"}
    editor = _editor(files, "a.txt")

    _run(editor, "e b.txt")

    assert editor.state.filename == "b.txt"
    assert editor.state.buffer == ["beta"]
    assert not editor.history.can_undo


def test_edit_guards() -> None:
    editor = _editor({"a.txt": "alpha"}, "a.txt")
    _run(editor, "e")
    assert editor.state.message == "E471: Argument required"

    editor.feed(parse_keys("ix<Esc>"))
    _run(editor, "e other.txt")
    assert editor.state.message == "E37: No write since last change (add ! to override)"
    assert editor.state.filename == "a.txt"


def test_set_line_numbers() -> None:
    editor = Editor()

    _run(editor, "set nonu")
    assert editor.state.show_line_numbers is False
    assert editor.state.message == "Line numbers disabled"
    _run(editor, "set number!")
    assert editor.state.show_line_numbers is True
    _run(editor, "set invnu")
    assert editor.state.show_line_numbers is False
    _run(editor, "se nu")
    assert editor.state.show_line_numbers is True


def test_set_rejects_unknown_and_missing_options() -> None:
    editor = Editor()

    _run(editor, "set wrap")
    assert editor.state.message == "E518: Unknown option: wrap"
    _run(editor, "set")
    assert editor.state.message == "E471: Argument required"


def test_help_replaces_buffer() -> None:
    editor = Editor()
    _run(editor, "help")

    assert editor.state.buffer == HELP_LINES
    assert editor.state.filename == "[Help]"
    assert editor.state.message == "Help loaded"
    assert editor.state.modified is False


def test_unknown_command() -> None:
    editor = Editor()
    execute_ex_command(editor, "  frob  ")

    assert editor.state.message == "E492: Not an editor command: frob"


def test_handler_errors_surface_on_status_line(monkeypatch) -> None:
    editor = Editor()

    def _explode(_filename: str | None = None) -> bool:
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(editor, "write_file", _explode)
    _run(editor, "w")

    assert editor.state.message == "Command error: disk on fire"
    assert editor.mode == "normal"
