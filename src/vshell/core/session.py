"""The shell session: prompt, output buffer and command execution."""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from vshell import vfs
from vshell.commands.registry import CommandRegistry
from vshell.config import Profile, Settings
from vshell.core.autocomplete import AutocompleteEngine
from vshell.core.history import HistoryManager
from vshell.core.parser import parse
from vshell.desktop import DesktopFileSystem
from vshell.editor.engine import Editor
from vshell.storage import KeyValueStore, MemoryKeyValueStore
from vshell.types import CommandContext, CommandResult, EditorRequest, Flag, OutputKind, OutputLine

PROFILE_NAMES = {"linux": "Linux", "windows": "Windows"}
BANNER = "Portfolio Desktop Terminal v1.0.0"


def not_found_message(profile: Profile, command: str) -> str:
    if profile == "windows":
        return f"'{command}' is not recognized as an internal or external command, operable program or batch file."
    return f"{command}: command not found"


class ShellSession:
    """One terminal instance.

    The session owns its output lines, the input line, the working directory
    and the active profile. The filesystem is only touched through the
    mutators handed to commands in each ``CommandContext``.
    """

    def __init__(
        self,
        filesystem: DesktopFileSystem | None = None,
        store: KeyValueStore | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.filesystem = filesystem or DesktopFileSystem()
        self.profile: Profile = self.settings.profile
        self.username = self.settings.username
        self.hostname = self.settings.hostname
        self.current_directory = self.settings.home_directory
        self.environment = {
            "PATH": "/usr/local/bin:/usr/bin:/bin",
            "HOME": self.settings.home_directory,
            "USER": self.settings.username,
        }
        self.output: list[OutputLine] = []
        self.input = ""
        self.cursor = 0
        self.executing = False
        self.exit_requested = False
        self.editor: Editor | None = None
        self.last_result: CommandResult | None = None

        self.registry = CommandRegistry(self.profile)
        self.history = HistoryManager(
            store if store is not None else MemoryKeyValueStore(),
            self.profile,
            max_size=self.settings.history_max_size,
            namespace=self.settings.history_namespace,
        )
        self.autocomplete = AutocompleteEngine(
            self.registry, self.build_context, limit=self.settings.suggestion_limit
        )

    # output

    @property
    def prompt(self) -> str:
        if self.profile == "windows":
            return "C:" + self.current_directory.replace("/", "\\") + "> "
        directory = "~" if self.current_directory == self.settings.home_directory else self.current_directory
        return f"{self.username}@{self.hostname}:{directory}$ "

    def add_output(self, content: str, kind: OutputKind = "output") -> OutputLine:
        line = OutputLine(content=content, kind=kind)
        self.output.append(line)
        return line

    def clear_output(self) -> None:
        self.output.clear()

    def welcome(self) -> list[OutputLine]:
        messages = [
            BANNER,
            f"Running in {PROFILE_NAMES[self.profile]} mode",
            'Type "help" for available commands',
            "Use Ctrl+L to clear, Ctrl+C to interrupt",
            "",
        ]
        return [self.add_output(message, "info") for message in messages]

    # state

    def build_context(self, flags: Mapping[str, Flag] | None = None, raw: str = "") -> CommandContext:
        return CommandContext(
            current_directory=self.current_directory,
            profile=self.profile,
            filesystem=self.filesystem.tree,
            username=self.username,
            hostname=self.hostname,
            environment=dict(self.environment),
            history=self.history.entries,
            flags=dict(flags or {}),
            raw=raw,
            commands=tuple(self.registry.all_commands()),
            create_file=self.filesystem.create_file,
            create_folder=self.filesystem.create_folder,
            remove_item=self.filesystem.remove_item,
        )

    def switch_os(self, profile: Profile) -> None:
        self.registry.switch_os(profile)
        self.profile = profile
        self.history.switch_profile(profile)
        self.autocomplete.clear()
        self.add_output(f"Switched to {PROFILE_NAMES[profile]} mode", "info")
        logger.info("session.switch_os profile={}", profile)

    def update_input(self, text: str, cursor: int | None = None, *, from_history: bool = False) -> None:
        self.input = text
        self.cursor = len(text) if cursor is None else cursor
        if not from_history:
            self.history.reset_index()
        if text.strip():
            self.autocomplete.update_suggestions(text, self.cursor)
        else:
            self.autocomplete.clear()

    # execution

    async def execute_command(self, raw: str) -> None:
        if self.editor is not None:
            return

        self.add_output(self.prompt + raw, "input")
        line = raw.strip()
        if not line:
            self._reset_input()
            return

        self.history.add(line)
        self.last_result = None
        self.executing = True
        try:
            parsed = parse(line)
            if parsed.is_empty:
                return

            command = self.registry.get_command(parsed.command)
            if command is None:
                self._apply_result(CommandResult(success=False, error=not_found_message(self.profile, parsed.command)))
                return

            result = await command.handler(list(parsed.args), self.build_context(parsed.flags, raw=line))
            self._apply_result(result)
        except Exception as exc:
            logger.exception("session.execute.error raw={}", line)
            self._apply_result(CommandResult(success=False, error=f"Error executing command: {exc}"))
        finally:
            self.executing = False
            self._reset_input()
            self.autocomplete.hide()

    def _apply_result(self, result: CommandResult) -> None:
        self.last_result = result
        if result.clear:
            self.clear_output()
        elif result.output:
            self.add_output(result.output, result.kind)
        if result.error:
            self.add_output(result.error, "error")
        if result.new_directory:
            self.current_directory = result.new_directory
        if result.exit:
            self.exit_requested = True
            self.add_output("Terminal session ended.", "info")
        if result.editor is not None:
            self.open_editor(result.editor)

    def _reset_input(self) -> None:
        self.input = ""
        self.cursor = 0

    # keys

    async def handle_key(self, key: str) -> None:
        if self.editor is not None:
            self.editor.handle_key(key)
            return
        if self.executing:
            return

        match key:
            case "Enter":
                await self.execute_command(self.input)
            case "ArrowUp" | "ArrowDown":
                direction = "up" if key == "ArrowUp" else "down"
                if self.autocomplete.visible:
                    self.autocomplete.navigate(direction)
                    return
                entry = self.history.navigate(direction)
                if entry is not None:
                    self.update_input(entry, from_history=True)
            case "Tab":
                if self.autocomplete.visible and self.autocomplete.selected() is not None:
                    completion = self.autocomplete.apply_completion(self.input, self.cursor)
                    self.autocomplete.hide()
                else:
                    completion = self.autocomplete.tab_completion(self.input, self.cursor)
                self.input = completion.text
                self.cursor = completion.cursor
            case "Escape":
                self.autocomplete.hide()
            case "ctrl+c":
                self.add_output(f"{self.prompt}{self.input}^C", "input")
                self.update_input("")
                self.autocomplete.hide()
            case "ctrl+l":
                self.clear_output()
            case "ctrl+r":
                self._reverse_search()

    def _reverse_search(self) -> None:
        matches = self.history.search(self.input)
        found = matches[-1] if matches and self.input.strip() else ""
        self.add_output(f"(reverse-i-search)'{self.input}': {found}", "info")
        if found:
            self.update_input(found, from_history=True)

    # editor

    def open_editor(self, request: EditorRequest) -> Editor:
        directory = request.directory

        def save(filename: str, content: str) -> bool:
            path = vfs.resolve(directory, filename)
            tree = self.filesystem.tree
            if vfs.is_directory(tree, path) or not vfs.is_directory(tree, vfs.parent_of(path)):
                return False
            if vfs.exists(tree, path):
                self.filesystem.remove_item(path)
            return self.filesystem.create_file(vfs.parent_of(path), vfs.basename(path), content)

        def load(filename: str) -> str:
            content = vfs.read_file(self.filesystem.tree, vfs.resolve(directory, filename))
            if content is None:
                raise FileNotFoundError(filename)
            return content

        self.editor = Editor(
            filename=request.filename,
            directory=directory,
            save=save,
            load=load,
            on_exit=self.close_editor,
            undo_depth=self.settings.editor_undo_depth,
            viewport_height=self.settings.editor_viewport_height,
        )
        logger.info("session.editor.open file={} cwd={}", request.filename, directory)
        return self.editor

    def close_editor(self) -> None:
        if self.editor is None:
            return
        logger.info("session.editor.close file={}", self.editor.state.filename)
        self.editor = None
