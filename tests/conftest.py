from __future__ import annotations

from collections.abc import Awaitable, Callable

import pytest

from vshell.commands.registry import CommandRegistry
from vshell.config import Profile, Settings
from vshell.core.parser import parse
from vshell.core.session import ShellSession
from vshell.desktop import DesktopFileSystem
from vshell.storage import MemoryKeyValueStore
from vshell.types import CommandContext, CommandResult

RunCommand = Callable[..., Awaitable[CommandResult]]


@pytest.fixture(autouse=True)
def _instant_network(monkeypatch: pytest.MonkeyPatch) -> None:
    async def _no_delay(_seconds: float) -> None:
        return None

    monkeypatch.setattr("vshell.commands.shared.simulate_delay", _no_delay)
    monkeypatch.setattr("vshell.commands.windows.simulate_delay", _no_delay)


@pytest.fixture
def desktop() -> DesktopFileSystem:
    return DesktopFileSystem()


def make_context(
    desktop: DesktopFileSystem,
    *,
    line: str = "",
    profile: Profile = "linux",
    cwd: str = "/Desktop",
    registry: CommandRegistry | None = None,
) -> CommandContext:
    registry = registry or CommandRegistry(profile)
    return CommandContext(
        current_directory=cwd,
        profile=profile,
        filesystem=desktop.tree,
        environment={"HOME": "/Desktop", "USER": "portfolio"},
        flags=parse(line).flags,
        raw=line,
        commands=tuple(registry.all_commands()),
        create_file=desktop.create_file,
        create_folder=desktop.create_folder,
        remove_item=desktop.remove_item,
    )


@pytest.fixture
def run_command(desktop: DesktopFileSystem) -> RunCommand:
    """Parse a line and run it through the registry of the given profile."""

    async def _run(line: str, *, profile: Profile = "linux", cwd: str = "/Desktop") -> CommandResult:
        registry = CommandRegistry(profile)
        parsed = parse(line)
        command = registry.get_command(parsed.command)
        assert command is not None, parsed.command
        context = make_context(desktop, line=line, profile=profile, cwd=cwd, registry=registry)
        return await command.handler(list(parsed.args), context)

    return _run


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(home=tmp_path, profile="linux", username="portfolio", hostname="thalison")


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def session(desktop: DesktopFileSystem, store: MemoryKeyValueStore, settings: Settings) -> ShellSession:
    return ShellSession(filesystem=desktop, store=store, settings=settings)
