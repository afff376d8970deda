"""vshell command line entry points."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError

from vshell.cli.render import CLEAR_SCREEN, TOGGLE_PROFILE, Renderer
from vshell.config import Settings, get_settings
from vshell.core.session import ShellSession
from vshell.desktop import DesktopFileSystem
from vshell.editor.keys import parse_keys
from vshell.errors import VShellError
from vshell.logging_utils import configure_logging
from vshell.storage import JsonFileKeyValueStore

app = typer.Typer(
    name="vshell",
    help="A simulated Linux/Windows terminal over a virtual desktop filesystem.",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        shell(profile=None, filesystem=None, history_file=None)


def _load_settings(**overrides: object) -> Settings:
    try:
        return get_settings(**overrides)
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc.errors()[0]['msg']}", err=True)
        raise typer.Exit(2) from exc


def build_session(settings: Settings) -> ShellSession:
    """Wire a session to the seeded filesystem and the on-disk history store."""
    filesystem = DesktopFileSystem.from_seed(settings.filesystem_seed)
    store = JsonFileKeyValueStore(settings.resolve_history_file())
    return ShellSession(filesystem=filesystem, store=store, settings=settings)


def _open_session(settings: Settings) -> ShellSession:
    try:
        return build_session(settings)
    except VShellError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(2) from exc


async def _edit(session: ShellSession, renderer: Renderer) -> None:
    while session.editor is not None:
        editor = session.editor
        renderer.editor(editor)
        try:
            notation = await renderer.read_keys(editor)
        except KeyboardInterrupt:
            notation = "<Esc>"
        except EOFError:
            editor.quit(force=True)
            break
        for key in parse_keys(notation):
            await session.handle_key(key)
            if session.editor is None:
                break


async def _repl(session: ShellSession, renderer: Renderer) -> None:
    renderer.lines(session.welcome())
    while not session.exit_requested:
        if session.editor is not None:
            await _edit(session, renderer)
            continue

        try:
            text = await renderer.read_line(session.prompt)
        except KeyboardInterrupt:
            await session.handle_key("ctrl+c")
            continue
        except EOFError:
            break

        if text == TOGGLE_PROFILE:
            session.switch_os("windows" if session.profile == "linux" else "linux")
            renderer.line(session.output[-1])
            continue
        if text == CLEAR_SCREEN:
            await session.handle_key("ctrl+l")
            renderer.clear()
            continue

        start = len(session.output)
        await session.execute_command(text)
        if len(session.output) < start:
            renderer.clear()
            start = 0
        renderer.lines(session.output[start:])


@app.command()
def shell(
    profile: str | None = typer.Option(None, "--profile", "-p", help="OS profile: linux or windows"),
    filesystem: Path | None = typer.Option(None, "--filesystem", "-f", help="JSON seed for the filesystem"),  # noqa: B008
    history_file: Path | None = typer.Option(None, "--history-file", help="History JSON file"),  # noqa: B008
) -> None:
    """Start the interactive terminal. Ctrl+O switches between Linux and Windows."""
    settings = _load_settings(profile=profile, filesystem_seed=filesystem, history_file=history_file)
    configure_logging(profile="chat", level=settings.log_level)
    session = _open_session(settings)
    renderer = Renderer(session)
    logger.info("shell.start profile={} cwd={}", session.profile, session.current_directory)
    try:
        asyncio.run(_repl(session, renderer))
    except KeyboardInterrupt:
        typer.echo("Interrupted.")
    logger.info("shell.stop profile={}", session.profile)


@app.command()
def run(
    command: str = typer.Argument(..., help="Command line to execute"),
    profile: str | None = typer.Option(None, "--profile", "-p", help="OS profile: linux or windows"),
    filesystem: Path | None = typer.Option(None, "--filesystem", "-f", help="JSON seed for the filesystem"),  # noqa: B008
    history_file: Path | None = typer.Option(None, "--history-file", help="History JSON file"),  # noqa: B008
) -> None:
    """Execute one command line and print its output."""
    settings = _load_settings(profile=profile, filesystem_seed=filesystem, history_file=history_file)
    configure_logging(profile="default", level=settings.log_level)
    session = _open_session(settings)

    asyncio.run(session.execute_command(command))
    for line in session.output:
        if line.kind != "input":
            typer.echo(line.content, err=line.kind == "error")

    result = session.last_result
    if result is None or not result.success:
        raise typer.Exit(1)
