"""Commands available in every OS profile, plus the simulated network tools."""

from __future__ import annotations

import asyncio
import random
from datetime import datetime

from vshell.commands.base import fail, has_switch, ok
from vshell.types import CommandContext, CommandDefinition, CommandResult

_rng = random.Random()  # noqa: S311

SYSTEM_NAME = "Portfolio-OS"
SYSTEM_HOST = "desktop"
SYSTEM_VERSION = "1.0.0"
SYSTEM_ARCH = "x86_64"

_PROCESSES = (
    (1, "init", 0.0, "1.2M", "S", "00:00"),
    (123, "terminal", 2.5, "15.4M", "R", "10:30"),
    (456, "browser", 5.2, "128.7M", "S", "09:15"),
    (789, "editor", 1.8, "45.3M", "S", "11:20"),
)

_CURL_BODY = "\n".join([
    "HTTP/1.1 200 OK",
    "Content-Type: text/html",
    "",
    "<!DOCTYPE html>",
    "<html>",
    "<head><title>Example</title></head>",
    "<body><h1>Hello World!</h1></body>",
    "</html>",
])


async def simulate_delay(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _clear(_args: list[str], _context: CommandContext) -> CommandResult:
    return CommandResult(success=True, clear=True, kind="success")


def _exit(_args: list[str], _context: CommandContext) -> CommandResult:
    return CommandResult(success=True, output="Goodbye!", exit=True, kind="info")


def _command_help(name: str, context: CommandContext) -> str:
    for command in context.commands:
        if name == command.name or name in command.aliases:
            lines = [command.name, f"Description: {command.description}", f"Usage: {command.usage}"]
            if command.aliases:
                lines.append(f"Aliases: {', '.join(command.aliases)}")
            return "\n".join(lines)
    return f"Command '{name}' not found."


def _help(args: list[str], context: CommandContext) -> CommandResult:
    if args:
        return ok(_command_help(args[0], context), kind="info")

    rows = [f"  {command.name.ljust(12)} {command.description}" for command in context.commands]
    lines = [
        "Available Commands:",
        "",
        *rows,
        "",
        'Type "help <command>" for more information about a specific command.',
        f"Current OS: {'Windows' if context.profile == 'windows' else 'Linux'}",
    ]
    return ok("\n".join(lines), kind="info")


def _echo(args: list[str], _context: CommandContext) -> CommandResult:
    return ok(" ".join(args))


def _date(_args: list[str], _context: CommandContext) -> CommandResult:
    return ok(datetime.now().astimezone().strftime("%a %b %d %Y %H:%M:%S %Z"))


def _whoami(_args: list[str], context: CommandContext) -> CommandResult:
    return ok(context.username)


async def _ping_once(host: str, seq: int) -> str | None:
    await simulate_delay(_rng.random() * 0.5 + 0.2)
    if _rng.random() <= 0.1:
        return None
    response_time = _rng.randint(10, 109)
    return f"PING {host}: 64 bytes from {host}: icmp_seq={seq} ttl=64 time={response_time} ms"


async def _ping(args: list[str], _context: CommandContext) -> CommandResult:
    if not args:
        return fail("ping: missing host argument")

    host = args[0]
    lines = [f"PING {host} ({host}): 56 data bytes"]
    for seq in range(1, 5):
        reply = await _ping_once(host, seq)
        if reply is None:
            lines.append(f"ping: cannot resolve {host}: Unknown host")
            break
        lines.append(reply)
    return ok("\n".join(lines))


async def _curl(args: list[str], _context: CommandContext) -> CommandResult:
    if not args:
        return fail("curl: no URL specified")

    url = args[0]
    await simulate_delay(1.0)
    if _rng.random() <= 0.2:
        return fail(f"curl: (6) Could not resolve host: {url}")
    return ok(_CURL_BODY)


def _ps(_args: list[str], _context: CommandContext) -> CommandResult:
    lines = ["PID     NAME        CPU%   MEM     STATE  START"]
    for pid, name, cpu, memory, state, started in _PROCESSES:
        lines.append(f"{pid:<8}{name:<12}{cpu:<7.1f}{memory:<8}{state:<7}{started}")
    return ok("\n".join(lines))


def _uptime(_args: list[str], _context: CommandContext) -> CommandResult:
    now = datetime.now().strftime("%H:%M:%S")
    return ok(f"{now} up 2 days, 14:32, 1 user, load average: 0.15, 0.23, 0.18")


def _uname(_args: list[str], context: CommandContext) -> CommandResult:
    if has_switch(context, "a", "all"):
        return ok(f"{SYSTEM_NAME} {SYSTEM_HOST} {SYSTEM_VERSION} {SYSTEM_ARCH}")
    return ok(SYSTEM_NAME)


def shared_commands() -> list[CommandDefinition]:
    return [
        CommandDefinition("clear", "Clear the terminal screen", "clear", _clear, aliases=("cls",)),
        CommandDefinition("exit", "Exit the terminal", "exit", _exit, aliases=("quit",)),
        CommandDefinition("help", "Display available commands", "help [command]", _help, aliases=("?",)),
        CommandDefinition("echo", "Display text", "echo [text...]", _echo),
        CommandDefinition("date", "Display current date and time", "date", _date),
        CommandDefinition("whoami", "Display current username", "whoami", _whoami),
        CommandDefinition("ping", "Send ICMP echo requests to a host", "ping <host>", _ping),
    ]


def network_commands() -> list[CommandDefinition]:
    """Process and network tools only the Linux profile ships."""
    return [
        CommandDefinition("curl", "Transfer data from servers", "curl <url>", _curl),
        CommandDefinition("ps", "Display running processes", "ps [options]", _ps),
        CommandDefinition("uptime", "Show system uptime and load", "uptime", _uptime),
        CommandDefinition("uname", "Display system information", "uname [-a]", _uname),
    ]
