"""DOS-flavoured filesystem and system commands."""

from __future__ import annotations

from datetime import datetime

from vshell import vfs
from vshell.commands.base import (
    Transfer,
    apply_transfer,
    fail,
    flag_operands,
    ok,
    path_completer,
    plan_transfer,
    plural,
    split_dos_switches,
    split_target,
)
from vshell.commands.shared import simulate_delay
from vshell.types import CommandContext, CommandDefinition, CommandResult

SYNTAX_ERROR = "The syntax of the command is incorrect."
PATH_NOT_FOUND = "The system cannot find the path specified."
FILE_NOT_FOUND = "The system cannot find the file specified."
ACCESS_DENIED = "Access is denied."

_TRANSFER_ERRORS = {
    "missing_source": FILE_NOT_FOUND,
    "missing_parent": PATH_NOT_FOUND,
    "same_file": "The file cannot be copied onto itself.",
    "into_itself": ACCESS_DENIED,
    "target_is_directory": ACCESS_DENIED,
}

_IPCONFIG_BRIEF = (
    "Windows IP Configuration",
    "",
    "Ethernet adapter Local Area Connection:",
    "",
    "   Connection-specific DNS Suffix  . : ",
    "   IPv4 Address. . . . . . . . . . . : 192.168.1.100",
    "   Subnet Mask . . . . . . . . . . . : 255.255.255.0",
    "   Default Gateway . . . . . . . . . : 192.168.1.1",
)

_IPCONFIG_ALL = (
    "Windows IP Configuration",
    "",
    "   Host Name . . . . . . . . . . . . : portfolio-desktop",
    "   Primary Dns Suffix  . . . . . . . : ",
    "   Node Type . . . . . . . . . . . . : Hybrid",
    "   IP Routing Enabled. . . . . . . . : No",
    "   WINS Proxy Enabled. . . . . . . . : No",
    "",
    "Ethernet adapter Local Area Connection:",
    "",
    "   Connection-specific DNS Suffix  . : ",
    "   Description . . . . . . . . . . . : Intel(R) Ethernet Connection",
    "   Physical Address. . . . . . . . . : 00-1B-21-12-34-56",
    "   DHCP Enabled. . . . . . . . . . . : Yes",
    "   Autoconfiguration Enabled . . . . : Yes",
    "   IPv4 Address. . . . . . . . . . . : 192.168.1.100(Preferred)",
    "   Subnet Mask . . . . . . . . . . . : 255.255.255.0",
    "   Default Gateway . . . . . . . . . : 192.168.1.1",
    "   DHCP Server . . . . . . . . . . . : 192.168.1.1",
    "   DNS Servers . . . . . . . . . . . : 8.8.8.8",
    "                                       8.8.4.4",
)


def _switches(args: list[str]) -> set[str]:
    switches, _ = split_dos_switches(args)
    return {switch.lower() for switch in switches}


def _result(output: list[str], errors: list[str]) -> CommandResult:
    return CommandResult(
        success=bool(output) or not errors,
        output="\n".join(output),
        error="\n".join(errors) or None,
        kind="success" if output else "error",
    )


def _dir(args: list[str], context: CommandContext) -> CommandResult:
    _, paths = split_dos_switches(args)
    target = vfs.resolve(context.current_directory, paths[0]) if paths else context.current_directory

    item = vfs.find(context.filesystem, target)
    if item is None:
        return fail(PATH_NOT_FOUND)
    if not item.is_directory:
        return ok(item.name)
    if not item.children:
        return ok("Directory is empty.")

    today = datetime.now().strftime("%m/%d/%Y")
    lines = [
        " Volume in drive C has no label.",
        " Volume Serial Number is 1234-5678",
        "",
        f" Directory of {target}",
        "",
    ]
    for child in item.children:
        size = "<DIR>" if child.is_directory else f"{child.size:>15}"
        lines.append(f"{today}  00:00    {size} {child.name}")

    files = [child for child in item.children if not child.is_directory]
    folders = len(item.children) - len(files)
    total = sum(child.size for child in files)
    lines += [
        "",
        f"               {len(files)} File(s)  {total:,} bytes",
        f"               {folders} Dir(s)   999,999,999 bytes free",
    ]
    return ok("\n".join(lines))


def _cd(args: list[str], context: CommandContext) -> CommandResult:
    if not args:
        return ok(context.current_directory)

    target = vfs.resolve(context.current_directory, args[0])
    item = vfs.find(context.filesystem, target)
    if item is None:
        return fail(PATH_NOT_FOUND)
    if not item.is_directory:
        return fail("The directory name is invalid.")
    return CommandResult(success=True, new_directory=target, kind="success")


def _md(args: list[str], context: CommandContext) -> CommandResult:
    if not args:
        return fail(SYNTAX_ERROR)

    created: list[str] = []
    errors: list[str] = []
    for name in args:
        parent, leaf = split_target(context, name)
        if vfs.exists(context.filesystem, vfs.resolve(context.current_directory, name)):
            errors.append(f"A subdirectory or file {name} already exists.")
        elif not vfs.is_directory(context.filesystem, parent):
            errors.append(PATH_NOT_FOUND)
        elif context.create_folder is None or not context.create_folder(parent, leaf):
            errors.append(ACCESS_DENIED)
        else:
            created.append(f"Directory created: {name}")
    return _result(created, errors)


def _rd(args: list[str], context: CommandContext) -> CommandResult:
    switches, paths = split_dos_switches(args)
    if not paths:
        return fail(SYNTAX_ERROR)

    recursive = "/s" in _switches(switches)
    removed: list[str] = []
    errors: list[str] = []
    for name in paths:
        item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, name))
        if item is None:
            errors.append(FILE_NOT_FOUND)
        elif not item.is_directory:
            errors.append("The directory name is invalid.")
        elif item.children and not recursive:
            errors.append("The directory is not empty.")
        elif context.remove_item is None or not context.remove_item(item.path):
            errors.append(ACCESS_DENIED)
        else:
            removed.append(f"Directory removed: {name}")
    return _result(removed, errors)


def _del(args: list[str], context: CommandContext) -> CommandResult:
    _, paths = split_dos_switches(args)
    if not paths:
        return fail(SYNTAX_ERROR)

    deleted = 0
    errors: list[str] = []
    for name in paths:
        path = vfs.resolve(context.current_directory, name)
        item = vfs.find(context.filesystem, path)
        if item is None:
            errors.append(f"Could Not Find {path}")
        elif item.is_directory or context.remove_item is None or not context.remove_item(item.path):
            errors.append(ACCESS_DENIED)
        else:
            deleted += 1

    output = [f"Deleted {deleted} {plural(deleted, 'file')}."] if deleted else []
    return _result(output, errors)


def _transfer(args: list[str], context: CommandContext, *, move: bool) -> CommandResult:
    _, paths = split_dos_switches(args)
    if len(paths) < 2:
        return fail(SYNTAX_ERROR)

    source, destination = paths[0], paths[1]
    plan = plan_transfer(context, source, destination)
    if not isinstance(plan, Transfer):
        return fail(_TRANSFER_ERRORS[plan])
    if plan.source.is_directory and not move:
        return fail(FILE_NOT_FOUND)
    if not apply_transfer(context, plan, move=move):
        return fail(ACCESS_DENIED)

    verb = "moved" if move else "copied"
    return ok(f"        1 file(s) {verb}.\n        {source} -> {destination}", kind="success")


def _copy(args: list[str], context: CommandContext) -> CommandResult:
    return _transfer(args, context, move=False)


def _move(args: list[str], context: CommandContext) -> CommandResult:
    return _transfer(args, context, move=True)


def _type(args: list[str], context: CommandContext) -> CommandResult:
    if not args:
        return fail(SYNTAX_ERROR)

    item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, args[0]))
    if item is None:
        return fail(FILE_NOT_FOUND)
    if item.is_directory:
        return fail(ACCESS_DENIED)
    return ok(item.content or "")


def _attrib(args: list[str], context: CommandContext) -> CommandResult:
    # ``-R file`` reaches us as flag R carrying ``file``
    paths = [*flag_operands(context, "R", "A", "S", "H"), *args]
    if not paths:
        lines = [
            f"{'    ' if item.is_directory else 'A   '} {item.path}"
            for item in vfs.list_directory(context.filesystem, context.current_directory)
        ]
        return ok("\n".join(lines))

    filename = paths[-1]
    attributes = [*paths[:-1], *(f"-{name}" for name in context.flags)]
    if not vfs.exists(context.filesystem, vfs.resolve(context.current_directory, filename)):
        return fail(f"File not found - {filename}")
    return ok(f"Attributes {' '.join(attributes)} set for {filename}", kind="success")


def _ver(_args: list[str], _context: CommandContext) -> CommandResult:
    return ok("Portfolio Desktop OS [Version 1.0.0]")


def _time(args: list[str], _context: CommandContext) -> CommandResult:
    if not args:
        return ok(f"The current time is: {datetime.now().strftime('%H:%M:%S')}")
    return ok(f"Time set to: {args[0]}", kind="success")


def _findstr(args: list[str], context: CommandContext) -> CommandResult:
    switches, terms = split_dos_switches(args)
    if not terms:
        return fail(SYNTAX_ERROR)

    pattern, files = terms[0], terms[1:]
    if not files:
        return ok(f'Searching for "{pattern}" in standard input...')

    ignore_case = "/i" in _switches(switches)
    needle = pattern.lower() if ignore_case else pattern
    results: list[str] = []
    for name in files:
        content = vfs.read_file(context.filesystem, vfs.resolve(context.current_directory, name))
        if not content:
            continue
        for index, line in enumerate(content.split("\n"), start=1):
            if needle in (line.lower() if ignore_case else line):
                results.append(f"{name}:{index}:{line}")
    return ok("\n".join(results) if results else "String not found.")


def _ipconfig(args: list[str], _context: CommandContext) -> CommandResult:
    show_all = any(arg.lower() == "/all" for arg in args)
    return ok("\n".join(_IPCONFIG_ALL if show_all else _IPCONFIG_BRIEF))


async def _nslookup(args: list[str], _context: CommandContext) -> CommandResult:
    if not args:
        return ok("\n".join(["Default Server:  dns.google", "Address:  8.8.8.8", "", ">"]))

    await simulate_delay(0.5)
    return ok(
        "\n".join(["Server:  dns.google", "Address:  8.8.8.8", "", f"Name:    {args[0]}", "Address:  93.184.216.34"])
    )


def windows_commands() -> list[CommandDefinition]:
    return [
        CommandDefinition("dir", "Display directory contents", "dir [path]", _dir, autocomplete=path_completer()),
        CommandDefinition(
            "cd", "Change current directory", "cd [directory]", _cd, aliases=("chdir",),
            autocomplete=path_completer(directories=True),
        ),
        CommandDefinition("md", "Create directories", "md directory...", _md, aliases=("mkdir",)),
        CommandDefinition(
            "rd", "Remove directories", "rd [/S] directory...", _rd, aliases=("rmdir",),
            autocomplete=path_completer(directories=True),
        ),
        CommandDefinition(
            "del", "Delete files", "del filename...", _del, aliases=("erase",),
            autocomplete=path_completer(directories=False),
        ),
        CommandDefinition("copy", "Copy files", "copy source destination", _copy, autocomplete=path_completer()),
        CommandDefinition(
            "move", "Move files and directories", "move source destination", _move, autocomplete=path_completer()
        ),
        CommandDefinition(
            "type", "Display file contents", "type filename", _type, autocomplete=path_completer(directories=False)
        ),
        CommandDefinition(
            "attrib", "Display or change file attributes",
            "attrib [+R | -R] [+A | -A] [+S | -S] [+H | -H] [filename]", _attrib,
        ),
        CommandDefinition("ver", "Display system version", "ver", _ver),
        CommandDefinition("time", "Display or set system time", "time [new-time]", _time),
        CommandDefinition(
            "findstr", "Search for text in files", "findstr [/I] string [filename...]", _findstr,
            autocomplete=path_completer(directories=False),
        ),
        CommandDefinition("ipconfig", "Display network configuration", "ipconfig [/all]", _ipconfig),
        CommandDefinition("nslookup", "Query DNS servers", "nslookup [hostname]", _nslookup),
    ]
