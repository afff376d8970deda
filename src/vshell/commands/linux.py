"""POSIX-flavoured filesystem commands."""

from __future__ import annotations

from datetime import datetime
from fnmatch import fnmatchcase

from vshell import vfs
from vshell.commands.base import (
    Transfer,
    apply_transfer,
    fail,
    has_switch,
    ok,
    operands,
    path_completer,
    plan_transfer,
    plural,
    split_target,
)
from vshell.core.parser import tokenize
from vshell.types import CommandContext, CommandDefinition, CommandResult, OutputKind, ValueFlag

DEFAULT_HOME = "/Desktop"


def _summary(output: list[str], errors: list[str], *, kind: OutputKind = "success") -> CommandResult:
    """Fold per-operand outcomes into one result. Any error marks the command failed."""
    return CommandResult(
        success=not errors,
        output="\n".join(output),
        error="\n".join(errors) or None,
        kind="error" if errors and not output else kind,
    )


def _ls(args: list[str], context: CommandContext) -> CommandResult:
    paths = operands(args, context, "l", "a", "h", "F")
    target = vfs.resolve(context.current_directory, paths[0]) if paths else context.current_directory

    item = vfs.find(context.filesystem, target)
    if item is None:
        return fail(f"ls: cannot access '{paths[0] if paths else target}': No such file or directory")
    if not item.is_directory:
        return ok(item.name)
    if not item.children:
        return ok("")

    if has_switch(context, "l", "long"):
        human = has_switch(context, "h")
        today = datetime.now().strftime("%m/%d/%Y")
        lines = []
        for child in item.children:
            permissions = "drwxr-xr-x" if child.is_directory else "-rw-r--r--"
            if child.is_directory:
                size = "4096"
            else:
                size = vfs.format_size(child.size) if human else str(child.size)
            lines.append(f"{permissions} 1 {context.username} {context.username} {size:>8} {today} {child.name}")
        return ok("\n".join(lines))

    classify = has_switch(context, "F")
    names = []
    for child in item.children:
        if child.is_directory:
            names.append(f"{child.name}/")
        elif classify and vfs.is_executable(child.name):
            names.append(f"{child.name}*")
        else:
            names.append(child.name)
    return ok("  ".join(names))


def _cd(args: list[str], context: CommandContext) -> CommandResult:
    home = context.environment.get("HOME", DEFAULT_HOME)
    target = vfs.resolve(context.current_directory, args[0]) if args else vfs.normalize(home)

    item = vfs.find(context.filesystem, target)
    if item is None:
        return fail(f"cd: no such file or directory: {args[0] if args else 'home'}")
    if not item.is_directory:
        return fail(f"cd: not a directory: {args[0]}")
    return CommandResult(success=True, new_directory=target, kind="success")


def _pwd(_args: list[str], context: CommandContext) -> CommandResult:
    return ok(context.current_directory)


def _make_parents(context: CommandContext, path: str) -> bool:
    current = vfs.ROOT
    for segment in [part for part in path.split("/") if part]:
        next_path = vfs.resolve(current, segment)
        if not vfs.exists(context.filesystem, next_path):
            if context.create_folder is None or not context.create_folder(current, segment):
                return False
        elif not vfs.is_directory(context.filesystem, next_path):
            return False
        current = next_path
    return True


def _mkdir(args: list[str], context: CommandContext) -> CommandResult:
    targets = operands(args, context, "p")
    if not targets:
        return fail("mkdir: missing operand")

    parents = has_switch(context, "p", "parents")
    created: list[str] = []
    errors: list[str] = []
    for target in targets:
        path = vfs.resolve(context.current_directory, target)
        parent, name = split_target(context, target)
        if vfs.exists(context.filesystem, path):
            if not parents:
                errors.append(f"mkdir: cannot create directory '{target}': File exists")
            continue
        if parents:
            success = _make_parents(context, path)
        elif not vfs.is_directory(context.filesystem, parent):
            errors.append(f"mkdir: cannot create directory '{target}': No such file or directory")
            continue
        else:
            success = context.create_folder is not None and context.create_folder(parent, name)
        if success:
            created.append(target)
        else:
            errors.append(f"mkdir: cannot create directory '{target}': Permission denied")

    output = []
    if created:
        output.append(f"Created {len(created)} {plural(len(created), 'directory', plural_form='directories')}: "
                      f"{', '.join(created)}")
    return _summary(output, errors)


def _rmdir(args: list[str], context: CommandContext) -> CommandResult:
    if not args:
        return fail("rmdir: missing operand")

    removed: list[str] = []
    errors: list[str] = []
    for target in args:
        item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, target))
        if item is None:
            errors.append(f"rmdir: failed to remove '{target}': No such file or directory")
        elif not item.is_directory:
            errors.append(f"rmdir: failed to remove '{target}': Not a directory")
        elif item.children:
            errors.append(f"rmdir: failed to remove '{target}': Directory not empty")
        elif context.remove_item is None or not context.remove_item(item.path):
            errors.append(f"rmdir: failed to remove '{target}': Permission denied")
        else:
            removed.append(target)

    output = []
    if removed:
        output.append(f"Removed {len(removed)} {plural(len(removed), 'directory', plural_form='directories')}: "
                      f"{', '.join(removed)}")
    return _summary(output, errors)


def _touch(args: list[str], context: CommandContext) -> CommandResult:
    if not args:
        return fail("touch: missing file operand")

    touched: list[str] = []
    errors: list[str] = []
    for target in args:
        path = vfs.resolve(context.current_directory, target)
        if vfs.exists(context.filesystem, path):
            touched.append(target)
            continue
        parent, name = split_target(context, target)
        if not vfs.is_directory(context.filesystem, parent):
            errors.append(f"touch: cannot touch '{target}': No such file or directory")
        elif context.create_file is None or not context.create_file(parent, name, ""):
            errors.append(f"touch: cannot touch '{target}': Permission denied")
        else:
            touched.append(target)

    output = []
    if touched:
        output.append(f"Created/updated {len(touched)} {plural(len(touched), 'file')}: {', '.join(touched)}")
    return _summary(output, errors)


def _rm(args: list[str], context: CommandContext) -> CommandResult:
    targets = operands(args, context, "r", "R", "f", "recursive", "force")
    if not targets:
        return fail("rm: missing operand")

    recursive = has_switch(context, "r", "R", "recursive")
    force = has_switch(context, "f", "force")
    removed: list[str] = []
    errors: list[str] = []
    for target in targets:
        item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, target))
        if item is None:
            if not force:
                errors.append(f"rm: cannot remove '{target}': No such file or directory")
        elif item.is_directory and not recursive:
            errors.append(f"rm: cannot remove '{target}': Is a directory")
        elif item.path == vfs.ROOT or context.remove_item is None or not context.remove_item(item.path):
            errors.append(f"rm: cannot remove '{target}': Permission denied")
        else:
            removed.append(target)

    output = []
    if removed:
        output.append(f"Removed {len(removed)} {plural(len(removed), 'item')}: {', '.join(removed)}")
    return _summary(output, errors)


def _transfer_error(command: str, source: str, destination: str, reason: str) -> str:
    messages = {
        "missing_source": f"{command}: cannot stat '{source}': No such file or directory",
        "missing_parent": f"{command}: cannot create regular file '{destination}': No such file or directory",
        "same_file": f"{command}: '{source}' and '{destination}' are the same file",
        "into_itself": f"{command}: cannot copy a directory, '{source}', into itself, '{destination}'",
        "target_is_directory": f"{command}: cannot overwrite directory '{destination}'",
    }
    return messages[reason]


def _transfer(command: str, args: list[str], context: CommandContext, *, move: bool) -> CommandResult:
    paths = operands(args, context, "r", "R", "f", "recursive") if not move else operands(args, context, "f")
    if len(paths) < 2:
        if not paths:
            return fail(f"{command}: missing file operand")
        return fail(f"{command}: missing destination file operand after '{paths[0]}'")

    recursive = move or has_switch(context, "r", "R", "recursive")
    sources, destination = paths[:-1], paths[-1]
    if len(sources) > 1 and not vfs.is_directory(
        context.filesystem, vfs.resolve(context.current_directory, destination)
    ):
        return fail(f"{command}: target '{destination}' is not a directory")

    verb = "Moved" if move else "Copied"
    output: list[str] = []
    errors: list[str] = []
    for source in sources:
        plan = plan_transfer(context, source, destination)
        if not isinstance(plan, Transfer):
            errors.append(_transfer_error(command, source, destination, plan))
        elif plan.source.is_directory and not recursive:
            errors.append(f"{command}: -r not specified; omitting directory '{source}'")
        elif not apply_transfer(context, plan, move=move):
            errors.append(f"{command}: cannot create '{destination}': Permission denied")
        else:
            output.append(f"{verb} '{source}' to '{destination}'")
    return _summary(output, errors)


def _cp(args: list[str], context: CommandContext) -> CommandResult:
    return _transfer("cp", args, context, move=False)


def _mv(args: list[str], context: CommandContext) -> CommandResult:
    return _transfer("mv", args, context, move=True)


def _cat(args: list[str], context: CommandContext) -> CommandResult:
    files = operands(args, context, "n")
    if not files:
        return fail("cat: missing file operand")

    number = has_switch(context, "n", "number")
    results: list[str] = []
    errors: list[str] = []
    for name in files:
        item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, name))
        if item is None:
            errors.append(f"cat: {name}: No such file or directory")
        elif item.is_directory:
            errors.append(f"cat: {name}: Is a directory")
        elif number:
            lines = (item.content or "").split("\n")
            results.extend(f"{index:>6}\t{line}" for index, line in enumerate(lines, start=1))
        else:
            results.append(item.content or "")
    return _summary(results, errors, kind="output")


def _grep(args: list[str], context: CommandContext) -> CommandResult:
    terms = operands(args, context, "i", "n")
    if not terms:
        return fail("grep: missing pattern")

    pattern, files = terms[0], terms[1:]
    if not files:
        return ok(f"Searching for pattern '{pattern}' in standard input...")

    ignore_case = has_switch(context, "i", "ignore-case")
    line_numbers = has_switch(context, "n", "line-number")
    needle = pattern.lower() if ignore_case else pattern
    results: list[str] = []
    errors: list[str] = []
    for name in files:
        item = vfs.find(context.filesystem, vfs.resolve(context.current_directory, name))
        if item is None:
            errors.append(f"grep: {name}: No such file or directory")
            continue
        if item.is_directory:
            errors.append(f"grep: {name}: Is a directory")
            continue
        matches = [
            f"  {index}:{line}" if line_numbers else f"  {line}"
            for index, line in enumerate((item.content or "").split("\n"), start=1)
            if needle in (line.lower() if ignore_case else line)
        ]
        if matches:
            results.append(f"{name}:")
            results.extend(matches)

    # Only report "no matches" when at least one operand was searched.
    if not results and len(errors) < len(files):
        results.append(f"No matches found for '{pattern}'")
    return _summary(results, errors, kind="output")


def _find_option(context: CommandContext, name: str) -> str | None:
    """Read ``-name``/``--name`` style options from the raw line.

    The flag parser splits ``-type`` into the cluster ``t y p e``, so two long
    single-dash options would share the ``e`` slot. Scan the tokens instead.
    """
    value = None
    tokens = tokenize(context.raw)
    for idx, token in enumerate(tokens):
        option, sep, inline = token.lstrip("-").partition("=")
        if not token.startswith("-") or option != name:
            continue
        if sep:
            value = inline
        elif idx + 1 < len(tokens):
            value = tokens[idx + 1]
    if value is None:
        flag = context.flags.get(name)
        if isinstance(flag, ValueFlag):
            value = flag.value
    return value


def _find(args: list[str], context: CommandContext) -> CommandResult:
    start = args[0] if args else "."
    root = vfs.find(context.filesystem, vfs.resolve(context.current_directory, start))
    if root is None:
        return fail(f"find: '{start}': No such file or directory")

    pattern = _find_option(context, "name")
    kind = _find_option(context, "type")
    if kind not in (None, "f", "d"):
        return fail(f"find: Unknown argument to -type: {kind}")
    results = []
    for item in vfs.walk(root):
        if pattern is not None and not fnmatchcase(item.name, pattern):
            continue
        if (kind == "f" and item.is_directory) or (kind == "d" and not item.is_directory):
            continue
        results.append(item.path)
    return ok("\n".join(results))


def linux_commands() -> list[CommandDefinition]:
    return [
        CommandDefinition(
            "ls", "List directory contents", "ls [options] [directory]", _ls, aliases=("ll",),
            autocomplete=path_completer(),
        ),
        CommandDefinition(
            "cd", "Change current directory", "cd [directory]", _cd, autocomplete=path_completer(directories=True)
        ),
        CommandDefinition("pwd", "Print current working directory", "pwd", _pwd),
        CommandDefinition(
            "mkdir", "Create directories", "mkdir [-p] directory...", _mkdir,
            autocomplete=path_completer(directories=True),
        ),
        CommandDefinition(
            "rmdir", "Remove empty directories", "rmdir directory...", _rmdir,
            autocomplete=path_completer(directories=True),
        ),
        CommandDefinition(
            "touch", "Create empty files or update timestamps", "touch file...", _touch, autocomplete=path_completer()
        ),
        CommandDefinition(
            "rm", "Remove files and directories", "rm [-rf] file...", _rm, autocomplete=path_completer()
        ),
        CommandDefinition(
            "cp", "Copy files or directories", "cp [-r] source... destination", _cp, autocomplete=path_completer()
        ),
        CommandDefinition(
            "mv", "Move/rename files or directories", "mv source... destination", _mv, autocomplete=path_completer()
        ),
        CommandDefinition(
            "cat", "Display file contents", "cat [-n] file...", _cat, autocomplete=path_completer(directories=False)
        ),
        CommandDefinition(
            "grep", "Search text patterns in files", "grep [-in] pattern [file...]", _grep,
            autocomplete=path_completer(),
        ),
        CommandDefinition(
            "find", "Search for files and directories", "find [path] [--name pattern] [--type f|d]", _find,
            autocomplete=path_completer(directories=True),
        ),
    ]
