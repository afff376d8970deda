import pytest

from vshell import vfs
from vshell.commands.registry import CommandRegistry
from vshell.desktop import DesktopFileSystem
from vshell.types import CommandContext, EditorRequest


class _FixedRandom:
    def __init__(self, value: float) -> None:
        self.value = value

    def random(self) -> float:
        return self.value

    def randint(self, low: int, high: int) -> int:
        return 42


@pytest.mark.asyncio
async def test_ls_lists_current_directory(run_command) -> None:
    result = await run_command("ls")

    assert result.success is True
    assert result.output == "About Me.txt  Resume.pdf  Contact.lnk"


@pytest.mark.asyncio
async def test_ls_marks_folders_and_long_format(run_command) -> None:
    root = await run_command("ls /")
    long = await run_command("ls -l /Documents")

    assert root.output == "Desktop/  Projects/  Documents/"
    assert long.output.startswith("-rw-r--r-- 1 portfolio portfolio")
    assert long.output.endswith("Skills.md")


@pytest.mark.asyncio
async def test_ls_missing_path_on_empty_tree() -> None:
    command = CommandRegistry("linux").get_command("ls")
    assert command is not None
    context = CommandContext(current_directory="/", profile="linux", filesystem=[])

    result = await command.handler(["nonexistent"], context)

    assert result.success is False
    assert result.error == "ls: cannot access 'nonexistent': No such file or directory"


@pytest.mark.asyncio
async def test_cd_resolves_relative_paths_and_home(run_command) -> None:
    up = await run_command("cd ../Documents")
    home = await run_command("cd", cwd="/Projects")

    assert up.new_directory == "/Documents"
    assert home.new_directory == "/Desktop"


@pytest.mark.asyncio
async def test_cd_errors(run_command) -> None:
    missing = await run_command("cd nowhere")
    not_dir = await run_command('cd "About Me.txt"')

    assert missing.success is False
    assert missing.error == "cd: no such file or directory: nowhere"
    assert not_dir.error == "cd: not a directory: About Me.txt"
    assert missing.new_directory is None


@pytest.mark.asyncio
async def test_pwd_and_whoami(run_command) -> None:
    assert (await run_command("pwd", cwd="/Projects")).output == "/Projects"
    assert (await run_command("whoami")).output == "portfolio"


@pytest.mark.asyncio
async def test_mkdir_creates_folder(run_command, desktop: DesktopFileSystem) -> None:
    result = await run_command("mkdir notes")

    assert result.success is True
    assert result.output == "Created 1 directory: notes"
    assert vfs.is_directory(desktop.tree, "/Desktop/notes")


@pytest.mark.asyncio
async def test_mkdir_parents(run_command, desktop: DesktopFileSystem) -> None:
    result = await run_command("mkdir -p a/b/c")

    assert result.success is True
    assert vfs.is_directory(desktop.tree, "/Desktop/a/b/c")


@pytest.mark.asyncio
async def test_mkdir_failures(run_command) -> None:
    missing = await run_command("mkdir missing/child")
    exists = await run_command('mkdir "About Me.txt"')

    assert missing.success is False
    assert missing.kind == "error"
    assert missing.error == "mkdir: cannot create directory 'missing/child': No such file or directory"
    assert exists.error == "mkdir: cannot create directory 'About Me.txt': File exists"


@pytest.mark.asyncio
async def test_mkdir_reports_partial_success(run_command) -> None:
    result = await run_command("mkdir fresh Resume.pdf")

    assert result.success is False
    assert result.output == "Created 1 directory: fresh"
    assert result.error == "mkdir: cannot create directory 'Resume.pdf': File exists"
    assert result.kind == "success"


@pytest.mark.asyncio
async def test_touch_creates_empty_files(run_command, desktop: DesktopFileSystem) -> None:
    result = await run_command("touch a.txt b.txt")

    assert result.output == "Created/updated 2 files: a.txt, b.txt"
    assert vfs.read_file(desktop.tree, "/Desktop/a.txt") == ""


@pytest.mark.asyncio
async def test_rmdir_only_removes_empty_folders(run_command, desktop: DesktopFileSystem) -> None:
    not_empty = await run_command("rmdir /Projects")
    removed = await run_command('rmdir "/Projects/Mobile Apps"')

    assert not_empty.error == "rmdir: failed to remove '/Projects': Directory not empty"
    assert removed.success is True
    assert not vfs.exists(desktop.tree, "/Projects/Mobile Apps")


@pytest.mark.asyncio
async def test_rm_files_and_directories(run_command, desktop: DesktopFileSystem) -> None:
    file_result = await run_command("rm Resume.pdf")
    refused = await run_command("rm /Projects")
    recursive = await run_command("rm -r /Projects")

    assert file_result.output == "Removed 1 item: Resume.pdf"
    assert refused.error == "rm: cannot remove '/Projects': Is a directory"
    assert recursive.success is True
    assert not vfs.exists(desktop.tree, "/Projects")
    assert not vfs.exists(desktop.tree, "/Desktop/Resume.pdf")


@pytest.mark.asyncio
async def test_rm_force_ignores_missing(run_command) -> None:
    result = await run_command("rm -f ghost")

    assert result.success is True
    assert result.error is None


@pytest.mark.asyncio
async def test_cp_file_into_folder(run_command, desktop: DesktopFileSystem) -> None:
    result = await run_command('cp "About Me.txt" /Documents')

    assert result.output == "Copied 'About Me.txt' to '/Documents'"
    assert vfs.read_file(desktop.tree, "/Documents/About Me.txt") == vfs.read_file(
        desktop.tree, "/Desktop/About Me.txt"
    )


@pytest.mark.asyncio
async def test_cp_recursive_copies_subtree(run_command, desktop: DesktopFileSystem) -> None:
    refused = await run_command("cp /Projects /Documents/backup")
    copied = await run_command("cp -r /Projects /Documents/backup")

    assert refused.error == "cp: -r not specified; omitting directory '/Projects'"
    assert copied.success is True
    assert vfs.is_directory(desktop.tree, "/Documents/backup/Web Development")
    assert vfs.is_directory(desktop.tree, "/Projects/Web Development")


@pytest.mark.asyncio
async def test_cp_missing_operands(run_command) -> None:
    assert (await run_command("cp")).error == "cp: missing file operand"
    assert (await run_command("cp Resume.pdf")).error == "cp: missing destination file operand after 'Resume.pdf'"
    assert (await run_command("cp ghost x")).error == "cp: cannot stat 'ghost': No such file or directory"


@pytest.mark.asyncio
async def test_mv_renames_and_refuses_moving_into_itself(run_command, desktop: DesktopFileSystem) -> None:
    renamed = await run_command("mv Resume.pdf CV.pdf")
    nested = await run_command('mv /Projects "/Projects/Mobile Apps"')

    assert renamed.output == "Moved 'Resume.pdf' to 'CV.pdf'"
    assert vfs.exists(desktop.tree, "/Desktop/CV.pdf")
    assert not vfs.exists(desktop.tree, "/Desktop/Resume.pdf")
    assert nested.error == "mv: cannot copy a directory, '/Projects', into itself, '/Projects/Mobile Apps'"
    assert vfs.is_directory(desktop.tree, "/Projects")


@pytest.mark.asyncio
async def test_cat_with_line_numbers(run_command) -> None:
    plain = await run_command('cat "About Me.txt"')
    numbered = await run_command("cat -n /Documents/Skills.md")
    missing = await run_command("cat ghost")

    assert plain.output == "Welcome to my portfolio! I'm a passionate developer..."
    assert numbered.output.splitlines()[0] == "     1\t# Technical Skills"
    assert missing.success is False
    assert missing.output == ""
    assert missing.error == "cat: ghost: No such file or directory"


@pytest.mark.asyncio
async def test_cat_reports_bad_operands_as_errors(run_command) -> None:
    folder = await run_command("cat /Projects")
    mixed = await run_command('cat ghost "About Me.txt"')

    assert folder.success is False
    assert folder.error == "cat: /Projects: Is a directory"
    assert mixed.success is False
    assert mixed.output == "Welcome to my portfolio! I'm a passionate developer..."
    assert mixed.error == "cat: ghost: No such file or directory"


@pytest.mark.asyncio
async def test_grep_case_insensitive(run_command) -> None:
    result = await run_command("grep -i react /Documents/Skills.md")
    none = await run_command("grep zzz /Documents/Skills.md")

    assert result.output == "/Documents/Skills.md:\n  - React/TypeScript"
    assert none.output == "No matches found for 'zzz'"


@pytest.mark.asyncio
async def test_grep_missing_file_is_an_error(run_command) -> None:
    missing = await run_command("grep react ghost")
    folder = await run_command("grep react /Projects")
    partial = await run_command("grep -i react ghost /Documents/Skills.md")

    assert missing.success is False
    assert missing.output == ""
    assert missing.error == "grep: ghost: No such file or directory"
    assert folder.error == "grep: /Projects: Is a directory"
    assert partial.success is False
    assert partial.output == "/Documents/Skills.md:\n  - React/TypeScript"
    assert partial.error == "grep: ghost: No such file or directory"


@pytest.mark.asyncio
async def test_find_by_name_and_type(run_command) -> None:
    by_long_name = await run_command('find / --name "*.md"')
    by_short_name = await run_command('find / -name "*.txt"')
    folders = await run_command("find /Projects --type d")

    assert by_long_name.output == "/Documents/Skills.md"
    assert by_short_name.output == "/Desktop/About Me.txt"
    assert folders.output.splitlines() == ["/Projects", "/Projects/Web Development", "/Projects/Mobile Apps"]


@pytest.mark.asyncio
async def test_find_single_dash_type_and_combined_options(run_command) -> None:
    folders = await run_command("find / -type d")
    text_files = await run_command('find / -name "*.txt" -type f')
    reversed_order = await run_command('find / -type f -name "*.md"')
    projects = await run_command("find /Projects -type d")
    named_folder = await run_command('find / -name "Web*" -type f')
    bad_kind = await run_command("find / -type x")

    paths = folders.output.splitlines()
    assert "/Projects/Mobile Apps" in paths
    assert all(not path.endswith((".txt", ".pdf", ".lnk", ".md")) for path in paths)
    assert text_files.output == "/Desktop/About Me.txt"
    assert reversed_order.output == "/Documents/Skills.md"
    assert projects.output.splitlines() == ["/Projects", "/Projects/Web Development", "/Projects/Mobile Apps"]
    assert named_folder.output == ""
    assert bad_kind.success is False
    assert bad_kind.error == "find: Unknown argument to -type: x"


@pytest.mark.asyncio
async def test_help_lists_and_describes_commands(run_command) -> None:
    listing = await run_command("help")
    single = await run_command("help ls")
    unknown = await run_command("help nope")

    assert listing.output.startswith("Available Commands:")
    assert listing.output.endswith("Current OS: Linux")
    assert single.output == "ls\nDescription: List directory contents\nUsage: ls [options] [directory]\nAliases: ll"
    assert unknown.output == "Command 'nope' not found."


@pytest.mark.asyncio
async def test_uname_and_echo(run_command) -> None:
    assert (await run_command("uname")).output == "Portfolio-OS"
    assert (await run_command("uname -a")).output == "Portfolio-OS desktop 1.0.0 x86_64"
    assert (await run_command("echo hello   world")).output == "hello world"


@pytest.mark.asyncio
async def test_ping_replies(run_command, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vshell.commands.shared._rng", _FixedRandom(0.5))

    result = await run_command("ping example.com")

    lines = result.output.splitlines()
    assert lines[0] == "PING example.com (example.com): 56 data bytes"
    assert len(lines) == 5
    assert lines[1] == "PING example.com: 64 bytes from example.com: icmp_seq=1 ttl=64 time=42 ms"


@pytest.mark.asyncio
async def test_ping_unknown_host(run_command, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vshell.commands.shared._rng", _FixedRandom(0.05))

    result = await run_command("ping nowhere")

    assert result.output.splitlines()[1] == "ping: cannot resolve nowhere: Unknown host"
    assert (await run_command("ping")).error == "ping: missing host argument"


@pytest.mark.asyncio
async def test_curl_outcomes(run_command, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("vshell.commands.shared._rng", _FixedRandom(0.5))
    fetched = await run_command("curl example.com")
    monkeypatch.setattr("vshell.commands.shared._rng", _FixedRandom(0.1))
    failed = await run_command("curl example.com")

    assert fetched.output.startswith("HTTP/1.1 200 OK")
    assert failed.success is False
    assert failed.error == "curl: (6) Could not resolve host: example.com"


@pytest.mark.asyncio
async def test_vim_requests_editor(run_command) -> None:
    result = await run_command("vim notes.txt")
    rejected = await run_command("vim ../secret.txt")

    assert result.editor == EditorRequest(filename="notes.txt", directory="/Desktop")
    assert rejected.success is False
    assert rejected.editor is None


@pytest.mark.asyncio
async def test_exit_and_clear(run_command) -> None:
    exit_result = await run_command("exit")
    clear_result = await run_command("clear")

    assert exit_result.exit is True
    assert exit_result.output == "Goodbye!"
    assert clear_result.clear is True
