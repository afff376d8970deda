import pytest

from vshell import vfs
from vshell.desktop import ABOUT_ME, default_tree


@pytest.fixture
def tree():
    return default_tree()


def test_resolve_parent_segments() -> None:
    assert vfs.resolve("/a/b/c", "../../x") == "/a/x"


@pytest.mark.parametrize(
    ("current", "target", "expected"),
    [
        ("/Desktop", "", "/Desktop"),
        ("/Desktop", ".", "/Desktop"),
        ("/Desktop", "..", "/"),
        ("/", "..", "/"),
        ("/Desktop", "/Projects/", "/Projects"),
        ("/Desktop", "./notes", "/Desktop/notes"),
        ("/Desktop", "a/../b", "/Desktop/b"),
        ("/Desktop", "../../../etc", "/etc"),
    ],
)
def test_resolve(current: str, target: str, expected: str) -> None:
    assert vfs.resolve(current, target) == expected


@pytest.mark.parametrize("cwd", ["/Desktop", "/Projects/Web Development", "/a/b/c", "/a/./b/", "/x//y"])
def test_parent_then_basename_returns_to_directory(cwd: str) -> None:
    parent = vfs.resolve(cwd, "..")

    assert vfs.resolve(parent, vfs.basename(cwd)) == vfs.normalize(cwd)


@pytest.mark.parametrize("path", ["//a/./b/../c/", "/", "", "a/b", "/x/../../y"])
def test_normalize_is_idempotent(path: str) -> None:
    once = vfs.normalize(path)
    assert vfs.normalize(once) == once
    assert once.startswith("/")


def test_normalize_collapses_segments() -> None:
    assert vfs.normalize("//a/./b/../c/") == "/a/c"


def test_path_helpers() -> None:
    assert vfs.parent_of("/a/b") == "/a"
    assert vfs.parent_of("/a") == "/"
    assert vfs.basename("/a/b.txt") == "b.txt"
    assert vfs.basename("/") == ""
    assert vfs.is_subdirectory("/a", "/a/b")
    assert not vfs.is_subdirectory("/a", "/ab")
    assert not vfs.is_subdirectory("/a", "/a")
    assert vfs.is_subdirectory("/", "/x")


def test_extension_and_executable() -> None:
    assert vfs.extension("archive.TAR.GZ") == "gz"
    assert vfs.extension(".bashrc") == ""
    assert vfs.extension("README") == ""
    assert vfs.is_executable("run.sh")
    assert not vfs.is_executable("notes.txt")


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0 B"), (1023, "1023 B"), (1024, "1 KB"), (1536, "1.5 KB"), (1048576, "1 MB")],
)
def test_format_size(size: int, expected: str) -> None:
    assert vfs.format_size(size) == expected


def test_item_size_counts_utf8_bytes() -> None:
    item = vfs.VirtualFileSystemItem(name="a", path="/a", content="héllo")
    assert item.size == 6


def test_find_descends_into_folders(tree) -> None:
    about = vfs.find(tree, "/Desktop/About Me.txt")

    assert about is not None
    assert about.content == ABOUT_ME
    assert vfs.find(tree, "/Nope") is None
    assert vfs.find(tree, "/Desktop/About Me.txt/inner") is None


def test_root_is_a_listable_folder(tree) -> None:
    root = vfs.find(tree, "/")

    assert root is not None
    assert root.is_directory
    assert [item.name for item in vfs.list_directory(tree, "/")] == ["Desktop", "Projects", "Documents"]


def test_queries(tree) -> None:
    assert vfs.exists(tree, "/Projects/Mobile Apps")
    assert vfs.is_directory(tree, "/Projects")
    assert not vfs.is_directory(tree, "/Desktop/Resume.pdf")
    assert vfs.list_directory(tree, "/Desktop/Resume.pdf") == []
    assert vfs.read_file(tree, "/Desktop/Resume.pdf") == ""
    assert vfs.read_file(tree, "/Desktop") is None


def test_walk_is_depth_first(tree) -> None:
    projects = vfs.find(tree, "/Projects")
    assert projects is not None
    assert [item.path for item in vfs.walk(projects)] == [
        "/Projects",
        "/Projects/Web Development",
        "/Projects/Mobile Apps",
    ]


def test_path_completions_relative(tree) -> None:
    assert vfs.path_completions(tree, "/Desktop", "") == ["About Me.txt", "Contact.lnk", "Resume.pdf"]
    assert vfs.path_completions(tree, "/", "p") == ["Projects/"]
    assert vfs.path_completions(tree, "/", "Projects/M") == ["Projects/Mobile Apps/"]


def test_path_completions_absolute(tree) -> None:
    assert vfs.path_completions(tree, "/Desktop", "/Pro") == ["/Projects/"]
    assert vfs.path_completions(tree, "/Desktop", "/Projects/W") == ["/Projects/Web Development/"]


def test_path_completions_folders_first(tree) -> None:
    tree[1].children.append(vfs.VirtualFileSystemItem(name="Apple.txt", path="/Projects/Apple.txt"))
    assert vfs.path_completions(tree, "/Projects", "") == ["Mobile Apps/", "Web Development/", "Apple.txt"]
