"""Path algebra and read-only queries over a virtual filesystem tree.

Every function here is pure: the tree is passed in by the caller and never
mutated. Mutation belongs to whoever owns the tree (see ``vshell.desktop``).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, Field

ROOT = "/"
EXECUTABLE_EXTENSIONS = frozenset({"exe", "bat", "cmd", "sh", "py", "js", "rb", "pl"})
_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


class VirtualFileSystemItem(BaseModel):
    """A file or folder node. ``path`` is absolute and normalized."""

    name: str
    path: str
    kind: Literal["file", "folder"] = "file"
    content: str | None = None
    children: list[VirtualFileSystemItem] = Field(default_factory=list)

    @property
    def is_directory(self) -> bool:
        return self.kind == "folder"

    @property
    def size(self) -> int:
        return len((self.content or "").encode("utf-8"))


def normalize(path: str) -> str:
    parts: list[str] = []
    for segment in path.split("/"):
        if not segment or segment == ".":
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    return ROOT + "/".join(parts)


def resolve(current: str, target: str) -> str:
    """Resolve ``target`` against ``current`` into an absolute normalized path."""
    if not target or target == ".":
        return normalize(current)
    if target.startswith("/"):
        return normalize(target)
    if target == "..":
        return parent_of(current)

    if target.startswith("./"):
        target = target[2:]
    elif target.startswith("../"):
        parts = [part for part in current.split("/") if part]
        for part in target.split("/"):
            if part == "..":
                if parts:
                    parts.pop()
            elif part and part != ".":
                parts.append(part)
        return normalize("/".join(parts))

    return normalize(f"{current}/{target}")


def parent_of(path: str) -> str:
    normalized = normalize(path)
    if normalized == ROOT:
        return ROOT
    head, _, _ = normalized.rpartition("/")
    return head or ROOT


def basename(path: str) -> str:
    return normalize(path).rpartition("/")[2]


def is_subdirectory(parent: str, child: str) -> bool:
    parent = normalize(parent)
    child = normalize(child)
    if parent == ROOT:
        return child != ROOT
    return child.startswith(parent + "/")


def extension(name: str) -> str:
    stem, dot, suffix = name.rpartition(".")
    if not dot or not stem:
        return ""
    return suffix.lower()


def is_executable(name: str) -> bool:
    return extension(name) in EXECUTABLE_EXTENSIONS


def format_size(size: int) -> str:
    if size <= 0:
        return "0 B"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    rendered = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{rendered} {_SIZE_UNITS[index]}"


def root_item(tree: Sequence[VirtualFileSystemItem]) -> VirtualFileSystemItem:
    """Synthetic folder standing for ``/`` so the root can be listed and entered."""
    return VirtualFileSystemItem(name="", path=ROOT, kind="folder", children=list(tree))


def find(tree: Sequence[VirtualFileSystemItem], path: str) -> VirtualFileSystemItem | None:
    target = normalize(path)
    if target == ROOT:
        return root_item(tree)

    items: Sequence[VirtualFileSystemItem] = tree
    while True:
        for item in items:
            if item.path == target:
                return item
            if item.is_directory and target.startswith(item.path + "/"):
                items = item.children
                break
        else:
            return None


def list_directory(tree: Sequence[VirtualFileSystemItem], path: str) -> list[VirtualFileSystemItem]:
    item = find(tree, path)
    if item is None or not item.is_directory:
        return []
    return list(item.children)


def exists(tree: Sequence[VirtualFileSystemItem], path: str) -> bool:
    return find(tree, path) is not None


def is_directory(tree: Sequence[VirtualFileSystemItem], path: str) -> bool:
    item = find(tree, path)
    return item is not None and item.is_directory


def read_file(tree: Sequence[VirtualFileSystemItem], path: str) -> str | None:
    """Return file content, ``""`` for a file without content, ``None`` otherwise."""
    item = find(tree, path)
    if item is None or item.is_directory:
        return None
    return item.content or ""


def walk(item: VirtualFileSystemItem):
    """Yield ``item`` and all of its descendants, depth first."""
    stack = [item]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def path_completions(tree: Sequence[VirtualFileSystemItem], current: str, partial: str) -> list[str]:
    """Complete a partial path typed relative to ``current``.

    Folders get a trailing ``/`` and sort before files.
    """
    search_path = current
    pattern = partial
    prefix = ""
    if partial.startswith("/"):
        head, _, pattern = partial.rpartition("/")
        search_path = head or ROOT
        prefix = ROOT if search_path == ROOT else f"{search_path}/"
    elif "/" in partial:
        head, _, pattern = partial.rpartition("/")
        search_path = resolve(current, head)
        prefix = f"{head}/"

    lowered = pattern.lower()
    matches = [
        f"{prefix}{item.name}/" if item.is_directory else f"{prefix}{item.name}"
        for item in list_directory(tree, search_path)
        if item.name.lower().startswith(lowered)
    ]
    return sorted(matches, key=lambda entry: (not entry.endswith("/"), entry.casefold()))
