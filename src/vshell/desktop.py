"""In-process desktop store owning the virtual filesystem tree."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from vshell import vfs
from vshell.errors import FilesystemSeedError
from vshell.vfs import VirtualFileSystemItem

_TREE_ADAPTER = TypeAdapter(list[VirtualFileSystemItem])

ABOUT_ME = "Welcome to my portfolio! I'm a passionate developer..."
SKILLS = (
    "# Technical Skills\n\n"
    "## Frontend\n- React/TypeScript\n- JavaScript/HTML/CSS\n\n"
    "## Backend\n- Node.js\n- Python\n\n"
    "## Tools\n- Git/GitHub\n- Docker"
)


def _folder(path: str, children: Iterable[VirtualFileSystemItem] = ()) -> VirtualFileSystemItem:
    return VirtualFileSystemItem(name=vfs.basename(path), path=path, kind="folder", children=list(children))


def _file(path: str, content: str | None = None) -> VirtualFileSystemItem:
    return VirtualFileSystemItem(name=vfs.basename(path), path=path, kind="file", content=content)


def default_tree() -> list[VirtualFileSystemItem]:
    return [
        _folder(
            "/Desktop",
            [
                _file("/Desktop/About Me.txt", ABOUT_ME),
                _file("/Desktop/Resume.pdf"),
                _file("/Desktop/Contact.lnk"),
            ],
        ),
        _folder(
            "/Projects",
            [
                _folder("/Projects/Web Development"),
                _folder("/Projects/Mobile Apps"),
            ],
        ),
        _folder("/Documents", [_file("/Documents/Skills.md", SKILLS)]),
    ]


def load_tree(path: Path) -> list[VirtualFileSystemItem]:
    """Load a tree from a JSON array of items."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return _TREE_ADAPTER.validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise FilesystemSeedError(f"cannot load filesystem seed {path}: {exc}") from exc


class DesktopFileSystem:
    """Owns the tree and exposes the three mutators the shell is allowed to call.

    Every mutator returns ``False`` on failure instead of raising.
    """

    def __init__(self, tree: list[VirtualFileSystemItem] | None = None) -> None:
        self._tree: list[VirtualFileSystemItem] = default_tree() if tree is None else tree

    @classmethod
    def from_seed(cls, path: Path | None) -> DesktopFileSystem:
        if path is None:
            return cls()
        return cls(load_tree(path))

    @property
    def tree(self) -> list[VirtualFileSystemItem]:
        return self._tree

    def _children_of(self, parent_path: str) -> list[VirtualFileSystemItem] | None:
        parent = vfs.normalize(parent_path)
        if parent == vfs.ROOT:
            return self._tree
        item = vfs.find(self._tree, parent)
        if item is None or not item.is_directory:
            return None
        return item.children

    def _insert(self, parent_path: str, item: VirtualFileSystemItem) -> bool:
        if not item.name or "/" in item.name or item.name in {".", ".."}:
            logger.warning("desktop.insert.rejected name={!r}", item.name)
            return False
        children = self._children_of(parent_path)
        if children is None:
            logger.warning("desktop.insert.missing_parent parent={}", parent_path)
            return False
        if any(child.name == item.name for child in children):
            logger.warning("desktop.insert.collision path={}", item.path)
            return False
        children.append(item)
        logger.debug("desktop.insert kind={} path={}", item.kind, item.path)
        return True

    def create_file(self, parent_path: str, name: str, content: str = "") -> bool:
        path = vfs.resolve(parent_path, name) if name else parent_path
        return self._insert(parent_path, VirtualFileSystemItem(name=name, path=path, kind="file", content=content))

    def create_folder(self, parent_path: str, name: str) -> bool:
        path = vfs.resolve(parent_path, name) if name else parent_path
        return self._insert(parent_path, VirtualFileSystemItem(name=name, path=path, kind="folder"))

    def remove_item(self, path: str) -> bool:
        target = vfs.normalize(path)
        if target == vfs.ROOT:
            return False
        children = self._children_of(vfs.parent_of(target))
        if children is None:
            return False
        for index, child in enumerate(children):
            if child.path == target:
                del children[index]
                logger.debug("desktop.remove path={}", target)
                return True
        return False
