"""Line-diff undo and redo for the editor."""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

from vshell.editor.state import Position


@dataclass(frozen=True)
class BufferDiff:
    """Replace ``old_lines`` at ``start`` with ``new_lines``."""

    start: int
    old_lines: tuple[str, ...]
    new_lines: tuple[str, ...]

    @property
    def operation(self) -> Literal["insert", "delete", "replace"]:
        if not self.old_lines:
            return "insert"
        if not self.new_lines:
            return "delete"
        return "replace"

    @classmethod
    def between(cls, before: Sequence[str], after: Sequence[str]) -> BufferDiff | None:
        """Smallest single hunk turning ``before`` into ``after``, or ``None`` when equal."""
        prefix = 0
        limit = min(len(before), len(after))
        while prefix < limit and before[prefix] == after[prefix]:
            prefix += 1
        if prefix == len(before) == len(after):
            return None

        suffix = 0
        while (
            suffix < limit - prefix
            and before[len(before) - 1 - suffix] == after[len(after) - 1 - suffix]
        ):
            suffix += 1

        return cls(
            start=prefix,
            old_lines=tuple(before[prefix : len(before) - suffix]),
            new_lines=tuple(after[prefix : len(after) - suffix]),
        )

    def apply(self, buffer: Sequence[str]) -> list[str]:
        end = self.start + len(self.old_lines)
        return [*buffer[: self.start], *self.new_lines, *buffer[end:]]

    def inverted(self) -> BufferDiff:
        return BufferDiff(start=self.start, old_lines=self.new_lines, new_lines=self.old_lines)


@dataclass(frozen=True)
class VimChange:
    diff: BufferDiff
    cursor_before: Position
    cursor_after: Position
    modified_before: bool = False
    modified_after: bool = True
    timestamp: float = field(default_factory=time.time)

    def inverted(self) -> VimChange:
        return VimChange(
            diff=self.diff.inverted(),
            cursor_before=self.cursor_after,
            cursor_after=self.cursor_before,
            modified_before=self.modified_after,
            modified_after=self.modified_before,
            timestamp=self.timestamp,
        )


class UndoHistory:
    """Linear undo/redo stacks. A new change clears redo."""

    def __init__(self, depth: int = 20) -> None:
        self.depth = depth
        self._undo: list[VimChange] = []
        self._redo: list[VimChange] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def push(self, change: VimChange) -> None:
        self._undo.append(change)
        if len(self._undo) > self.depth:
            del self._undo[: len(self._undo) - self.depth]
        self._redo.clear()

    def undo(self) -> VimChange | None:
        """Pop the newest change and return the change that reverts it."""
        if not self._undo:
            return None
        change = self._undo.pop()
        self._redo.append(change)
        return change.inverted()

    def redo(self) -> VimChange | None:
        if not self._redo:
            return None
        change = self._redo.pop()
        self._undo.append(change)
        return change

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
