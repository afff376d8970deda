"""Command and argument completion."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from loguru import logger

from vshell.commands.registry import CommandRegistry
from vshell.types import CommandContext

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class AutocompleteResult:
    completions: list[str]
    common_prefix: str
    has_exact_match: bool


@dataclass(frozen=True)
class Completion:
    """Input text and cursor after a completion was applied."""

    text: str
    cursor: int


def common_prefix(strings: list[str]) -> str:
    if not strings:
        return ""
    if len(strings) == 1:
        return strings[0]

    first = strings[0]
    for idx, char in enumerate(first):
        if any(idx >= len(other) or other[idx] != char for other in strings[1:]):
            return first[:idx]
    return first


def _split(text: str) -> list[str]:
    return _WHITESPACE.split(text.lstrip())


def _word_index(text: str, cursor: int) -> int:
    return max(0, len(_split(text[:cursor])) - 1)


class AutocompleteEngine:
    """Suggestion list state plus the completion policy used by Tab."""

    def __init__(
        self,
        registry: CommandRegistry,
        context_provider: Callable[[], CommandContext],
        *,
        limit: int = 20,
    ) -> None:
        self._registry = registry
        self._context_provider = context_provider
        self.limit = limit
        self.suggestions: list[str] = []
        self.selected_index = -1
        self.visible = False

    def generate_suggestions(self, text: str, cursor: int) -> AutocompleteResult:
        if not text.strip():
            return AutocompleteResult(completions=[], common_prefix="", has_exact_match=False)

        words = _split(text)
        index = _word_index(text, cursor)
        current = words[index] if index < len(words) else ""

        if index == 0:
            completions = self._registry.get_command_suggestions(current)
        else:
            try:
                completions = self._registry.get_argument_suggestions(
                    words[0], current, words[1:index], self._context_provider()
                )
            except Exception:
                logger.opt(exception=True).warning("autocomplete.arguments.error command={}", words[0])
                completions = []

        return AutocompleteResult(
            completions=completions[: self.limit],
            common_prefix=common_prefix(completions),
            has_exact_match=current in completions,
        )

    def update_suggestions(self, text: str, cursor: int) -> AutocompleteResult:
        result = self.generate_suggestions(text, cursor)
        self.suggestions = result.completions
        self.selected_index = -1
        self.visible = bool(result.completions)
        return result

    def navigate(self, direction: Literal["up", "down"]) -> str | None:
        if not self.suggestions:
            return None
        last = len(self.suggestions) - 1
        if direction == "up":
            self.selected_index = last if self.selected_index <= 0 else self.selected_index - 1
        else:
            self.selected_index = 0 if self.selected_index >= last else self.selected_index + 1
        return self.suggestions[self.selected_index]

    def select(self, index: int) -> str | None:
        if not 0 <= index < len(self.suggestions):
            return None
        self.selected_index = index
        return self.suggestions[index]

    def selected(self) -> str | None:
        if not 0 <= self.selected_index < len(self.suggestions):
            return None
        return self.suggestions[self.selected_index]

    def apply_completion(self, text: str, cursor: int, suggestion: str | None = None) -> Completion:
        """Replace the word under the cursor with ``suggestion`` (or the selected entry)."""
        chosen = suggestion or self.selected()
        if not chosen:
            return Completion(text=text, cursor=cursor)

        words = _split(text)
        index = _word_index(text, cursor)
        if index < len(words):
            words[index] = chosen
        else:
            words.append(chosen)
        before = " ".join(words[:index])
        return Completion(text=" ".join(words), cursor=len(before) + (1 if index else 0) + len(chosen))

    def tab_completion(self, text: str, cursor: int) -> Completion:
        result = self.generate_suggestions(text, cursor)

        if len(result.completions) == 1:
            self.hide()
            return self.apply_completion(text, cursor, result.completions[0])

        if len(result.completions) > 1 and result.common_prefix:
            words = _split(text)
            index = _word_index(text, cursor)
            current = words[index] if index < len(words) else ""
            if len(result.common_prefix) > len(current):
                return self.apply_completion(text, cursor, result.common_prefix)

        self.update_suggestions(text, cursor)
        return Completion(text=text, cursor=cursor)

    def hide(self) -> None:
        self.visible = False
        self.selected_index = -1

    def show(self) -> None:
        if self.suggestions:
            self.visible = True

    def clear(self) -> None:
        self.suggestions = []
        self.selected_index = -1
        self.visible = False
