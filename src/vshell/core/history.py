"""Persistent, de-duplicated command history per OS profile."""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from vshell.storage import KeyValueStore

Direction = Literal["up", "down"]

_ENTRIES = TypeAdapter(list[str])

NOT_BROWSING = -1
SEARCH_LIMIT = 20


class HistoryManager:
    """Most-recently-used command list with an arrow-key browsing cursor.

    Entries are unique: re-adding a command moves it to the end. The list is
    stored under ``"<namespace>-<profile>"`` as a JSON array of strings.
    """

    def __init__(
        self,
        store: KeyValueStore,
        profile: str,
        *,
        max_size: int = 1000,
        namespace: str = "terminal-command-history",
    ) -> None:
        self._store = store
        self._namespace = namespace
        self.max_size = max_size
        self.profile = profile
        self.index = NOT_BROWSING
        self._entries: list[str] = self._load()

    @property
    def key(self) -> str:
        return f"{self._namespace}-{self.profile}"

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _load(self) -> list[str]:
        raw = self._store.get(self.key)
        if raw is None:
            return []
        try:
            entries = _ENTRIES.validate_json(raw)
        except ValidationError as exc:
            logger.warning("history.load.invalid key={} errors={}", self.key, exc.error_count())
            return []
        return entries[-self.max_size :]

    def _save(self) -> None:
        self._store.set(self.key, _ENTRIES.dump_json(self._entries).decode("utf-8"))

    def add(self, command: str) -> None:
        entry = command.strip()
        if not entry:
            return
        entries = [existing for existing in self._entries if existing != entry]
        entries.append(entry)
        self._entries = entries[-self.max_size :]
        self.index = NOT_BROWSING
        self._save()

    def navigate(self, direction: Direction) -> str | None:
        """Move the cursor and return the entry to show.

        ``""`` means the cursor left the list (back to an empty prompt); ``None``
        means there was nothing to move to.
        """
        if not self._entries:
            return None

        if direction == "up":
            self.index = len(self._entries) - 1 if self.index == NOT_BROWSING else max(0, self.index - 1)
            return self._entries[self.index]

        if self.index == NOT_BROWSING:
            return None
        if self.index >= len(self._entries) - 1:
            self.index = NOT_BROWSING
            return ""
        self.index += 1
        return self._entries[self.index]

    @property
    def can_navigate_up(self) -> bool:
        return bool(self._entries) and (self.index == NOT_BROWSING or self.index > 0)

    @property
    def can_navigate_down(self) -> bool:
        return self.index != NOT_BROWSING

    def current_entry(self) -> str | None:
        if self.index == NOT_BROWSING or self.index >= len(self._entries):
            return None
        return self._entries[self.index]

    def reset_index(self) -> None:
        self.index = NOT_BROWSING

    def search(self, term: str) -> list[str]:
        if not term.strip():
            return list(self._entries)
        lowered = term.lower()
        return [entry for entry in self._entries if lowered in entry.lower()][-SEARCH_LIMIT:]

    def recent(self, count: int = 10) -> list[str]:
        if count <= 0:
            return []
        return self._entries[-count:]

    def clear(self) -> None:
        self._entries = []
        self.index = NOT_BROWSING
        self._store.delete(self.key)

    def switch_profile(self, profile: str) -> None:
        self.profile = profile
        self.index = NOT_BROWSING
        self._entries = self._load()
        logger.debug("history.switch profile={} entries={}", profile, len(self._entries))
