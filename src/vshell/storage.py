"""Key-value stores used to persist shell history."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Protocol

from loguru import logger


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store. Used by tests and one-shot command runs."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileKeyValueStore:
    """A single JSON object on disk mapping keys to string values."""

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)
        self._lock = threading.RLock()
        self._values: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("storage.load.error path={} error={}", self.file_path, e)
            return {}
        if not isinstance(loaded, dict):
            logger.error("storage.load.invalid path={} type={}", self.file_path, type(loaded).__name__)
            return {}
        return {str(key): value for key, value in loaded.items() if isinstance(value, str)}

    def _save(self) -> None:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump(self._values, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("storage.save.error path={} error={}", self.file_path, e)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value
            self._save()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._values.pop(key, None) is not None:
                self._save()
