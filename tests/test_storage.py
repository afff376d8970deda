import json
from pathlib import Path

import pytest

from vshell.storage import JsonFileKeyValueStore, MemoryKeyValueStore


def test_memory_store_roundtrip() -> None:
    store = MemoryKeyValueStore({"a": "1"})

    assert store.get("a") == "1"
    store.set("b", "2")
    store.delete("a")
    store.delete("missing")

    assert store.get("a") is None
    assert store.get("b") == "2"


def test_json_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    store = JsonFileKeyValueStore(path)

    store.set("history", '["ls"]')

    assert JsonFileKeyValueStore(path).get("history") == '["ls"]'
    assert json.loads(path.read_text(encoding="utf-8")) == {"history": '["ls"]'}

    store.delete("history")
    assert JsonFileKeyValueStore(path).get("history") is None


def test_json_store_treats_corrupt_file_as_empty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    messages: list[str] = []

    def _capture(message: str, *args: object) -> None:
        messages.append(message.format(*args))

    monkeypatch.setattr("vshell.storage.logger.error", _capture)

    store = JsonFileKeyValueStore(path)

    assert store.get("anything") is None
    assert messages and messages[0].startswith("storage.load.error")


def test_json_store_ignores_non_object_and_non_string_values(tmp_path: Path) -> None:
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]", encoding="utf-8")
    mixed = tmp_path / "mixed.json"
    mixed.write_text('{"a": "ok", "b": 3}', encoding="utf-8")

    assert JsonFileKeyValueStore(listing).get("0") is None
    store = JsonFileKeyValueStore(mixed)
    assert store.get("a") == "ok"
    assert store.get("b") is None


def test_json_store_logs_unwritable_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    messages: list[str] = []

    def _capture(message: str, *args: object) -> None:
        messages.append(message.format(*args))

    monkeypatch.setattr("vshell.storage.logger.error", _capture)

    store = JsonFileKeyValueStore(blocker / "store.json")
    store.set("history", '["ls"]')

    assert store.get("history") == '["ls"]'
    assert messages and messages[0].startswith("storage.save.error")
