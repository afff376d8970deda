import json

import pytest

from vshell.core.history import HistoryManager
from vshell.storage import MemoryKeyValueStore


@pytest.fixture
def history() -> HistoryManager:
    return HistoryManager(MemoryKeyValueStore(), "linux")


def test_add_moves_duplicates_to_the_end(history: HistoryManager) -> None:
    for command in ["ls", "pwd", "ls", "  ", ""]:
        history.add(command)

    assert history.entries == ("pwd", "ls")


def test_add_trims_and_caps_from_the_front() -> None:
    history = HistoryManager(MemoryKeyValueStore(), "linux", max_size=3)
    for number in range(1, 6):
        history.add(f" cmd{number} ")

    assert history.entries == ("cmd3", "cmd4", "cmd5")


def test_navigation_walks_back_then_returns_to_empty(history: HistoryManager) -> None:
    for command in ["a", "b", "c"]:
        history.add(command)

    assert history.navigate("down") is None
    assert [history.navigate("up") for _ in range(4)] == ["c", "b", "a", "a"]
    assert history.current_entry() == "a"
    assert [history.navigate("down") for _ in range(3)] == ["b", "c", ""]
    assert history.index == -1
    assert history.navigate("down") is None


def test_navigation_flags(history: HistoryManager) -> None:
    assert not history.can_navigate_up
    history.add("a")
    assert history.can_navigate_up
    assert not history.can_navigate_down

    history.navigate("up")
    assert history.can_navigate_down
    assert not history.can_navigate_up

    history.reset_index()
    assert history.current_entry() is None


def test_empty_history_does_not_navigate(history: HistoryManager) -> None:
    assert history.navigate("up") is None


def test_entries_are_persisted_under_profile_key() -> None:
    store = MemoryKeyValueStore()
    history = HistoryManager(store, "linux")

    history.add("ls")
    history.add("pwd")

    raw = store.get("terminal-command-history-linux")
    assert raw is not None
    assert json.loads(raw) == ["ls", "pwd"]
    assert HistoryManager(store, "linux").entries == ("ls", "pwd")


def test_switching_profile_reloads_a_separate_list() -> None:
    store = MemoryKeyValueStore()
    history = HistoryManager(store, "linux")
    history.add("ls")
    history.navigate("up")

    history.switch_profile("windows")
    assert history.entries == ()
    assert history.index == -1
    history.add("dir")

    history.switch_profile("linux")
    assert history.entries == ("ls",)
    assert json.loads(store.get("terminal-command-history-windows") or "[]") == ["dir"]


def test_corrupt_entries_load_as_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    warnings: list[str] = []

    def _capture(message: str, *args: object) -> None:
        warnings.append(message.format(*args))

    monkeypatch.setattr("vshell.core.history.logger.warning", _capture)
    store = MemoryKeyValueStore({"terminal-command-history-linux": '{"not": "a list"}'})

    history = HistoryManager(store, "linux")

    assert history.entries == ()
    assert warnings[0].startswith("history.load.invalid key=terminal-command-history-linux")


def test_search_recent_and_clear() -> None:
    store = MemoryKeyValueStore()
    history = HistoryManager(store, "linux", namespace="custom")
    for command in ["ls", "cat file", "LS -la"]:
        history.add(command)

    assert history.search("ls") == ["ls", "LS -la"]
    assert history.search(" ") == ["ls", "cat file", "LS -la"]
    assert history.recent(2) == ["cat file", "LS -la"]
    assert history.recent(0) == []

    history.clear()
    assert len(history) == 0
    assert store.get("custom-linux") is None
