"""Vim key notation (``ihello<Esc>:wq<CR>``) to editor key names."""

from __future__ import annotations

import re

_NOTATION = re.compile(r"<([^<>\s]+)>")

SPECIAL_KEYS = {
    "esc": "Escape",
    "escape": "Escape",
    "cr": "Enter",
    "enter": "Enter",
    "return": "Enter",
    "bs": "Backspace",
    "backspace": "Backspace",
    "del": "Delete",
    "delete": "Delete",
    "tab": "Tab",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    "space": " ",
    "lt": "<",
}


def _named_key(name: str) -> str | None:
    lowered = name.lower()
    if lowered.startswith("c-") and len(name) == 3:
        return f"ctrl+{lowered[2]}"
    return SPECIAL_KEYS.get(lowered)


def parse_keys(notation: str) -> list[str]:
    """Split a key-notation string. Unknown ``<...>`` groups are typed literally."""
    keys: list[str] = []
    position = 0
    while position < len(notation):
        match = _NOTATION.match(notation, position)
        if match is not None:
            named = _named_key(match.group(1))
            if named is not None:
                keys.append(named)
                position = match.end()
                continue
        keys.append(notation[position])
        position += 1
    return keys
