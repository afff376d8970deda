import pytest

from vshell.editor.keys import parse_keys


def test_plain_characters_are_split() -> None:
    assert parse_keys("dd") == ["d", "d"]
    assert parse_keys("") == []


@pytest.mark.parametrize(
    ("notation", "expected"),
    [
        ("<Esc>", ["Escape"]),
        ("<CR>", ["Enter"]),
        ("<bs>", ["Backspace"]),
        ("<Del>", ["Delete"]),
        ("<Up><PageDown>", ["ArrowUp", "PageDown"]),
        ("<Space>", [" "]),
        ("<lt>", ["<"]),
        ("<C-r>", ["ctrl+r"]),
        ("<c-W>", ["ctrl+w"]),
    ],
)
def test_named_keys(notation: str, expected: list[str]) -> None:
    assert parse_keys(notation) == expected


def test_mixed_notation() -> None:
    assert parse_keys("ihi<Esc>:wq<CR>") == ["i", "h", "i", "Escape", ":", "w", "q", "Enter"]


def test_unknown_groups_are_typed_literally() -> None:
    assert parse_keys("<foo>") == ["<", "f", "o", "o", ">"]
    assert parse_keys("a<b") == ["a", "<", "b"]
