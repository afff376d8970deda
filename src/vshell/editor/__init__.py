"""Modal text editor."""

from .engine import Editor
from .keys import parse_keys
from .state import EditorState, Position

__all__ = ["Editor", "EditorState", "Position", "parse_keys"]
