"""Command line tokenizing and parsing."""

from __future__ import annotations

from vshell.types import BoolFlag, Flag, ParsedCommandLine, ValueFlag

_QUOTES = frozenset({'"', "'"})


def tokenize(raw: str) -> list[str]:
    """Split a line on unquoted, unescaped spaces.

    Quote characters are dropped, a backslash makes the next character literal,
    and an unterminated quote runs to the end of the line.
    """

    tokens: list[str] = []
    current: list[str] = []
    quote = ""
    escaped = False

    for char in raw:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if not quote and char in _QUOTES:
            quote = char
            continue
        if quote and char == quote:
            quote = ""
            continue
        if char == " " and not quote:
            if current:
                tokens.append("".join(current))
                current = []
            continue
        current.append(char)

    if current:
        tokens.append("".join(current))
    return tokens


def _takes_value(tokens: list[str], idx: int) -> bool:
    return idx + 1 < len(tokens) and not tokens[idx + 1].startswith("-")


def parse(raw: str) -> ParsedCommandLine:
    """Parse one line into command, positional args and flags.

    A flag without ``=`` consumes the following token as its value unless that
    token starts with ``-``. Use ``--name=value`` when a positional argument must
    follow a flag.
    """

    tokens = tokenize(raw.strip())
    if not tokens:
        return ParsedCommandLine(command="", raw=raw)

    command, rest = tokens[0], tokens[1:]
    args: list[str] = []
    flags: dict[str, Flag] = {}
    idx = 0
    while idx < len(rest):
        token = rest[idx]

        if token.startswith("--"):
            name, sep, value = token[2:].partition("=")
            if sep:
                flags[name] = ValueFlag(value)
            elif _takes_value(rest, idx):
                flags[name] = ValueFlag(rest[idx + 1])
                idx += 1
            else:
                flags[name] = BoolFlag()
            idx += 1
            continue

        if token.startswith("-") and len(token) > 1:
            cluster = token[1:]
            for char in cluster[:-1]:
                flags[char] = BoolFlag()
            if _takes_value(rest, idx):
                flags[cluster[-1]] = ValueFlag(rest[idx + 1])
                idx += 1
            else:
                flags[cluster[-1]] = BoolFlag()
            idx += 1
            continue

        args.append(token)
        idx += 1

    return ParsedCommandLine(command=command, args=tuple(args), raw=raw, flags=flags)
