"""Shell-style command line tokenizer for launch profile arguments.

Splits a ``commandLineArgs`` string into individual arguments:

- whitespace outside quotes separates arguments
- ``'...'`` and ``"..."`` group text containing whitespace
- a backslash escapes the next character, inside or outside quotes
"""

from __future__ import annotations

from typing import Final

from ..errors import MalformedArgumentSyntax

QUOTES: Final[frozenset[str]] = frozenset({"'", '"'})

ESCAPES: Final[dict[str, str]] = {
    "0": "\0",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def unescape(text: str) -> str:
    """Replace backslash escape sequences with the characters they stand for.

    Raises:
        MalformedArgumentSyntax: If the text ends with a lone backslash
    """
    if "\\" not in text:
        return text

    result: list[str] = []
    pos = 0
    while pos < len(text):
        ch = text[pos]
        if ch != "\\":
            result.append(ch)
            pos += 1
            continue
        if pos + 1 >= len(text):
            raise MalformedArgumentSyntax(f"Dangling escape at end of argument: [{text}]")
        escaped = text[pos + 1]
        result.append(ESCAPES.get(escaped, escaped))
        pos += 2

    return "".join(result)


def parse_args(command_line: str | None, *, drop_empty: bool = False) -> list[str]:
    """Split a command line into arguments.

    Args:
        command_line: Raw command line, None is treated as empty
        drop_empty: Drop explicitly quoted empty arguments (``''`` or ``""``)
            instead of returning them as empty strings

    Returns:
        Arguments in source order

    Raises:
        MalformedArgumentSyntax: On an unterminated quote or dangling escape
    """
    command_line = (command_line or "").strip()
    args: list[str] = []
    length = len(command_line)
    pos = 0

    while pos < length:
        ch = command_line[pos]

        if ch.isspace():
            pos += 1
            continue

        if ch in QUOTES:
            quote = ch
            pos += 1
            chars: list[str] = []
            while True:
                if pos >= length:
                    raise MalformedArgumentSyntax(
                        f"Unterminated {quote} quote in: [{command_line}]"
                    )
                current = command_line[pos]
                if current == quote:
                    pos += 1
                    break
                if current == "\\":
                    if pos + 1 >= length:
                        raise MalformedArgumentSyntax(f"Invalid escape in: [{command_line}]")
                    # Keep the escape, unescape() resolves it below
                    chars.append(command_line[pos : pos + 2])
                    pos += 2
                else:
                    chars.append(current)
                    pos += 1
            raw = "".join(chars)
            keep = bool(raw) or not drop_empty
        else:
            start = pos
            while pos < length and not command_line[pos].isspace():
                pos += 1
            raw = command_line[start:pos]
            keep = bool(raw)

        if keep:
            args.append(unescape(raw))

    return args
