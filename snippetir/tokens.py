"""Token trees for code templates: lexing, rendering and value conversion."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union


class TokenError(ValueError):
    """Raised when text cannot be split into balanced token trees."""


class Delimiter(enum.Enum):
    """The bracket kind that encloses a group."""

    PARENTHESIS = "()"
    BRACE = "{}"
    BRACKET = "[]"
    NONE = ""

    def opening(self) -> str:
        """The character that opens a group of this kind."""
        if self is Delimiter.NONE:
            raise TokenError("Delimiter::None has no opening character")
        return self.value[0]

    def closing(self) -> str:
        """The character that closes a group of this kind."""
        if self is Delimiter.NONE:
            raise TokenError("Delimiter::None has no closing character")
        return self.value[1]


class Spacing(enum.Enum):
    """Whether a punctuation character is directly followed by another one."""

    ALONE = "alone"
    JOINT = "joint"


_PUNCT_CHARS = frozenset("=<>!~+-*/%^&|@.,;:#$?'")
_JOINING_CHARS = _PUNCT_CHARS - {"'"}


@dataclass(frozen=True)
class Ident:
    """An identifier or keyword."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Punct:
    """A single punctuation character."""

    char: str
    spacing: Spacing = Spacing.ALONE

    def __post_init__(self) -> None:
        if len(self.char) != 1 or self.char not in _PUNCT_CHARS:
            raise TokenError(f"not a punctuation character: {self.char!r}")

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Literal:
    """A string, character or numeric literal, kept as written."""

    text: str

    def __str__(self) -> str:
        return self.text


_DISPLAY = {
    Delimiter.PARENTHESIS: ("(", ")"),
    Delimiter.BRACE: ("{ ", "}"),
    Delimiter.BRACKET: ("[", "]"),
    Delimiter.NONE: ("", ""),
}


@dataclass(frozen=True)
class Group:
    """A delimited sequence of token trees."""

    delimiter: Delimiter
    stream: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "stream", tuple(self.stream))

    def stream_text(self) -> str:
        """Render the enclosed tokens without the delimiters."""
        return render(self.stream)

    def __str__(self) -> str:
        opening, closing = _DISPLAY[self.delimiter]
        inner = self.stream_text()
        if self.delimiter is Delimiter.BRACE and self.stream:
            inner += " "
        return f"{opening}{inner}{closing}"


Token = Union[Ident, Punct, Literal, Group]

_OPENERS = {"(": Delimiter.PARENTHESIS, "{": Delimiter.BRACE, "[": Delimiter.BRACKET}
_CLOSERS = frozenset(")}]")

_IDENT = re.compile(r"(?:r#)?[^\W\d]\w*")
_NUMBER = re.compile(
    r"0[xob]\w*"
    r"|[0-9][0-9_]*(?:\.[0-9][0-9_]*|\.(?![.\w]))?(?:[eE][+-]?[0-9_]+)?\w*"
)
_RAW_STRING = re.compile(r'[bc]?r(#*)"')
_STRING = re.compile(r'[bc]?"')
_BYTE_CHAR = re.compile(r"b'")


def _scan_quoted(text: str, start: int, quote: str) -> int:
    """Return the index just past the closing quote of a literal opened at start."""
    pos = start + 1
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos + 1
        pos += 1
    raise TokenError(f"unterminated literal starting at offset {start}")


def _skip_block_comment(text: str, start: int) -> int:
    depth = 0
    pos = start
    while pos < len(text):
        if text.startswith("/*", pos):
            depth += 1
            pos += 2
        elif text.startswith("*/", pos):
            depth -= 1
            pos += 2
            if depth == 0:
                return pos
        else:
            pos += 1
    raise TokenError(f"unterminated block comment starting at offset {start}")


def _scan_quote_mark(text: str, pos: int) -> tuple[Token, int]:
    """Read a character literal or the quote of a lifetime at pos."""
    following = text[pos + 1 : pos + 2]
    if following == "\\":
        end = _scan_quoted(text, pos, "'")
        return Literal(text[pos:end]), end
    if pos + 2 < len(text) and text[pos + 2] == "'":
        return Literal(text[pos : pos + 3]), pos + 3
    if following and _IDENT.match(following):
        return Punct("'", Spacing.JOINT), pos + 1
    raise TokenError(f"stray quote at offset {pos}")


def tokenize(text: str) -> list[Token]:
    """Split source text into a list of token trees with balanced groups."""
    stack: list[tuple[Delimiter, int, list]] = []
    current: list = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char.isspace():
            pos += 1
            continue
        if text.startswith("//", pos):
            newline = text.find("\n", pos)
            pos = length if newline == -1 else newline + 1
            continue
        if text.startswith("/*", pos):
            pos = _skip_block_comment(text, pos)
            continue
        if char in _OPENERS:
            stack.append((_OPENERS[char], pos, current))
            current = []
            pos += 1
            continue
        if char in _CLOSERS:
            if not stack:
                raise TokenError(f"unexpected {char!r} at offset {pos}")
            delimiter, start, parent = stack.pop()
            if delimiter.closing() != char:
                raise TokenError(
                    f"{char!r} at offset {pos} does not close "
                    f"{delimiter.opening()!r} at offset {start}"
                )
            parent.append(Group(delimiter, current))
            current = parent
            pos += 1
            continue

        match = _RAW_STRING.match(text, pos)
        if match:
            terminator = '"' + match.group(1)
            end = text.find(terminator, match.end())
            if end == -1:
                raise TokenError(f"unterminated raw string at offset {pos}")
            end += len(terminator)
            current.append(Literal(text[pos:end]))
            pos = end
            continue
        match = _STRING.match(text, pos)
        if match:
            end = _scan_quoted(text, match.end() - 1, '"')
            current.append(Literal(text[pos:end]))
            pos = end
            continue
        if _BYTE_CHAR.match(text, pos):
            end = _scan_quoted(text, pos + 1, "'")
            current.append(Literal(text[pos:end]))
            pos = end
            continue
        if char == "'":
            token, pos = _scan_quote_mark(text, pos)
            current.append(token)
            continue
        match = _IDENT.match(text, pos)
        if match:
            current.append(Ident(match.group()))
            pos = match.end()
            continue
        match = _NUMBER.match(text, pos)
        if match:
            current.append(Literal(match.group()))
            pos = match.end()
            continue
        if char in _PUNCT_CHARS:
            nxt = pos + 1
            joint = (
                nxt < length
                and text[nxt] in _JOINING_CHARS
                and not text.startswith(("//", "/*"), nxt)
            )
            current.append(Punct(char, Spacing.JOINT if joint else Spacing.ALONE))
            pos = nxt
            continue
        raise TokenError(f"unexpected character {char!r} at offset {pos}")

    if stack:
        delimiter, start, _ = stack[-1]
        raise TokenError(f"unclosed {delimiter.opening()!r} at offset {start}")
    return current


def render(tokens: Iterable[Token]) -> str:
    """Render token trees as space-separated text, keeping joint punctuation together."""
    parts: list[str] = []
    joint = False
    for token in tokens:
        if parts and not joint:
            parts.append(" ")
        parts.append(str(token))
        joint = isinstance(token, Punct) and token.spacing is Spacing.JOINT
    return "".join(parts)


_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _string_literal(value: str) -> str:
    escaped = []
    for char in value:
        if char in _ESCAPES:
            escaped.append(_ESCAPES[char])
        elif not char.isprintable():
            escaped.append(f"\\u{{{ord(char):x}}}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


def to_tokens(value) -> tuple:
    """Convert a value into the token trees that stand for it in a template."""
    if isinstance(value, (Ident, Punct, Literal, Group)):
        return (value,)
    convert = getattr(value, "to_tokens", None)
    if callable(convert):
        return tuple(convert())
    if isinstance(value, bool):
        return (Ident("true" if value else "false"),)
    if isinstance(value, (int, float)):
        return (Literal(repr(value)),)
    if isinstance(value, str):
        return (Literal(_string_literal(value)),)
    if isinstance(value, (bytes, bytearray)):
        raise TypeError("byte strings cannot be converted to tokens")
    if isinstance(value, Iterable):
        result: list = []
        for item in value:
            result.extend(to_tokens(item))
        return tuple(result)
    raise TypeError(f"cannot convert {type(value).__name__} to tokens")