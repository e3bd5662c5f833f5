"""Turn a token template into formatted code text with #name interpolations."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Optional

from .tokens import Delimiter, Group, Ident, Literal, Punct, TokenError, tokenize


class _Cursor:
    """An iterator over tokens that can look one token ahead."""

    def __init__(self, items: Iterable) -> None:
        self._items = list(items)
        self._pos = 0

    def __iter__(self) -> "_Cursor":
        return self

    def __next__(self):
        if self._pos >= len(self._items):
            raise StopIteration
        item = self._items[self._pos]
        self._pos += 1
        return item

    def peek(self) -> Optional[Any]:
        if self._pos >= len(self._items):
            return None
        return self._items[self._pos]


def _lookup(values: Mapping[str, Any], name: str) -> Any:
    try:
        return values[name]
    except KeyError:
        raise KeyError(f"no value given for #{name}") from None


def _escape(text: str) -> str:
    return text.replace("{", "{{").replace("}", "}}")


def _is_punct(token: Any, chars: str) -> bool:
    return isinstance(token, Punct) and token.char in chars


def interpolation_binding(ident: str, captured: list[str], escape: bool) -> str:
    """Return the format placeholder for ident, adding it to captured if new."""
    if ident in captured:
        index = captured.index(ident)
    else:
        index = len(captured)
        captured.append(ident)
    return f"{{{index}{'!r' if escape else ''}}}"


def pull_interpolation(tokens: Iterator, captured: list[str], escape: bool) -> str:
    """Consume the identifier after a '#' and return its placeholder."""
    token = next(tokens, None)
    if not isinstance(token, Ident):
        raise TokenError(f"Expected ident after #, got {token!r}")
    return interpolation_binding(token.name, captured, escape)


def _opening(delimiter: Delimiter) -> str:
    return "{{" if delimiter is Delimiter.BRACE else delimiter.opening()


def _closing(delimiter: Delimiter) -> str:
    return "}}" if delimiter is Delimiter.BRACE else delimiter.closing()


def _collect_lines(stream: Iterable, captured: list[str], lines: list[str], indent: int) -> None:
    cursor = _Cursor(stream)
    for token in cursor:
        following = cursor.peek()
        if _is_punct(token, "#"):
            lines[-1] += pull_interpolation(cursor, captured, False)
            if _is_punct(cursor.peek(), "#=:"):
                lines[-1] += " "
        elif _is_punct(token, ";"):
            lines.append(" " * indent)
        elif _is_punct(token, ".!"):
            lines[-1] += token.char
        elif isinstance(token, Group):
            line_count = len(lines)
            lines[-1] += _opening(token.delimiter)
            inner_indent = indent + 4
            if ";" in token.stream_text():
                lines.append(" " * inner_indent)
            _collect_lines(token.stream, captured, lines, inner_indent)
            multiline = len(lines) > line_count
            if multiline:
                lines[-1] = lines[-1][:indent]
            lines[-1] += _closing(token.delimiter)
            if multiline:
                lines.append(" " * indent)
        elif isinstance(token, Ident):
            lines[-1] += token.name
            tight = (
                following is None
                or _is_punct(following, ".;,")
                or (isinstance(following, Group) and following.delimiter is not Delimiter.BRACE)
                or (isinstance(following, Group) and ";" not in str(following))
            )
            if not tight:
                lines[-1] += " "
        elif isinstance(token, Punct):
            lines[-1] += token.char
            tight = (
                following is None
                or _is_punct(following, "><=*")
                or isinstance(following, Group)
            )
            if not tight:
                lines[-1] += " "
        elif isinstance(token, Literal):
            lines[-1] += _escape(token.text)


def body_template(tokens: Iterable) -> tuple[str, list[str]]:
    """Build a format template and the ordered names it interpolates."""
    captured: list[str] = []
    lines = [""]
    _collect_lines(tokens, captured, lines, 0)
    return "\n".join(line for line in lines if line), captured


def _format_body(tokens: Iterable, values: Mapping[str, Any]) -> str:
    template, names = body_template(tokens)
    text = template.format(*(_lookup(values, name) for name in names))
    return "\n".join(line for line in text.splitlines() if line.strip())


def body(template: str, **kwargs: Any) -> str:
    """Format a code template, replacing each #name with the given value."""
    return _format_body(tokenize(template), kwargs)