"""Build token-based Function models, with quasi-quoting of token templates."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from . import mir
from .body import _Cursor, _is_punct, _lookup
from .function import Arg, parse_intro
from .tokens import Delimiter, Group, Ident, Literal, Punct, TokenError, tokenize, to_tokens

_TOKEN_TYPES = (Ident, Punct, Literal, Group)


def _names_in(stream: Iterable) -> Iterator[str]:
    cursor = _Cursor(stream)
    for token in cursor:
        if _is_punct(token, "#") and isinstance(cursor.peek(), Ident):
            yield next(cursor).name
        elif isinstance(token, Group):
            yield from _names_in(token.stream)


def _is_repeating(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray) + _TOKEN_TYPES) or hasattr(value, "to_tokens"):
        return False
    if not isinstance(value, (list, tuple)):
        return False
    return not value or not all(isinstance(item, _TOKEN_TYPES) for item in value)


def _repeat(group: Group, cursor: _Cursor, values: Mapping[str, Any]) -> list:
    separator = None
    token = next(cursor, None)
    if isinstance(token, Punct) and token.char != "*":
        separator = Punct(token.char)
        token = next(cursor, None)
    if not _is_punct(token, "*"):
        raise TokenError(f"Expected * after #(...). Got: {token!r}")
    repeated = {}
    for name in dict.fromkeys(_names_in(group.stream)):
        value = _lookup(values, name)
        if isinstance(value, Iterator):
            value = list(value)
        if _is_repeating(value):
            repeated[name] = list(value)
    if not repeated:
        raise TokenError("repetition #(...) contains no repeating value")
    if len({len(items) for items in repeated.values()}) > 1:
        raise TokenError("repeated values have different lengths")
    out: list = []
    for count, row in enumerate(zip(*repeated.values())):
        if count and separator is not None:
            out.append(separator)
        out.extend(_expand(group.stream, {**values, **dict(zip(repeated, row))}))
    return out


def _expand(stream: Iterable, values: Mapping[str, Any]) -> tuple:
    cursor = _Cursor(stream)
    out: list = []
    for token in cursor:
        following = cursor.peek()
        if _is_punct(token, "#") and isinstance(following, Ident):
            next(cursor)
            out.extend(to_tokens(_lookup(values, following.name)))
        elif (
            _is_punct(token, "#")
            and isinstance(following, Group)
            and following.delimiter is Delimiter.PARENTHESIS
        ):
            next(cursor)
            out.extend(_repeat(following, cursor, values))
        elif isinstance(token, Group):
            out.append(Group(token.delimiter, _expand(token.stream, values)))
        elif isinstance(token, Punct) and _is_punct(following, "#"):
            out.append(Punct(token.char))
        else:
            out.append(token)
    return tuple(out)


def quote(template: str, **kwargs: Any) -> tuple:
    """Tokenize a template, substituting #name and repeating #(...) sep? * blocks."""
    return _expand(tokenize(template), kwargs)


def parse_args2(tokens: Iterable, values: Mapping[str, Any]) -> list[Arg]:
    """Parse 'name: Type' entries whose types become tokens."""
    cursor = _Cursor(tokens)
    args = []
    while True:
        token = next(cursor, None)
        if token is None:
            break
        if not isinstance(token, Ident):
            raise TokenError(f"Expected an argument name. Got: {token!r}")
        colon = next(cursor, None)
        if not _is_punct(colon, ":"):
            raise TokenError(f"Expected a colon. Got: {colon!r}")
        type_token = next(cursor, None)
        if isinstance(type_token, Ident):
            arg_type = (type_token,)
        elif _is_punct(type_token, "#"):
            name = next(cursor, None)
            if not isinstance(name, Ident):
                raise TokenError("Expected an ident after #")
            arg_type = _expand((type_token, name), values)
        else:
            raise TokenError(f"Expected an argument type. Got: {type_token!r}")
        args.append(Arg(token.name, arg_type, None))
        separator = next(cursor, None)
        if separator is None:
            break
        if not _is_punct(separator, ","):
            raise TokenError(f"Expected a comma or a closing parenthesis. Got: {separator!r}")
    return args


def parse_return2(tokens, values: Mapping[str, Any]) -> tuple:
    """Collect the tokens of '-> Type' up to the body; empty when absent."""
    following = tokens.peek()
    if isinstance(following, Group) and following.delimiter is Delimiter.BRACE:
        return ()
    if not _is_punct(following, "-"):
        raise TokenError(f"Expected -> or {{. Got: {following!r}")
    next(tokens)
    arrow = next(tokens, None)
    if not _is_punct(arrow, ">"):
        raise TokenError(f"Expected ->. Got: {arrow!r}")
    collected = []
    while True:
        following = tokens.peek()
        if following is None:
            raise TokenError("Expected return type. Got end of stream.")
        if isinstance(following, Group) and following.delimiter is Delimiter.BRACE:
            break
        collected.append(next(tokens))
    return _expand(collected, values)


def rfunction(template: str, **kwargs: Any) -> mir.Function:
    """Build a Function whose types and body are token trees."""
    cursor = _Cursor(tokenize(template))
    tags = parse_intro(cursor, kwargs)
    group = next(cursor, None)
    if not (isinstance(group, Group) and group.delimiter is Delimiter.PARENTHESIS):
        raise TokenError("Expected a group of arguments")
    args = [mir.FnArg(mir.ArgIdent(a.name), a.arg_type) for a in parse_args2(group.stream, kwargs)]
    ret = parse_return2(cursor, kwargs)
    block = next(cursor, None)
    if not (isinstance(block, Group) and block.delimiter is Delimiter.BRACE):
        raise TokenError(f"Expected function body. Got: {block!r}")
    return mir.Function(
        name=tags.fn_name,
        async_=tags.asyn,
        public=tags.public,
        args=args,
        ret=ret,
        body=_expand(block.stream, kwargs),
    )