"""Build textual Function models from compact function templates."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from . import mir
from .body import _Cursor, _format_body, _is_punct, _lookup, pull_interpolation
from .tokens import Delimiter, Group, Ident, Literal, TokenError, tokenize


@dataclass
class Tags:
    asyn: bool
    public: bool
    fn_name: mir.Ident


@dataclass
class Arg:
    name: str
    arg_type: Any
    default: Optional[str] = None


def _interpolated(tokens, values: Mapping[str, Any]) -> str:
    captured: list[str] = []
    pull_interpolation(tokens, captured, False)
    return str(_lookup(values, captured[0]))


def parse_intro(tokens, values: Mapping[str, Any]) -> Tags:
    """Read the optional async and pub markers and the function name."""
    asyn = public = False
    while True:
        token = next(tokens, None)
        if token is None:
            raise TokenError("Unexpectedly reached end of token stream in function template")
        if isinstance(token, Ident) and token.name == "async":
            asyn = True
        elif isinstance(token, Ident) and token.name == "pub":
            public = True
        elif isinstance(token, Ident):
            return Tags(asyn, public, mir.Ident(token.name))
        elif _is_punct(token, "#"):
            return Tags(asyn, public, mir.Ident(_interpolated(tokens, values)))
        else:
            raise TokenError(
                f"Expected one of: async, pub, or the function's name. Got: {token!r}"
            )


def parse_type(ident: Ident, tokens) -> str:
    """Read a possibly dotted, possibly generic type name starting at ident."""
    text = ident.name
    while _is_punct(tokens.peek(), "."):
        text += str(next(tokens))
        if not isinstance(tokens.peek(), Ident):
            raise TokenError(f"Expected an identifier after a dot. Got: {tokens.peek()!r}")
        text += str(next(tokens))
    following = tokens.peek()
    if isinstance(following, Group) and following.delimiter is Delimiter.BRACKET:
        text += str(next(tokens))
    return text


def parse_args(tokens: Iterable, values: Mapping[str, Any]) -> list[Arg]:
    """Parse 'name: type [= default]' entries separated by commas."""
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
            arg_type = parse_type(type_token, cursor)
        elif _is_punct(type_token, "#"):
            arg_type = _interpolated(cursor, values)
        else:
            raise TokenError(f"Expected an argument type. Got: {type_token!r}")
        following = cursor.peek()
        default = None
        if _is_punct(following, "="):
            next(cursor)
            value = next(cursor, None)
            if not isinstance(value, Literal):
                raise TokenError(f"Expected a default value. Got: {value!r}")
            default = value.text
        elif following is not None and not _is_punct(following, ",)"):
            raise TokenError(f"Expected one of: , or ) or =. Got: {following!r}")
        args.append(Arg(token.name, arg_type, default))
        separator = next(cursor, None)
        if separator is None:
            break
        if not _is_punct(separator, ","):
            raise TokenError(f"Expected a comma or a closing parenthesis. Got: {separator!r}")
    return args


def parse_return(tokens, values: Mapping[str, Any]) -> str:
    """Read an optional '-> type' before the body; empty text when absent."""
    following = tokens.peek()
    if isinstance(following, Group) and following.delimiter is Delimiter.BRACE:
        return ""
    if not _is_punct(following, "-"):
        raise TokenError(f"Expected -> or {{. Got: {following!r}")
    next(tokens)
    arrow = next(tokens, None)
    if not _is_punct(arrow, ">"):
        raise TokenError(f"Expected ->. Got: {arrow!r}")
    token = next(tokens, None)
    if isinstance(token, Ident):
        return parse_type(token, tokens)
    if _is_punct(token, "#"):
        return _interpolated(tokens, values)
    raise TokenError(f"Expected the return type. Got: {token!r}")


def function(template: str, **kwargs: Any) -> mir.Function:
    """Build a Function from '[async] [pub] name(args) [-> ret] { body }'."""
    cursor = _Cursor(tokenize(template))
    tags = parse_intro(cursor, kwargs)
    group = next(cursor, None)
    if not (isinstance(group, Group) and group.delimiter is Delimiter.PARENTHESIS):
        raise TokenError("Expected a group of arguments")
    args = [
        mir.FnArg(mir.ArgIdent(a.name), a.arg_type, default=a.default)
        for a in parse_args(group.stream, kwargs)
    ]
    ret = parse_return(cursor, kwargs)
    block = next(cursor, None)
    if not (isinstance(block, Group) and block.delimiter is Delimiter.BRACE):
        raise TokenError(f"Expected a function body. Got: {block!r}")
    return mir.Function(
        name=tags.fn_name,
        async_=tags.asyn,
        public=tags.public,
        args=args,
        ret=ret,
        body=_format_body(block.stream, kwargs),
    )