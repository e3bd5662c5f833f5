"""Models that describe generated code: functions, classes, files and imports."""

from __future__ import annotations

import dataclasses
import enum
from typing import Any, Iterable, Optional, Union

from . import tokens


@dataclasses.dataclass(frozen=True, order=True)
class Name:
    """A name that is not yet localized to a target language."""

    value: str = ""

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True)
class Ident:
    """A name localized to a target language."""

    value: str

    def __str__(self) -> str:
        return self.value

    def to_tokens(self) -> tuple:
        """The single identifier token for this name."""
        if not self.value.removeprefix("r#").isidentifier():
            raise ValueError(f"{self.value!r} is not a valid identifier")
        return (tokens.Ident(self.value),)


class Visibility(enum.Enum):
    PUBLIC = "public"
    CRATE = "crate"
    PRIVATE = "private"

    def is_public(self) -> bool:
        return self is Visibility.PUBLIC


@dataclasses.dataclass(frozen=True)
class Doc:
    text: str


def doc(s: str) -> Optional[Doc]:
    """A Doc for non-empty text, otherwise None."""
    return Doc(s) if s else None


def build_struct(items: Iterable[Any]) -> str:
    """Join items inside braces, e.g. {A, B, C}."""
    return "{" + ", ".join(str(item) for item in items) + "}"


def build_dict(pairs: Iterable[tuple[str, str]]) -> str:
    """Join quoted keys and values inside braces, e.g. {"a": 1, "b": 2}."""
    return build_struct(f'"{key}": {value}' for key, value in pairs)


@dataclasses.dataclass(frozen=True)
class ArgIdent:
    """An argument name: a single name, or a tuple of names to unpack."""

    value: Union[str, tuple]

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, Ident):
            value = value.value
        elif isinstance(value, list):
            value = tuple(value)
        if not isinstance(value, (str, tuple)):
            raise TypeError(f"invalid argument name: {value!r}")
        object.__setattr__(self, "value", value)

    @property
    def is_unpack(self) -> bool:
        return isinstance(self.value, tuple)

    def force_string(self) -> str:
        if self.is_unpack:
            raise TypeError("cannot force unpacked arg name to string")
        return self.value

    def is_empty(self) -> bool:
        return len(self.value) == 0

    def unwrap_ident(self) -> Ident:
        if self.is_unpack:
            raise TypeError("cannot unwrap unpacked arg name")
        return Ident(self.value)

    def __str__(self) -> str:
        return build_struct(self.value) if self.is_unpack else self.value


class FnArgTreatment(enum.Enum):
    KWARGS = "kwargs"
    VARIADIC = "variadic"


@dataclasses.dataclass
class FnArg:
    """A function parameter; ty is text, or tokens for token-based targets."""

    name: ArgIdent
    ty: Any
    default: Optional[str] = None
    treatment: Optional[FnArgTreatment] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, ArgIdent):
            self.name = ArgIdent(self.name)

    @classmethod
    def empty_variadic(cls) -> "FnArg":
        """A nameless variadic marker separating required from optional arguments."""
        return cls(ArgIdent(""), "", treatment=FnArgTreatment.VARIADIC)


def _as_ident(value: Union[str, Ident]) -> Ident:
    return value if isinstance(value, Ident) else Ident(str(value))


@dataclasses.dataclass
class Function:
    name: Ident = dataclasses.field(default_factory=lambda: Ident(""))
    args: list = dataclasses.field(default_factory=list)
    ret: Any = ""
    body: Any = ""
    doc: Optional[Doc] = None
    async_: bool = False
    public: bool = False
    annotations: list = dataclasses.field(default_factory=list)
    generic: list = dataclasses.field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = _as_ident(self.name)


@dataclasses.dataclass
class Field:
    name: Name = dataclasses.field(default_factory=Name)
    ty: Any = ""
    default: Any = None
    visibility: Visibility = Visibility.PRIVATE
    doc: Optional[Doc] = None
    optional: bool = False
    decorators: list = dataclasses.field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.name, Name):
            self.name = Name(str(self.name))


@dataclasses.dataclass
class Interface:
    name: str
    doc: Optional[Doc] = None
    fields: list = dataclasses.field(default_factory=list)
    public: bool = False
    instance_methods: list = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class NewType:
    name: str
    ty: Any
    doc: Optional[str] = None
    public: bool = False


@dataclasses.dataclass
class Class:
    name: Ident = dataclasses.field(default_factory=lambda: Ident(""))
    doc: Optional[Doc] = None
    code: Optional[str] = None
    instance_fields: list = dataclasses.field(default_factory=list)
    static_fields: list = dataclasses.field(default_factory=list)
    instance_methods: list = dataclasses.field(default_factory=list)
    constructors: list = dataclasses.field(default_factory=list)
    class_methods: list = dataclasses.field(default_factory=list)
    static_methods: list = dataclasses.field(default_factory=list)
    public: bool = False
    mut_self_instance_methods: list = dataclasses.field(default_factory=list)
    lifetimes: list = dataclasses.field(default_factory=list)
    decorators: list = dataclasses.field(default_factory=list)
    superclasses: list = dataclasses.field(default_factory=list)

    def __post_init__(self) -> None:
        self.name = _as_ident(self.name)


@dataclasses.dataclass(frozen=True)
class ImportItem:
    """One imported name, optionally renamed."""

    name: str
    alias: Optional[str] = None

    @classmethod
    def aliased(cls, name: str, alias: str) -> "ImportItem":
        return cls(name, alias)


def _as_import_item(item: Any) -> ImportItem:
    if isinstance(item, ImportItem):
        return item
    if isinstance(item, (str, Ident)):
        return ImportItem(str(item))
    raise TypeError(f"cannot import {item!r}")


@dataclasses.dataclass
class Import:
    """An import of a module path, of names from it, or of it under an alias."""

    path: str
    imports: list = dataclasses.field(default_factory=list)
    alias: Optional[str] = None
    vis: Visibility = Visibility.PRIVATE

    def __post_init__(self) -> None:
        self.imports = [_as_import_item(item) for item in self.imports]

    @classmethod
    def package(cls, path: str) -> "Import":
        return cls(path)

    @classmethod
    def aliased(cls, path: str, alias: str) -> "Import":
        return cls(path, alias=alias)

    def make_public(self) -> "Import":
        """A copy of this import that is re-exported."""
        return dataclasses.replace(self, vis=Visibility.PUBLIC)


@dataclasses.dataclass
class File:
    doc: Optional[Doc] = None
    declaration: Any = None
    classes: list = dataclasses.field(default_factory=list)
    functions: list = dataclasses.field(default_factory=list)
    code: Any = None
    imports: list = dataclasses.field(default_factory=list)
    package: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Literal:
    """Literal code text; interpolated marks template strings such as f-strings."""

    text: str
    interpolated: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.text, Ident):
            object.__setattr__(self, "text", self.text.value)

    @classmethod
    def f(cls, s: str) -> "Literal":
        """A Python f-string."""
        return cls(f'f"{s}"', True)

    @classmethod
    def grave(cls, s: str) -> "Literal":
        """A backtick-quoted template string."""
        return cls(f"`{s}`", True)


def import_(path: str, *args: Union[str, Ident, ImportItem], public: bool = False) -> Import:
    """Import a whole path, or the given names from it."""
    result = Import(path, list(args)) if args else Import.package(path)
    return result.make_public() if public else result


def arg(name: str, ty: Any, default: Any = None) -> FnArg:
    """A textual function argument with an optional default."""
    return FnArg(
        ArgIdent(name),
        str(ty),
        default=None if default is None else str(default),
    )


def field(name: str, ty: Any, visibility: Visibility = Visibility.PRIVATE) -> Field:
    """A field with the given name, type and visibility."""
    return Field(name=Name(name), ty=ty, visibility=visibility)


def lit(template: str, *args: Any, **kwargs: Any) -> Literal:
    """A plain literal built from a format template."""
    return Literal(template.format(*args, **kwargs), False)