"""
Sophia type descriptors
=======================

The contract interface (ACI) describes every argument and return value with a
declarative type tag:

    "int"                                      bare tag
    {"list": ["int"]}                          tag with generic parameters
    {"map": ["address", "string"]}
    {"tuple": ["int", {"option": ["bool"]}]}
    {"record": [{"name": "a", "type": ["int"]}]}

Argument and field types arrive wrapped in a one-element list; the wrapper is
peeled before reading the tag.

`parse_type` turns such a value into a closed tree of frozen dataclasses, one
per discriminator:

    IntType  StringType  BoolType  AddressType
    ListType  TupleType  MapType  RecordType  OptionType

Encoding, decoding and schema building branch over exactly this set, so a tag
that is not understood is rejected here (`MalformedTypeError`) rather than
being silently reinterpreted later. The one tolerated extension is a contract
reference: a bare capitalised identifier such as ``"Remote"`` names another
contract and is carried as `AddressType(contract="Remote")`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping, Optional, Sequence, Tuple

from ..errors import MalformedTypeError

log = logging.getLogger(__name__)

__all__ = [
    "SCALAR_TAGS",
    "CONTAINER_TAGS",
    "SOPHIA_TAGS",
    "SophiaType",
    "IntType",
    "StringType",
    "BoolType",
    "AddressType",
    "ListType",
    "OptionType",
    "MapType",
    "TupleType",
    "Field",
    "RecordType",
    "read_type",
    "parse_type",
    "type_hint",
]

SCALAR_TAGS = ("int", "string", "bool", "address")
CONTAINER_TAGS = ("list", "tuple", "map", "record", "option")
SOPHIA_TAGS = SCALAR_TAGS + CONTAINER_TAGS

_CONTRACT_NAME_RE = re.compile(r"^[A-Z][A-Za-z0-9_']*$")


# -----------------
# Core type system
# -----------------


class SophiaType:
    """Base of the descriptor sum. `tag` is the discriminator."""

    tag: ClassVar[str] = ""

    @property
    def generic(self) -> Any:
        return None

    def __str__(self) -> str:
        return type_hint(self)


@dataclass(frozen=True)
class IntType(SophiaType):
    tag: ClassVar[str] = "int"


@dataclass(frozen=True)
class StringType(SophiaType):
    tag: ClassVar[str] = "string"


@dataclass(frozen=True)
class BoolType(SophiaType):
    tag: ClassVar[str] = "bool"


@dataclass(frozen=True)
class AddressType(SophiaType):
    tag: ClassVar[str] = "address"
    # Set when the descriptor was a contract reference (e.g. "Remote").
    contract: Optional[str] = None


@dataclass(frozen=True)
class ListType(SophiaType):
    tag: ClassVar[str] = "list"
    item: SophiaType

    @property
    def generic(self) -> SophiaType:
        return self.item


@dataclass(frozen=True)
class OptionType(SophiaType):
    tag: ClassVar[str] = "option"
    inner: SophiaType

    @property
    def generic(self) -> SophiaType:
        return self.inner


@dataclass(frozen=True)
class MapType(SophiaType):
    tag: ClassVar[str] = "map"
    key: SophiaType
    value: SophiaType

    @property
    def generic(self) -> Tuple[SophiaType, SophiaType]:
        return (self.key, self.value)


@dataclass(frozen=True)
class TupleType(SophiaType):
    tag: ClassVar[str] = "tuple"
    elements: Tuple[SophiaType, ...]

    @property
    def generic(self) -> Tuple[SophiaType, ...]:
        return self.elements


@dataclass(frozen=True)
class Field:
    """Named record field."""
    name: str
    type: SophiaType


@dataclass(frozen=True)
class RecordType(SophiaType):
    tag: ClassVar[str] = "record"
    fields: Tuple[Field, ...]

    @property
    def generic(self) -> Tuple[Field, ...]:
        return self.fields

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)


# ---------------
# Parsing
# ---------------


def _unwrap(raw: Any) -> Any:
    while isinstance(raw, (list, tuple)) and len(raw) == 1:
        raw = raw[0]
    return raw


def read_type(raw: Any) -> Tuple[str, Any]:
    """
    Normalise a declarative type into (tag, generic).

    A bare tag string has no generic (None); a single-key mapping
    ``{tag: params}`` yields ``params`` as-is.
    """
    raw = _unwrap(raw)
    if isinstance(raw, str):
        return raw, None
    if isinstance(raw, Mapping) and len(raw) == 1:
        ((tag, generic),) = raw.items()
        if isinstance(tag, str):
            return tag, generic
    raise MalformedTypeError("type must be a tag string or a single-key mapping", raw)


def _seq(generic: Any, tag: str) -> Sequence[Any]:
    if isinstance(generic, (list, tuple)):
        return generic
    raise MalformedTypeError(f"{tag} parameters must be a list", generic)


def _parse_field(raw: Any) -> Field:
    if not isinstance(raw, Mapping) or "name" not in raw or "type" not in raw:
        raise MalformedTypeError("record field must be {name, type}", raw)
    name = raw["name"]
    if not isinstance(name, str) or not name:
        raise MalformedTypeError("record field name must be a non-empty string", raw)
    return Field(name=name, type=parse_type(raw["type"]))


def parse_type(raw: Any) -> SophiaType:
    """Build the descriptor tree for a declarative type (idempotent on trees)."""
    if isinstance(raw, SophiaType):
        return raw
    tag, generic = read_type(raw)

    if generic is None:
        if tag == "int":
            return IntType()
        if tag == "string":
            return StringType()
        if tag == "bool":
            return BoolType()
        if tag == "address":
            return AddressType()
        if tag in CONTAINER_TAGS:
            raise MalformedTypeError(f"{tag} requires generic parameters", raw)
        if _CONTRACT_NAME_RE.match(tag):
            log.debug("treating type %r as a contract reference (address)", tag)
            return AddressType(contract=tag)
        raise MalformedTypeError(f"unknown type tag {tag!r}", raw)

    if tag == "list":
        return ListType(parse_type(generic))
    if tag == "option":
        return OptionType(parse_type(generic))
    if tag == "map":
        params = _seq(generic, tag)
        if len(params) != 2:
            raise MalformedTypeError("map takes exactly two parameters (key, value)", raw)
        return MapType(parse_type(params[0]), parse_type(params[1]))
    if tag == "tuple":
        return TupleType(tuple(parse_type(e) for e in _seq(generic, tag)))
    if tag == "record":
        return RecordType(tuple(_parse_field(f) for f in _seq(generic, tag)))
    raise MalformedTypeError(f"unknown parameterised type tag {tag!r}", raw)


# ---------------
# Rendering
# ---------------


def type_hint(typ: SophiaType) -> str:
    """
    Render a descriptor as the compiler's textual type, e.g. ``list(int)``,
    ``map(address,string)``, ``(int,bool)``. Records render as the tuple of
    their field types.
    """
    if isinstance(typ, (IntType, StringType, BoolType, AddressType)):
        return typ.tag
    if isinstance(typ, ListType):
        return f"list({type_hint(typ.item)})"
    if isinstance(typ, OptionType):
        return f"option({type_hint(typ.inner)})"
    if isinstance(typ, MapType):
        return f"map({type_hint(typ.key)},{type_hint(typ.value)})"
    if isinstance(typ, TupleType):
        return "(" + ",".join(type_hint(e) for e in typ.elements) + ")"
    if isinstance(typ, RecordType):
        return "(" + ",".join(type_hint(f.type) for f in typ.fields) + ")"
    raise MalformedTypeError("not a Sophia type descriptor", typ)
