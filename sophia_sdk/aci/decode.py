"""
Decoded return values → native Python values.

The compiler's data decoder returns a tree of nodes, each carrying its payload
under ``"value"``:

    int / string      {"value": 42}
    bool              {"value": 1}
    address           {"value": <payload as big integer>}   (0 = null address)
    list / tuple      {"value": [{"value": ...}, ...]}
    map               {"value": [{"key": {"value": ...}, "val": {"value": ...}}, ...]}
    option            {"value": [variant, {"value": ...}]}  (variant 1 = Some)
    record            {"value": [{"name": "a", "value": ...}, ...]}

`transform_decoded` walks that tree against the return type:

    bool   -> bool               address -> "ak_..." text, or 0
    list   -> list               tuple   -> tuple
    map    -> [(key, value), ...] in node order
    option -> payload or None    record  -> dict in declared field order
"""

from __future__ import annotations

from typing import Any, Mapping

from .. import address
from ..errors import MalformedTypeError
from ..types.sophia import (
    AddressType,
    BoolType,
    IntType,
    ListType,
    MapType,
    OptionType,
    RecordType,
    StringType,
    TupleType,
    parse_type,
)

__all__ = ["transform_decoded"]

_SOME = 1


def _value(node: Any) -> Any:
    if isinstance(node, Mapping) and "value" in node:
        return node["value"]
    raise ValueError(f"decoded node must carry a 'value', got {node!r}")


def _address(value: Any, prefix: str) -> Any:
    if isinstance(value, bool):
        raise ValueError(f"invalid address word: {value!r}")
    if isinstance(value, int):
        return 0 if value == 0 else address.from_int(value, prefix=prefix)
    if isinstance(value, (bytes, bytearray)):
        return address.encode(bytes(value), prefix=prefix)
    if isinstance(value, str) and address.validate(value):
        return value
    raise ValueError(f"invalid address word: {value!r}")


def _decode(typ: Any, node: Any, prefix: str) -> Any:
    v = _value(node)
    if isinstance(typ, BoolType):
        return bool(v)
    if isinstance(typ, AddressType):
        return _address(v, prefix)
    if isinstance(typ, MapType):
        return [
            (_decode(typ.key, entry["key"], prefix), _decode(typ.value, entry["val"], prefix))
            for entry in v
        ]
    if isinstance(typ, OptionType):
        if v[0] != _SOME:
            return None
        return _decode(typ.inner, v[1], prefix)
    if isinstance(typ, ListType):
        return [_decode(typ.item, el, prefix) for el in v]
    if isinstance(typ, TupleType):
        if len(v) != len(typ.elements):
            raise ValueError(f"tuple of {len(typ.elements)} elements expected, got {len(v)}")
        return tuple(_decode(t, el, prefix) for t, el in zip(typ.elements, v))
    if isinstance(typ, RecordType):
        if len(v) != len(typ.fields):
            raise ValueError(f"record with {len(typ.fields)} fields expected, got {len(v)}")
        return {f.name: _decode(f.type, el, prefix) for f, el in zip(typ.fields, v)}
    if isinstance(typ, (IntType, StringType)):
        return v
    raise MalformedTypeError("not a Sophia type descriptor", typ)


def transform_decoded(
    typ: Any,
    node: Any,
    *,
    skip_transform_decoded: bool = False,
    address_prefix: str = address.DEFAULT_PREFIX,
) -> Any:
    """
    Convert a decoded node into its native value.

    With `skip_transform_decoded` the node is returned untouched.
    `address_prefix` applies to every address in the tree.
    """
    if skip_transform_decoded:
        return node
    return _decode(parse_type(typ), node, address_prefix)
