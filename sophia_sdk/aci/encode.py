"""
Native Python values → Sophia call-data literals.

    await transform(ListType(IntType()), [1, 2, 3])          -> '[1,2,3]'
    await transform({"record": [{"name": "a", "type": ["int"]}]}, {"a": 5})
                                                             -> '{a = 5}'
    await transform({"option": ["int"]}, Some(7))            -> 'Some(7)'
    await transform("address", 0)                            -> '#0'

Children of lists, tuples, records and maps are encoded concurrently and the
container literal is assembled once all of them are done.

A string starting with the contract-address marker (``ct_``) is encoded as an
address whatever type the interface declares for it, so callers can pass a
contract address where the interface names a contract type.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .. import address
from ..errors import MalformedTypeError
from ..types.aci import FunctionACI
from ..types.option import Nothing, Some
from ..types.sophia import (
    AddressType,
    BoolType,
    IntType,
    ListType,
    MapType,
    OptionType,
    RecordType,
    SophiaType,
    StringType,
    TupleType,
    parse_type,
)
from ..utils.bytes import to_hex
from .schema import validate_arguments

log = logging.getLogger(__name__)

__all__ = ["CONTRACT_MARKER", "transform", "prepare_args", "map_pairs"]

CONTRACT_MARKER = f"{address.CONTRACT_PREFIX}_"


async def _gather(coros: Iterable[Awaitable[str]]) -> List[str]:
    return list(await asyncio.gather(*coros))


def _quote(value: Any) -> str:
    s = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{s}"'


def _address_literal(value: Any) -> str:
    if address.is_zero_address(value):
        return "#0"
    _, payload = address.decode(value)
    return f"#{to_hex(payload)}"


def map_pairs(value: Any) -> List[Tuple[Any, Any]]:
    """Accept a Mapping or a sequence of (key, value) pairs; keep iteration order."""
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, (list, tuple)):
        out: List[Tuple[Any, Any]] = []
        for pair in value:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ValueError(f"map entry must be a (key, value) pair, got {pair!r}")
            out.append((pair[0], pair[1]))
        return out
    raise TypeError(f"map value must be a mapping or a list of pairs, got {type(value).__name__}")


async def transform(typ: Any, value: Any) -> str:
    """Encode `value` as a Sophia literal of type `typ` (raw or parsed)."""
    typ = parse_type(typ)

    # contract Remote = ...
    # entrypoint f(r : Remote) = ...
    if isinstance(value, str) and value.startswith(CONTRACT_MARKER):
        typ = typ if isinstance(typ, AddressType) else AddressType()

    if isinstance(typ, StringType):
        return _quote(value)
    if isinstance(typ, ListType):
        parts = await _gather(transform(typ.item, el) for el in value)
        return "[" + ",".join(parts) + "]"
    if isinstance(typ, TupleType):
        if len(value) != len(typ.elements):
            raise ValueError(
                f"tuple of {len(typ.elements)} elements expected, got {len(value)}"
            )
        parts = await _gather(transform(t, el) for t, el in zip(typ.elements, value))
        return "(" + ",".join(parts) + ")"
    if isinstance(typ, OptionType):
        if isinstance(value, Some):
            return f"Some({await transform(typ.inner, value.value)})"
        if isinstance(value, Nothing):
            return "None"
        raise TypeError(f"option value must be Some(...) or NOTHING, got {value!r}")
    if isinstance(typ, AddressType):
        return _address_literal(value)
    if isinstance(typ, RecordType):
        parts = await _gather(transform(f.type, value[f.name]) for f in typ.fields)
        return "{" + ",".join(f"{f.name} = {p}" for f, p in zip(typ.fields, parts)) + "}"
    if isinstance(typ, MapType):
        pairs = map_pairs(value)
        keys, vals = await asyncio.gather(
            _gather(transform(typ.key, k) for k, _ in pairs),
            _gather(transform(typ.value, v) for _, v in pairs),
        )
        return "{" + ",".join(f"[{k}] = {v}" for k, v in zip(keys, vals)) + "}"
    if isinstance(typ, BoolType):
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)
    if isinstance(typ, IntType):
        return str(value)
    raise MalformedTypeError("not a Sophia type descriptor", typ)


async def prepare_args(fn: Optional[FunctionACI], params: Sequence[Any]) -> List[Any]:
    """
    Validate `params` against `fn` and encode each one.

    `fn` is None for an implicit constructor; params then pass through as-is.
    """
    if fn is None:
        return list(params)
    validate_arguments(fn, params)
    types: Sequence[SophiaType] = fn.argument_types
    args = await _gather(transform(t, p) for t, p in zip(types, params))
    log.debug("encoded %d argument(s) for %s", len(args), fn.name)
    return args
