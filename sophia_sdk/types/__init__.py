"""
sophia_sdk.types
================

Datatypes shared by the encoder, decoder and schema builder:

- :mod:`sophia_sdk.types.sophia`: the closed set of Sophia type descriptors
- :mod:`sophia_sdk.types.option`: `Some` / `NOTHING` option values
- :mod:`sophia_sdk.types.aci`: contract interface (ACI) models
"""

from __future__ import annotations

from .aci import INIT, Argument, ContractACI, FunctionACI
from .option import NOTHING, Nothing, OptionValue, Some, is_option, option_of
from .sophia import (
    CONTAINER_TAGS,
    SCALAR_TAGS,
    SOPHIA_TAGS,
    AddressType,
    BoolType,
    Field,
    IntType,
    ListType,
    MapType,
    OptionType,
    RecordType,
    SophiaType,
    StringType,
    TupleType,
    parse_type,
    read_type,
    type_hint,
)

__all__ = [
    # descriptors
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
    # options
    "Some",
    "Nothing",
    "NOTHING",
    "OptionValue",
    "is_option",
    "option_of",
    # aci
    "INIT",
    "Argument",
    "FunctionACI",
    "ContractACI",
]
