"""
sophia_sdk.aci
==============

Interface-driven value marshalling:

- schema : JSON Schema per type descriptor; aggregate argument validation
- encode : native values -> Sophia call-data literals (async)
- decode : decoded return nodes -> native values

Typical usage
-------------
    from sophia_sdk.aci import prepare_args, transform_decoded

    args = await prepare_args(aci.get_function("set"), [42])
    value = transform_decoded(aci.get_function("get").return_type, node)
"""

from __future__ import annotations

from .decode import transform_decoded
from .encode import CONTRACT_MARKER, map_pairs, prepare_args, transform
from .schema import (
    ADDRESS_PATTERN,
    SophiaValidator,
    arguments_schema,
    iter_issues,
    prepare_schema,
    validate_arguments,
)

__all__ = [
    # encode
    "CONTRACT_MARKER",
    "transform",
    "prepare_args",
    "map_pairs",
    # decode
    "transform_decoded",
    # schema
    "ADDRESS_PATTERN",
    "SophiaValidator",
    "prepare_schema",
    "arguments_schema",
    "iter_issues",
    "validate_arguments",
]
