"""
Argument validation against the contract interface.

Every Sophia type descriptor compiles to a JSON Schema (Draft 2020-12) node;
a function's arguments compile to one array schema with a `prefixItems` entry
per declared argument. Validation runs through `jsonschema` with a validator
class extended for Python-native values:

- tuples count as arrays, any Mapping counts as an object
- ``integer`` excludes floats and bools
- ``option`` is a custom type satisfied by `Some(...)` / `NOTHING`; the
  ``optionOf`` keyword validates a `Some` payload
- ``map`` is a custom type satisfied by a Mapping or a sequence of pairs; the
  ``mapOf`` keyword validates every key and value

`validate_arguments` collects every violation (``iter_errors``) and raises a
single `ArgumentValidationError`; it never stops at the first bad argument.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Mapping, Sequence

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import ValidationError as SchemaViolation

from ..address import PREFIXES
from ..errors import ArgumentValidationError, MalformedTypeError, ValidationIssue
from ..types.aci import FunctionACI
from ..types.option import Some, is_option
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

log = logging.getLogger(__name__)

__all__ = [
    "ADDRESS_PATTERN",
    "SophiaValidator",
    "prepare_schema",
    "arguments_schema",
    "iter_issues",
    "validate_arguments",
]

ADDRESS_PATTERN = "^(" + "|".join(f"{p}_" for p in PREFIXES) + ")"

JsonDict = Dict[str, Any]


# --- Type checker & custom keywords ------------------------------------------


def _is_integer(checker, instance) -> bool:
    return isinstance(instance, int) and not isinstance(instance, bool)


def _is_array(checker, instance) -> bool:
    return isinstance(instance, (list, tuple))


def _is_object(checker, instance) -> bool:
    return isinstance(instance, Mapping)


def _is_option(checker, instance) -> bool:
    return is_option(instance)


def _is_map(checker, instance) -> bool:
    return isinstance(instance, (Mapping, list, tuple))


def _option_of(validator, inner, instance, schema) -> Iterator[SchemaViolation]:
    if isinstance(instance, Some):
        yield from validator.descend(instance.value, inner)


def _map_of(validator, params, instance, schema) -> Iterator[SchemaViolation]:
    key_schema, value_schema = params
    if isinstance(instance, Mapping):
        pairs = [(k, k, v) for k, v in instance.items()]
    elif isinstance(instance, (list, tuple)):
        pairs = []
        for i, pair in enumerate(instance):
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                yield SchemaViolation(f"{pair!r} is not a key/value pair", path=[i])
                continue
            pairs.append((i, pair[0], pair[1]))
    else:
        return
    for where, key, value in pairs:
        yield from validator.descend(key, key_schema, path=where)
        yield from validator.descend(value, value_schema, path=where)


_TYPE_CHECKER = Draft202012Validator.TYPE_CHECKER.redefine_many(
    {
        "integer": _is_integer,
        "array": _is_array,
        "object": _is_object,
        "option": _is_option,
        "map": _is_map,
    }
)

SophiaValidator = validators.extend(
    Draft202012Validator,
    validators={"optionOf": _option_of, "mapOf": _map_of},
    type_checker=_TYPE_CHECKER,
)


# --- Schema building ----------------------------------------------------------


def prepare_schema(typ: Any) -> JsonDict:
    """Compile a type descriptor (raw or parsed) into a schema node."""
    typ = parse_type(typ)
    if isinstance(typ, IntType):
        return {"type": "integer"}
    if isinstance(typ, StringType):
        return {"type": "string"}
    if isinstance(typ, BoolType):
        return {"type": "boolean"}
    if isinstance(typ, AddressType):
        return {
            "anyOf": [
                {"type": "integer", "const": 0},
                {"type": "string", "pattern": ADDRESS_PATTERN},
            ]
        }
    if isinstance(typ, ListType):
        return {"type": "array", "items": prepare_schema(typ.item)}
    if isinstance(typ, TupleType):
        n = len(typ.elements)
        return {
            "type": "array",
            "prefixItems": [prepare_schema(e) for e in typ.elements],
            "items": False,
            "minItems": n,
        }
    if isinstance(typ, RecordType):
        return {
            "type": "object",
            "properties": {f.name: prepare_schema(f.type) for f in typ.fields},
            "required": list(typ.names),
        }
    if isinstance(typ, OptionType):
        return {"type": "option", "optionOf": prepare_schema(typ.inner)}
    if isinstance(typ, MapType):
        return {"type": "map", "mapOf": [prepare_schema(typ.key), prepare_schema(typ.value)]}
    raise MalformedTypeError("not a Sophia type descriptor", typ)


def arguments_schema(fn: FunctionACI) -> JsonDict:
    """One array schema spanning every declared argument of `fn`, in order."""
    items = [prepare_schema(t) for t in fn.argument_types]
    return {
        "type": "array",
        "prefixItems": items,
        "items": False,
        "minItems": len(items),
    }


# --- Error formatting ---------------------------------------------------------

_TYPE_KINDS = {
    "string": ("not-a-string", "not a string"),
    "integer": ("not-a-number", "not a number"),
    "boolean": ("not-a-boolean", "not a boolean"),
    "array": ("not-an-array", "not an array"),
    "object": ("not-an-object", "not an object"),
    "option": ("wrong-variant-type", "not an option value (Some(...) or NOTHING)"),
    "map": ("not-a-map", "not a map"),
}


def _render_value(value: Any) -> Any:
    if is_option(value):
        return repr(value)
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, default=repr)
        except (TypeError, ValueError):
            return repr(value)
    return value


def _to_issue(err: SchemaViolation) -> ValidationIssue:
    path = tuple(err.absolute_path)
    value = _render_value(err.instance)
    if err.validator == "type":
        kind, text = _TYPE_KINDS.get(
            err.validator_value, ("wrong-type", f"not a {err.validator_value}")
        )
    elif err.validator == "anyOf":
        kind, text = "not-an-address", "not an address (0 or " + "/".join(f"{p}_" for p in PREFIXES) + " text)"
    elif err.validator == "required":
        kind, text = "missing-field", err.message
    elif err.validator in ("minItems", "maxItems", "items"):
        kind, text = "wrong-length", err.message
    elif err.validator == "mapOf":
        kind, text = "not-a-pair", "not a key/value pair"
    else:
        kind, text = str(err.validator), err.message
    where = ",".join(str(p) for p in path)
    return ValidationIssue(
        path=path,
        kind=kind,
        message=f'Value "{value}" at path: [{where}] {text}',
        value=value,
    )


# --- Public API ---------------------------------------------------------------


def iter_issues(fn: FunctionACI, params: Sequence[Any]) -> Iterator[ValidationIssue]:
    """Yield every violation of `params` against the declared arguments of `fn`."""
    validator = SophiaValidator(arguments_schema(fn))
    for err in validator.iter_errors(params):
        yield _to_issue(err)


def validate_arguments(fn: FunctionACI, params: Sequence[Any]) -> None:
    """
    Check call parameters against `fn`'s declared argument types.

    Raises ArgumentValidationError carrying one issue per violation.
    """
    issues: List[ValidationIssue] = list(iter_issues(fn, params))
    if issues:
        log.debug("argument validation failed for %s: %d issue(s)", fn.name, len(issues))
        raise ArgumentValidationError(issues=issues, function=fn.name)
