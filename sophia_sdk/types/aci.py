"""
Contract interface (ACI) models.

The compiler publishes a contract's callable surface as JSON:

    {
      "encoded_aci": {
        "contract": {
          "name": "Counter",
          "functions": [
            {"name": "init", "arguments": [{"name": "start", "type": "int"}],
             "returns": {"tuple": []}, "stateful": false},
            {"name": "get", "arguments": [], "returns": "int", "stateful": false}
          ],
          "state": "int",
          "type_defs": []
        }
      },
      "interface": "contract Counter = ..."
    }

`ContractACI.from_dict` accepts that whole document, the ``encoded_aci``
object, or the bare ``contract`` object. Argument and return types are kept
raw and parsed on access so that one unsupported type does not make the rest
of the interface unusable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from ..errors import MalformedTypeError, UnknownFunctionError
from .sophia import SophiaType, parse_type

__all__ = ["INIT", "Argument", "FunctionACI", "ContractACI"]

INIT = "init"


@dataclass(frozen=True)
class Argument:
    name: str
    type: Any  # raw declarative type

    @property
    def sophia_type(self) -> SophiaType:
        return parse_type(self.type)


@dataclass(frozen=True)
class FunctionACI:
    name: str
    arguments: Tuple[Argument, ...] = ()
    returns: Any = None
    stateful: bool = False
    payable: bool = False

    @property
    def argument_types(self) -> Tuple[SophiaType, ...]:
        return tuple(a.sophia_type for a in self.arguments)

    @property
    def return_type(self) -> SophiaType:
        return parse_type(self.returns)

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> "FunctionACI":
        if not isinstance(raw, Mapping):
            raise MalformedTypeError("function entry must be an object", raw)
        name = raw.get("name")
        if not isinstance(name, str) or not name:
            raise MalformedTypeError("function.name must be a non-empty string", raw)
        args_raw = raw.get("arguments") or []
        if not isinstance(args_raw, (list, tuple)):
            raise MalformedTypeError(f"function {name}: arguments must be a list", args_raw)
        args: List[Argument] = []
        for i, a in enumerate(args_raw):
            if not isinstance(a, Mapping) or "type" not in a:
                raise MalformedTypeError(f"function {name}: argument {i} must carry a type", a)
            args.append(Argument(name=str(a.get("name") or f"arg{i}"), type=a["type"]))
        return FunctionACI(
            name=name,
            arguments=tuple(args),
            returns=raw.get("returns"),
            stateful=bool(raw.get("stateful", False)),
            payable=bool(raw.get("payable", False)),
        )


@dataclass(frozen=True)
class ContractACI:
    name: str
    functions: Tuple[FunctionACI, ...] = ()
    state: Any = None
    type_defs: Tuple[Any, ...] = ()
    interface: Optional[str] = field(default=None, compare=False)

    @staticmethod
    def from_dict(raw: Mapping[str, Any]) -> "ContractACI":
        if not isinstance(raw, Mapping):
            raise MalformedTypeError("ACI must be an object", raw)
        interface = raw.get("interface")
        doc: Any = raw
        if "encoded_aci" in doc:
            doc = doc["encoded_aci"]
        if isinstance(doc, Mapping) and "contract" in doc:
            doc = doc["contract"]
        if not isinstance(doc, Mapping):
            raise MalformedTypeError("ACI contract entry must be an object", doc)
        fns = doc.get("functions") or []
        if not isinstance(fns, (list, tuple)):
            raise MalformedTypeError("ACI functions must be a list", fns)
        return ContractACI(
            name=str(doc.get("name") or ""),
            functions=tuple(FunctionACI.from_dict(f) for f in fns),
            state=doc.get("state"),
            type_defs=tuple(doc.get("type_defs") or ()),
            interface=interface if isinstance(interface, str) else None,
        )

    @property
    def function_names(self) -> List[str]:
        return [f.name for f in self.functions]

    def find(self, name: str) -> Optional[FunctionACI]:
        for f in self.functions:
            if f.name == name:
                return f
        return None

    def get_function(self, name: str) -> Optional[FunctionACI]:
        """
        Look a function up by name. A missing `init` is tolerated (the
        constructor may be implicit) and yields None; any other missing name
        raises UnknownFunctionError.
        """
        fn = self.find(name)
        if fn is None and name != INIT:
            raise UnknownFunctionError(function=name, contract=self.name or None)
        return fn
