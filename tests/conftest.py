from __future__ import annotations

import copy
import re
from typing import Any, Dict, List, Tuple

import pytest

from sophia_sdk import address
from sophia_sdk.types.sophia import (
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
)

RECORD_AB = {"record": [{"name": "a", "type": ["int"]}, {"name": "b", "type": ["string"]}]}


def _fn(name: str, args: List[Any], returns: Any = "int", stateful: bool = False) -> Dict[str, Any]:
    return {
        "name": name,
        "arguments": [{"name": f"a{i}", "type": t} for i, t in enumerate(args)],
        "returns": returns,
        "stateful": stateful,
    }


IDENTITY_ACI: Dict[str, Any] = {
    "encoded_aci": {
        "contract": {
            "name": "Identity",
            "functions": [
                _fn("init", ["int"], {"tuple": []}),
                _fn("set_state", ["int"], {"tuple": []}, stateful=True),
                _fn("get_state", [], "int"),
                _fn("int_fn", ["int"], "int"),
                _fn("string_fn", ["string"], "string"),
                _fn("bool_fn", ["bool"], "bool"),
                _fn("address_fn", ["address"], "address"),
                _fn("list_fn", [{"list": ["int"]}], {"list": ["int"]}),
                _fn("nested_fn", [{"list": [{"list": ["address"]}]}], {"list": [{"list": ["address"]}]}),
                _fn("tuple_fn", [{"tuple": ["int", "string"]}], {"tuple": ["int", "string"]}),
                _fn("option_fn", [{"option": ["int"]}], {"option": ["int"]}),
                _fn("map_fn", [{"map": ["address", "int"]}], {"map": ["address", "int"]}),
                _fn("record_fn", [RECORD_AB], RECORD_AB),
                _fn("remote_fn", ["Remote"], "int"),
                _fn("four", ["int", "string", {"list": ["int"]}, "bool"], "int"),
            ],
            "state": "int",
            "type_defs": [],
        }
    },
    "interface": "contract Identity =\n  entrypoint init(x : int) = x\n",
}


# --- Offline stand-in for the compiler's data decoder ------------------------

_INT = re.compile(r"-?\d+")
_HEX = re.compile(r"[0-9a-fA-F]+")
_IDENT = re.compile(r"[a-z]+")


class _Reader:
    def __init__(self, text: str) -> None:
        self.s = text
        self.i = 0

    def startswith(self, tok: str) -> bool:
        return self.s.startswith(tok, self.i)

    def expect(self, tok: str) -> None:
        if not self.startswith(tok):
            raise ValueError(f"expected {tok!r} at {self.i} in {self.s!r}")
        self.i += len(tok)

    def match(self, rx: "re.Pattern[str]") -> str:
        m = rx.match(self.s, self.i)
        if m is None:
            raise ValueError(f"unexpected input at {self.i} in {self.s!r}")
        self.i = m.end()
        return m.group()

    def items(self, close: str, read_one) -> List[Any]:
        out: List[Any] = []
        if self.startswith(close):
            self.expect(close)
            return out
        while True:
            out.append(read_one(len(out)))
            if self.startswith(","):
                self.expect(",")
                continue
            self.expect(close)
            return out


def parse_hint(text: str) -> SophiaType:
    """Parse the textual type the instance sends to the decoder."""
    r = _Reader(text.replace(" ", ""))

    def read() -> SophiaType:
        if r.startswith("("):
            r.expect("(")
            return TupleType(tuple(r.items(")", lambda _i: read())))
        name = r.match(_IDENT)
        if name in ("list", "option", "map"):
            r.expect("(")
            params = r.items(")", lambda _i: read())
            if name == "list":
                return ListType(params[0])
            if name == "option":
                return OptionType(params[0])
            return MapType(params[0], params[1])
        return parse_type(name)

    return read()


def read_literal(typ: Any, text: str) -> Dict[str, Any]:
    """Read a Sophia literal of type `typ` into a decoded node tree."""
    r = _Reader(text)

    def read(t: SophiaType) -> Dict[str, Any]:
        if isinstance(t, IntType):
            return {"value": int(r.match(_INT))}
        if isinstance(t, BoolType):
            if r.startswith("true"):
                r.expect("true")
                return {"value": True}
            r.expect("false")
            return {"value": False}
        if isinstance(t, StringType):
            r.expect('"')
            chars: List[str] = []
            while not r.startswith('"'):
                if r.startswith("\\"):
                    r.i += 1
                chars.append(r.s[r.i])
                r.i += 1
            r.expect('"')
            return {"value": "".join(chars)}
        if isinstance(t, AddressType):
            r.expect("#")
            return {"value": int(r.match(_HEX), 16)}
        if isinstance(t, ListType):
            r.expect("[")
            return {"value": r.items("]", lambda _i: read(t.item))}
        if isinstance(t, TupleType):
            r.expect("(")
            return {"value": r.items(")", lambda i: read(t.elements[i]))}
        if isinstance(t, RecordType):
            r.expect("{")
            fields = []
            for idx, f in enumerate(t.fields):
                if idx:
                    r.expect(",")
                r.expect(f"{f.name} = ")
                fields.append({"name": f.name, **read(f.type)})
            r.expect("}")
            return {"value": fields}
        if isinstance(t, OptionType):
            if r.startswith("None"):
                r.expect("None")
                return {"value": [0, {"value": None}]}
            r.expect("Some(")
            node = read(t.inner)
            r.expect(")")
            return {"value": [1, node]}
        if isinstance(t, MapType):
            r.expect("{")

            def entry(_i: int) -> Dict[str, Any]:
                r.expect("[")
                k = read(t.key)
                r.expect("] = ")
                return {"key": k, "val": read(t.value)}

            return {"value": r.items("}", entry)}
        raise TypeError(f"unsupported type {t!r}")

    node = read(parse_type(typ))
    if r.i != len(r.s):
        raise ValueError(f"trailing input in {text!r}")
    return node


# --- Fake collaborators -------------------------------------------------------


class FakeCompiler:
    def __init__(self, aci: Dict[str, Any]) -> None:
        self.aci = aci
        self.calls: List[Tuple[str, Any]] = []

    async def compile(self, source, options):
        self.calls.append(("compile", source))
        return {"bytecode": f"cb_{len(self.calls)}"}

    async def get_aci(self, source, options):
        self.calls.append(("get_aci", source))
        return copy.deepcopy(self.aci)

    async def decode_data(self, type_hint, data):
        self.calls.append(("decode_data", type_hint))
        typ = parse_hint(type_hint)
        # Records travel as tuples; the reader needs the named form back.
        if isinstance(typ, TupleType) and data.startswith("{"):
            return read_literal(_record_like(typ, data), data)
        return read_literal(typ, data)


def _record_like(typ: TupleType, data: str) -> RecordType:
    names = re.findall(r"(?:^\{|,)(\w+) = ", data)
    return RecordType(tuple(Field(n, t) for n, t in zip(names, typ.elements)))


class FakeNode:
    """
    Records every collaborator call. A call returns `returns[fn]` when set,
    otherwise echoes its first (encoded) argument.
    """

    def __init__(self, contract_address: str) -> None:
        self.contract_address = contract_address
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.returns: Dict[str, str] = {}

    async def deploy(self, bytecode, source, init_args, options):
        self.calls.append(
            ("deploy", {"bytecode": bytecode, "source": source, "args": list(init_args), "options": dict(options)})
        )
        return {
            "owner": "ak_owner",
            "transaction": "th_deploy",
            "address": self.contract_address,
            "createdAt": 1700000000,
            "result": {"gasUsed": 100},
            "rawTx": "tx_raw",
        }

    def _result(self, fn, args):
        value = self.returns.get(fn, args[0] if args else "()")
        return {"result": {"returnValue": value, "gasUsed": 1}, "hash": "th_call"}

    async def call(self, source, address_, fn, args, options):
        self.calls.append(("call", {"fn": fn, "source": source, "address": address_, "args": list(args), "options": dict(options)}))
        return self._result(fn, args)

    async def call_static(self, source, address_, fn, args, options):
        self.calls.append(
            ("call_static", {"fn": fn, "source": source, "address": address_, "args": list(args), "options": dict(options)})
        )
        return self._result(fn, args)


# --- Fixtures ------------------------------------------------------------------


@pytest.fixture()
def aci_doc() -> Dict[str, Any]:
    return copy.deepcopy(IDENTITY_ACI)


@pytest.fixture()
def account() -> str:
    return address.encode(bytes(range(1, 33)), prefix="ak")


@pytest.fixture()
def contract_address() -> str:
    return address.encode(bytes(range(101, 133)), prefix="ct")


@pytest.fixture()
def compiler(aci_doc) -> FakeCompiler:
    return FakeCompiler(aci_doc)


@pytest.fixture()
def node(contract_address) -> FakeNode:
    return FakeNode(contract_address)
