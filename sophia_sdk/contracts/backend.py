"""
Collaborator protocols consumed by `ContractInstance`.

The instance never compiles, signs or talks to a node itself. It awaits two
collaborators:

- `Compiler`: turns source into bytecode, publishes the interface (ACI) and
  decodes raw return values into typed nodes. `sophia_sdk.contracts.compiler.
  CompilerClient` implements it over HTTP.
- `Node`: deploys bytecode and performs (static) calls. Building, signing
  and broadcasting transactions lives behind this protocol.

Any exception a collaborator raises propagates to the caller unchanged.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Protocol, Sequence, runtime_checkable

JsonDict = Dict[str, Any]
Options = Mapping[str, Any]

__all__ = ["Compiler", "Node", "JsonDict"]


@runtime_checkable
class Compiler(Protocol):
    async def compile(self, source: str, options: Options) -> JsonDict:
        """Return {"bytecode": "cb_..."}."""
        ...

    async def get_aci(self, source: str, options: Options) -> JsonDict:
        """Return {"interface": str, "encoded_aci": {"contract": {...}}}."""
        ...

    async def decode_data(self, type_hint: str, data: str) -> JsonDict:
        """Decode a raw return value into a typed node ({"value": ...})."""
        ...


@runtime_checkable
class Node(Protocol):
    async def deploy(
        self, bytecode: str, source: str, init_args: Sequence[Any], options: Options
    ) -> JsonDict:
        """Return {owner, transaction, address, createdAt, result, rawTx}."""
        ...

    async def call(
        self, source: str, address: str, fn: str, args: Sequence[Any], options: Options
    ) -> JsonDict:
        """State-changing call. Return {"result": {"returnValue": ..., ...}, ...}."""
        ...

    async def call_static(
        self, source: str, address: str, fn: str, args: Sequence[Any], options: Options
    ) -> JsonDict:
        """Read-only call (optionally pinned by options["top"]). Same shape as call."""
        ...
