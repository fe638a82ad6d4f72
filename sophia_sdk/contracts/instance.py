"""
sophia_sdk.contracts.instance
=============================

An interface-driven contract object that walks through

    Uninitialized --compile()--> Compiled --deploy()--> Deployed

and exposes every function declared in the contract interface (ACI) as a
coroutine in `instance.methods`.

The instance:
- validates call arguments against the ACI and encodes them to Sophia literals
  (`sophia_sdk.aci`), unless `skip_args_convert` is set
- delegates compilation to a `Compiler` and deployment/calls to a `Node`
  (`sophia_sdk.contracts.backend`)
- returns call results with a lazy `decode()` that asks the compiler to decode
  the raw return value and maps it to native Python values

Example
-------
    from sophia_sdk.contracts import get_contract_instance

    c = await get_contract_instance(compiler, node, source)
    await c.deploy([321])
    res = await c.call("set_state", [123])
    value = await (await c.call("get_state", [], {"call_static": True})).decode()

    # or through the method table
    await c.methods["set_state"](123)

State changes are not synchronised: overlapping compile/deploy/call on the same
instance must be serialised by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Union

from ..aci.decode import transform_decoded
from ..aci.encode import prepare_args
from ..config import ContractOptions
from ..errors import MissingSourceError, NotDeployedError, UnknownFunctionError
from ..types.aci import INIT, ContractACI, FunctionACI
from ..types.sophia import type_hint as render_type_hint
from .backend import Compiler, JsonDict, Node

log = logging.getLogger(__name__)

OptionsLike = Union[ContractOptions, Mapping[str, Any], None]
Method = Callable[..., Awaitable[Any]]

__all__ = [
    "LifecycleState",
    "DeploymentRecord",
    "CallResult",
    "ContractInstance",
    "get_contract_instance",
]


class LifecycleState(str, Enum):
    UNINITIALIZED = "uninitialized"
    COMPILED = "compiled"
    DEPLOYED = "deployed"


@dataclass(frozen=True)
class DeploymentRecord:
    address: Optional[str] = None
    owner: Optional[str] = None
    transaction: Optional[str] = None
    created_at: Any = None
    result: Any = None
    raw_tx: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "DeploymentRecord":
        return cls(
            address=raw.get("address"),
            owner=raw.get("owner"),
            transaction=raw.get("transaction"),
            created_at=raw.get("createdAt", raw.get("created_at")),
            result=raw.get("result"),
            raw_tx=raw.get("rawTx", raw.get("raw_tx")),
        )


@dataclass
class CallResult:
    """
    Raw result of a contract call plus a lazy decoder.

    Nothing is decoded until `decode()` is awaited.
    """

    function: str
    raw: JsonDict
    _decoder: Callable[[Optional[str], Dict[str, Any]], Awaitable[Any]] = field(repr=False)

    def __getitem__(self, key: str) -> Any:
        return self.raw[key]

    @property
    def result(self) -> Any:
        return self.raw.get("result")

    @property
    def return_value(self) -> Any:
        result = self.result
        return result.get("returnValue") if isinstance(result, Mapping) else None

    async def decode(self, type_hint: Optional[str] = None, **decode_options: Any) -> Any:
        """
        Decode the return value.

        type_hint : textual return type for the compiler's decoder; inferred
            from the ACI when omitted.
        decode_options : `skip_transform_decoded`, `address_prefix`; layered
            over the options the call ran with.
        """
        return await self._decoder(type_hint, decode_options)


class ContractInstance:
    """
    Interface-bound contract with compile/deploy/call lifecycle.

    Parameters
    ----------
    compiler : Compiler collaborator (compile, get_aci, decode_data)
    node : Node collaborator (deploy, call, call_static)
    aci : ContractACI or the ACI document as returned by the compiler
    source : contract source; required to compile
    contract_address : attach to an already deployed contract
    options : default options for this instance (layered over the defaults)
    """

    def __init__(
        self,
        *,
        compiler: Compiler,
        node: Node,
        aci: Union[ContractACI, Mapping[str, Any]],
        source: Optional[str] = None,
        interface: Optional[str] = None,
        contract_address: Optional[str] = None,
        options: OptionsLike = None,
    ) -> None:
        self._compiler = compiler
        self._node = node
        self.aci: ContractACI = aci if isinstance(aci, ContractACI) else ContractACI.from_dict(aci)
        self.source = source
        self.interface = interface or self.aci.interface
        self.compiled: Optional[str] = None
        self.deploy_info = DeploymentRecord(address=contract_address)
        self.options: ContractOptions = ContractOptions.coerce(options)
        self.methods: Mapping[str, Method] = self._build_methods()

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"<ContractInstance {self.aci.name or '?'} state={self.state.value} address={self.address}>"

    # ------------------------------------------------------------------ Accessors

    @property
    def state(self) -> LifecycleState:
        if self.deploy_info.address:
            return LifecycleState.DEPLOYED
        if self.compiled:
            return LifecycleState.COMPILED
        return LifecycleState.UNINITIALIZED

    @property
    def address(self) -> Optional[str]:
        return self.deploy_info.address

    def set_options(self, overrides: OptionsLike = None, **kw: Any) -> ContractOptions:
        """Merge `overrides` into this instance's default options (persists)."""
        self.options = self.options.merged(overrides, **kw)
        return self.options

    # ------------------------------------------------------------------ Method table

    def _bind(self, name: str) -> Method:
        if name == INIT:
            async def method(*args: Any, options: OptionsLike = None) -> Any:
                return await self.deploy(list(args), options)
        else:
            async def method(*args: Any, options: OptionsLike = None) -> Any:
                return await self.call(name, list(args), options)
        method.__name__ = name
        method.__qualname__ = f"{type(self).__name__}.methods.{name}"
        return method

    def _build_methods(self) -> Mapping[str, Method]:
        return MappingProxyType({fn.name: self._bind(fn.name) for fn in self.aci.functions})

    # ------------------------------------------------------------------ Lifecycle

    async def compile(self) -> "ContractInstance":
        """Compile the source (every invocation recompiles)."""
        if not self.source:
            raise MissingSourceError()
        out = await self._compiler.compile(self.source, self.options.to_dict())
        self.compiled = out["bytecode"]
        log.debug("compiled %s (%d bytes of bytecode text)", self.aci.name, len(self.compiled or ""))
        return self

    async def deploy(self, init_args: Sequence[Any] = (), options: OptionsLike = None) -> "ContractInstance":
        """
        Deploy the contract, compiling first if needed. `init_args` are
        validated and encoded against `init` unless `skip_args_convert` is set.
        """
        opt = self.options.merged(options)
        fn_aci = self.aci.get_function(INIT)
        if not self.compiled:
            await self.compile()
        args = list(init_args)
        if not opt.skip_args_convert:
            args = await prepare_args(fn_aci, args)

        raw = await self._node.deploy(self.compiled, opt.source or self.source, args, opt.to_dict())
        self.deploy_info = DeploymentRecord.from_dict(raw)
        log.debug("deployed %s at %s", self.aci.name, self.deploy_info.address)
        return self

    async def call(self, fn: str, params: Sequence[Any] = (), options: OptionsLike = None) -> CallResult:
        """
        Call a contract function.

        Options of note: `call_static` (read-only, pinned by `top`),
        `skip_args_convert`, `skip_transform_decoded`.
        """
        if not fn:
            raise ValueError("Function name is required")
        opt = self.options.merged(options)
        if self.state is not LifecycleState.DEPLOYED:
            raise NotDeployedError(function=fn)
        fn_aci = self.aci.get_function(fn)

        args = list(params)
        if not opt.skip_args_convert:
            args = await prepare_args(fn_aci, args)

        source = opt.source or self.source
        if opt.call_static:
            log.debug("static call %s.%s (top=%s)", self.aci.name, fn, opt.top)
            raw = await self._node.call_static(source, self.address, fn, args, opt.to_dict())
        else:
            log.debug("call %s.%s", self.aci.name, fn)
            raw = await self._node.call(source, self.address, fn, args, opt.to_dict())

        async def decoder(type_hint: Optional[str], decode_options: Dict[str, Any]) -> Any:
            return await self._decode_return(fn, fn_aci, raw, opt.merged(decode_options), type_hint)

        return CallResult(function=fn, raw=raw, _decoder=decoder)

    async def _decode_return(
        self,
        fn: str,
        fn_aci: Optional[FunctionACI],
        raw: JsonDict,
        opt: ContractOptions,
        type_hint: Optional[str],
    ) -> Any:
        if fn_aci is None:
            raise UnknownFunctionError(function=fn, contract=self.aci.name or None)
        return_type = fn_aci.return_type
        result = raw.get("result") or {}
        node = await self._compiler.decode_data(
            type_hint or render_type_hint(return_type), result.get("returnValue")
        )
        return transform_decoded(
            return_type,
            node,
            skip_transform_decoded=opt.skip_transform_decoded,
            address_prefix=opt.address_prefix,
        )


async def get_contract_instance(
    compiler: Compiler,
    node: Node,
    source: Optional[str] = None,
    *,
    aci: Union[ContractACI, Mapping[str, Any], None] = None,
    contract_address: Optional[str] = None,
    options: OptionsLike = None,
) -> ContractInstance:
    """
    Build a ContractInstance, fetching the ACI from the compiler when it is not
    supplied.
    """
    opts = ContractOptions.coerce(options)
    if aci is None:
        if not source:
            raise MissingSourceError("contract source or ACI is required")
        aci = await compiler.get_aci(source, opts.to_dict())
    return ContractInstance(
        compiler=compiler,
        node=node,
        aci=aci,
        source=source,
        contract_address=contract_address,
        options=opts,
    )
