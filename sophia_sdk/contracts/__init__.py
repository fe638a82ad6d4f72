"""
sophia_sdk.contracts
====================

Contract lifecycle on top of the ACI marshalling layer:

- backend  : `Compiler` / `Node` collaborator protocols
- compiler : `CompilerClient`, the compiler service over HTTP
- instance : `ContractInstance` (compile -> deploy -> call) and its factory
"""

from __future__ import annotations

from .backend import Compiler, Node
from .compiler import CompilerClient
from .instance import (
    CallResult,
    ContractInstance,
    DeploymentRecord,
    LifecycleState,
    get_contract_instance,
)

__all__ = [
    "Compiler",
    "Node",
    "CompilerClient",
    "CallResult",
    "ContractInstance",
    "DeploymentRecord",
    "LifecycleState",
    "get_contract_instance",
]
