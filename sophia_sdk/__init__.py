"""
Sophia contract SDK (Python)
Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import CompilerConfig, ContractOptions  # noqa: F401
from .errors import (  # noqa: F401
    ArgumentValidationError,
    CompilerError,
    MalformedTypeError,
    MissingSourceError,
    NotDeployedError,
    SophiaSdkError,
    UnknownFunctionError,
    ValidationIssue,
)

# Types
from .types import NOTHING, ContractACI, FunctionACI, Some, parse_type, type_hint  # noqa: F401

# Marshalling
from .aci import prepare_args, transform, transform_decoded, validate_arguments  # noqa: F401

# Contracts
from .contracts import (  # noqa: F401
    CallResult,
    CompilerClient,
    ContractInstance,
    LifecycleState,
    get_contract_instance,
)

__all__ = [
    "__version__",
    # Core
    "CompilerConfig", "ContractOptions",
    "SophiaSdkError", "UnknownFunctionError", "NotDeployedError", "MissingSourceError",
    "MalformedTypeError", "ArgumentValidationError", "ValidationIssue", "CompilerError",
    # Types
    "Some", "NOTHING", "ContractACI", "FunctionACI", "parse_type", "type_hint",
    # Marshalling
    "transform", "prepare_args", "transform_decoded", "validate_arguments",
    # Contracts
    "CompilerClient", "ContractInstance", "CallResult", "LifecycleState",
    "get_contract_instance",
]
