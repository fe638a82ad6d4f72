"""
Typed error classes for the Sophia contract SDK.

These are raised by the type parser, argument validation, the contract
lifecycle and the compiler HTTP client so callers can catch specific failure
modes while still being able to catch the base `SophiaSdkError`.

Failures raised by the node collaborator (deploy / call) are *not* wrapped:
they propagate to the caller unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

__all__ = [
    "SophiaSdkError",
    "UnknownFunctionError",
    "NotDeployedError",
    "MissingSourceError",
    "MalformedTypeError",
    "ValidationIssue",
    "ArgumentValidationError",
    "CompilerError",
]

PathItem = Union[int, str]


class SophiaSdkError(Exception):
    """Base class for all SDK errors."""


@dataclass(slots=True)
class UnknownFunctionError(SophiaSdkError):
    """Raised when a call/deploy target is not declared in the contract interface."""

    function: str
    contract: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = f" in contract {self.contract}" if self.contract else " in contract"
        return f"Function {self.function} doesn't exist{where}"


@dataclass(slots=True)
class NotDeployedError(SophiaSdkError):
    """Raised when a contract function is called before the instance is deployed."""

    function: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        fn = f" (calling {self.function})" if self.function else ""
        return f"You need to deploy contract before calling!{fn}"


@dataclass(slots=True)
class MissingSourceError(SophiaSdkError):
    """Raised when compile is requested on an instance without contract source."""

    message: str = "contract source is required to compile"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


@dataclass(slots=True)
class MalformedTypeError(SophiaSdkError):
    """
    Raised when a type descriptor is neither a recognised scalar/container tag
    nor a contract reference, or when a container carries the wrong generic
    parameters.
    """

    message: str
    raw: Any = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"MalformedTypeError: {self.message} (got {self.raw!r})"


@dataclass(frozen=True)
class ValidationIssue:
    """
    One malformed argument.

    Fields:
      - path: location of the offending value, argument index first
      - kind: violation kind (e.g. "not-a-string", "wrong-variant-type")
      - message: human-readable description
      - value: the offending value (JSON text when structured)
    """

    path: Tuple[PathItem, ...]
    kind: str
    message: str
    value: Any = None


@dataclass(slots=True)
class ArgumentValidationError(SophiaSdkError):
    """
    Aggregate validation failure: one entry per violation found across *all*
    arguments of a call. Never raised for the first violation alone.
    """

    issues: List[ValidationIssue] = field(default_factory=list)
    function: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        fn = f" for {self.function}" if self.function else ""
        msgs = "; ".join(i.message for i in self.issues) or "unknown error"
        return f"Validation failed{fn}: {msgs}"

    @property
    def paths(self) -> List[Tuple[PathItem, ...]]:
        return [i.path for i in self.issues]


@dataclass(slots=True)
class CompilerError(SophiaSdkError):
    """Raised when the compiler service rejects a request or cannot be reached."""

    message: str
    endpoint: Optional[str] = None
    status: Optional[int] = None
    reason: Optional[Any] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        parts = [f"Compiler[{self.endpoint or '-'}] {self.message}"]
        if self.status is not None:
            parts.append(f"http={self.status}")
        if self.reason is not None:
            parts.append(f"reason={self.reason!r}")
        return " ".join(parts)
