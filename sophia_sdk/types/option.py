"""
Optional argument values.

Sophia's ``option('a)`` is passed from Python as an explicit sum:

    Some(value)   present, encodes to ``Some(<value>)``
    NOTHING       absent,  encodes to ``None``

Plain Python ``None`` is deliberately *not* accepted as an option value so that
an omitted argument can never be confused with an intentional ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")

__all__ = ["Some", "Nothing", "NOTHING", "OptionValue", "is_option", "option_of"]


@dataclass(frozen=True)
class Some(Generic[T]):
    value: T

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Some({self.value!r})"


class Nothing:
    """The absent option value. Use the `NOTHING` singleton."""

    _instance: Optional["Nothing"] = None

    def __new__(cls) -> "Nothing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return "NOTHING"

    def __bool__(self) -> bool:
        return False


NOTHING = Nothing()

OptionValue = Union[Some[Any], Nothing]


def is_option(value: Any) -> bool:
    return isinstance(value, (Some, Nothing))


def option_of(value: Optional[T]) -> OptionValue:
    """Convenience: lift a Python Optional into the option sum (None -> NOTHING)."""
    return NOTHING if value is None else Some(value)
