"""
sophia_sdk.cli
==============

Command-line interface for the Sophia contract SDK.

Exposed via the `sophia-sdk` console script. Typer (and the CLI module) are
only imported when the CLI is accessed or executed, so plain library imports
stay light.

Quick usage
-----------
- From Python:
    >>> from sophia_sdk.cli import main
    >>> main(["version"])

- From shell:
    $ sophia-sdk --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List, Optional

from ..version import __version__

__all__: List[str] = [
    "__version__",
    "main",
    "app",  # Typer app (lazy)
]

_SUBMODULE = "sophia_sdk.cli.main"
_EXPOSE = ("app",)


def _load() -> Any:
    return import_module(_SUBMODULE)


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in _EXPOSE:
        return getattr(_load(), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def main(argv: Optional[list[str]] = None) -> int:
    """
    Execute the CLI and return the process exit code.

    argv defaults to sys.argv when None.
    """
    return int(_load().main(argv))
