"""
Version helpers for the Sophia contract SDK.
We keep a static __version__ (PEP 440) and a helper that builds the
User-Agent string sent to the compiler service.
"""

from __future__ import annotations

# Bump this when publishing
__version__ = "0.1.0"


def user_agent() -> str:
    """e.g. 'sophia-sdk-py/0.1.0'"""
    return f"sophia-sdk-py/{__version__}"


__all__ = ["__version__", "user_agent"]
