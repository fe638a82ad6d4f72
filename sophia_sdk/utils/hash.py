from __future__ import annotations

import hashlib

from .bytes import BytesLike, ensure_bytes


# --- SHA-256 ------------------------------------------------------------------
# Base58check (used by address text) appends the first four bytes of a double
# SHA-256 over the payload.

def sha256(data: BytesLike) -> bytes:
    """Return SHA-256 digest of *data*."""
    return hashlib.sha256(ensure_bytes(data)).digest()


def sha256d(data: BytesLike) -> bytes:
    """Return SHA-256(SHA-256(*data*))."""
    return sha256(sha256(data))


def checksum4(data: BytesLike) -> bytes:
    """First four bytes of the double SHA-256 of *data*."""
    return sha256d(data)[:4]


__all__ = [
    "sha256",
    "sha256d",
    "checksum4",
]
