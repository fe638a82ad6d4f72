"""
sophia_sdk.address
==================

Address text utilities.

Format
------
Addresses are rendered as ``<prefix>_<base58check(payload)>`` where the prefix
names the kind of on-chain entity and the payload is the raw (32-byte) public
key or contract id:

    ak_...   account
    ct_...   contract
    ok_...   oracle
    oq_...   oracle query

In contract call-data an address is written as ``#<hex payload>``; the null
address is the sentinel ``#0`` and is represented natively by the integer 0.

This module provides:
- encode(payload, prefix="ak") -> str
- decode(address) -> (prefix, payload_bytes)
- from_int(value, prefix="ak") -> str       (payload given as a big integer)
- parse(address) -> {"prefix", "kind", "payload"}
- validate(address, expected_prefix=None) -> bool
- is_valid(address, expected_prefix=None) -> bool (alias)
- is_zero_address(value) -> bool
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from .utils.base58 import Base58Error, b58check_decode, b58check_encode
from .utils.bytes import int_to_bytes

DEFAULT_PREFIX = "ak"
CONTRACT_PREFIX = "ct"
PAYLOAD_SIZE = 32

PREFIXES: Dict[str, str] = {
    "ak": "account",
    "ct": "contract",
    "ok": "oracle",
    "oq": "oracle query",
}

__all__ = [
    "DEFAULT_PREFIX",
    "CONTRACT_PREFIX",
    "PAYLOAD_SIZE",
    "PREFIXES",
    "AddressError",
    "encode",
    "decode",
    "from_int",
    "parse",
    "validate",
    "is_valid",
    "is_zero_address",
]


# ---- Errors -----------------------------------------------------------------


class AddressError(ValueError):
    """Raised for malformed or invalid addresses/payloads."""


# ---- Core API ----------------------------------------------------------------


def encode(payload: bytes, *, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Encode a binary payload as address text with the given entity prefix.
    """
    if not isinstance(payload, (bytes, bytearray)) or len(payload) == 0:
        raise AddressError("payload must be non-empty bytes")
    if not prefix or "_" in prefix:
        raise AddressError(f"invalid address prefix: {prefix!r}")
    return f"{prefix}_{b58check_encode(bytes(payload))}"


def decode(address: str) -> Tuple[str, bytes]:
    """
    Decode address text into (prefix, payload_bytes).
    """
    if not isinstance(address, str) or not address:
        raise AddressError("address must be a non-empty string")
    prefix, sep, body = address.partition("_")
    if not sep or not prefix or not body:
        raise AddressError(f"address is missing its prefix: {address!r}")
    try:
        payload = b58check_decode(body)
    except Base58Error as e:
        raise AddressError(f"invalid address {address!r}: {e}") from e
    if not payload:
        raise AddressError("address payload is empty")
    return prefix, payload


def from_int(value: int, *, prefix: str = DEFAULT_PREFIX) -> str:
    """
    Render an address whose payload is given as a big-endian integer (the form
    the compiler uses for decoded address words). Leading zero bytes are
    restored up to PAYLOAD_SIZE.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise AddressError(f"address word must be a non-negative integer, got {value!r}")
    return encode(int_to_bytes(value, min_length=PAYLOAD_SIZE), prefix=prefix)


def parse(address: str) -> Dict[str, object]:
    """
    Parse an address into its components.

    Returns
    -------
    dict with keys:
      - prefix: str
      - kind: str ("account", "contract", ... or "unknown")
      - payload: bytes
    """
    prefix, payload = decode(address)
    return {
        "prefix": prefix,
        "kind": PREFIXES.get(prefix, "unknown"),
        "payload": payload,
    }


def validate(address: str, *, expected_prefix: Optional[str] = None) -> bool:
    """
    Validate an address format and, if provided, its prefix.

    Returns True if valid; False otherwise.
    """
    try:
        prefix, _ = decode(address)
    except AddressError:
        return False
    if expected_prefix is not None:
        return prefix == expected_prefix
    return prefix in PREFIXES


# Friendly alias
is_valid = validate


def is_zero_address(value: object) -> bool:
    """True for the null-address sentinel: the number 0 (or its text form)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value == 0
    if isinstance(value, str):
        return value.strip() == "0"
    return False
