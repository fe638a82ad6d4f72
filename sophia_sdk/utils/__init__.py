"""
Utility helpers for the Sophia contract SDK.

Re-exports:
- bytes: hex helpers and big-endian integer conversion
- hash: SHA-256 / double SHA-256 wrappers
- base58: Base58 and Base58Check codec used by address text
"""

from .base58 import Base58Error, b58check_decode, b58check_encode, b58decode, b58encode
from .bytes import bytes_to_int, ensure_bytes, from_hex, int_to_bytes, to_hex
from .hash import checksum4, sha256, sha256d

__all__ = [
    # bytes
    "to_hex",
    "from_hex",
    "ensure_bytes",
    "int_to_bytes",
    "bytes_to_int",
    # hash
    "sha256",
    "sha256d",
    "checksum4",
    # base58
    "b58encode",
    "b58decode",
    "b58check_encode",
    "b58check_decode",
    "Base58Error",
]
