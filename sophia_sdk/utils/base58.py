"""
Base58 / Base58Check codec.

A tiny self-contained implementation so the SDK doesn't depend on an external
base58 library. Base58Check appends a 4-byte checksum (double SHA-256) to the
payload before encoding; decoding verifies and strips it.

Typical usage
-------------
>>> payload = bytes.fromhex("aabbcc")
>>> text = b58check_encode(payload)
>>> assert b58check_decode(text) == payload
"""

from __future__ import annotations

from .bytes import BytesLike
from .hash import checksum4

__all__ = [
    "ALPHABET",
    "Base58Error",
    "b58encode",
    "b58decode",
    "b58check_encode",
    "b58check_decode",
]

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_ALPHABET_REV = {c: i for i, c in enumerate(ALPHABET)}


class Base58Error(ValueError):
    pass


def b58encode(data: BytesLike) -> str:
    data = bytes(data)
    value = int.from_bytes(data, "big")
    out = []
    while value > 0:
        value, mod = divmod(value, 58)
        out.append(ALPHABET[mod])
    # Preserve leading zero bytes as "1" characters.
    padding = len(data) - len(data.lstrip(b"\x00"))
    return "1" * padding + "".join(reversed(out))


def b58decode(text: str) -> bytes:
    if not isinstance(text, str):
        raise Base58Error("base58 input must be a string")
    value = 0
    for ch in text:
        try:
            value = value * 58 + _ALPHABET_REV[ch]
        except KeyError:
            raise Base58Error(f"invalid base58 character: {ch!r}") from None
    body = value.to_bytes((value.bit_length() + 7) // 8, "big") if value else b""
    padding = len(text) - len(text.lstrip("1"))
    return b"\x00" * padding + body


def b58check_encode(payload: BytesLike) -> str:
    payload = bytes(payload)
    return b58encode(payload + checksum4(payload))


def b58check_decode(text: str) -> bytes:
    raw = b58decode(text)
    if len(raw) < 4:
        raise Base58Error("base58check input too short")
    payload, check = raw[:-4], raw[-4:]
    if checksum4(payload) != check:
        raise Base58Error("base58check checksum mismatch")
    return payload
