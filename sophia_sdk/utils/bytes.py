from __future__ import annotations

from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Ensure input is bytes.

    Accepts:
      - bytes / bytearray / memoryview  -> bytes(data)
      - str: treated as hex; optional '0x' prefix; even-length enforced

    Raises:
      ValueError on invalid hex strings.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        return from_hex(data)
    raise TypeError(f"Unsupported type for ensure_bytes: {type(data)!r}")


def to_hex(b: BytesLike, prefix: bool = False) -> str:
    """
    Bytes -> lowercase hex string. Sophia call-data literals carry bare hex,
    so the '0x' prefix is opt-in.
    """
    s = bytes(b).hex()
    return f"0x{s}" if prefix else s


def from_hex(s: str) -> bytes:
    """
    Hex string (optionally '0x' prefixed) -> bytes.

    Enforces even-length (nibbles must pair to bytes) and lowercase/uppercase agnostic.
    """
    if not isinstance(s, str):
        raise TypeError("from_hex expects a string")
    if s.startswith(("0x", "0X")):
        s = s[2:]
    if len(s) % 2 != 0:
        raise ValueError("hex string must have even length")
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


# --- Big-endian integers ------------------------------------------------------


def int_to_bytes(n: int, *, min_length: int = 0) -> bytes:
    """
    Encode a non-negative integer big-endian, using the minimal number of bytes
    but never fewer than `min_length` (left-padded with zeros).

    Example:
        int_to_bytes(0x0102)               -> b'\\x01\\x02'
        int_to_bytes(0x0102, min_length=4) -> b'\\x00\\x00\\x01\\x02'
    """
    if n < 0:
        raise ValueError("int_to_bytes expects a non-negative integer")
    length = max((n.bit_length() + 7) // 8, int(min_length), 1)
    return n.to_bytes(length, "big")


def bytes_to_int(b: BytesLike) -> int:
    """Big-endian bytes -> int."""
    return int.from_bytes(bytes(b), "big")


__all__ = [
    "BytesLike",
    "ensure_bytes",
    "to_hex",
    "from_hex",
    "int_to_bytes",
    "bytes_to_int",
]
