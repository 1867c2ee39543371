from __future__ import annotations

import hashlib
from typing import Union

BytesLike = Union[bytes, bytearray, memoryview]

_HEX_PREFIXES = ("0x", "0X")


def ensure_bytes(data: Union[BytesLike, str]) -> bytes:
    """
    Normalize raw input to immutable `bytes`.

    Bytes-likes are copied; strings are parsed as hex (see `from_hex`).
    Anything else raises TypeError.
    """
    if isinstance(data, str):
        return from_hex(data)
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected bytes or a hex string, got {type(data)!r}")
    return bytes(data)


def to_hex(b: BytesLike, prefix: bool = True) -> str:
    """Lowercase hex, `0x`-prefixed unless `prefix=False`."""
    digits = bytes(b).hex()
    return "0x" + digits if prefix else digits


def from_hex(s: str) -> bytes:
    """
    Parse hex with an optional `0x` prefix. Case-insensitive; an odd number of
    digits or a non-hex character raises ValueError.
    """
    if not isinstance(s, str):
        raise TypeError(f"from_hex expects str, got {type(s)!r}")
    digits = s[2:] if s.startswith(_HEX_PREFIXES) else s
    if len(digits) % 2:
        raise ValueError(f"odd number of hex digits ({len(digits)})")
    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


def blake2b_256(data: BytesLike) -> bytes:
    """32-byte BLAKE2b digest, the hash used for code hashes and contract addresses."""
    return hashlib.blake2b(bytes(data), digest_size=32).digest()


__all__ = ["BytesLike", "ensure_bytes", "to_hex", "from_hex", "blake2b_256"]
