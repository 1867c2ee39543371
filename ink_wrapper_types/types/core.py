from __future__ import annotations

"""
Core value types.

- `AccountId`: the 32-byte address of a deployed contract (or any account).
- `Hash`: 32-byte hashes such as code hashes. Kept as plain `bytes`.
- `TxInfo`: the transaction handle produced by the local chain. Other
  connection implementations may use any hashable value instead.

Nothing here performs I/O.
"""

from dataclasses import dataclass
from typing import Any

from ..utils.bytes import from_hex, to_hex

ACCOUNT_ID_LEN = 32

Hash = bytes

@dataclass(frozen=True, slots=True)
class AccountId:
    """Fixed-size (32-byte) account address. Hashable and comparable by value."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray, memoryview)):
            raise TypeError(f"AccountId expects bytes, got {type(self.raw)!r}")
        raw = bytes(self.raw)
        if len(raw) != ACCOUNT_ID_LEN:
            raise ValueError(f"AccountId must be {ACCOUNT_ID_LEN} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_hex(cls, s: str) -> "AccountId":
        return cls(from_hex(s))

    @classmethod
    def coerce(cls, value: Any) -> "AccountId":
        """
        Convert anything that identifies an account into an `AccountId`:
        an `AccountId`, 32 raw bytes, a hex string, or an object exposing an
        `account_id` attribute (e.g. a generated contract wrapper).
        """
        if isinstance(value, AccountId):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(value)
        if isinstance(value, str):
            return cls.from_hex(value)
        inner = getattr(value, "account_id", None)
        if isinstance(inner, AccountId):
            return inner
        raise TypeError(f"cannot derive an AccountId from {type(value)!r}")

    def to_hex(self, prefix: bool = True) -> str:
        return to_hex(self.raw, prefix=prefix)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"AccountId({self.to_hex()})"

@dataclass(frozen=True, slots=True)
class TxInfo:
    """Identifies a finalized transaction on the local chain."""

    block_hash: bytes
    tx_hash: bytes
    block_number: int = 0

    def __repr__(self) -> str:
        return (
            f"TxInfo(block={self.block_number}, block_hash={to_hex(self.block_hash)}, "
            f"tx_hash={to_hex(self.tx_hash)})"
        )

__all__ = ["ACCOUNT_ID_LEN", "AccountId", "Hash", "TxInfo"]
