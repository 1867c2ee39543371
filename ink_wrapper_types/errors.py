"""
Typed error classes for ink_wrapper_types.

Four failure classes are kept apart so callers can react to each one:

- `TransportError`: network, submission or finality faults raised by a
  connection implementation (or a subclass of it).
- `InkLangError`: the callee could not route the call (e.g. unknown selector).
- `DecodeError`: returned bytes do not match the expected type's layout.
- `UnsupportedOperationError`: an optional capability was invoked on an
  implementor that does not provide it.

All of them derive from `InkWrapperError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

__all__ = [
    "InkWrapperError",
    "TransportError",
    "TransactionNotFoundError",
    "TransactionFailedError",
    "DecodeError",
    "EncodeError",
    "LangError",
    "InkLangError",
    "UnsupportedOperationError",
    "CodeHashMismatchError",
]


class InkWrapperError(Exception):
    """Base class for all ink_wrapper_types errors."""


class TransportError(InkWrapperError):
    """Raised by connection implementations for network/submission/finality faults."""


class TransactionNotFoundError(TransportError):
    """A transaction handle could not be resolved to a finalized transaction."""


@dataclass(eq=False)
class TransactionFailedError(TransportError):
    """
    The transaction was included but failed on-chain (trap, revert, missing code,
    duplicate contract, ...).
    """

    message: str
    tx_hash: Optional[bytes] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        suffix = f" tx=0x{self.tx_hash.hex()}" if self.tx_hash else ""
        return f"TransactionFailedError{suffix}: {self.message}"


@dataclass(eq=False)
class DecodeError(InkWrapperError, ValueError):
    """
    Raised when bytes cannot be decoded into the requested type.

    Fields:
      - message: what went wrong
      - type_name: the codec that failed (if known)
      - offset: byte offset into the input at which decoding failed
    """

    message: str
    type_name: Optional[str] = None
    offset: Optional[int] = None

    def __str__(self) -> str:
        where = []
        if self.type_name:
            where.append(f"type={self.type_name}")
        if self.offset is not None:
            where.append(f"offset={self.offset}")
        where_s = (" [" + ", ".join(where) + "]") if where else ""
        return f"DecodeError{where_s}: {self.message}"


class LangError(IntEnum):
    """Language-level dispatch failures reported by the callee."""

    COULD_NOT_READ_INPUT = 1

    @property
    def variant_name(self) -> str:
        return "".join(part.capitalize() for part in self.name.split("_"))


class InkLangError(InkWrapperError):
    """
    Wraps a `LangError` so it can be raised, chained and displayed like any
    other error. Carries the code and nothing else.
    """

    def __init__(self, code: LangError | int) -> None:
        code = LangError(code)
        super().__init__(code)
        self.code = code

    def __str__(self) -> str:
        return f"InkLangError({self.code.variant_name})"

    def __repr__(self) -> str:
        return f"InkLangError(LangError.{self.code.name})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InkLangError):
            return NotImplemented
        return self.code == other.code

    def __hash__(self) -> int:
        return hash((InkLangError, int(self.code)))


class UnsupportedOperationError(InkWrapperError, NotImplementedError):
    """An optional connection operation is not provided by this implementor."""

    def __init__(self, operation: str, implementor: Optional[str] = None) -> None:
        self.operation = operation
        self.implementor = implementor
        who = f" by {implementor}" if implementor else ""
        super().__init__(f"operation {operation!r} is not supported{who}")


@dataclass(eq=False)
class CodeHashMismatchError(InkWrapperError):
    """Uploaded code hashed to something other than the expected code hash."""

    expected: bytes
    got: bytes

    def __str__(self) -> str:
        return f"CodeHashMismatchError: expected=0x{self.expected.hex()} got=0x{self.got.hex()}"


class EncodeError(InkWrapperError, ValueError):
    """A value cannot be represented by the requested codec (range, type, length)."""
