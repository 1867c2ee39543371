from __future__ import annotations

"""
Call descriptors: what to call and with what, independent of transport.

The `data` of every descriptor is already fully encoded by the caller
(selector followed by SCALE-encoded arguments). Descriptors never inspect,
validate or re-encode it; they are transparent carriers handed to exactly
one connection operation.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from ..utils.bytes import BytesLike
from .core import AccountId

if TYPE_CHECKING:  # pragma: no cover
    from ..utils.scale import Codec

T = TypeVar("T")


def _frozen(value: BytesLike) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected bytes-like, got {type(value)!r}")
    return bytes(value)


def _as_account_id(account_id: AccountId) -> Any:
    return account_id


@dataclass(frozen=True, slots=True)
class InstantiateCall(Generic[T]):
    """
    Instantiate a contract from uploaded code.

    `contract` builds the caller's result from the new contract's
    `AccountId` (a generated wrapper class, typically). It defaults to
    returning the `AccountId` itself.
    """

    code_hash: bytes
    data: bytes
    salt: bytes = b""
    contract: Callable[[AccountId], T] = field(default=_as_account_id, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "code_hash", _frozen(self.code_hash))
        object.__setattr__(self, "data", _frozen(self.data))
        object.__setattr__(self, "salt", _frozen(self.salt))

    def with_salt(self, salt: BytesLike) -> "InstantiateCall[T]":
        """Return a copy with `salt` replaced."""
        return replace(self, salt=_frozen(salt))


@dataclass(frozen=True, slots=True)
class ExecCall:
    """Invoke a mutating message on `account_id`."""

    account_id: AccountId
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId.coerce(self.account_id))
        object.__setattr__(self, "data", _frozen(self.data))


@dataclass(frozen=True, slots=True)
class ReadCall(Generic[T]):
    """
    Evaluate a non-mutating message on `account_id`; `returns` is the codec the
    result is decoded with.
    """

    account_id: AccountId
    data: bytes
    returns: "Codec[T]" = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId.coerce(self.account_id))
        object.__setattr__(self, "data", _frozen(self.data))


@dataclass(frozen=True, slots=True)
class UploadCall:
    """Upload contract code; `code_hash` is the hash the caller expects it to have."""

    wasm: bytes
    code_hash: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "wasm", _frozen(self.wasm))
        object.__setattr__(self, "code_hash", _frozen(self.code_hash))


__all__ = ["InstantiateCall", "ExecCall", "ReadCall", "UploadCall"]
