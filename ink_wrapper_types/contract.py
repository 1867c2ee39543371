"""
Base class for generated contract wrappers.

A code generator emits one `ContractRef` subclass per contract. The
subclass pins the contract's event codec and turns each message into a
call descriptor with its payload already encoded:

    class Flipper(ContractRef):
        Event = scale.Enum({"Flipped": scale.Struct(Flipped, [("value", scale.bool_)])})

        @classmethod
        def new(cls, code_hash: bytes, init: bool) -> InstantiateCall["Flipper"]:
            return cls.instantiate_call(code_hash, encode_message(NEW, (scale.bool_, init)))

        def get(self) -> ReadCall[bool]:
            return self.read_call(encode_message(GET), scale.bool_)

        def flip(self) -> ExecCall:
            return self.exec_call(encode_message(FLIP))

    flipper = await signed.instantiate(Flipper.new(code_hash, False))
    tx = await signed.exec(flipper.flip())
    assert await conn.read(flipper.get()) is True
    events = (await conn.get_contract_events(tx)).for_contract(flipper)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple, Type, TypeVar

from .types.calls import ExecCall, InstantiateCall, ReadCall
from .types.core import AccountId
from .utils.bytes import BytesLike
from .utils.scale import Codec

SELECTOR_LEN = 4

C = TypeVar("C", bound="ContractRef")
T = TypeVar("T")


def encode_message(selector: BytesLike, *args: Tuple[Codec[Any], Any]) -> bytes:
    """Selector followed by each `(codec, value)` argument, SCALE-encoded in order."""
    sel = bytes(selector)
    if len(sel) != SELECTOR_LEN:
        raise ValueError(f"selector must be {SELECTOR_LEN} bytes, got {len(sel)}")
    out = bytearray(sel)
    for codec, value in args:
        codec.encode_into(value, out)
    return bytes(out)


@dataclass(frozen=True)
class ContractRef:
    """A typed handle on one deployed contract instance."""

    account_id: AccountId
    Event: ClassVar[Optional[Codec[Any]]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId.coerce(self.account_id))

    @classmethod
    def instantiate_call(
        cls: Type[C], code_hash: BytesLike, data: BytesLike, salt: BytesLike = b""
    ) -> InstantiateCall[C]:
        return InstantiateCall(code_hash=code_hash, data=data, salt=salt, contract=cls)

    def exec_call(self, data: BytesLike) -> ExecCall:
        return ExecCall(self.account_id, data)

    def read_call(self, data: BytesLike, returns: Codec[T]) -> ReadCall[T]:
        return ReadCall(self.account_id, data, returns)

    def __bytes__(self) -> bytes:
        return self.account_id.raw


__all__ = ["SELECTOR_LEN", "ContractRef", "encode_message"]
