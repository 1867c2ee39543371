"""
A small counter contract used across the test-suite: local logic plus the
wrapper a code generator would emit for it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ink_wrapper_types import ContractRef, ExecCall, InstantiateCall, ReadCall, encode_message, scale
from ink_wrapper_types.local import LocalContract, constructor, message

NEW = bytes.fromhex("9bae9d5e")
GET = bytes.fromhex("2f865bd9")
INC = bytes.fromhex("633aa551")
BOOM = bytes.fromhex("0badc0de")
RELAY = bytes.fromhex("7e1a7e1a")
TOUCH = bytes.fromhex("70c0e5e5")
EMIT_RAW = bytes.fromhex("ee000001")


@dataclass(frozen=True)
class Created:
    value: int


@dataclass(frozen=True)
class Incremented:
    by: int
    value: int


EVENT = scale.Enum(
    {
        "Created": scale.Struct(Created, [("value", scale.u64)]),
        "Incremented": scale.Struct(Incremented, [("by", scale.u32), ("value", scale.u64)]),
    },
    type_name="CounterEvent",
)


def created(value: int) -> bytes:
    return EVENT.encode(scale.Variant("Created", Created(value)))


def incremented(by: int, value: int) -> bytes:
    return EVENT.encode(scale.Variant("Incremented", Incremented(by, value)))


class CounterLogic(LocalContract):
    def __init__(self, value: int) -> None:
        self.value = value

    @constructor(NEW)
    def new(cls, ctx, payload):
        value = scale.u64.decode_all(payload)
        ctx.emit(created(value))
        return cls(value)

    @message(GET)
    def get(self, ctx, payload):
        return scale.u64.encode(self.value)

    @message(INC)
    def inc(self, ctx, payload):
        by = scale.u32.decode_all(payload)
        self.value += by
        ctx.emit(incremented(by, self.value))

    @message(BOOM)
    def boom(self, ctx, payload):
        self.value += 1000
        raise RuntimeError("boom")

    @message(RELAY)
    def relay(self, ctx, payload):
        # bump ourselves, then forward `inner` to `target`; report whether it succeeded
        target, inner = scale.Tuple_(scale.account_id, scale.bytes_).decode_all(payload)
        self.value += 1
        ctx.emit(incremented(1, self.value))
        out = ctx.call(target, inner)
        return scale.bool_.encode(out[:1] == b"\x00")

    @message(TOUCH)
    def touch(self, ctx, payload):
        # state and events change before the argument is validated
        self.value += 1
        ctx.emit(incremented(1, self.value))
        scale.bool_.decode_all(payload)

    @message(EMIT_RAW)
    def emit_raw(self, ctx, payload):
        for item in scale.Vec(scale.bytes_).decode_all(payload):
            ctx.emit(item)


class Counter(ContractRef):
    Event = EVENT

    @classmethod
    def new(cls, code_hash: bytes, initial: int, salt: bytes = b"") -> InstantiateCall["Counter"]:
        return cls.instantiate_call(code_hash, encode_message(NEW, (scale.u64, initial)), salt)

    def get(self) -> ReadCall[int]:
        return self.read_call(encode_message(GET), scale.u64)

    def inc(self, by: int) -> ExecCall:
        return self.exec_call(encode_message(INC, (scale.u32, by)))

    def boom(self) -> ExecCall:
        return self.exec_call(encode_message(BOOM))

    def relay(self, target: Any, inner: bytes) -> ExecCall:
        return self.exec_call(
            encode_message(RELAY, (scale.account_id, target), (scale.bytes_, inner))
        )

    def touch(self, raw_flag: bytes) -> ExecCall:
        return self.exec_call(TOUCH + raw_flag)

    def emit_raw(self, *payloads: bytes) -> ExecCall:
        return self.exec_call(encode_message(EMIT_RAW, (scale.Vec(scale.bytes_), list(payloads))))
