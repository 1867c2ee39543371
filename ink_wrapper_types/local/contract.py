"""
Contract logic for the local chain.

Simulated contracts are plain Python classes. Constructors and messages are
registered by selector; each handler receives a `CallContext` and the call
payload with the 4-byte selector stripped, and returns the SCALE-encoded
return value (or None for `()`):

    class Flipper(LocalContract):
        def __init__(self, value: bool) -> None:
            self.value = value

        @constructor(NEW)
        def new(cls, ctx, payload):
            return cls(scale.bool_.decode_all(payload))

        @message(FLIP)
        def flip(self, ctx, payload):
            self.value = not self.value
            ctx.emit(EVENT.encode(Variant("Flipped", Flipped(self.value))))

        @message(GET)
        def get(self, ctx, payload):
            return scale.bool_.encode(self.value)

Dispatch follows the platform: an unknown selector, a payload shorter than a
selector, or arguments that fail to decode (`DecodeError` raised by the
handler) produce `Err(LangError::CouldNotReadInput)` as the call output.
Any other exception traps the call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, List, Optional

from ..contract import SELECTOR_LEN
from ..events import ContractEvent
from ..types.core import AccountId

Handler = Callable[..., Any]

_CONSTRUCTOR_ATTR = "__local_constructor__"
_MESSAGE_ATTR = "__local_message__"


@dataclass
class CallContext:
    """What a handler can see and do during one call."""

    caller: AccountId
    account_id: AccountId
    events: List[ContractEvent] = field(default_factory=list)
    invoke: Optional[Callable[[AccountId, bytes], bytes]] = field(default=None, repr=False)

    def emit(self, data: bytes) -> None:
        """Emit a raw event from the executing contract."""
        self.events.append(ContractEvent(self.account_id, bytes(data)))

    def call(self, account_id: Any, data: bytes) -> bytes:
        """
        Call a message on another contract within the same transaction and return
        its raw output envelope (decode it with `decode_message_result`). The
        callee's state changes and events are kept only if it returns `Ok`.
        """
        if self.invoke is None:
            raise RuntimeError("cross-contract calls are not available in this context")
        return self.invoke(AccountId.coerce(account_id), bytes(data))


def _selector(selector: bytes) -> bytes:
    sel = bytes(selector)
    if len(sel) != SELECTOR_LEN:
        raise ValueError(f"selector must be {SELECTOR_LEN} bytes, got {len(sel)}")
    return sel


def constructor(selector: bytes) -> Callable[[Handler], Handler]:
    """Register `fn(cls, ctx, payload) -> instance` as a constructor."""
    sel = _selector(selector)

    def deco(fn: Handler) -> Handler:
        setattr(fn, _CONSTRUCTOR_ATTR, sel)
        return fn

    return deco


def message(selector: bytes) -> Callable[[Handler], Handler]:
    """Register `fn(self, ctx, payload) -> bytes | None` as a message."""
    sel = _selector(selector)

    def deco(fn: Handler) -> Handler:
        setattr(fn, _MESSAGE_ATTR, sel)
        return fn

    return deco


class LocalContract:
    """Base class for simulated contract logic."""

    _constructors: ClassVar[Dict[bytes, Handler]] = {}
    _messages: ClassVar[Dict[bytes, Handler]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        constructors: Dict[bytes, Handler] = {}
        messages: Dict[bytes, Handler] = {}
        for klass in reversed(cls.__mro__):
            for attr in vars(klass).values():
                sel = getattr(attr, _CONSTRUCTOR_ATTR, None)
                if sel is not None:
                    constructors[sel] = attr
                sel = getattr(attr, _MESSAGE_ATTR, None)
                if sel is not None:
                    messages[sel] = attr
        cls._constructors = constructors
        cls._messages = messages

    @classmethod
    def find_constructor(cls, selector: bytes) -> Optional[Handler]:
        return cls._constructors.get(selector)

    @classmethod
    def find_message(cls, selector: bytes) -> Optional[Handler]:
        return cls._messages.get(selector)


__all__ = ["CallContext", "LocalContract", "constructor", "message"]
