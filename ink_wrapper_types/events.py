"""
ink_wrapper_types.events
========================

Raw contract events and the per-contract demultiplexer.

A connection returns every event emitted by any contract during one
transaction as a `ContractEvents` collection, unparsed and in emission
order. `ContractEvents.for_contract(wrapper)` keeps the events emitted by
that wrapper's contract and decodes each one independently with the
wrapper's `Event` codec:

    events = await conn.get_contract_events(tx_info)
    for decoded in events.for_contract(token):
        if decoded.ok:
            handle(decoded.value)
        else:
            log.warning("stale metadata? %s", decoded.error)

A decode failure is reported for that event only. It usually means the
wrapper was generated from metadata that no longer matches the deployed
contract, so the caller decides how severe it is.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import (Any, Generic, Iterable, Iterator, List, Optional, Protocol,
                    Sequence, Tuple, TypeVar, Union, overload,
                    runtime_checkable)

from .errors import DecodeError
from .types.core import AccountId
from .utils.bytes import to_hex
from .utils.scale import Codec

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ContractEvent:
    """A raw event: the emitting contract plus its undecoded payload."""

    account_id: AccountId
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "account_id", AccountId.coerce(self.account_id))
        object.__setattr__(self, "data", bytes(self.data))

    def to_dict(self) -> dict:
        return {"account_id": self.account_id.to_hex(), "data": to_hex(self.data)}


@runtime_checkable
class EventSource(Protocol):
    """
    Anything that identifies a contract and knows how to decode its events.
    Generated wrappers (see `ink_wrapper_types.contract.ContractRef`) satisfy it.
    """

    account_id: AccountId
    Event: Codec[Any]


@dataclass(frozen=True, slots=True)
class DecodedEvent(Generic[T]):
    """Outcome of decoding one raw event: either `value` or `error` is set."""

    event: ContractEvent
    value: Optional[T] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the decoded value or raise the decode error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class ContractEvents(Sequence[ContractEvent]):
    """
    Immutable, ordered collection of the raw events emitted in one transaction.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[ContractEvent] = ()) -> None:
        self._events: Tuple[ContractEvent, ...] = tuple(events)

    @property
    def events(self) -> Tuple[ContractEvent, ...]:
        return self._events

    @overload
    def __getitem__(self, index: int) -> ContractEvent: ...

    @overload
    def __getitem__(self, index: slice) -> "ContractEvents": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[ContractEvent, "ContractEvents"]:
        if isinstance(index, slice):
            return ContractEvents(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[ContractEvent]:
        return iter(self._events)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContractEvents):
            return NotImplemented
        return self._events == other._events

    def __hash__(self) -> int:
        return hash(self._events)

    def __repr__(self) -> str:
        return f"ContractEvents({len(self._events)} events)"

    # ------------------------------------------------------------------ queries

    def accounts(self) -> List[AccountId]:
        """Distinct emitting contracts, in order of first emission."""
        seen: dict[AccountId, None] = {}
        for ev in self._events:
            seen.setdefault(ev.account_id, None)
        return list(seen)

    def raw_for(self, contract: Any) -> "ContractEvents":
        """Events emitted by `contract` (anything `AccountId.coerce` accepts), undecoded."""
        account_id = AccountId.coerce(contract)
        return ContractEvents(ev for ev in self._events if ev.account_id == account_id)

    def for_contract(self, contract: EventSource) -> List[DecodedEvent[Any]]:
        """
        Decode the events emitted by `contract`, one outcome per event, in
        emission order. A failed event never affects the others.
        """
        codec = getattr(contract, "Event", None)
        if codec is None:
            raise TypeError(f"{type(contract).__name__} does not declare an Event codec")
        out: List[DecodedEvent[Any]] = []
        for position, ev in enumerate(self.raw_for(contract)):
            try:
                out.append(DecodedEvent(ev, value=codec.decode(ev.data)))
            except DecodeError as e:
                log.debug(
                    "event #%d from %s could not be decoded as %s: %s",
                    position,
                    ev.account_id,
                    codec.type_name,
                    e,
                )
                out.append(DecodedEvent(ev, error=e))
        return out


__all__ = ["ContractEvent", "ContractEvents", "DecodedEvent", "EventSource"]
