import pytest

from ink_wrapper_types.local import CallContext, LocalContract, constructor, message
from ink_wrapper_types.types import AccountId

from .sample_contracts import GET, INC, NEW, CounterLogic

ME = AccountId(b"\x01" * 32)
CALLER = AccountId(b"\x02" * 32)


def test_handlers_are_collected_by_selector():
    assert CounterLogic.find_constructor(NEW) is not None
    assert CounterLogic.find_message(GET) is not None
    assert CounterLogic.find_message(NEW) is None
    assert CounterLogic.find_constructor(GET) is None


def test_handlers_are_inherited_and_overridable():
    class Doubling(CounterLogic):
        @message(INC)
        def inc(self, ctx, payload):
            self.value += 2

    assert Doubling.find_message(GET) is CounterLogic.find_message(GET)
    assert Doubling.find_message(INC) is not CounterLogic.find_message(INC)
    # the base class is unaffected
    assert CounterLogic.find_message(INC) is vars(CounterLogic)["inc"]


def test_selector_must_be_four_bytes():
    with pytest.raises(ValueError):
        message(b"\x00\x01")
    with pytest.raises(ValueError):
        constructor(b"\x00" * 5)


def test_context_emit_tags_events_with_executing_contract():
    ctx = CallContext(caller=CALLER, account_id=ME)
    ctx.emit(b"\x01")
    ctx.emit(bytearray(b"\x02"))
    assert [(e.account_id, e.data) for e in ctx.events] == [(ME, b"\x01"), (ME, b"\x02")]


def test_context_call_requires_a_chain():
    ctx = CallContext(caller=CALLER, account_id=ME)
    with pytest.raises(RuntimeError):
        ctx.call(ME, GET)


def test_context_call_delegates():
    seen = []

    def invoke(target, payload):
        seen.append((target, payload))
        return b"\x00"

    ctx = CallContext(caller=CALLER, account_id=ME, invoke=invoke)
    assert ctx.call(ME.to_hex(), bytearray(GET)) == b"\x00"
    assert seen == [(ME, GET)]


def test_base_class_has_no_handlers():
    class Empty(LocalContract):
        pass

    assert Empty.find_constructor(NEW) is None
    assert Empty.find_message(GET) is None
