import pytest

from ink_wrapper_types.types import AccountId, TxInfo

RAW = bytes(range(32))


def test_account_id_requires_32_bytes():
    assert AccountId(RAW).raw == RAW
    with pytest.raises(ValueError):
        AccountId(b"\x00" * 31)
    with pytest.raises(TypeError):
        AccountId("00" * 32)  # type: ignore[arg-type]


def test_account_id_value_semantics():
    a = AccountId(RAW)
    b = AccountId(bytearray(RAW))
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert bytes(a) == RAW


def test_account_id_hex():
    a = AccountId(RAW)
    assert a.to_hex() == "0x" + RAW.hex()
    assert str(a) == a.to_hex()
    assert AccountId.from_hex(a.to_hex()) == a
    assert AccountId.from_hex(RAW.hex()) == a


def test_account_id_coerce():
    a = AccountId(RAW)

    class Wrapper:
        account_id = a

    assert AccountId.coerce(a) is a
    assert AccountId.coerce(RAW) == a
    assert AccountId.coerce(a.to_hex()) == a
    assert AccountId.coerce(Wrapper()) is a
    with pytest.raises(TypeError):
        AccountId.coerce(42)


def test_tx_info_is_hashable_and_immutable():
    info = TxInfo(block_hash=b"\x01" * 32, tx_hash=b"\x02" * 32, block_number=3)
    assert info == TxInfo(b"\x01" * 32, b"\x02" * 32, 3)
    assert {info: 1}[info] == 1
    with pytest.raises(AttributeError):
        info.block_number = 4  # type: ignore[misc]
