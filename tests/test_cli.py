import json

import pytest
from typer.testing import CliRunner

from ink_wrapper_types import __version__
from ink_wrapper_types.cli import app
from ink_wrapper_types.types import AccountId

from .sample_contracts import created, incremented

runner = CliRunner()

A = AccountId(b"\x0a" * 32)
B = AccountId(b"\x0b" * 32)


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_version_verbose():
    result = runner.invoke(app, ["version", "--verbose"])
    assert result.exit_code == 0
    assert result.output.startswith(__version__)


def test_decode_scalar():
    result = runner.invoke(app, ["decode", "u32", "0x2a000000"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == 42


def test_decode_large_ints_as_strings():
    result = runner.invoke(app, ["decode", "u128", "0x" + "ff" * 16])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == str(2**128 - 1)


def test_decode_composite():
    result = runner.invoke(app, ["decode", "(bool, Vec<u8>, Option<u16>)", "0x01080102" + "00"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [True, "0x0102", None]


def test_decode_message_result():
    ok = runner.invoke(app, ["decode", "--message-result", "Option<u128>", "0x0000"])
    assert ok.exit_code == 0, ok.output
    assert json.loads(ok.output) is None

    err = runner.invoke(app, ["decode", "--message-result", "u8", "0x0101"])
    assert err.exit_code == 1
    assert "CouldNotReadInput" in err.output


def test_decode_strict_rejects_trailing_bytes():
    assert runner.invoke(app, ["decode", "u8", "0x0102"]).exit_code == 0
    result = runner.invoke(app, ["decode", "--strict", "u8", "0x0102"])
    assert result.exit_code == 1
    assert "trailing" in result.output


def test_decode_bad_input():
    assert runner.invoke(app, ["decode", "u7", "0x00"]).exit_code == 1
    assert runner.invoke(app, ["decode", "u8", "0xzz"]).exit_code == 1
    assert runner.invoke(app, ["decode", "u32", "0x00"]).exit_code == 1


def test_events(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps(
            [
                {"account_id": A.to_hex(), "data": "0x" + created(1).hex()},
                {"account_id": B.to_hex(), "data": "0x" + created(2).hex()},
                {"account_id": A.to_hex(), "data": "0x" + incremented(3, 4).hex()},
                {"account_id": A.to_hex(), "data": "0x07"},
            ]
        ),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["events", str(path), "--contract", A.to_hex(), "--type", "u8"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert [e["index"] for e in out] == [0, 1, 2]
    assert [e["ok"] for e in out] == [True, True, True]
    assert [e["value"] for e in out] == [0, 1, 7]


def test_events_reports_decode_failures(tmp_path):
    path = tmp_path / "events.json"
    path.write_text(
        json.dumps([{"account_id": A.to_hex(), "data": "0x"}, {"account_id": A.to_hex(), "data": "0x01"}]),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["events", str(path), "-c", A.to_hex(), "-t", "bool"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert out[0]["ok"] is False and "DecodeError" in out[0]["error"]
    assert out[1] == {"index": 1, "ok": True, "value": True}


@pytest.mark.parametrize(
    "type_expr,data,expected",
    [
        ("Vec<u8>", "0x1001020304", "0x01020304"),
        ("u128", "0x" + "ff" * 16, str(2**128 - 1)),
        ("AccountId", "0x" + "0b" * 32, B.to_hex()),
        ("(u8,Vec<u8>)", "0x0508beef", [5, "0xbeef"]),
    ],
)
def test_events_values_are_json_safe(tmp_path, type_expr, data, expected):
    path = tmp_path / "events.json"
    path.write_text(json.dumps([{"account_id": A.to_hex(), "data": data}]), encoding="utf-8")
    result = runner.invoke(app, ["events", str(path), "-c", A.to_hex(), "-t", type_expr])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"index": 0, "ok": True, "value": expected}]


def test_events_bad_file(tmp_path):
    path = tmp_path / "events.json"
    path.write_text('{"not": "a list"}', encoding="utf-8")
    result = runner.invoke(app, ["events", str(path), "-c", A.to_hex(), "-t", "u8"])
    assert result.exit_code == 1
    missing = runner.invoke(app, ["events", str(tmp_path / "nope.json"), "-c", A.to_hex(), "-t", "u8"])
    assert missing.exit_code == 1
