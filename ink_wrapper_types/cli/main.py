"""
ink_wrapper_types.cli.main
==========================

`ink-wrapper-types`: offline helpers for inspecting contract payloads.

Examples
--------
    $ ink-wrapper-types version
    $ ink-wrapper-types decode "u32" 0x2a000000
    $ ink-wrapper-types decode --message-result "Option<u128>" 0x000100...
    $ ink-wrapper-types events tx-events.json --contract 0x1234... --type "(u8,bool)"

`events` expects a JSON list of raw events, each `{"account_id": "0x…", "data": "0x…"}`,
as dumped by a transport.

Configuration
-------------
- Log level : `--log-level` or env `INK_WRAPPER_LOG_LEVEL` (default: WARNING)
"""

from __future__ import annotations

import dataclasses
import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

import typer

from ..config import Config
from ..connection import decode_message_result
from ..errors import DecodeError, InkLangError
from ..events import ContractEvent, ContractEvents
from ..types.core import AccountId
from ..utils.bytes import from_hex, to_hex
from ..utils.scale import Codec, Err, Ok, Variant, parse_type
from ..version import __version__, version

log = logging.getLogger(__name__)

app = typer.Typer(
    name="ink-wrapper-types",
    help="Decode contract call results and demultiplex raw contract events.",
    no_args_is_help=True,
    add_completion=False,
)

__all__ = ["app", "main", "run"]


def _jsonable(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return to_hex(obj)
    if isinstance(obj, AccountId):
        return obj.to_hex()
    if isinstance(obj, Ok):
        return {"Ok": _jsonable(obj.value)}
    if isinstance(obj, Err):
        return {"Err": _jsonable(obj.value)}
    if isinstance(obj, Variant):
        return {obj.name: _jsonable(obj.value)}
    if isinstance(obj, Enum):
        return obj.name
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        return {str(k): _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_jsonable(x) for x in obj]
    if isinstance(obj, int) and not isinstance(obj, bool) and abs(obj) >= 2**53:
        # JSON consumers lose precision above 2**53
        return str(obj)
    return obj


def _print_json(obj: Any) -> None:
    typer.echo(json.dumps(_jsonable(obj), indent=2, ensure_ascii=False))


def _fail(msg: str) -> typer.Exit:
    typer.echo(msg, err=True)
    return typer.Exit(code=1)


def _codec(type_expr: str) -> Codec[Any]:
    try:
        return parse_type(type_expr)
    except ValueError as e:
        raise _fail(f"invalid type expression: {e}") from e


def _hex_arg(value: str, what: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError as e:
        raise _fail(f"invalid {what}: {e}") from e


@app.callback()
def _root(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (CRITICAL, ERROR, WARNING, INFO, DEBUG).",
        envvar="INK_WRAPPER_LOG_LEVEL",
    ),
) -> None:
    try:
        cfg = Config.with_overrides(Config.from_env(), log_level=log_level)
    except ValueError as e:
        raise _fail(f"invalid configuration: {e}") from e
    cfg.configure_logging()


@app.command("version")
def cmd_version(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Include git describe metadata."),
) -> None:
    """Print the package version."""
    typer.echo(version() if verbose else __version__)


@app.command("decode")
def cmd_decode(
    type_expr: str = typer.Argument(..., metavar="TYPE", help="Type expression, e.g. 'Vec<u32>'."),
    payload: str = typer.Argument(..., metavar="HEX", help="0x-prefixed payload."),
    message_result: bool = typer.Option(
        False,
        "--message-result",
        help="Payload is a message output: unwrap Result<TYPE, LangError>.",
    ),
    strict: bool = typer.Option(False, "--strict", help="Reject trailing bytes."),
) -> None:
    """Decode a SCALE payload and print it as JSON."""
    codec = _codec(type_expr)
    raw = _hex_arg(payload, "payload")
    try:
        if message_result:
            value = decode_message_result(codec, raw)
        elif strict:
            value = codec.decode_all(raw)
        else:
            value = codec.decode(raw)
    except (DecodeError, InkLangError) as e:
        raise _fail(str(e)) from e
    _print_json(value)


class _AdHocSource:
    """Event source built from CLI arguments."""

    def __init__(self, account_id: AccountId, event_codec: Codec[Any]) -> None:
        self.account_id = account_id
        self.Event = event_codec


def _load_events(path: Path) -> ContractEvents:
    try:
        items = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise _fail(f"cannot read events from {path}: {e}") from e
    if not isinstance(items, list):
        raise _fail("events file must contain a JSON list")
    try:
        return ContractEvents(
            ContractEvent(AccountId.from_hex(it["account_id"]), from_hex(it["data"])) for it in items
        )
    except (KeyError, TypeError, ValueError) as e:
        raise _fail(f"malformed event entry: {e}") from e


@app.command("events")
def cmd_events(
    path: Path = typer.Argument(..., metavar="FILE", help="JSON list of raw events."),
    contract: str = typer.Option(..., "--contract", "-c", help="Contract account id (hex)."),
    type_expr: str = typer.Option(..., "--type", "-t", help="Event type expression."),
) -> None:
    """Print the decoded events of one contract, in emission order."""
    codec = _codec(type_expr)
    try:
        account_id = AccountId.from_hex(contract)
    except ValueError as e:
        raise _fail(f"invalid contract account id: {e}") from e
    events = _load_events(path)
    out = []
    for position, decoded in enumerate(events.for_contract(_AdHocSource(account_id, codec))):
        entry: dict[str, Any] = {"index": position, "ok": decoded.ok}
        if decoded.ok:
            entry["value"] = decoded.value
        else:
            entry["error"] = str(decoded.error)
        out.append(entry)
    log.info("%d of %d events matched %s", len(out), len(events), account_id)
    _print_json(out)


def main() -> None:
    """Console-script entrypoint."""
    app()


run = main


if __name__ == "__main__":  # pragma: no cover
    main()
