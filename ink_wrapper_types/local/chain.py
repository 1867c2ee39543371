"""
ink_wrapper_types.local.chain
=============================

A deterministic, in-process contracts platform. It stores code and contract
instances, runs `LocalContract` logic, and keeps one block per transaction
together with the raw events each transaction emitted.

The chain speaks bytes only: call payloads come in pre-encoded and call
outputs go out as encoded `Result<_, LangError>` envelopes. Interpreting
outputs (dispatch errors, return values) is left to the connections in
`ink_wrapper_types.local.connection`.

Transactions are committed in two steps: `upload`, `instantiate` or `call`
records them as pending, then `finalize` marks them final. Events are only
retrievable once finalized.

Each call runs against staged copies of the contract states it touches,
nested cross-contract calls included. A nested call whose output is an
`Err` is rolled back on its own; the transaction's staged changes and
events are applied only when the top-level output is `Ok`. Failed
transactions (traps, missing code, duplicate contracts) are still recorded
and finalized, with no events and no state change, and `finalize` reports
them as `TransactionFailedError`. Re-entering a contract that is already
executing traps.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Type

from ..config import Config
from ..contract import SELECTOR_LEN
from ..errors import (DecodeError, LangError, TransactionFailedError,
                      TransactionNotFoundError)
from ..events import ContractEvent, ContractEvents
from ..types.core import AccountId, TxInfo
from ..utils.bytes import blake2b_256, to_hex
from ..utils.scale import Err, Result, bytes_, lang_error, unit
from .contract import CallContext, LocalContract

log = logging.getLogger(__name__)

MAX_CALL_DEPTH = 16

_ADDR_PREFIX = b"contract_addr_v1"
_GENESIS_HASH = b"\x00" * 32

# Output of a call the contract could not dispatch.
_DISPATCH_FAILED = Result(unit, lang_error).encode(Err(LangError.COULD_NOT_READ_INPUT))


def _ok(payload: bytes) -> bytes:
    # payload is already encoded
    return b"\x00" + payload


def _is_ok(output: bytes) -> bool:
    return output[:1] == b"\x00"


@dataclass
class _Instance:
    code_hash: bytes
    state: LocalContract


@dataclass
class _TxRecord:
    info: TxInfo
    events: Tuple[ContractEvent, ...] = ()
    finalized: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class CallOutcome:
    """What one transaction produced, before interpretation."""

    tx_info: TxInfo
    output: bytes = b""
    account_id: Optional[AccountId] = None
    code_hash: Optional[bytes] = None


@dataclass
class _Scope:
    """States and events staged by one call frame."""

    parent: Optional["_Scope"] = None
    states: Dict[AccountId, LocalContract] = field(default_factory=dict)
    events: List[ContractEvent] = field(default_factory=list)
    new_instance: Optional[Tuple[AccountId, _Instance]] = None
    executing: Optional[AccountId] = None

    def is_executing(self, account_id: AccountId) -> bool:
        scope: Optional[_Scope] = self
        while scope is not None:
            if scope.executing == account_id:
                return True
            scope = scope.parent
        return False

    def lookup(self, account_id: AccountId) -> Optional[LocalContract]:
        scope: Optional[_Scope] = self
        while scope is not None:
            state = scope.states.get(account_id)
            if state is not None:
                return state
            scope = scope.parent
        return None

    def merge_into_parent(self) -> None:
        assert self.parent is not None
        self.parent.states.update(self.states)
        self.parent.events.extend(self.events)


class _Trap(Exception):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class LocalChain:
    """
    In-process chain holding code, contracts, blocks and events.

    Thread-safe: every public method takes the chain lock.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config or Config.from_env()
        self._lock = threading.RLock()
        self._logic: Dict[bytes, Type[LocalContract]] = {}
        self._uploaded: set[bytes] = set()
        self._contracts: Dict[AccountId, _Instance] = {}
        self._txs: Dict[bytes, _TxRecord] = {}
        self._nonces: Dict[AccountId, int] = {}
        self._head_hash = _GENESIS_HASH
        self._height = 0

    # ------------------------------------------------------------------ code

    def register_code(
        self,
        logic: Type[LocalContract],
        wasm: Optional[bytes] = None,
        *,
        uploaded: bool = True,
    ) -> bytes:
        """
        Make `logic` the behavior of code `wasm` (a placeholder blob derived from
        the class name when omitted) and return its code hash. With
        `uploaded=False` the code must still be uploaded before instantiation.
        """
        blob = wasm if wasm is not None else placeholder_wasm(logic)
        code_hash = blake2b_256(blob)
        with self._lock:
            self._logic[code_hash] = logic
            if uploaded:
                self._uploaded.add(code_hash)
        log.debug("registered %s as code %s", logic.__name__, to_hex(code_hash))
        return code_hash

    def has_code(self, code_hash: bytes) -> bool:
        with self._lock:
            return bytes(code_hash) in self._uploaded

    # ------------------------------------------------------------------ queries

    @property
    def height(self) -> int:
        with self._lock:
            return self._height

    def contract_code_hash(self, account_id: AccountId) -> Optional[bytes]:
        with self._lock:
            inst = self._contracts.get(account_id)
            return inst.code_hash if inst else None

    def events(self, tx_info: TxInfo) -> ContractEvents:
        """Raw events of a finalized transaction, in emission order."""
        with self._lock:
            rec = self._txs.get(getattr(tx_info, "tx_hash", b""))
            if rec is None or rec.info != tx_info:
                raise TransactionNotFoundError(f"unknown transaction {tx_info!r}")
            if not rec.finalized:
                raise TransactionNotFoundError(f"transaction not finalized yet: {tx_info!r}")
            return ContractEvents(rec.events)

    # ------------------------------------------------------------------ transactions

    def upload(self, signer: AccountId, wasm: bytes) -> CallOutcome:
        code_hash = blake2b_256(wasm)
        with self._lock:
            info = self._new_tx(signer, b"upload", code_hash)
            self._uploaded.add(code_hash)
            self._txs[info.tx_hash] = _TxRecord(info)
        log.info("upload code=%s tx=%s", to_hex(code_hash), to_hex(info.tx_hash))
        return CallOutcome(info, code_hash=code_hash)

    def instantiate(
        self, signer: AccountId, code_hash: bytes, data: bytes, salt: bytes
    ) -> CallOutcome:
        code_hash = bytes(code_hash)
        account_id = contract_address(signer, code_hash, data, salt)
        with self._lock:
            info = self._new_tx(signer, b"instantiate", code_hash + data + salt)
            scope = _Scope()
            try:
                output = self._run_constructor(signer, account_id, code_hash, data, scope)
            except _Trap as trap:
                return self._fail(info, trap.reason)
            self._commit(info, scope if _is_ok(output) else None)
        log.info(
            "instantiate code=%s -> %s tx=%s", to_hex(code_hash), account_id, to_hex(info.tx_hash)
        )
        return CallOutcome(info, output=output, account_id=account_id, code_hash=code_hash)

    def call(self, signer: AccountId, account_id: AccountId, data: bytes) -> CallOutcome:
        with self._lock:
            info = self._new_tx(signer, b"call", account_id.raw + data)
            scope = _Scope()
            try:
                output = self._run_message(signer, account_id, data, scope, depth=0)
            except _Trap as trap:
                return self._fail(info, trap.reason)
            self._commit(info, scope if _is_ok(output) else None)
        log.info("call %s tx=%s", account_id, to_hex(info.tx_hash))
        return CallOutcome(info, output=output, account_id=account_id)

    def dry_run(self, origin: AccountId, account_id: AccountId, data: bytes) -> bytes:
        """Execute a message against staged state and discard everything it changed."""
        with self._lock:
            try:
                return self._run_message(origin, account_id, data, _Scope(), depth=0)
            except _Trap as trap:
                raise TransactionFailedError(f"dry run failed: {trap.reason}") from None

    def finalize(self, tx_info: TxInfo) -> None:
        with self._lock:
            rec = self._txs.get(tx_info.tx_hash)
            if rec is None:
                raise TransactionNotFoundError(f"unknown transaction {tx_info!r}")
            rec.finalized = True
            error = rec.error
        log.debug("finalized tx=%s block=%d", to_hex(tx_info.tx_hash), tx_info.block_number)
        if error is not None:
            raise TransactionFailedError(error, tx_hash=tx_info.tx_hash)

    # ------------------------------------------------------------------ internals

    def _new_tx(self, signer: AccountId, kind: bytes, body: bytes) -> TxInfo:
        nonce = self._nonces.get(signer, 0)
        self._nonces[signer] = nonce + 1
        tx_hash = blake2b_256(kind + signer.raw + nonce.to_bytes(8, "little") + body)
        self._height += 1
        block_hash = blake2b_256(self._head_hash + self._height.to_bytes(8, "little") + tx_hash)
        self._head_hash = block_hash
        return TxInfo(block_hash=block_hash, tx_hash=tx_hash, block_number=self._height)

    def _fail(self, info: TxInfo, reason: str) -> CallOutcome:
        log.info("tx=%s failed: %s", to_hex(info.tx_hash), reason)
        self._txs[info.tx_hash] = _TxRecord(info, error=reason)
        return CallOutcome(info)

    def _commit(self, info: TxInfo, scope: Optional[_Scope]) -> None:
        if scope is None:
            self._txs[info.tx_hash] = _TxRecord(info)
            return
        if scope.new_instance is not None:
            account_id, inst = scope.new_instance
            self._contracts[account_id] = inst
        for account_id, state in scope.states.items():
            self._contracts[account_id].state = state
        self._txs[info.tx_hash] = _TxRecord(info, events=tuple(scope.events))

    def _context(
        self, caller: AccountId, account_id: AccountId, scope: _Scope, depth: int
    ) -> CallContext:
        def invoke(target: AccountId, payload: bytes) -> bytes:
            return self._run_message(account_id, target, payload, scope, depth=depth + 1)

        return CallContext(caller=caller, account_id=account_id, events=scope.events, invoke=invoke)

    def _run_constructor(
        self,
        signer: AccountId,
        account_id: AccountId,
        code_hash: bytes,
        data: bytes,
        scope: _Scope,
    ) -> bytes:
        if code_hash not in self._uploaded:
            raise _Trap(f"CodeNotFound: {to_hex(code_hash)}")
        logic = self._logic.get(code_hash)
        if logic is None:
            raise _Trap(f"CodeNotExecutable: no local logic for {to_hex(code_hash)}")
        if account_id in self._contracts:
            raise _Trap(f"DuplicateContract: {account_id}")
        handler = logic.find_constructor(data[:SELECTOR_LEN]) if len(data) >= SELECTOR_LEN else None
        if handler is None:
            return _DISPATCH_FAILED
        ctx = self._context(signer, account_id, scope, depth=0)
        try:
            state = handler(logic, ctx, data[SELECTOR_LEN:])
        except DecodeError:
            return _DISPATCH_FAILED
        except _Trap:
            raise
        except Exception as e:
            raise _Trap(f"ContractTrapped: {type(e).__name__}: {e}") from e
        if not isinstance(state, logic):
            raise _Trap(f"ContractTrapped: constructor returned {type(state).__name__}")
        scope.new_instance = (account_id, _Instance(code_hash, state))
        return _ok(b"")

    def _run_message(
        self,
        caller: AccountId,
        account_id: AccountId,
        data: bytes,
        parent: _Scope,
        *,
        depth: int,
    ) -> bytes:
        if depth > MAX_CALL_DEPTH:
            raise _Trap("MaxCallDepthReached")
        inst = self._contracts.get(account_id)
        if inst is None:
            raise _Trap(f"ContractNotFound: {account_id}")
        if parent.is_executing(account_id):
            raise _Trap(f"ReentranceDenied: {account_id}")
        handler = (
            type(inst.state).find_message(data[:SELECTOR_LEN]) if len(data) >= SELECTOR_LEN else None
        )
        if handler is None:
            return _DISPATCH_FAILED
        staged = parent.lookup(account_id)
        state = copy.deepcopy(inst.state if staged is None else staged)
        scope = _Scope(parent=parent, states={account_id: state}, executing=account_id)
        ctx = self._context(caller, account_id, scope, depth)
        try:
            ret = handler(state, ctx, data[SELECTOR_LEN:])
        except DecodeError:
            return _DISPATCH_FAILED
        except _Trap:
            raise
        except Exception as e:
            raise _Trap(f"ContractTrapped: {type(e).__name__}: {e}") from e
        scope.merge_into_parent()
        return _ok(bytes(ret) if ret is not None else b"")


def placeholder_wasm(logic: Type[LocalContract]) -> bytes:
    """Stand-in code blob for a logic class: the wasm magic plus its qualified name."""
    return b"\x00asm" + bytes_.encode(f"{logic.__module__}.{logic.__qualname__}".encode("utf-8"))


def contract_address(deployer: AccountId, code_hash: bytes, data: bytes, salt: bytes) -> AccountId:
    """Deterministic address of a contract instantiated with these parameters."""
    return AccountId(
        blake2b_256(_ADDR_PREFIX + deployer.raw + bytes(code_hash) + bytes(data) + bytes(salt))
    )


__all__ = ["MAX_CALL_DEPTH", "CallOutcome", "LocalChain", "contract_address", "placeholder_wasm"]
