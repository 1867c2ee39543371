"""
Connections backed by a `LocalChain`.

- `LocalConnection` implements the read capability (dry-run reads, events).
- `LocalSignedConnection` adds the mutating capability for one signer.

Every mutating call waits `Config.finalization_delay` seconds (0 by default)
before finalizing, then reports failures in this order: transport-level
failure (`TransactionFailedError`), then dispatch failure (`InkLangError`).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, TypeVar

from ..connection import (Connection, SignedConnection, check_dispatch,
                          decode_message_result, verify_code_hash)
from ..errors import TransactionFailedError
from ..events import ContractEvents
from ..types.calls import ExecCall, InstantiateCall, ReadCall
from ..types.core import AccountId, TxInfo
from ..utils.bytes import blake2b_256
from .chain import LocalChain

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SIGNER = AccountId(blake2b_256(b"//Alice"))


class LocalConnection(Connection[TxInfo]):
    """Read capability over a local chain. `origin` is the caller seen by reads."""

    def __init__(self, chain: LocalChain, origin: Optional[AccountId] = None) -> None:
        self.chain = chain
        self.origin = AccountId.coerce(origin) if origin is not None else _default_signer(chain)

    async def read(self, call: ReadCall[T]) -> T:
        await asyncio.sleep(0)
        raw = self.chain.dry_run(self.origin, call.account_id, call.data)
        return decode_message_result(call.returns, raw)

    async def get_contract_events(self, tx_info: TxInfo) -> ContractEvents:
        await asyncio.sleep(0)
        return self.chain.events(tx_info)


class LocalSignedConnection(LocalConnection, SignedConnection[TxInfo]):
    """Both capabilities over a local chain, signing as `signer`."""

    def __init__(self, chain: LocalChain, signer: Optional[AccountId] = None) -> None:
        super().__init__(chain, origin=signer)

    @property
    def signer(self) -> AccountId:
        return self.origin

    async def upload(self, wasm: bytes, code_hash: bytes) -> TxInfo:
        outcome = self.chain.upload(self.signer, bytes(wasm))
        await self._finalize(outcome.tx_info)
        if self.chain.config.verify_code_hash:
            verify_code_hash(code_hash, wasm)
        return outcome.tx_info

    async def instantiate(self, call: InstantiateCall[T]) -> T:
        outcome = self.chain.instantiate(self.signer, call.code_hash, call.data, call.salt)
        await self._finalize(outcome.tx_info)
        check_dispatch(outcome.output)
        if outcome.account_id is None:
            raise TransactionFailedError(
                "instantiation produced no contract account", tx_hash=outcome.tx_info.tx_hash
            )
        return call.contract(outcome.account_id)

    async def exec(self, call: ExecCall) -> TxInfo:
        outcome = self.chain.call(self.signer, call.account_id, call.data)
        await self._finalize(outcome.tx_info)
        check_dispatch(outcome.output)
        return outcome.tx_info

    async def _finalize(self, tx_info: TxInfo) -> None:
        delay = self.chain.config.finalization_delay
        if delay:
            log.debug("waiting %.3fs for finality of block %d", delay, tx_info.block_number)
        await asyncio.sleep(delay)
        self.chain.finalize(tx_info)


def _default_signer(chain: LocalChain) -> AccountId:
    seed = chain.config.deployer_seed
    return AccountId(seed) if seed is not None else DEFAULT_SIGNER


__all__ = ["DEFAULT_SIGNER", "LocalConnection", "LocalSignedConnection"]
