"""
ink_wrapper_types.connection
============================

The two capabilities generated contract wrappers call into:

- `SignedConnection`: mutating operations (code upload, instantiation,
  mutating messages). Each returns once the transaction is finalized.
- `Connection`: non-mutating message reads and event retrieval.

Both are abstract and asynchronous; a transport (an RPC client bound to a
signer, the in-process `ink_wrapper_types.local` chain, ...) implements them.
`TxInfo` is whatever handle the transport uses to identify a finalized
transaction; this layer only passes it back to `get_contract_events`.

Failure classes implementors must keep apart:

- transport faults       -> raise `TransportError` (or a subclass)
- callee routing failure -> raise `InkLangError`
- undecodable result     -> raise `DecodeError`

Nothing here retries. Implementations must be safe to share between
concurrent callers; no operation needs exclusive access to the connection.

Helpers at the bottom of the module implement the shared parts of those
rules so transports do not have to re-derive them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .errors import (CodeHashMismatchError, DecodeError, InkLangError,
                     UnsupportedOperationError)
from .events import ContractEvents
from .types.calls import ExecCall, InstantiateCall, ReadCall, UploadCall
from .utils.bytes import BytesLike, blake2b_256
from .utils.scale import Codec, Err, ScaleReader, lang_error, message_result

log = logging.getLogger(__name__)

TxInfo = TypeVar("TxInfo")
T = TypeVar("T")


class SignedConnection(ABC, Generic[TxInfo]):
    """Invoke mutating operations: upload, constructors and mutating messages."""

    async def upload(self, wasm: bytes, code_hash: bytes) -> TxInfo:
        """
        Upload contract code so it can be instantiated later.

        Optional. The default fails with `UnsupportedOperationError` without
        doing any transport work. Implementations SHOULD check that the
        resulting code hash equals `code_hash` (see `verify_code_hash`).
        """
        raise UnsupportedOperationError("upload", type(self).__name__)

    async def upload_call(self, call: UploadCall) -> TxInfo:
        """Descriptor form of `upload`."""
        return await self.upload(call.wasm, call.code_hash)

    @abstractmethod
    async def instantiate(self, call: InstantiateCall[T]) -> T:
        """
        Instantiate a contract from `call.code_hash` with `call.data` (constructor
        selector + arguments) and `call.salt`, wait for finalization, and return
        `call.contract(<new AccountId>)`.
        """

    @abstractmethod
    async def exec(self, call: ExecCall) -> TxInfo:
        """
        Invoke a mutating message on `call.account_id` with `call.data` and
        return the handle of the finalized transaction.
        """


class Connection(ABC, Generic[TxInfo]):
    """Read from contracts and fetch events."""

    @abstractmethod
    async def read(self, call: ReadCall[T]) -> T:
        """
        Evaluate a non-mutating message without committing a transaction and
        decode its result with `call.returns` (see `decode_message_result`).
        """

    @abstractmethod
    async def get_contract_events(self, tx_info: TxInfo) -> ContractEvents:
        """
        Fetch every event emitted by any contract in the transaction identified by
        `tx_info`, undecoded and in emission order.
        """


# -----------------------------------------------------------------------------
# Helpers for implementors
# -----------------------------------------------------------------------------


def decode_message_result(codec: Codec[T], raw: BytesLike) -> T:
    """
    Decode a message's raw output, `Result<T, LangError>`.

    Returns the `T`; raises `InkLangError` if the callee reported a dispatch
    failure and `DecodeError` if the bytes do not fit the layout.
    """
    result = message_result(codec).decode(raw)
    if isinstance(result, Err):
        log.debug("callee reported dispatch failure %r", result.value)
        raise InkLangError(result.value)
    return result.value


def check_dispatch(raw: BytesLike) -> bytes:
    """
    Inspect the output of a constructor or mutating message without knowing its
    return type. Raises `InkLangError` when the output is `Err(LangError)`;
    otherwise returns the bytes following the `Ok` tag.
    """
    reader = ScaleReader(raw)
    pos = reader.offset
    tag = reader.read_byte("MessageResult")
    if tag == 0:
        return reader.read(reader.remaining)
    if tag == 1:
        raise InkLangError(lang_error.decode_from(reader))
    raise DecodeError(f"invalid Result tag 0x{tag:02x}", "MessageResult", pos)


def code_hash_of(wasm: BytesLike) -> bytes:
    """Code hash the platform assigns to uploaded code (BLAKE2b-256)."""
    return blake2b_256(wasm)


def verify_code_hash(expected: BytesLike, wasm: BytesLike) -> bytes:
    """Raise `CodeHashMismatchError` unless `wasm` hashes to `expected`; return the hash."""
    got = code_hash_of(wasm)
    if got != bytes(expected):
        raise CodeHashMismatchError(expected=bytes(expected), got=got)
    return got


__all__ = [
    "SignedConnection",
    "Connection",
    "decode_message_result",
    "check_dispatch",
    "code_hash_of",
    "verify_code_hash",
]

