"""
ink_wrapper_types.local
=======================

An in-process contracts chain plus connections implementing both
capabilities on top of it. Useful for testing generated wrappers offline:

    chain = LocalChain()
    code_hash = chain.register_code(FlipperLogic)
    signed = LocalSignedConnection(chain)
    flipper = await signed.instantiate(Flipper.new(code_hash, False))
"""

from .chain import CallOutcome, LocalChain, contract_address, placeholder_wasm  # noqa: F401
from .connection import DEFAULT_SIGNER, LocalConnection, LocalSignedConnection  # noqa: F401
from .contract import CallContext, LocalContract, constructor, message  # noqa: F401

__all__ = [
    "CallOutcome",
    "LocalChain",
    "contract_address",
    "placeholder_wasm",
    "DEFAULT_SIGNER",
    "LocalConnection",
    "LocalSignedConnection",
    "CallContext",
    "LocalContract",
    "constructor",
    "message",
]
