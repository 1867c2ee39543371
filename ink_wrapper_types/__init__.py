"""
ink_wrapper_types: typed call descriptors, connection capabilities and
event demultiplexing for generated ink! contract wrappers.

Convenience exports for the most common APIs.
"""

from .version import __version__  # noqa: F401

# Config & errors
from .config import Config  # noqa: F401
from .errors import (  # noqa: F401
    CodeHashMismatchError,
    DecodeError,
    EncodeError,
    InkLangError,
    InkWrapperError,
    LangError,
    TransactionFailedError,
    TransactionNotFoundError,
    TransportError,
    UnsupportedOperationError,
)

# Types & descriptors
from .types import AccountId, ExecCall, InstantiateCall, ReadCall, TxInfo, UploadCall  # noqa: F401

# Capabilities
from .connection import Connection, SignedConnection  # noqa: F401

# Events
from .events import ContractEvent, ContractEvents, DecodedEvent, EventSource  # noqa: F401

# Wrapper base
from .contract import ContractRef, encode_message  # noqa: F401

# Codec
from .utils import scale  # noqa: F401

__all__ = [
    "__version__",
    # Config & errors
    "Config",
    "InkWrapperError", "TransportError", "TransactionNotFoundError",
    "TransactionFailedError", "DecodeError", "EncodeError", "LangError",
    "InkLangError", "UnsupportedOperationError", "CodeHashMismatchError",
    # Types
    "AccountId", "TxInfo",
    "InstantiateCall", "ExecCall", "ReadCall", "UploadCall",
    # Capabilities
    "Connection", "SignedConnection",
    # Events
    "ContractEvent", "ContractEvents", "DecodedEvent", "EventSource",
    # Wrapper base
    "ContractRef", "encode_message",
    # Codec
    "scale",
]
