"""
Value types: account ids, transaction handles and call descriptors.
"""

from .calls import ExecCall, InstantiateCall, ReadCall, UploadCall  # noqa: F401
from .core import ACCOUNT_ID_LEN, AccountId, Hash, TxInfo  # noqa: F401

__all__ = [
    "ACCOUNT_ID_LEN",
    "AccountId",
    "Hash",
    "TxInfo",
    "InstantiateCall",
    "ExecCall",
    "ReadCall",
    "UploadCall",
]
