"""
Small shared helpers: hex/bytes conversion and hashing.
The SCALE codec lives in `ink_wrapper_types.utils.scale`.
"""

from .bytes import blake2b_256, ensure_bytes, from_hex, to_hex  # noqa: F401

__all__ = ["blake2b_256", "ensure_bytes", "from_hex", "to_hex"]
