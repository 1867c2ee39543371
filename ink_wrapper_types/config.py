"""
Runtime configuration: local-chain behavior and logging.

- Loads sane defaults and supports overrides via environment variables (INK_WRAPPER_*).
- Validates values eagerly so misconfiguration fails at startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .utils.bytes import ensure_bytes

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _parse_bool(val: Any, default: bool) -> bool:
    if val is None or val == "":
        return default
    if isinstance(val, bool):
        return val
    s = str(val).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"expected a boolean, got {val!r}")


def _parse_level(val: Any) -> str:
    s = str(val or "WARNING").strip().upper()
    if s not in _LEVELS:
        raise ValueError(f"log level must be one of {_LEVELS}, got {val!r}")
    return s


def _parse_delay(val: Any) -> float:
    d = float(val)
    if d < 0:
        raise ValueError(f"finalization_delay must be >= 0, got {d}")
    return d


def _parse_seed(val: Any) -> Optional[bytes]:
    if val is None or val == "":
        return None
    seed = ensure_bytes(val)
    if len(seed) != 32:
        raise ValueError(f"deployer_seed must be 32 bytes, got {len(seed)}")
    return seed


@dataclass(slots=True)
class Config:
    # Local chain
    finalization_delay: float = 0.0
    verify_code_hash: bool = True
    deployer_seed: Optional[bytes] = field(default=None)
    # Logging
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.finalization_delay = _parse_delay(self.finalization_delay)
        self.verify_code_hash = _parse_bool(self.verify_code_hash, True)
        self.deployer_seed = _parse_seed(self.deployer_seed)
        self.log_level = _parse_level(self.log_level)

    @classmethod
    def from_env(cls, prefix: str = "INK_WRAPPER_") -> "Config":
        """
        Create config from environment variables:

        INK_WRAPPER_FINALIZATION_DELAY   (float seconds, local chain)
        INK_WRAPPER_VERIFY_CODE_HASH     (bool, local chain uploads)
        INK_WRAPPER_DEPLOYER_SEED        (32-byte hex, default signer account)
        INK_WRAPPER_LOG_LEVEL            (CRITICAL|ERROR|WARNING|INFO|DEBUG)
        """
        return cls(
            finalization_delay=float(_env(f"{prefix}FINALIZATION_DELAY", "0.0") or 0.0),
            verify_code_hash=_parse_bool(_env(f"{prefix}VERIFY_CODE_HASH"), True),
            deployer_seed=_parse_seed(_env(f"{prefix}DEPLOYER_SEED")),
            log_level=_env(f"{prefix}LOG_LEVEL", "WARNING") or "WARNING",
        )

    @classmethod
    def with_overrides(cls, base: Optional["Config"] = None, **overrides: Any) -> "Config":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored; None values keep the base value.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finalization_delay": float(self.finalization_delay),
            "verify_code_hash": bool(self.verify_code_hash),
            "deployer_seed": self.deployer_seed,
            "log_level": self.log_level,
        }

    def configure_logging(self) -> None:
        """Apply `log_level` to the root logger (CLI entrypoints call this)."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


__all__ = ["Config"]
