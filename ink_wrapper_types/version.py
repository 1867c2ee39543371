"""
Package version.

`__version__` is the released (PEP 440) version. In a source checkout,
`version()` appends what `git describe` reports, which helps when filing
bug reports against unreleased builds.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

__version__ = "0.5.0"

# How many parent directories to search for a checkout root.
_MAX_ROOT_DEPTH = 6


@dataclass(frozen=True)
class VersionInfo:
    base: str
    git: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.base} ({self.git})" if self.git else self.base


def _checkout_root(start: Path) -> Optional[Path]:
    for candidate in [start, *start.parents][:_MAX_ROOT_DEPTH]:
        if (candidate / ".git").exists():
            return candidate
    return None


def _git_describe(start: Optional[Path] = None) -> Optional[str]:
    """`git describe --tags --dirty --always` for a source checkout, else None."""
    root = _checkout_root(start or Path(__file__).resolve().parent)
    if root is None:
        return None
    try:
        proc = subprocess.run(
            ["git", "describe", "--tags", "--dirty", "--always"],
            cwd=root,
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    return proc.stdout.strip() or None


def version_info() -> VersionInfo:
    return VersionInfo(base=__version__, git=_git_describe())


def version() -> str:
    """E.g. `0.5.0` or `0.5.0 (v0.5.0-3-gabc1234)`."""
    return str(version_info())


__all__ = ["__version__", "VersionInfo", "version_info", "version"]
