"""
ink_wrapper_types.cli
=====================

Command-line interface, exposed via the `ink-wrapper-types` console script.
Typer is only imported when the CLI is actually used.

Quick usage
-----------
- From Python:
    >>> from ink_wrapper_types.cli import main
    >>> main()  # runs the CLI

- From shell:
    $ ink-wrapper-types --help
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, List

__all__: List[str] = ["main", "run", "app"]

_SUBMODULE = "ink_wrapper_types.cli.main"
_EXPOSE = ("app", "main", "run")


def __getattr__(name: str) -> Any:  # PEP 562 lazy attribute access
    if name in _EXPOSE:
        return getattr(import_module(_SUBMODULE), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
