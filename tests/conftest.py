"""
Shared pytest fixtures:
- anyio backend pinned to asyncio
- A clean environment (no INK_WRAPPER_* leakage from the developer's shell)
- A local chain with the sample contracts registered, plus connections to it
"""
from __future__ import annotations

import os

import pytest

from ink_wrapper_types import Config
from ink_wrapper_types.local import LocalChain, LocalConnection, LocalSignedConnection

from .sample_contracts import CounterLogic


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("INK_WRAPPER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def chain() -> LocalChain:
    return LocalChain(Config())


@pytest.fixture
def counter_code(chain: LocalChain) -> bytes:
    """Code hash of the counter logic, already uploaded."""
    return chain.register_code(CounterLogic)


@pytest.fixture
def signed(chain: LocalChain) -> LocalSignedConnection:
    return LocalSignedConnection(chain)


@pytest.fixture
def conn(chain: LocalChain) -> LocalConnection:
    return LocalConnection(chain)
