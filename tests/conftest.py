"""
tests/conftest.py -- Shared fixtures for credfile tests.

This module provides:
  - store / plain_store: stores backed by a fresh file under tmp_path
  - FakeClock / clock: a manually advanced clock for session expiry tests

CREDFILE_BCRYPT_ROUNDS must be set before any auth import so the module-level
settings in auth.passwords pick up the minimum bcrypt cost. At the default
cost of 12 every add() takes a few hundred milliseconds.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

# CRITICAL: Set before any auth/core import so get_settings() sees it.
os.environ.setdefault("CREDFILE_BCRYPT_ROUNDS", "4")

import pytest

from auth.store import CredentialStore, PlainStore

# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "credentials.suc"


@pytest.fixture
def store(store_path: Path) -> Generator[CredentialStore, None, None]:
    s = CredentialStore.open(store_path)
    yield s
    s.close()


@pytest.fixture
def plain_store(tmp_path: Path) -> Generator[PlainStore, None, None]:
    s = PlainStore.open(tmp_path / "plain.suc")
    yield s
    s.close()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable clock for SessionPool that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
