"""Shared test fixtures for parlorgames."""

import pytest

from parlorgames.core.store import InMemoryStore

# 2026-10-19 12:00:00 UTC
FIXED_NOW_MS = 1_792_411_200_000


@pytest.fixture
def store():
    """Empty in-memory key-value store."""
    return InMemoryStore()


@pytest.fixture
def clock():
    """Deterministic epoch-ms clock that advances one second per call."""
    ticks = iter(range(FIXED_NOW_MS, FIXED_NOW_MS + 10_000_000, 1000))
    return lambda: next(ticks)
