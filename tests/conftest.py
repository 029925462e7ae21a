# tests/conftest.py

from __future__ import annotations

import pytest

from taskdeck.engine.store import TaskStore

from fakes import NOW, FakeClock, MemoryStorage


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> TaskStore:
    """
    Empty store with a frozen clock, so ids and timestamps are deterministic.
    """
    return TaskStore(clock=clock, now=lambda: NOW)


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()
