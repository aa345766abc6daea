"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.state.memory import InMemoryStore
from src.state.service import StateService

FIXED_NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
POD_NAME = "kuberhealthy-7d9f8-abcde"


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def clock():
    """A clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def service(memory_store: InMemoryStore, clock) -> StateService:
    """A StateService over an empty in-memory store."""
    return StateService(memory_store, pod_name=POD_NAME, clock=clock)
