"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.scheduling import PersistenceReadError, PersistenceWriteError, ReviewRecord, ReviewScheduler  # noqa: E402
from src.storage import InMemoryReviewStore  # noqa: E402

FIXED_NOW = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FailingReviewStore:
    """Store whose reads and/or writes always fail."""

    def __init__(self, items=None, fail_reads=True, fail_writes=True):
        self._items = list(items or [])
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.save_count = 0

    async def get_review_items(self):
        if self.fail_reads:
            raise PersistenceReadError("storage unavailable")
        return list(self._items)

    async def save_review_items(self, items):
        if self.fail_writes:
            raise PersistenceWriteError("disk full")
        self._items = list(items)
        self.save_count += 1


@pytest.fixture
def now():
    """The instant every scheduler fixture treats as 'now'."""
    return FIXED_NOW


@pytest.fixture
def clock(now):
    return lambda: now


@pytest.fixture
def make_record(now):
    """Build a ReviewRecord due `days` from now."""
    def _make(module_id, days=0.0, interval_days=1, ease_factor=2.5, repetition=0):
        return ReviewRecord(
            module_id=module_id,
            next_review=now + timedelta(days=days),
            interval_days=interval_days,
            ease_factor=ease_factor,
            repetition=repetition,
        )
    return _make


@pytest.fixture
def memory_store():
    return InMemoryReviewStore()


@pytest.fixture
def scheduler(memory_store, clock):
    return ReviewScheduler(memory_store, clock=clock)


@pytest.fixture
def make_failing_store():
    """Factory for stores that raise persistence errors."""
    return FailingReviewStore


@pytest.fixture
def failing_store():
    return FailingReviewStore()
