"""
Shared pytest fixtures for sessionx tests.

This module provides common fixtures including:
- FakeClock: Controllable time source for expiry and rotation tests
- Session managers for embedded and store-backed modes
- Redis mocks for store tests
"""

import os
import sys
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sessionx.modules.session import SessionManager, dev_config
from sessionx.modules.storage import InMemoryStore

KEY_16 = b"0123456789abcdef"
KEY_24 = b"0123456789abcdef01234567"
KEY_32 = b"0123456789abcdef0123456789abcdef"


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    """Development config: 1 hour expiry, 15 minute rotation."""
    return dev_config(KEY_32, max_age=3600, rotation_interval=900)


@pytest.fixture
def manager(config, clock):
    return SessionManager(config, clock=clock)


@pytest.fixture
def memory_store(clock):
    return InMemoryStore(clock=clock)


@pytest.fixture
def store_manager(config, clock, memory_store):
    return SessionManager(config.with_options(store=memory_store), clock=clock)


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock async Redis client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock(return_value=1)
    redis.close = AsyncMock()
    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}
    ttls = {}

    redis = AsyncMock()

    async def mock_set(key, value, *args, **kwargs):
        storage[key] = value
        return True

    async def mock_setex(key, ttl, value):
        storage[key] = value
        ttls[key] = ttl
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                count += 1
        return count

    redis.set = mock_set
    redis.setex = mock_setex
    redis.get = mock_get
    redis.delete = mock_delete
    redis._storage = storage  # Expose for test assertions
    redis._ttls = ttls

    return redis


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
