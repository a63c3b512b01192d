"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/: Fixture manager, factory, renewals and backends together
    - unit/     : Models, entity mock, store, dates, assertions, config

The subscription_fixtures / subscription_assertions fixtures come from the
installed pytest11 plugin (subscription_testkit.pytest_plugin).
"""
import os
import sys
from datetime import datetime, timezone

import pytest

# Set testing environment BEFORE any imports
os.environ.setdefault("ENV", "testing")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from subscription_testkit import FixtureClock, InMemoryJobScheduler, InMemoryStore


# =============================================================================
# Shared Fixtures
# =============================================================================

FROZEN_AT = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_clock():
    """Clock frozen at 2024-01-01 12:00:00 UTC"""
    return FixtureClock(frozen_at=FROZEN_AT)


@pytest.fixture
def store(frozen_clock):
    """Empty in-memory backend sharing the frozen clock"""
    return InMemoryStore(clock=frozen_clock)


@pytest.fixture
def scheduler():
    """Empty in-memory job scheduler"""
    return InMemoryJobScheduler()
