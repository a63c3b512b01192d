"""
Component Test Layer Configuration

Components are wired together over the in-memory backend, or over a mocked
host object for the delegating backend.

Usage:
    pytest tests/component -v
"""
import os
import sys

import pytest

# Set testing environment BEFORE any imports
os.environ.setdefault("ENV", "testing")

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from subscription_testkit import (
    FixtureManager,
    JobRegistry,
    RecurringCart,
    RenewalGenerator,
    SubscriptionFixtureFactory,
    TestkitConfig,
)
from tests.component.mocks import MockHost


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "component: marks tests as component tests"
    )


# =============================================================================
# Component Fixtures
# =============================================================================

@pytest.fixture
def testkit_config():
    """Lenient in-memory configuration"""
    return TestkitConfig()


@pytest.fixture
def strict_config():
    """Configuration rejecting partial trial arguments"""
    return TestkitConfig(strict_trial_args=True)


@pytest.fixture
def factory(store, testkit_config, frozen_clock):
    return SubscriptionFixtureFactory(store, config=testkit_config, clock=frozen_clock)


@pytest.fixture
def renewals(store, scheduler):
    return RenewalGenerator(store, scheduler=scheduler)


@pytest.fixture
def cart(store):
    return RecurringCart(store)


@pytest.fixture
def manager(store, scheduler, testkit_config, frozen_clock):
    """Fixture manager that is set up and torn down around the test"""
    fixture_manager = FixtureManager(
        backend=store,
        scheduler=scheduler,
        job_registry=JobRegistry(testkit_config.job_hooks),
        config=testkit_config,
        clock=frozen_clock,
    )
    with fixture_manager:
        yield fixture_manager


@pytest.fixture
def mock_host(frozen_clock):
    """Host capability object without renewal construction"""
    return MockHost(clock=frozen_clock)


@pytest.fixture
def mock_host_with_renewals(frozen_clock):
    """Host capability object that builds its own renewal orders"""
    return MockHost(clock=frozen_clock, with_renewals=True)
