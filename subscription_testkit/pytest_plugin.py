"""
pytest integration

Fixtures for tests that use the subscription testkit. Loaded automatically
through the pytest11 entry point, or explicitly with::

    pytest_plugins = ["subscription_testkit.pytest_plugin"]
"""
from dataclasses import replace
from typing import Generator

import pytest

from .assertions import SubscriptionAssertions
from .config import TestkitConfig, get_settings
from .factory import create_fixture_manager
from .lifecycle import FixtureManager


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "subscription_testkit(**settings): override TestkitConfig fields for a test"
    )


@pytest.fixture
def subscription_testkit_config(request) -> TestkitConfig:
    """Testkit settings, with per-test overrides from the subscription_testkit marker"""
    base = get_settings()
    marker = request.node.get_closest_marker("subscription_testkit")
    if marker is None:
        return base
    return replace(base, **marker.kwargs)


@pytest.fixture
def subscription_fixtures(subscription_testkit_config) -> Generator[FixtureManager, None, None]:
    """Fixture manager set up before the test and torn down after it"""
    manager = create_fixture_manager(subscription_testkit_config)
    with manager:
        yield manager


@pytest.fixture
def subscription_assertions() -> SubscriptionAssertions:
    """Assertions that raise AssertionError on failure"""
    return SubscriptionAssertions()
