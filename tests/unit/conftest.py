"""
Unit Test Layer Configuration

Structure:
    tests/unit/
    ├── test_models.py             Enums, pydantic models
    ├── test_dates.py              Date parsing and formatting
    ├── test_subscription_mock.py  Order and subscription entities
    ├── test_store.py              In-memory backend
    ├── test_scheduler.py          Job registry and scheduler
    ├── test_assertions.py         Predicates and assertion surface
    └── test_config.py             Settings and logging

Usage:
    pytest tests/unit -v
    pytest tests/unit -m unit -v
"""
import os
import sys

import pytest

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from subscription_testkit import SubscriptionMock


def pytest_configure(config):
    """Configure custom markers"""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


@pytest.fixture
def subscription(store):
    """Saved monthly subscription starting 2024-01-01"""
    sub = SubscriptionMock(store=store, start_date="2024-01-01 00:00:00")
    sub.save()
    return sub
