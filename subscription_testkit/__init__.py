"""
subscription_testkit

In-memory fixtures, renewal helpers and assertions for testing code built on
a subscriptions plugin.
"""

from .assertions import AssertionOutcome, SubscriptionAssertions
from .backends import HostBackend, create_backend
from .clock import FixtureClock
from .config import TestkitConfig, LoggingConfig, configure_logging, get_settings
from .factory import create_fixture_manager
from .fixture_factory import SubscriptionFixtureFactory
from .lifecycle import FixtureManager
from .models import (
    BillingPeriod,
    DateType,
    LineItem,
    OrderRelation,
    OrderStatus,
    Product,
    ProductType,
    SubscriptionStatus,
)
from .protocols import (
    BackendConfigurationError,
    DateOrderError,
    IncompleteTrialError,
    InvalidDateError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    SubscriptionTestkitError,
    SubscriptionValidationError,
)
from .recurring_cart import RecurringCart
from .renewal import RenewalGenerator
from .scheduler import InMemoryJobScheduler, JobRegistry
from .store import InMemoryStore
from .subscription_mock import Order, SubscriptionMock

__version__ = "0.1.0"

__all__ = [
    # Lifecycle
    "FixtureManager",
    "create_fixture_manager",
    # Components
    "SubscriptionFixtureFactory",
    "RenewalGenerator",
    "RecurringCart",
    "SubscriptionAssertions",
    "AssertionOutcome",
    # Backends
    "InMemoryStore",
    "HostBackend",
    "create_backend",
    "InMemoryJobScheduler",
    "JobRegistry",
    "FixtureClock",
    # Entities
    "Order",
    "SubscriptionMock",
    "LineItem",
    "Product",
    # Enums
    "SubscriptionStatus",
    "OrderStatus",
    "BillingPeriod",
    "OrderRelation",
    "DateType",
    "ProductType",
    # Config
    "TestkitConfig",
    "LoggingConfig",
    "configure_logging",
    "get_settings",
    # Errors
    "SubscriptionTestkitError",
    "SubscriptionValidationError",
    "InvalidDateError",
    "DateOrderError",
    "InvalidStatusError",
    "IncompleteTrialError",
    "InvalidStatusTransitionError",
    "BackendConfigurationError",
]
