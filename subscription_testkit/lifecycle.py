"""
Fixture lifecycle

FixtureManager owns the fixtures created during one test: it tracks
subscription, renewal order and product IDs as they are created, deletes
them (FIFO per list) on tear down, and unschedules every registered job hook
both before and after the test.
"""

import logging
from typing import Any, Dict, List, Optional

from .assertions import SubscriptionAssertions
from .clock import FixtureClock
from .config import TestkitConfig
from .fixture_factory import SubscriptionFixtureFactory
from .models import OrderStatus, Product
from .protocols import (
    JobSchedulerProtocol,
    SubscriptionBackendProtocol,
    SubscriptionValidationError,
)
from .recurring_cart import RecurringCart
from .renewal import RenewalGenerator
from .scheduler import JobRegistry
from .subscription_mock import resolve_date_type

logger = logging.getLogger(__name__)


class FixtureManager:
    """Per-test fixture tracking and cleanup"""

    def __init__(
        self,
        backend: SubscriptionBackendProtocol,
        scheduler: Optional[JobSchedulerProtocol] = None,
        job_registry: Optional[JobRegistry] = None,
        config: Optional[TestkitConfig] = None,
        clock: Optional[FixtureClock] = None,
        assertions: Optional[SubscriptionAssertions] = None,
    ):
        self.config = config or TestkitConfig()
        self.clock = clock or getattr(backend, "clock", None) or FixtureClock()
        self.backend = backend
        self.scheduler = scheduler
        self.job_registry = job_registry or JobRegistry(self.config.job_hooks)

        self.factory = SubscriptionFixtureFactory(backend, config=self.config, clock=self.clock)
        self.renewals = RenewalGenerator(backend, scheduler=scheduler)
        self.cart = RecurringCart(backend)
        self.assertions = assertions or SubscriptionAssertions()

        self.subscription_ids: List[int] = []
        self.renewal_order_ids: List[int] = []
        self.product_ids: List[int] = []
        self._active = False

    # ====================
    # Lifecycle
    # ====================

    def set_up(self) -> "FixtureManager":
        self.clear_scheduled_subscription_events()
        self.subscription_ids = []
        self.renewal_order_ids = []
        self.product_ids = []
        self._active = True
        return self

    def tear_down(self) -> None:
        for subscription_id in self.subscription_ids:
            self.backend.delete_order(subscription_id)

        for order_id in self.renewal_order_ids:
            self.backend.delete_order(order_id)

        for product_id in self.product_ids:
            self.backend.delete_product(product_id)

        logger.debug(
            f"Tore down {len(self.subscription_ids)} subscriptions, "
            f"{len(self.renewal_order_ids)} renewal orders, {len(self.product_ids)} products"
        )
        self.subscription_ids = []
        self.renewal_order_ids = []
        self.product_ids = []

        self.clear_scheduled_subscription_events()
        self.clock.reset()
        self._active = False

    def __enter__(self) -> "FixtureManager":
        return self.set_up()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.tear_down()

    @property
    def active(self) -> bool:
        return self._active

    def clear_scheduled_subscription_events(self) -> Dict[str, int]:
        """Unschedule all pending jobs for every registered hook"""
        removed: Dict[str, int] = {}
        if self.scheduler is None:
            return removed
        for hook in self.job_registry.hooks:
            removed[hook] = self.scheduler.unschedule_all_actions(hook) or 0
        return removed

    # ====================
    # Tracked fixture creation
    # ====================

    def create_subscription(self, **args: Any) -> Any:
        subscription = self.factory.create_subscription(**args)
        self.track_subscription(subscription.get_id())
        return subscription

    def get_mock_subscription(self, **args: Any) -> Any:
        """Unsaved subscription from the configured backend"""
        return self.backend.new_subscription(**args)

    def create_subscription_product(self, **args: Any) -> Product:
        product = self.factory.create_subscription_product(**args)
        self.track_product(product.product_id)
        return product

    def create_variable_subscription(self, variations=(), **args: Any) -> Product:
        product = self.factory.create_variable_subscription(variations, **args)
        self.track_product(product.product_id)
        for child_id in product.children:
            self.track_product(child_id)
        return product

    def add_product(self, subscription: Any, product_id: int, **args: Any) -> int:
        return self.factory.add_product(subscription, product_id, **args)

    def create_renewal_order(self, subscription: Any, status: Any = OrderStatus.PENDING) -> Any:
        renewal_order = self.renewals.create_renewal_order(subscription, status=status)
        self.track_renewal_order(renewal_order.get_id())
        return renewal_order

    def trigger_early_renewal(self, subscription: Any) -> Any:
        renewal_order = self.renewals.trigger_early_renewal(subscription)
        self.track_renewal_order(renewal_order.get_id())
        return renewal_order

    def track_subscription(self, subscription_id: int) -> None:
        if subscription_id and subscription_id not in self.subscription_ids:
            self.subscription_ids.append(subscription_id)

    def track_renewal_order(self, order_id: int) -> None:
        if order_id and order_id not in self.renewal_order_ids:
            self.renewal_order_ids.append(order_id)

    def track_product(self, product_id: int) -> None:
        if product_id and product_id not in self.product_ids:
            self.product_ids.append(product_id)

    # ====================
    # Time helpers
    # ====================

    def mock_subscription_date(self, subscription: Any, date_type: Any, date: Any) -> None:
        """Set a subscription date and mirror it to the _schedule_<type> meta key"""
        resolved = resolve_date_type(date_type)
        if resolved is None:
            raise SubscriptionValidationError(f"Unknown date type '{date_type}'")
        key = resolved.value
        subscription.update_dates({key: date})
        self.backend.update_meta(subscription.get_id(), f"_schedule_{key}", date)

    def fast_forward_time(self, seconds: float) -> int:
        """Move the fixture clock forward; returns the new timestamp"""
        self.clock.advance(seconds)
        return self.clock.timestamp()
