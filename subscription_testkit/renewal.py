"""
Renewal Generator

Creates renewal orders for subscriptions, moves them through payment or
failure, and schedules next payments.

Renewal order lifecycle: pending -> completed (payment) | failed (fail).
Retries are not modelled; reschedule with schedule_next_payment.
"""

import logging
from typing import Any, List, Optional

from .dates import to_timestamp
from .models import (
    RELATION_META_KEYS,
    DateType,
    LineItem,
    OrderRelation,
    OrderStatus,
)
from .protocols import (
    InvalidStatusTransitionError,
    JobSchedulerProtocol,
    SubscriptionBackendProtocol,
)
from .scheduler import PAYMENT_HOOK

logger = logging.getLogger(__name__)


class RenewalGenerator:
    """Renewal order construction and payment helpers"""

    def __init__(
        self,
        backend: SubscriptionBackendProtocol,
        scheduler: Optional[JobSchedulerProtocol] = None,
    ):
        self.backend = backend
        self.scheduler = scheduler
        logger.info("RenewalGenerator initialized")

    def create_renewal_order(self, subscription: Any, status: Any = OrderStatus.PENDING) -> Any:
        """
        Create a renewal order for a subscription.

        Uses the backend's renewal construction when it has one, otherwise
        copies the subscription's line items verbatim (no re-pricing) into a
        new order linked back through renewal metadata.

        Args:
            subscription: Source subscription
            status: Status for the new order (default pending)

        Returns:
            The saved renewal order
        """
        renewal_order = None
        if self.backend.supports_renewal_orders:
            renewal_order = self.backend.create_renewal_order(subscription)

        if renewal_order is None:
            renewal_order = self._build_renewal_order(subscription)

        renewal_order.set_status(status)
        renewal_order.save()
        logger.debug(
            f"Created renewal order {renewal_order.get_id()} "
            f"for subscription {subscription.get_id()}"
        )
        return renewal_order

    def _build_renewal_order(self, subscription: Any) -> Any:
        renewal_order = self.backend.new_order()

        for item in subscription.get_items():
            renewal_order.add_item(LineItem(
                product_id=item.product_id,
                variation_id=item.variation_id,
                name=item.name,
                quantity=item.quantity,
                subtotal=item.subtotal,
                total=item.total,
            ))

        renewal_order.set_customer_id(subscription.get_customer_id())

        # Save first so the order has an ID to hang the back-reference on
        renewal_order.save()
        self.backend.update_meta(
            renewal_order.get_id(),
            RELATION_META_KEYS[OrderRelation.RENEWAL],
            subscription.get_id(),
        )

        renewal_order.calculate_totals()
        return renewal_order

    def process_renewal_payment(self, renewal_order: Any) -> None:
        self._require_pending(renewal_order, OrderStatus.COMPLETED)
        renewal_order.payment_complete()

    def fail_renewal_payment(self, renewal_order: Any, reason: str = "") -> None:
        """Mark a renewal order failed, keeping the reason as an order note"""
        self._require_pending(renewal_order, OrderStatus.FAILED)
        renewal_order.update_status(OrderStatus.FAILED, reason)

    @staticmethod
    def _require_pending(renewal_order: Any, target: OrderStatus) -> None:
        current = renewal_order.get_status()
        if current != OrderStatus.PENDING:
            raise InvalidStatusTransitionError(
                f"Renewal order {renewal_order.get_id()} cannot move from "
                f"{getattr(current, 'value', current)} to {target.value}"
            )

    def get_renewal_orders(self, subscription: Any) -> List[int]:
        return subscription.get_related_orders(OrderRelation.RENEWAL)

    def trigger_early_renewal(self, subscription: Any) -> Any:
        return self.create_renewal_order(subscription)

    def schedule_next_payment(self, subscription: Any, date: Any) -> None:
        """
        Set the next payment date and schedule the payment job.

        Scheduling is best effort: a missing scheduler is a no-op and
        scheduler errors are logged, not raised.
        """
        subscription.update_dates({DateType.NEXT_PAYMENT: date})
        subscription.save()

        if self.scheduler is None:
            return

        try:
            self.scheduler.schedule_single_action(
                to_timestamp(date),
                PAYMENT_HOOK,
                {"subscription_id": subscription.get_id()},
            )
        except Exception as e:
            logger.warning(
                f"Failed to schedule payment for subscription {subscription.get_id()}: {e}"
            )
