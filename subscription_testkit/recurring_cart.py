"""
Recurring cart helpers

Totals and snapshots for the recurring part of a subscription.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from .models import RecurringCartItem
from .protocols import SubscriptionBackendProtocol

logger = logging.getLogger(__name__)


class RecurringCart:
    """Recurring cart calculations against a backend's products"""

    def __init__(self, backend: SubscriptionBackendProtocol):
        self.backend = backend

    def calculate_totals(self, items: Iterable[Dict[str, Any]] = ()) -> Dict[str, Decimal]:
        """
        Sum price x quantity over cart items.

        Each item is a mapping with product_id and an optional quantity
        (default 1). Items whose product cannot be found are skipped.
        """
        subtotal = Decimal("0")
        for item in items:
            product = self.backend.get_product(item.get("product_id", 0))
            if product is None:
                logger.debug(f"Skipping unknown product {item.get('product_id')} in recurring cart")
                continue
            subtotal += product.get_price() * int(item.get("quantity", 1))

        # No recurring discounts or taxes at cart level
        return {"subtotal": subtotal, "total": subtotal}

    def get_recurring_cart(self, subscription: Any) -> List[RecurringCartItem]:
        return [
            RecurringCartItem(
                product_id=item.product_id,
                quantity=item.quantity,
                subtotal=item.subtotal,
                total=item.total,
            )
            for item in subscription.get_items()
        ]

    def calculate_recurring_shipping(self, subscription: Any) -> Decimal:
        return sum(
            (Decimal(str(method.get_total())) for method in subscription.get_shipping_methods()),
            Decimal("0"),
        )

    def calculate_recurring_taxes(self, subscription: Any) -> Decimal:
        return Decimal(str(subscription.get_total_tax()))

    def get_recurring_total(self, subscription: Any) -> Decimal:
        return Decimal(str(subscription.get_total()))
