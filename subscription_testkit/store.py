"""
In-memory backend

Process-local store for subscriptions, orders, products and metadata. This is
the "memory" backend strategy; it keeps insertion order everywhere so
metadata queries return records in creation order.
"""
import logging
from itertools import count
from typing import Any, Dict, List, Optional

from .clock import FixtureClock
from .models import Product
from .subscription_mock import Order, SubscriptionMock

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Mock backend for the fixture factory and renewal generator"""

    name = "memory"

    def __init__(self, clock: Optional[FixtureClock] = None):
        self.clock = clock or FixtureClock()
        self._ids = count(1)
        self._item_ids = count(1)
        self._orders: Dict[int, Any] = {}
        self._products: Dict[int, Product] = {}
        self._meta: Dict[int, Dict[str, Any]] = {}
        logger.info("InMemoryStore initialized")

    # ====================
    # Entity construction
    # ====================

    def new_subscription(self, **data: Any) -> SubscriptionMock:
        return SubscriptionMock(store=self, **data)

    def new_order(self) -> Order:
        return Order(store=self)

    # ====================
    # Orders and subscriptions
    # ====================

    def save_order(self, order: Any) -> int:
        order_id = order.get_id()
        if not order_id:
            order_id = next(self._ids)
            order.set_id(order_id)
        self._orders[order_id] = order
        return order_id

    def get_order(self, order_id: int) -> Optional[Any]:
        return self._orders.get(order_id)

    def delete_order(self, order_id: int) -> bool:
        """Delete an order and its metadata; deleting twice is a no-op"""
        self._meta.pop(order_id, None)
        deleted = self._orders.pop(order_id, None) is not None
        if deleted:
            logger.debug(f"Deleted order {order_id}")
        return deleted

    def get_orders(self, order_type: Optional[str] = None) -> List[Any]:
        return [
            order for order in self._orders.values()
            if order_type is None or order.get_type() == order_type
        ]

    # ====================
    # Products
    # ====================

    def save_product(self, product: Product) -> int:
        if not product.product_id:
            product.product_id = next(self._ids)
        self._products[product.product_id] = product
        return product.product_id

    def get_product(self, product_id: int) -> Optional[Product]:
        if not product_id:
            return None
        return self._products.get(product_id)

    def delete_product(self, product_id: int) -> bool:
        self._meta.pop(product_id, None)
        product = self._products.pop(product_id, None)
        if product is None:
            return False
        if product.parent_id and product.parent_id in self._products:
            parent = self._products[product.parent_id]
            parent.children = [c for c in parent.children if c != product_id]
        logger.debug(f"Deleted product {product_id}")
        return True

    def next_item_id(self) -> int:
        return next(self._item_ids)

    # ====================
    # Metadata
    # ====================

    def update_meta(self, object_id: int, key: str, value: Any) -> None:
        self._meta.setdefault(object_id, {})[key] = value

    def get_meta(self, object_id: int, key: str) -> Optional[Any]:
        return self._meta.get(object_id, {}).get(key)

    def find_ids_by_meta(self, key: str, value: Any) -> List[int]:
        return [
            object_id for object_id, meta in self._meta.items()
            if key in meta and str(meta[key]) == str(value)
        ]

    # ====================
    # Renewal capability
    # ====================

    @property
    def supports_renewal_orders(self) -> bool:
        return False

    def create_renewal_order(self, subscription: Any) -> Optional[Any]:
        return None

    def reset(self) -> None:
        """Drop every record"""
        self._orders.clear()
        self._products.clear()
        self._meta.clear()
