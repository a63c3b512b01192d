"""
Backend strategies

Two implementations of SubscriptionBackendProtocol: the in-memory store and
HostBackend, which forwards to a host-provided capability object. The
strategy is chosen once, from configuration, when the fixture manager is
built.
"""
import logging
from typing import Any, List, Optional

from .clock import FixtureClock
from .config import BACKEND_HOST, BACKEND_MEMORY, TestkitConfig
from .models import Product
from .protocols import BackendConfigurationError, SubscriptionBackendProtocol
from .store import InMemoryStore

logger = logging.getLogger(__name__)

REQUIRED_HOST_METHODS = (
    "new_subscription",
    "new_order",
    "save_order",
    "get_order",
    "delete_order",
    "save_product",
    "get_product",
    "delete_product",
    "next_item_id",
    "update_meta",
    "get_meta",
    "find_ids_by_meta",
)


class HostBackend:
    """Delegates persistence and renewal construction to a host object"""

    name = BACKEND_HOST

    def __init__(self, host: Any, clock: Optional[FixtureClock] = None):
        missing = [m for m in REQUIRED_HOST_METHODS if not callable(getattr(host, m, None))]
        if missing:
            raise BackendConfigurationError(
                f"Host object {type(host).__name__} is missing: {', '.join(missing)}"
            )
        self.host = host
        self.clock = clock or FixtureClock()
        self._renewal_factory = getattr(host, "create_renewal_order", None)
        if not callable(self._renewal_factory):
            self._renewal_factory = None
        logger.info(
            f"HostBackend initialized (renewal orders: "
            f"{'host' if self._renewal_factory else 'manual'})"
        )

    def new_subscription(self, **data: Any) -> Any:
        return self.host.new_subscription(**data)

    def new_order(self) -> Any:
        return self.host.new_order()

    def save_order(self, order: Any) -> int:
        return self.host.save_order(order)

    def get_order(self, order_id: int) -> Optional[Any]:
        return self.host.get_order(order_id)

    def delete_order(self, order_id: int) -> bool:
        return bool(self.host.delete_order(order_id))

    def save_product(self, product: Product) -> int:
        return self.host.save_product(product)

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.host.get_product(product_id)

    def delete_product(self, product_id: int) -> bool:
        return bool(self.host.delete_product(product_id))

    def next_item_id(self) -> int:
        return self.host.next_item_id()

    def update_meta(self, object_id: int, key: str, value: Any) -> None:
        self.host.update_meta(object_id, key, value)

    def get_meta(self, object_id: int, key: str) -> Optional[Any]:
        return self.host.get_meta(object_id, key)

    def find_ids_by_meta(self, key: str, value: Any) -> List[int]:
        return list(self.host.find_ids_by_meta(key, value))

    @property
    def supports_renewal_orders(self) -> bool:
        return self._renewal_factory is not None

    def create_renewal_order(self, subscription: Any) -> Optional[Any]:
        """Host renewal construction; None lets the caller build one manually"""
        if self._renewal_factory is None:
            return None
        try:
            return self._renewal_factory(subscription)
        except Exception as e:
            logger.warning(f"Host renewal order creation failed, building manually: {e}")
            return None


def create_backend(
    config: Optional[TestkitConfig] = None,
    host: Optional[Any] = None,
    clock: Optional[FixtureClock] = None,
) -> SubscriptionBackendProtocol:
    """
    Build the backend strategy named by config.backend.

    Args:
        config: Testkit configuration (defaults to TestkitConfig())
        host: Host capability object, required for the host backend
        clock: Clock shared with the fixture manager

    Returns:
        InMemoryStore or HostBackend
    """
    config = config or TestkitConfig()

    if config.backend == BACKEND_MEMORY:
        return InMemoryStore(clock=clock)

    if config.backend == BACKEND_HOST:
        if host is None:
            raise BackendConfigurationError("Host backend selected but no host object given")
        return HostBackend(host, clock=clock)

    raise BackendConfigurationError(
        f"Unknown backend '{config.backend}', expected '{BACKEND_MEMORY}' or '{BACKEND_HOST}'"
    )
