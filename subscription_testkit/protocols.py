"""
Subscription Testkit Protocols (Interfaces)

These interfaces define the host capability surface the fixture factory,
renewal generator and fixture manager depend on.
NO import-time I/O dependencies - safe to import anywhere.
"""
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .models import Product


# Custom exceptions - defined here so every layer can import them
class SubscriptionTestkitError(Exception):
    """Base exception for subscription testkit errors"""
    pass


class SubscriptionValidationError(SubscriptionTestkitError, ValueError):
    """Invalid fixture input"""
    pass


class InvalidDateError(SubscriptionValidationError):
    """Date value cannot be parsed"""
    pass


class DateOrderError(SubscriptionValidationError):
    """Subscription dates violate the start/trial/next payment ordering"""
    pass


class InvalidStatusError(SubscriptionValidationError):
    """Unknown subscription or order status"""
    pass


class IncompleteTrialError(SubscriptionValidationError):
    """Only one of trial_length/trial_period supplied in strict mode"""
    pass


class InvalidStatusTransitionError(SubscriptionTestkitError):
    """Status change not allowed from the current status"""
    pass


class BackendConfigurationError(SubscriptionTestkitError):
    """Backend strategy cannot be built from the given configuration"""
    pass


@runtime_checkable
class SubscriptionBackendProtocol(Protocol):
    """
    Interface for the backing store / host capability surface.

    Implementations must provide these methods.
    Selected once when the fixture manager is built.
    """

    name: str

    def new_subscription(self, **data: Any) -> Any:
        """Build an unsaved subscription entity"""
        ...

    def new_order(self) -> Any:
        """Build an unsaved order-like record"""
        ...

    def save_order(self, order: Any) -> int:
        """Persist an order or subscription, returning its ID"""
        ...

    def get_order(self, order_id: int) -> Optional[Any]:
        """Get an order or subscription by ID"""
        ...

    def delete_order(self, order_id: int) -> bool:
        """Delete an order or subscription by ID"""
        ...

    def save_product(self, product: Product) -> int:
        """Persist a product, returning its ID"""
        ...

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get a product by ID"""
        ...

    def delete_product(self, product_id: int) -> bool:
        """Delete a product by ID"""
        ...

    def next_item_id(self) -> int:
        """Allocate a line item ID"""
        ...

    def update_meta(self, object_id: int, key: str, value: Any) -> None:
        """Store a metadata value"""
        ...

    def get_meta(self, object_id: int, key: str) -> Optional[Any]:
        """Read a metadata value"""
        ...

    def find_ids_by_meta(self, key: str, value: Any) -> List[int]:
        """IDs of all records whose metadata key equals value"""
        ...

    @property
    def supports_renewal_orders(self) -> bool:
        """Whether create_renewal_order is provided by the host"""
        ...

    def create_renewal_order(self, subscription: Any) -> Optional[Any]:
        """Host-provided renewal order construction"""
        ...


@runtime_checkable
class JobSchedulerProtocol(Protocol):
    """Interface for the job scheduler"""

    def schedule_single_action(
        self, timestamp: int, hook: str, args: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Schedule a one-shot job"""
        ...

    def unschedule_all_actions(self, hook: str) -> int:
        """Remove all pending jobs for a hook"""
        ...


@runtime_checkable
class AssertionSurfaceProtocol(Protocol):
    """Interface for the test runner's failure reporting"""

    def fail(self, message: str) -> None:
        """Report a failed assertion"""
        ...
