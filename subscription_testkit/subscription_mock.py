"""
Subscription and order mocks

In-memory stand-ins for the host's order and subscription entities. They
expose the same getter/setter surface as the host objects so fixtures and
assertions work against either.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Type

from .dates import format_date, parse_date, to_timestamp
from .models import (
    DATE_ALIASES,
    RELATION_META_KEYS,
    BillingPeriod,
    DateType,
    LineItem,
    OrderRelation,
    OrderStatus,
    ShippingLine,
    SubscriptionStatus,
)
from .protocols import (
    DateOrderError,
    InvalidStatusError,
    SubscriptionValidationError,
)

logger = logging.getLogger(__name__)


def resolve_date_type(key: Any) -> Optional[DateType]:
    """DateType for a date type, its value or a start_date/end_date alias"""
    if isinstance(key, DateType):
        return key
    if key in DATE_ALIASES:
        return DATE_ALIASES[key]
    try:
        return DateType(key)
    except ValueError:
        return None


class Order:
    """Order-like record: status, customer, line items and totals"""

    order_type = "shop_order"
    status_enum: Type[Any] = OrderStatus
    default_status: Any = OrderStatus.PENDING

    def __init__(
        self,
        store: Optional[Any] = None,
        order_id: int = 0,
        status: Optional[Any] = None,
        customer_id: int = 0,
        parent_id: int = 0,
        payment_method: str = "",
        created_via: str = "",
    ):
        self._store = store
        self._id = order_id
        self._status = self._coerce_status(status or self.default_status)
        self._customer_id = customer_id
        self._parent_id = parent_id
        self._payment_method = payment_method
        self._created_via = created_via
        self._items: Dict[int, LineItem] = {}
        self._shipping: List[ShippingLine] = []
        self._total_tax = Decimal("0")
        self._total = Decimal("0")
        self._notes: List[str] = []
        self._date_paid: Optional[str] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self._id} status={self._status.value}>"

    # Identity

    def get_id(self) -> int:
        return self._id

    def set_id(self, order_id: int) -> None:
        self._id = order_id

    def get_type(self) -> str:
        return self.order_type

    # Status

    def _coerce_status(self, status: Any) -> Any:
        if isinstance(status, str) and status.startswith("wc-"):
            status = status[3:]
        try:
            return self.status_enum(status)
        except ValueError:
            valid = [s.value for s in self.status_enum]
            raise InvalidStatusError(
                f"Invalid {self.get_type()} status '{status}', expected one of {valid}"
            )

    def get_status(self) -> Any:
        return self._status

    def set_status(self, status: Any) -> None:
        self._status = self._coerce_status(status)

    def update_status(self, new_status: Any, note: str = "") -> None:
        """Change status, record an audit note and save"""
        previous = self._status
        self.set_status(new_status)
        message = f"Status changed from {previous.value} to {self._status.value}."
        if note:
            message = f"{note} {message}"
        self.add_order_note(message)
        self.save()

    def add_order_note(self, note: str) -> None:
        self._notes.append(note)

    def get_notes(self) -> List[str]:
        return list(self._notes)

    # Customer / relations / payment

    def get_customer_id(self) -> int:
        return self._customer_id

    def set_customer_id(self, customer_id: int) -> None:
        self._customer_id = customer_id

    def get_parent_id(self) -> int:
        return self._parent_id

    def set_parent_id(self, parent_id: int) -> None:
        self._parent_id = parent_id

    def get_payment_method(self) -> str:
        return self._payment_method

    def set_payment_method(self, payment_method: str) -> None:
        self._payment_method = payment_method

    def get_created_via(self) -> str:
        return self._created_via

    def set_created_via(self, value: str) -> None:
        self._created_via = value

    def get_date_paid(self) -> Optional[str]:
        return self._date_paid

    # Items and totals

    def add_item(self, item: LineItem) -> int:
        if not item.item_id and self._store is not None:
            item.item_id = self._store.next_item_id()
        elif not item.item_id:
            item.item_id = max(self._items, default=0) + 1
        self._items[item.item_id] = item
        return item.item_id

    def get_items(self) -> List[LineItem]:
        return list(self._items.values())

    def get_item(self, item_id: int) -> Optional[LineItem]:
        return self._items.get(item_id)

    def remove_item(self, item_id: int) -> bool:
        return self._items.pop(item_id, None) is not None

    def add_shipping(self, method_id: str, total: Any) -> ShippingLine:
        line = ShippingLine(method_id=method_id, total=total)
        self._shipping.append(line)
        return line

    def get_shipping_methods(self) -> List[ShippingLine]:
        return list(self._shipping)

    def get_shipping_total(self) -> Decimal:
        return sum((line.total for line in self._shipping), Decimal("0"))

    def get_total_tax(self) -> Decimal:
        return self._total_tax

    def set_total_tax(self, amount: Any) -> None:
        self._total_tax = Decimal(str(amount))

    def calculate_totals(self) -> Decimal:
        """Recompute the order total from items, shipping and tax"""
        items_total = sum((item.total for item in self._items.values()), Decimal("0"))
        self._total = items_total + self.get_shipping_total() + self._total_tax
        return self._total

    def get_subtotal(self) -> Decimal:
        return sum((item.subtotal for item in self._items.values()), Decimal("0"))

    def get_total(self) -> Decimal:
        return self._total

    def set_total(self, amount: Any) -> None:
        self._total = Decimal(str(amount))

    # Payment / persistence

    def payment_complete(self) -> None:
        self._date_paid = format_date(self._now())
        self.update_status(OrderStatus.COMPLETED, "Payment complete.")

    def _now(self) -> datetime:
        clock = getattr(self._store, "clock", None)
        if clock is not None:
            return clock.now()
        return datetime.now(timezone.utc)

    def save(self) -> int:
        if self._store is not None:
            self._id = self._store.save_order(self)
        return self._id


class SubscriptionMock(Order):
    """
    In-memory subscription entity.

    Stands in for the host subscription when no host backend is configured.
    Dates are kept as strings and only change through update_dates, which
    validates the whole merged date set before writing anything.
    """

    order_type = "shop_subscription"
    status_enum = SubscriptionStatus
    default_status = SubscriptionStatus.ACTIVE

    def __init__(
        self,
        store: Optional[Any] = None,
        order_id: int = 0,
        status: Optional[Any] = None,
        customer_id: int = 0,
        parent_id: int = 0,
        payment_method: str = "",
        created_via: str = "",
        billing_period: Any = BillingPeriod.MONTH,
        billing_interval: Any = 1,
        start_date: Any = None,
        trial_end: Any = None,
        next_payment: Any = None,
        end_date: Any = None,
        is_manual: bool = False,
    ):
        super().__init__(
            store=store,
            order_id=order_id,
            status=status,
            customer_id=customer_id,
            parent_id=parent_id,
            payment_method=payment_method,
            created_via=created_via,
        )
        self._billing_period = BillingPeriod.MONTH
        self._billing_interval = 1
        self._is_manual = bool(is_manual)
        self._dates: Dict[DateType, str] = {date_type: "" for date_type in DateType}

        self.set_billing_period(billing_period)
        self.set_billing_interval(billing_interval)
        self.update_dates({
            DateType.START: start_date,
            DateType.TRIAL_END: trial_end,
            DateType.NEXT_PAYMENT: next_payment,
            DateType.END: end_date,
        })

    # Billing schedule

    def get_billing_period(self) -> BillingPeriod:
        return self._billing_period

    def set_billing_period(self, period: Any) -> None:
        try:
            self._billing_period = BillingPeriod(period)
        except ValueError:
            valid = [p.value for p in BillingPeriod]
            raise SubscriptionValidationError(
                f"Invalid billing period '{period}', expected one of {valid}"
            )

    def get_billing_interval(self) -> int:
        return self._billing_interval

    def set_billing_interval(self, interval: Any) -> None:
        # Same coercion as the host: non-numeric input becomes 0
        try:
            self._billing_interval = abs(int(interval))
        except (TypeError, ValueError):
            self._billing_interval = 0

    # Dates

    def get_start_date(self) -> str:
        return self._dates[DateType.START]

    def set_start_date(self, date: Any) -> None:
        self.update_dates({DateType.START: date})

    def set_trial_end_date(self, date: Any) -> None:
        self.update_dates({DateType.TRIAL_END: date})

    def set_end_date(self, date: Any) -> None:
        self.update_dates({DateType.END: date})

    def get_date(self, date_type: Any) -> str:
        key = resolve_date_type(date_type)
        return self._dates[key] if key else ""

    def get_time(self, date_type: Any) -> int:
        """Epoch timestamp for a date type, 0 when unset"""
        return to_timestamp(self.get_date(date_type))

    def update_dates(self, dates: Mapping[Any, Any]) -> None:
        """
        Apply a partial set of dates.

        Each field is independent and last-write-wins. The merged result must
        keep trial_end and next_payment at or after start; on any error the
        subscription is left unchanged.
        """
        pending = dict(self._dates)
        for key, value in dates.items():
            date_type = resolve_date_type(key)
            if date_type is None:
                raise SubscriptionValidationError(f"Unknown date type '{key}'")
            if isinstance(value, str):
                value = value.strip()
                parse_date(value)
                pending[date_type] = value
            else:
                parsed = parse_date(value)
                pending[date_type] = format_date(parsed) if parsed else ""

        self._validate_date_order(pending)
        self._dates = pending
        logger.debug(f"Updated dates on subscription {self._id}: {dict(dates)}")

    @staticmethod
    def _validate_date_order(dates: Dict[DateType, str]) -> None:
        start = parse_date(dates[DateType.START])
        if start is None:
            return
        for date_type in (DateType.TRIAL_END, DateType.NEXT_PAYMENT):
            value = parse_date(dates[date_type])
            if value is not None and value < start:
                raise DateOrderError(
                    f"{date_type.value} ({dates[date_type]}) must not be before "
                    f"start ({dates[DateType.START]})"
                )

    # Flags

    def is_manual(self) -> bool:
        return self._is_manual

    def set_requires_manual_renewal(self, is_manual: bool) -> None:
        self._is_manual = bool(is_manual)

    # Relations

    def get_related_orders(self, relation: Any = "all") -> List[int]:
        """IDs of orders related to this subscription"""
        if relation == "all":
            order_ids = self.get_related_orders(OrderRelation.PARENT)
            for other in (OrderRelation.RENEWAL, OrderRelation.SWITCH, OrderRelation.RESUBSCRIBE):
                order_ids.extend(self.get_related_orders(other))
            return order_ids

        relation = OrderRelation(relation)
        if relation == OrderRelation.PARENT:
            return [self._parent_id] if self._parent_id else []

        if self._store is None or not self._id:
            return []
        return [
            int(order_id)
            for order_id in self._store.find_ids_by_meta(RELATION_META_KEYS[relation], self._id)
        ]

    def payment_complete(self) -> None:
        """Record a successful payment and activate the subscription"""
        self._date_paid = format_date(self._now())
        if self._status != SubscriptionStatus.ACTIVE:
            self.update_status(SubscriptionStatus.ACTIVE, "Payment received.")
        else:
            self.add_order_note("Payment received.")
            self.save()
