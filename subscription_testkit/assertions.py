"""
Subscription Assertions

Pure predicates over subscription state. Each check_* function returns an
AssertionOutcome; the caller's message replaces the default one.

SubscriptionAssertions wraps the predicates as assert_* methods that report
failures to an assertion surface. The default surface raises AssertionError,
so the methods work directly under pytest; a unittest.TestCase can be passed
as the surface since it provides fail(message).
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel

from .dates import parse_date
from .models import DateType, OrderRelation, SubscriptionStatus
from .protocols import AssertionSurfaceProtocol, InvalidDateError


class AssertionOutcome(BaseModel):
    """Result of a subscription predicate"""
    passed: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.passed


def _outcome(passed: bool, message: Optional[str], default: str) -> AssertionOutcome:
    return AssertionOutcome(passed=passed, message=message or default)


def _value(value: Any) -> Any:
    return getattr(value, "value", value)


def _amount(value: Any) -> Optional[Decimal]:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _item_product_ids(item: Any) -> tuple:
    get_product_id = getattr(item, "get_product_id", None)
    product_id = get_product_id() if callable(get_product_id) else getattr(item, "product_id", 0)
    return product_id, getattr(item, "variation_id", 0)


# ====================
# Status
# ====================

def check_subscription_status(
    expected_status: Any, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    expected = _value(expected_status)
    return _outcome(
        _value(subscription.get_status()) == expected,
        message,
        f"Failed asserting that subscription has status '{expected}'.",
    )


def _status_check(status: SubscriptionStatus, label: str):
    def check(subscription: Any, message: Optional[str] = None) -> AssertionOutcome:
        return check_subscription_status(
            status, subscription,
            message or f"Failed asserting subscription is {label}.",
        )
    check.__name__ = f"check_subscription_{status.name.lower()}"
    check.__doc__ = f"Subscription status is {status.value}"
    return check


check_subscription_active = _status_check(SubscriptionStatus.ACTIVE, "active")
check_subscription_pending = _status_check(SubscriptionStatus.PENDING, "pending")
check_subscription_on_hold = _status_check(SubscriptionStatus.ON_HOLD, "on-hold")
check_subscription_cancelled = _status_check(SubscriptionStatus.CANCELLED, "cancelled")
check_subscription_expired = _status_check(SubscriptionStatus.EXPIRED, "expired")


# ====================
# Schedule and dates
# ====================

def check_subscription_schedule(
    period: Any, interval: int, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    """Billing period and interval both match"""
    expected_period = _value(period)
    if _value(subscription.get_billing_period()) != expected_period:
        return _outcome(
            False, message,
            f"Failed asserting subscription billing period is {expected_period}.",
        )
    try:
        expected_interval = int(interval)
    except (TypeError, ValueError):
        expected_interval = None
    return _outcome(
        subscription.get_billing_interval() == expected_interval,
        message,
        f"Failed asserting subscription billing interval is {interval}.",
    )


def check_subscription_has_trial(subscription: Any, message: Optional[str] = None) -> AssertionOutcome:
    return _outcome(
        bool(subscription.get_time(DateType.TRIAL_END.value)),
        message,
        "Failed asserting subscription has trial period.",
    )


def check_subscription_has_end_date(subscription: Any, message: Optional[str] = None) -> AssertionOutcome:
    return _outcome(
        bool(subscription.get_time(DateType.END.value)),
        message,
        "Failed asserting subscription has end date.",
    )


def check_subscription_next_payment_date(
    expected_date: Any, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    """
    Next payment falls on the expected UTC calendar day.

    Time of day is ignored.
    """
    default = f"Failed asserting subscription next payment date is {expected_date}."
    try:
        expected = parse_date(expected_date)
        actual = parse_date(subscription.get_date(DateType.NEXT_PAYMENT.value))
    except InvalidDateError:
        return _outcome(False, message, default)

    if expected is None or actual is None:
        return _outcome(False, message, default)
    return _outcome(expected.date() == actual.date(), message, default)


# ====================
# Flags, totals, payment
# ====================

def check_subscription_requires_manual_renewal(
    subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    return _outcome(
        subscription.is_manual() is True,
        message,
        "Failed asserting subscription requires manual renewal.",
    )


def check_subscription_total(
    expected: Any, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    expected_amount = _amount(expected)
    actual_amount = _amount(subscription.get_total())
    return _outcome(
        expected_amount is not None and expected_amount == actual_amount,
        message,
        f"Failed asserting subscription total is {expected}.",
    )


def check_subscription_payment_method(
    expected: str, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    return _outcome(
        subscription.get_payment_method() == expected,
        message,
        f"Failed asserting subscription payment method is {expected}.",
    )


# ====================
# Relations and items
# ====================

def check_subscription_has_parent_order(
    subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    return _outcome(
        bool(subscription.get_parent_id()),
        message,
        "Failed asserting subscription has parent order.",
    )


def check_subscription_renewal_count(
    expected: int, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    renewals = subscription.get_related_orders(OrderRelation.RENEWAL.value)
    return _outcome(
        len(renewals) == expected,
        message,
        f"Failed asserting subscription has {expected} renewal orders.",
    )


def check_renewal_order_created(subscription: Any, message: Optional[str] = None) -> AssertionOutcome:
    renewals = subscription.get_related_orders(OrderRelation.RENEWAL.value)
    return _outcome(
        len(renewals) > 0,
        message,
        "Failed asserting that a renewal order was created.",
    )


def check_subscription_contains_product(
    product_id: int, subscription: Any, message: Optional[str] = None
) -> AssertionOutcome:
    """Subscription has a line for product_id (as product or variation)"""
    found = False
    for item in subscription.get_items():
        if product_id and product_id in _item_product_ids(item):
            found = True
            break
    return _outcome(
        found,
        message,
        f"Failed asserting subscription contains product ID {product_id}.",
    )


# ====================
# Assertion surface adapter
# ====================

class RaisingSurface:
    """Reports failures by raising AssertionError"""

    def fail(self, message: str) -> None:
        raise AssertionError(message)


class SubscriptionAssertions:
    """assert_* wrappers routing failed predicates to an assertion surface"""

    def __init__(self, surface: Optional[AssertionSurfaceProtocol] = None):
        self.surface = surface or RaisingSurface()

    def _report(self, outcome: AssertionOutcome) -> AssertionOutcome:
        if not outcome.passed:
            self.surface.fail(outcome.message)
        return outcome

    def assert_subscription_status(self, expected_status, subscription, message=None):
        return self._report(check_subscription_status(expected_status, subscription, message))

    def assert_subscription_active(self, subscription, message=None):
        return self._report(check_subscription_active(subscription, message))

    def assert_subscription_pending(self, subscription, message=None):
        return self._report(check_subscription_pending(subscription, message))

    def assert_subscription_on_hold(self, subscription, message=None):
        return self._report(check_subscription_on_hold(subscription, message))

    def assert_subscription_cancelled(self, subscription, message=None):
        return self._report(check_subscription_cancelled(subscription, message))

    def assert_subscription_expired(self, subscription, message=None):
        return self._report(check_subscription_expired(subscription, message))

    def assert_subscription_schedule(self, period, interval, subscription, message=None):
        return self._report(check_subscription_schedule(period, interval, subscription, message))

    def assert_subscription_has_trial(self, subscription, message=None):
        return self._report(check_subscription_has_trial(subscription, message))

    def assert_subscription_has_end_date(self, subscription, message=None):
        return self._report(check_subscription_has_end_date(subscription, message))

    def assert_subscription_requires_manual_renewal(self, subscription, message=None):
        return self._report(check_subscription_requires_manual_renewal(subscription, message))

    def assert_subscription_next_payment_date(self, expected_date, subscription, message=None):
        return self._report(check_subscription_next_payment_date(expected_date, subscription, message))

    def assert_subscription_total(self, expected, subscription, message=None):
        return self._report(check_subscription_total(expected, subscription, message))

    def assert_subscription_payment_method(self, expected, subscription, message=None):
        return self._report(check_subscription_payment_method(expected, subscription, message))

    def assert_subscription_has_parent_order(self, subscription, message=None):
        return self._report(check_subscription_has_parent_order(subscription, message))

    def assert_subscription_renewal_count(self, expected, subscription, message=None):
        return self._report(check_subscription_renewal_count(expected, subscription, message))

    def assert_renewal_order_created(self, subscription, message=None):
        return self._report(check_renewal_order_created(subscription, message))

    def assert_subscription_contains_product(self, product_id, subscription, message=None):
        return self._report(check_subscription_contains_product(product_id, subscription, message))
