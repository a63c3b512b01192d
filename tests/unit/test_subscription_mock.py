"""
Unit Tests: Order and Subscription Entities

Tests the in-memory subscription entity: billing schedule, validated dates,
related orders, items and totals.
"""
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from subscription_testkit.models import (
    BillingPeriod,
    DateType,
    LineItem,
    OrderStatus,
    SubscriptionStatus,
)
from subscription_testkit.protocols import (
    DateOrderError,
    InvalidDateError,
    InvalidStatusError,
    SubscriptionValidationError,
)
from subscription_testkit.subscription_mock import Order, SubscriptionMock

pytestmark = pytest.mark.unit


# ====================
# Construction
# ====================

class TestSubscriptionDefaults:
    """Test SubscriptionMock defaults"""

    def test_defaults(self):
        """Test new subscription is active, monthly, interval 1"""
        # Act
        sub = SubscriptionMock()

        # Assert
        assert sub.get_status() == SubscriptionStatus.ACTIVE
        assert sub.get_billing_period() == BillingPeriod.MONTH
        assert sub.get_billing_interval() == 1
        assert sub.get_type() == "shop_subscription"
        assert sub.get_id() == 0
        assert sub.is_manual() is False

    def test_all_dates_unset(self):
        """Test dates default to empty strings and 0 timestamps"""
        sub = SubscriptionMock()

        for date_type in DateType:
            assert sub.get_date(date_type) == ""
            assert sub.get_time(date_type) == 0

    def test_status_with_wc_prefix(self):
        """Test host-style prefixed statuses are accepted"""
        sub = SubscriptionMock(status="wc-on-hold")

        assert sub.get_status() == SubscriptionStatus.ON_HOLD

    def test_invalid_status_raises(self):
        """Test unknown status raises InvalidStatusError"""
        with pytest.raises(InvalidStatusError):
            SubscriptionMock(status="completed")


# ====================
# Billing schedule
# ====================

class TestBillingSchedule:
    """Test billing period and interval accessors"""

    def test_set_billing_period(self):
        """Test period accepts raw strings"""
        sub = SubscriptionMock()

        sub.set_billing_period("year")

        assert sub.get_billing_period() == BillingPeriod.YEAR

    def test_invalid_period_raises(self):
        """Test invalid period raises a validation error"""
        sub = SubscriptionMock()

        with pytest.raises(SubscriptionValidationError):
            sub.set_billing_period("fortnight")
        assert sub.get_billing_period() == BillingPeriod.MONTH

    @pytest.mark.parametrize("raw,expected", [
        (3, 3),
        ("2", 2),
        (-4, 4),
        (2.9, 2),
        ("abc", 0),
        (None, 0),
    ])
    def test_interval_coercion(self, raw, expected):
        """Test interval is coerced to a non-negative integer"""
        sub = SubscriptionMock()

        sub.set_billing_interval(raw)

        assert sub.get_billing_interval() == expected


# ====================
# Dates
# ====================

class TestUpdateDates:
    """Test the validated update_dates path"""

    def test_round_trip_without_side_effects(self, subscription):
        """Test next_payment reads back exactly and other fields are unchanged"""
        # Arrange
        subscription.update_dates({"trial_end": "2024-01-08 00:00:00"})
        before = {t: subscription.get_date(t) for t in DateType}

        # Act
        subscription.update_dates({"next_payment": "2024-02-01 10:30:00"})

        # Assert
        assert subscription.get_date("next_payment") == "2024-02-01 10:30:00"
        for date_type in (DateType.START, DateType.TRIAL_END, DateType.END):
            assert subscription.get_date(date_type) == before[date_type]

    def test_aliases(self):
        """Test start_date and end_date aliases"""
        sub = SubscriptionMock()

        sub.update_dates({"start_date": "2024-01-01 00:00:00", "end_date": "2025-01-01 00:00:00"})

        assert sub.get_start_date() == "2024-01-01 00:00:00"
        assert sub.get_date(DateType.END) == "2025-01-01 00:00:00"

    def test_datetime_values_are_formatted(self):
        """Test datetime values are stored in the UTC string format"""
        sub = SubscriptionMock()

        sub.update_dates({DateType.START: datetime(2024, 3, 1, 9, 15, tzinfo=timezone.utc)})

        assert sub.get_start_date() == "2024-03-01 09:15:00"

    def test_calendar_date_values_are_formatted(self, subscription):
        """Test plain dates are stored as midnight UTC"""
        subscription.update_dates({"next_payment": date(2024, 1, 15)})

        assert subscription.get_date("next_payment") == "2024-01-15 00:00:00"

    def test_calendar_date_before_start_raises(self, subscription):
        """Test plain dates take part in the ordering check"""
        with pytest.raises(DateOrderError):
            subscription.update_dates({"trial_end": date(2023, 12, 31)})

    @pytest.mark.parametrize("empty", [None, "", "   ", 0])
    def test_empty_value_unsets(self, subscription, empty):
        """Test empty values clear a date"""
        subscription.update_dates({"end": "2025-01-01 00:00:00"})

        subscription.update_dates({"end": empty})

        assert subscription.get_date("end") == ""
        assert subscription.get_time("end") == 0

    def test_next_payment_before_start_raises(self, subscription):
        """Test out-of-order next payment raises DateOrderError"""
        with pytest.raises(DateOrderError):
            subscription.update_dates({"next_payment": "2023-12-31 23:59:59"})

    def test_trial_end_before_start_raises(self, subscription):
        """Test out-of-order trial end raises DateOrderError"""
        with pytest.raises(DateOrderError):
            subscription.set_trial_end_date("2023-06-01 00:00:00")

    def test_failed_update_leaves_dates_unchanged(self, subscription):
        """Test a rejected update writes nothing"""
        # Arrange
        subscription.update_dates({"next_payment": "2024-02-01 00:00:00"})

        # Act
        with pytest.raises(DateOrderError):
            subscription.update_dates({
                "trial_end": "2024-01-05 00:00:00",
                "next_payment": "2023-01-01 00:00:00",
            })

        # Assert
        assert subscription.get_date("trial_end") == ""
        assert subscription.get_date("next_payment") == "2024-02-01 00:00:00"

    def test_moving_start_past_next_payment_raises(self, subscription):
        """Test ordering is checked against the merged result"""
        subscription.update_dates({"next_payment": "2024-02-01 00:00:00"})

        with pytest.raises(DateOrderError):
            subscription.set_start_date("2024-03-01 00:00:00")

    def test_order_error_is_validation_error(self, subscription):
        """Test DateOrderError is recoverable as SubscriptionValidationError"""
        with pytest.raises(SubscriptionValidationError):
            subscription.update_dates({"next_payment": "2020-01-01 00:00:00"})

    def test_unparseable_value_raises(self, subscription):
        """Test invalid strings raise InvalidDateError without writing"""
        with pytest.raises(InvalidDateError):
            subscription.update_dates({"end": "someday"})
        assert subscription.get_date("end") == ""

    def test_unknown_date_type_raises(self, subscription):
        """Test unknown keys are rejected"""
        with pytest.raises(SubscriptionValidationError):
            subscription.update_dates({"last_payment": "2024-02-01 00:00:00"})

    def test_end_is_not_ordered(self, subscription):
        """Test end date is stored as given"""
        subscription.set_end_date("2023-01-01 00:00:00")

        assert subscription.get_date("end") == "2023-01-01 00:00:00"

    def test_get_time(self, subscription):
        """Test get_time returns epoch seconds"""
        expected = int(datetime(2024, 1, 1, tzinfo=timezone.utc).timestamp())

        assert subscription.get_time(DateType.START) == expected


# ====================
# Flags and relations
# ====================

class TestRelatedOrders:
    """Test get_related_orders"""

    def test_parent_relation(self):
        """Test parent resolves to the parent id"""
        sub = SubscriptionMock(parent_id=42)

        assert sub.get_related_orders("parent") == [42]

    def test_no_parent(self):
        """Test missing parent resolves to empty list"""
        assert SubscriptionMock().get_related_orders("parent") == []

    def test_renewals_in_store_order(self, store, subscription):
        """Test renewal relation queries metadata in insertion order"""
        # Arrange
        first = store.new_order()
        first.save()
        second = store.new_order()
        second.save()
        store.update_meta(second.get_id(), "_subscription_renewal", subscription.get_id())
        store.update_meta(first.get_id(), "_subscription_renewal", subscription.get_id())

        # Act
        renewals = subscription.get_related_orders("renewal")

        # Assert
        assert renewals == [second.get_id(), first.get_id()]

    def test_all_concatenates_relations(self, store):
        """Test 'all' lists parent, renewals, switches, resubscribes"""
        # Arrange
        sub = SubscriptionMock(store=store, parent_id=99)
        sub.save()
        renewal = store.new_order()
        renewal.save()
        switch = store.new_order()
        switch.save()
        store.update_meta(renewal.get_id(), "_subscription_renewal", sub.get_id())
        store.update_meta(switch.get_id(), "_subscription_switch", sub.get_id())

        # Act / Assert
        assert sub.get_related_orders() == [99, renewal.get_id(), switch.get_id()]
        assert sub.get_related_orders("resubscribe") == []

    def test_manual_renewal_flag(self):
        """Test manual renewal flag accessors"""
        sub = SubscriptionMock(is_manual=True)
        assert sub.is_manual() is True

        sub.set_requires_manual_renewal(False)

        assert sub.is_manual() is False


# ====================
# Items, totals, status
# ====================

class TestOrderTotals:
    """Test items, shipping, tax and totals"""

    def test_calculate_totals(self, store):
        """Test total is items plus shipping plus tax"""
        # Arrange
        order = Order(store=store)
        order.add_item(LineItem(product_id=1, quantity=2, subtotal="20.00"))
        order.add_item(LineItem(product_id=2, subtotal="5.00", total="4.50"))
        order.add_shipping("flat_rate", "3.00")
        order.set_total_tax("1.25")

        # Act
        total = order.calculate_totals()

        # Assert
        assert total == Decimal("28.75")
        assert order.get_total() == Decimal("28.75")
        assert order.get_subtotal() == Decimal("25.00")
        assert order.get_shipping_total() == Decimal("3.00")

    def test_item_ids_come_from_store(self, store):
        """Test item IDs are allocated by the backend"""
        order = Order(store=store)

        first = order.add_item(LineItem(product_id=1))
        second = order.add_item(LineItem(product_id=1))

        assert second == first + 1
        assert order.get_item(first).product_id == 1

    def test_remove_item(self):
        """Test removing an item by id"""
        order = Order()
        item_id = order.add_item(LineItem(product_id=1))

        assert order.remove_item(item_id) is True
        assert order.remove_item(item_id) is False
        assert order.get_items() == []


class TestStatusChanges:
    """Test status updates, notes and payment"""

    def test_update_status_records_note(self, subscription):
        """Test update_status adds an audit note"""
        subscription.update_status("on-hold", "Customer request.")

        assert subscription.get_status() == SubscriptionStatus.ON_HOLD
        assert subscription.get_notes()[-1] == (
            "Customer request. Status changed from active to on-hold."
        )

    def test_order_payment_complete(self, store, frozen_clock):
        """Test order payment completes the order and stamps the paid date"""
        order = store.new_order()

        order.payment_complete()

        assert order.get_status() == OrderStatus.COMPLETED
        assert order.get_date_paid() == "2024-01-01 12:00:00"
        assert store.get_order(order.get_id()) is order

    def test_subscription_payment_activates(self, store):
        """Test payment reactivates an on-hold subscription"""
        sub = SubscriptionMock(store=store, status="on-hold")

        sub.payment_complete()

        assert sub.get_status() == SubscriptionStatus.ACTIVE
        assert sub.get_date_paid() is not None
