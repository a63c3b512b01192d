"""
Subscription Fixture Factory

Builds subscriptions, subscription products and variations, and attaches
line items. Caller arguments are merged over fixed defaults.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from .clock import FixtureClock
from .config import TestkitConfig
from .models import (
    CreateProductArgs,
    CreateSubscriptionArgs,
    CreateVariationArgs,
    DateType,
    LineItem,
    Product,
    ProductType,
)
from .protocols import (
    IncompleteTrialError,
    SubscriptionBackendProtocol,
    SubscriptionValidationError,
)

logger = logging.getLogger(__name__)


def _validate(model, args: Dict[str, Any]):
    try:
        return model(**args)
    except ValidationError as e:
        raise SubscriptionValidationError(str(e)) from e


class SubscriptionFixtureFactory:
    """Creates subscription and product fixtures through a backend strategy"""

    def __init__(
        self,
        backend: SubscriptionBackendProtocol,
        config: Optional[TestkitConfig] = None,
        clock: Optional[FixtureClock] = None,
    ):
        self.backend = backend
        self.config = config or TestkitConfig()
        self.clock = clock or getattr(backend, "clock", None) or FixtureClock()
        logger.info(f"SubscriptionFixtureFactory initialized with {backend.name} backend")

    # ====================
    # Subscriptions
    # ====================

    def create_subscription(self, **args: Any) -> Any:
        """
        Create and save a subscription.

        Defaults: active, monthly, interval 1, starting now, no customer,
        created via the configured marker. trial_end, next_payment and
        end_date are only set when supplied.
        """
        params = _validate(CreateSubscriptionArgs, args)

        subscription = self.backend.new_subscription(
            status=params.status,
            billing_period=params.billing_period,
            billing_interval=params.billing_interval,
            start_date=params.start_date or self.clock.mysql(),
            customer_id=params.customer_id,
            created_via=params.created_via or self.config.created_via,
            payment_method=params.payment_method,
            parent_id=params.parent_id,
            is_manual=params.is_manual,
        )

        dates = {}
        if params.trial_end is not None:
            dates[DateType.TRIAL_END] = params.trial_end
        if params.next_payment is not None:
            dates[DateType.NEXT_PAYMENT] = params.next_payment
        if params.end_date is not None:
            dates[DateType.END] = params.end_date
        if dates:
            subscription.update_dates(dates)

        subscription.save()
        logger.debug(f"Created subscription {subscription.get_id()}")
        return subscription

    def update_status(self, subscription: Any, new_status: Any, note: str = "") -> None:
        subscription.update_status(new_status, note)

    def process_payment(self, subscription: Any) -> None:
        subscription.payment_complete()

    # ====================
    # Products
    # ====================

    def create_subscription_product(self, **args: Any) -> Product:
        """Create and save a simple subscription product"""
        params = _validate(CreateProductArgs, args)

        product = Product(
            name=params.name,
            product_type=ProductType.SUBSCRIPTION,
            regular_price=params.regular_price,
            subscription_price=(
                params.subscription_price
                if params.subscription_price is not None
                else params.regular_price
            ),
            subscription_period=params.subscription_period,
            subscription_period_interval=params.subscription_period_interval,
            subscription_length=params.subscription_length,
        )

        has_length = params.trial_length is not None
        has_period = params.trial_period is not None
        if has_length and has_period:
            product.trial_length = params.trial_length
            product.trial_period = params.trial_period
        elif has_length or has_period:
            if self.config.strict_trial_args:
                raise IncompleteTrialError(
                    "trial_length and trial_period must be supplied together"
                )
            logger.debug("Ignoring partial trial arguments on subscription product")

        if params.sign_up_fee is not None:
            product.sign_up_fee = params.sign_up_fee

        self.backend.save_product(product)
        logger.debug(f"Created subscription product {product.product_id}")
        return product

    def create_variable_subscription(
        self,
        variations: Iterable[Dict[str, Any]] = (),
        **args: Any,
    ) -> Product:
        """Create a variable subscription, then its variations in order"""
        schedule = {
            key: args[key]
            for key in ("subscription_period", "subscription_period_interval", "subscription_length")
            if key in args
        }
        product = _validate(Product, {
            "name": args.get("name", "Test Variable Subscription"),
            "product_type": ProductType.VARIABLE_SUBSCRIPTION,
            **schedule,
        })
        self.backend.save_product(product)

        # Sequential: variation IDs and attribute order follow the given order
        for variation_args in variations:
            self.create_subscription_variation(product.product_id, **variation_args)

        return self.backend.get_product(product.product_id) or product

    def create_subscription_variation(self, parent_id: int, **args: Any) -> Optional[Product]:
        """Create a variation inheriting the parent's name and billing schedule"""
        params = _validate(CreateVariationArgs, args)

        parent = self.backend.get_product(parent_id)
        if parent is None:
            logger.debug(f"Parent product {parent_id} not found for variation")
            return None

        variation = Product(
            name=parent.name,
            product_type=ProductType.SUBSCRIPTION_VARIATION,
            parent_id=parent_id,
            regular_price=params.regular_price,
            subscription_price=params.regular_price,
            attributes=params.attributes,
            subscription_period=parent.subscription_period,
            subscription_period_interval=parent.subscription_period_interval,
            subscription_length=parent.subscription_length,
            trial_length=parent.trial_length,
            trial_period=parent.trial_period,
        )
        self.backend.save_product(variation)

        parent.children.append(variation.product_id)
        self.backend.save_product(parent)
        return variation

    # ====================
    # Line items
    # ====================

    def add_product(
        self,
        subscription: Any,
        product_id: int,
        quantity: int = 1,
        subtotal: Any = None,
        total: Any = None,
    ) -> int:
        """
        Add a product line to a subscription.

        Returns:
            The new item ID, or 0 when the product cannot be resolved (the
            subscription is left untouched).
        """
        product = self.backend.get_product(product_id)
        if product is None:
            logger.debug(f"Product {product_id} not found, no item added")
            return 0

        amounts = {
            key: value
            for key, value in (("subtotal", subtotal), ("total", total))
            if value not in (None, "")
        }
        item = _validate(LineItem, {
            "product_id": product.parent_id if product.is_variation() else product.product_id,
            "variation_id": product.product_id if product.is_variation() else 0,
            "name": product.name,
            "quantity": quantity,
            **amounts,
        })

        # Defaults use the validated quantity
        if "subtotal" not in amounts:
            item.subtotal = product.get_price() * item.quantity
        if "total" not in amounts:
            item.total = item.subtotal

        item_id = subscription.add_item(item)
        subscription.calculate_totals()
        subscription.save()
        return item_id
