"""
Shared Test Fixtures

Generators for IDs, dates and fixture arguments used across test layers.

Structure:
    - common.py: IDs, payment methods, dates
    - subscription_fixtures.py: Factory argument builders
"""

from .common import (
    make_customer_id,
    make_payment_method,
    make_mysql_date,
)

from .subscription_fixtures import (
    make_subscription_args,
    make_product_args,
    make_variation_args,
)

__all__ = [
    "make_customer_id",
    "make_payment_method",
    "make_mysql_date",
    "make_subscription_args",
    "make_product_args",
    "make_variation_args",
]
