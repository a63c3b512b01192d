"""
Subscription Testkit Data Models

Enums and pydantic models shared by the fixture factory, renewal generator,
recurring cart helpers and assertions.
"""

from enum import Enum
from typing import Optional, Dict, Any, List, Union
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pydantic import BaseModel, Field, field_validator


# ====================
# Enum Types
# ====================

class SubscriptionStatus(str, Enum):
    """Subscription status"""
    PENDING = "pending"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class OrderStatus(str, Enum):
    """Order status (parent and renewal orders)"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"
    CANCELLED = "cancelled"
    FAILED = "failed"
    REFUNDED = "refunded"


class BillingPeriod(str, Enum):
    """Billing period"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class OrderRelation(str, Enum):
    """Relation between a subscription and an order"""
    PARENT = "parent"
    RENEWAL = "renewal"
    SWITCH = "switch"
    RESUBSCRIBE = "resubscribe"


class DateType(str, Enum):
    """Subscription date fields"""
    START = "start"
    TRIAL_END = "trial_end"
    NEXT_PAYMENT = "next_payment"
    END = "end"


class ProductType(str, Enum):
    """Product types"""
    SUBSCRIPTION = "subscription"
    VARIABLE_SUBSCRIPTION = "variable-subscription"
    SUBSCRIPTION_VARIATION = "subscription_variation"


# Metadata keys linking an order back to its subscription
RELATION_META_KEYS: Dict[OrderRelation, str] = {
    OrderRelation.RENEWAL: "_subscription_renewal",
    OrderRelation.SWITCH: "_subscription_switch",
    OrderRelation.RESUBSCRIBE: "_subscription_resubscribe",
}

DATE_ALIASES: Dict[str, DateType] = {
    "start_date": DateType.START,
    "end_date": DateType.END,
}

MYSQL_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _to_decimal(value: Any) -> Any:
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, (int, str)):
        try:
            return Decimal(value)
        except InvalidOperation:
            raise ValueError(f"Invalid amount '{value}'")
    return value


# ====================
# Core Data Models
# ====================

class LineItem(BaseModel):
    """Product line item on a subscription or order"""
    item_id: int = 0
    product_id: int = Field(..., ge=0)
    variation_id: int = Field(default=0, ge=0)
    name: str = ""
    quantity: int = Field(default=1, gt=0)
    subtotal: Decimal = Field(default=Decimal("0"), ge=0)
    total: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("subtotal", "total", mode="before")
    @classmethod
    def coerce_amount(cls, v):
        return _to_decimal(v)

    def model_post_init(self, __context: Any) -> None:
        if self.total is None:
            self.total = self.subtotal

    def get_product_id(self) -> int:
        return self.product_id


class ShippingLine(BaseModel):
    """Shipping line on a subscription or order"""
    method_id: str = "flat_rate"
    total: Decimal = Field(default=Decimal("0"), ge=0)

    @field_validator("total", mode="before")
    @classmethod
    def coerce_total(cls, v):
        return _to_decimal(v) or Decimal("0")

    def get_total(self) -> Decimal:
        return self.total


class Product(BaseModel):
    """Subscription product, variable subscription or variation"""
    product_id: int = 0
    name: str = ""
    product_type: ProductType = ProductType.SUBSCRIPTION
    regular_price: Decimal = Field(default=Decimal("0"), ge=0)
    parent_id: int = 0
    attributes: Dict[str, str] = Field(default_factory=dict)
    children: List[int] = Field(default_factory=list)

    # Recurring billing metadata
    subscription_price: Optional[Decimal] = Field(default=None, ge=0)
    subscription_period: BillingPeriod = BillingPeriod.MONTH
    subscription_period_interval: int = Field(default=1, ge=1)
    subscription_length: int = Field(default=0, ge=0)
    trial_length: Optional[int] = Field(default=None, ge=0)
    trial_period: Optional[BillingPeriod] = None
    sign_up_fee: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("regular_price", "subscription_price", "sign_up_fee", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return _to_decimal(v)

    def get_id(self) -> int:
        return self.product_id

    def get_price(self) -> Decimal:
        """Recurring price, falling back to the regular price"""
        if self.subscription_price is not None:
            return self.subscription_price
        return self.regular_price

    def has_trial(self) -> bool:
        return bool(self.trial_length) and self.trial_period is not None

    def is_variation(self) -> bool:
        return self.product_type == ProductType.SUBSCRIPTION_VARIATION


# ====================
# Fixture Argument Models
# ====================

class CreateSubscriptionArgs(BaseModel):
    """Arguments for creating a subscription fixture"""
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    billing_period: BillingPeriod = BillingPeriod.MONTH
    billing_interval: int = Field(default=1, ge=1)
    start_date: Optional[Union[str, datetime, date]] = None
    customer_id: int = Field(default=0, ge=0)
    created_via: Optional[str] = None
    trial_end: Optional[Union[str, datetime, date]] = None
    next_payment: Optional[Union[str, datetime, date]] = None
    end_date: Optional[Union[str, datetime, date]] = None
    is_manual: bool = False
    payment_method: str = ""
    parent_id: int = Field(default=0, ge=0)


class CreateProductArgs(BaseModel):
    """Arguments for creating a subscription product fixture"""
    name: str = "Test Subscription Product"
    regular_price: Decimal = Field(default=Decimal("10.00"), ge=0)
    subscription_price: Optional[Decimal] = Field(default=None, ge=0)
    subscription_period: BillingPeriod = BillingPeriod.MONTH
    subscription_period_interval: int = Field(default=1, ge=1)
    subscription_length: int = Field(default=0, ge=0)
    trial_length: Optional[int] = Field(default=None, ge=0)
    trial_period: Optional[BillingPeriod] = None
    sign_up_fee: Optional[Decimal] = Field(default=None, ge=0)

    @field_validator("regular_price", "subscription_price", "sign_up_fee", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return _to_decimal(v)


class CreateVariationArgs(BaseModel):
    """Arguments for creating a subscription variation"""
    regular_price: Decimal = Field(default=Decimal("10.00"), ge=0)
    attributes: Dict[str, str] = Field(default_factory=dict)

    @field_validator("regular_price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        return _to_decimal(v)


class RecurringCartItem(BaseModel):
    """Recurring cart snapshot row"""
    product_id: int
    quantity: int = Field(default=1, gt=0)
    subtotal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
