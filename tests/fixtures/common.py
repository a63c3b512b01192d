"""
Common/Shared Fixtures

Base generators used across unit and component tests.
"""
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

MYSQL_FORMAT = "%Y-%m-%d %H:%M:%S"


def make_customer_id() -> int:
    """Generate a positive customer ID"""
    return random.randint(1000, 999999)


def make_payment_method(prefix: Optional[str] = None) -> str:
    """Generate a payment gateway ID"""
    prefix = prefix or "gateway"
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def make_mysql_date(days: int = 0, base: Optional[datetime] = None) -> str:
    """Date string in the stored format, offset from base (default now) by days"""
    base = base or datetime.now(timezone.utc)
    return (base + timedelta(days=days)).strftime(MYSQL_FORMAT)

