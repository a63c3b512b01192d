"""
Date helpers

Subscription dates are stored as strings and compared as UTC datetimes.
Naive values are treated as UTC.
"""
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from .models import MYSQL_DATE_FORMAT
from .protocols import InvalidDateError


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a stored date value into an aware UTC datetime, None when unset"""
    if value is None or value == "" or value == 0:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    elif isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise InvalidDateError(f"Invalid date value '{value}'") from e
    else:
        raise InvalidDateError(f"Unsupported date type: {type(value).__name__}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_date(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(MYSQL_DATE_FORMAT)


def to_timestamp(value: Any) -> int:
    """Epoch seconds for a date value, 0 when unset"""
    parsed = parse_date(value)
    return int(parsed.timestamp()) if parsed else 0
