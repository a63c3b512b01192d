"""
Fixture clock

Wall clock with a fast-forward offset, used for default start dates and
time travel inside a test.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from .models import MYSQL_DATE_FORMAT


class FixtureClock:
    """UTC clock that can be frozen or moved forward"""

    def __init__(self, frozen_at: Optional[datetime] = None):
        if frozen_at is not None and frozen_at.tzinfo is None:
            frozen_at = frozen_at.replace(tzinfo=timezone.utc)
        self._frozen_at = frozen_at
        self._offset = timedelta(0)

    def now(self) -> datetime:
        base = self._frozen_at or datetime.now(timezone.utc)
        return base + self._offset

    def timestamp(self) -> int:
        return int(self.now().timestamp())

    def mysql(self) -> str:
        """Current time in the stored date format"""
        return self.now().strftime(MYSQL_DATE_FORMAT)

    def advance(self, seconds: float) -> datetime:
        self._offset += timedelta(seconds=seconds)
        return self.now()

    @property
    def offset(self) -> timedelta:
        return self._offset

    def reset(self) -> None:
        self._offset = timedelta(0)
