"""
Timezone Utilities.

All datetimes are stored and compared in UTC.

Some drivers (SQLite) hand back naive datetimes even for
DateTime(timezone=True) columns, so anything compared against
utc_now() goes through to_utc() first.
"""

import math
from datetime import datetime, timezone

# UTC constant
UTC = timezone.utc


def utc_now() -> datetime:
    """
    Get current time in UTC (timezone-aware).

    Always use this instead of datetime.utcnow() which returns
    naive datetime.
    """
    return datetime.now(UTC)


def to_utc(dt: datetime | None) -> datetime | None:
    """Convert datetime to UTC; naive values are assumed to already be UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def seconds_until(dt: datetime, now: datetime | None = None) -> int:
    """Whole seconds from now until dt, rounded up, never negative."""
    now = now or utc_now()
    delta = (to_utc(dt) - now).total_seconds()
    return max(0, math.ceil(delta))
