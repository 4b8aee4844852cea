"""Layer -1: Recency filter.
Drops items published before the configured window. Applied at fetch time.
"""
from datetime import datetime, timedelta, timezone


def layer_minus1_time(published_at: datetime | None, max_age_days: int = 7,
                      now: datetime | None = None) -> bool:
    """Returns True if the item is NEW ENOUGH to keep.

    Args:
        published_at: publication time (None = keep; undated items pass)
        max_age_days: drop items older than this many days
        now: reference time, defaults to the current UTC time
    """
    if published_at is None:
        return True

    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    threshold = (now or datetime.now(timezone.utc)) - timedelta(days=max_age_days)
    return published_at >= threshold
