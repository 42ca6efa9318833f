"""Core Data timestamp conversion.

Bear stores dates as float seconds since 2001-01-01T00:00:00Z (the Core Data
reference date), 978307200 seconds after the Unix epoch.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

CORE_DATA_EPOCH_OFFSET = 978307200
CORE_DATA_EPOCH = datetime.fromtimestamp(CORE_DATA_EPOCH_OFFSET, tz=timezone.utc)

SECONDS_PER_DAY = 24 * 60 * 60


def from_core_data(value: Optional[Union[int, float]]) -> Optional[datetime]:
    """Convert a Core Data timestamp to an aware UTC datetime (None stays None)."""
    if value is None:
        return None
    return CORE_DATA_EPOCH + timedelta(seconds=value)


def to_core_data(value: Optional[datetime]) -> Optional[float]:
    """Convert a datetime to Core Data seconds. Naive datetimes are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - CORE_DATA_EPOCH).total_seconds()


def core_data_cutoff(days: Union[int, float], now: Optional[datetime] = None) -> float:
    """Core Data timestamp for ``now`` minus ``days`` days."""
    if now is None:
        now = datetime.now(timezone.utc)
    return to_core_data(now - timedelta(seconds=days * SECONDS_PER_DAY))
