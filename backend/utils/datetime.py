"""
Datetime utilities for loot timestamps.
All timestamps in API transit are ISO-8601 UTC strings with millisecond
precision (e.g. 2024-01-15T12:00:00.000Z).
"""
from datetime import datetime, timezone
from typing import Union


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime (naive values are assumed UTC)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Union[str, datetime]) -> datetime:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing 'Z' as well as explicit offsets.

    Raises:
        ValueError: if the string is not ISO-8601
    """
    if isinstance(value, datetime):
        return ensure_utc(value)

    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    return ensure_utc(datetime.fromisoformat(text))


def to_iso(dt: datetime) -> str:
    """
    Format datetime the way the dashboard expects it.

    Returns:
        ISO-8601 string in UTC with milliseconds and a 'Z' suffix
    """
    return ensure_utc(dt).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def to_epoch_ms(dt: datetime) -> int:
    """Convert datetime to Unix epoch milliseconds."""
    return int(ensure_utc(dt).timestamp() * 1000)
