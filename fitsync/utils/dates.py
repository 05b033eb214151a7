from datetime import datetime
from typing import Union

import pytz

TimestampInput = Union[str, int, float, datetime]


def to_naive_utc(value: datetime) -> datetime:
    """Convert timezone-aware datetime to naive UTC for database storage"""
    if value.tzinfo is not None:
        return value.astimezone(pytz.UTC).replace(tzinfo=None)
    return value


def parse_timestamp(value: TimestampInput) -> datetime:
    """
    Parse an ISO 8601 string or epoch milliseconds into a naive UTC datetime.
    Raises ValueError when the value cannot be read as a date.
    """
    if isinstance(value, datetime):
        try:
            return to_naive_utc(value)
        except OverflowError as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e

    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=pytz.UTC).replace(tzinfo=None)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e

    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
            # Offsets at the edges of the calendar cannot be shifted to UTC
            return to_naive_utc(parsed)
        except OverflowError as e:
            raise ValueError(f"Invalid timestamp: {value!r}") from e

    raise ValueError(f"Invalid timestamp: {value!r}")


def start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)
