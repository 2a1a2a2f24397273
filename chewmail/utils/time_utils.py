"""Timestamp helpers."""

from datetime import datetime
from typing import Union

Instant = Union[datetime, int, float]


def as_local(value: Instant) -> datetime:
    """
    Convert an instant to a timezone-aware datetime in local time.

    Args:
        value: Aware datetime, naive datetime (taken as local time), or
               POSIX timestamp in seconds

    Returns:
        Aware datetime in the local timezone

    Examples:
        >>> as_local(0).utcoffset() is not None
        True
    """
    if isinstance(value, datetime):
        return value.astimezone()

    return datetime.fromtimestamp(value).astimezone()


def local_now() -> datetime:
    """Current time as an aware local datetime."""
    return datetime.now().astimezone()
