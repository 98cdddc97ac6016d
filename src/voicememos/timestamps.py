#!/usr/bin/env python3
"""
Core Data timestamp conversion for Voice Memos records.

Voice Memos stores recording dates as Core Data timestamps: floating-point
seconds since the Core Data reference date, January 1, 2001 00:00:00 UTC.
Unix time counts from January 1, 1970 00:00:00 UTC, 978307200 seconds earlier.

Functions:
    - core_data_to_unix_timestamp: Convert to whole Unix seconds
    - core_data_to_datetime: Convert to a UTC-aware datetime
    - format_memo_date: Render the date shown in the clip banner
"""

from datetime import datetime, timezone


CORE_DATA_EPOCH_OFFSET = 978307200.0

DATE_DISPLAY_FORMAT = "%B %d, %Y at %I:%M:%S %p UTC"


def core_data_to_unix_timestamp(core_data_timestamp: float) -> int:
    """
    Convert a Core Data timestamp to Unix epoch seconds.

    Fractional seconds are truncated toward zero.

    Args:
        core_data_timestamp: Seconds since 2001-01-01T00:00:00Z

    Returns:
        Whole seconds since 1970-01-01T00:00:00Z

    Examples:
        >>> core_data_to_unix_timestamp(0.0)
        978307200
        >>> core_data_to_unix_timestamp(-978307200.0)
        0
    """
    return int(core_data_timestamp + CORE_DATA_EPOCH_OFFSET)


def core_data_to_datetime(core_data_timestamp: float) -> datetime:
    """
    Convert a Core Data timestamp to a UTC datetime.

    Timestamps outside the range the platform can represent fall back to the
    current time, so a corrupt date never prevents a memo from being shown.

    Args:
        core_data_timestamp: Seconds since 2001-01-01T00:00:00Z

    Returns:
        Timezone-aware datetime in UTC
    """
    try:
        unix_ts = core_data_to_unix_timestamp(core_data_timestamp)
        return datetime.fromtimestamp(unix_ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return datetime.now(timezone.utc)


def format_memo_date(core_data_timestamp: float) -> str:
    """
    Format a Core Data timestamp for display.

    Args:
        core_data_timestamp: Seconds since 2001-01-01T00:00:00Z

    Returns:
        Date string such as "March 12, 2024 at 10:15:00 AM UTC"
    """
    return core_data_to_datetime(core_data_timestamp).strftime(DATE_DISPLAY_FORMAT)
