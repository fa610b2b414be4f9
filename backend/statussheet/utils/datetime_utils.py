"""
Timezone-aware datetime utilities.

Health and duration calculations take "today" as an argument; these helpers
are where the application decides what "today" is.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# UTC timezone constant
UTC = timezone.utc


def get_user_today(user_timezone: str) -> date:
    """
    Get today's date in the given timezone.

    Args:
        user_timezone: IANA timezone name (e.g., "Europe/Berlin", "America/New_York")

    Returns:
        date: Today's date in that timezone. Unknown names fall back to UTC.

    Example:
        >>> get_user_today("Asia/Tokyo")  # When UTC is 2025-01-19 23:00
        date(2025, 1, 20)
    """
    try:
        tz = ZoneInfo(user_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        tz = UTC
    return datetime.now(UTC).astimezone(tz).date()
