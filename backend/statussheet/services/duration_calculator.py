"""
Project duration calculations.

Derives a project's date range and day counts from its milestones and
computes how much of the timeline is still ahead of a given day.

All functions are pure: "today" is always passed in by the caller.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any, Optional

from statussheet.models.health import DurationSummary, RemainingDays, TimeRemaining
from statussheet.models.project import ProjectDurationFields


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def milestone_field(milestone: Any, name: str, default: Any = None) -> Any:
    """Read a field from a milestone model or a plain mapping row."""
    if isinstance(milestone, Mapping):
        return milestone.get(name, default)
    return getattr(milestone, name, default)


def coerce_date(value: Any) -> Optional[date]:
    """
    Normalize a stored date value.

    Accepts date, datetime and ISO 8601 strings (a time part is ignored).
    Anything missing or unparseable becomes None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def ensure_milestone_sequence(milestones: Any) -> Sequence:
    """Reject inputs that are not a sequence of milestones at all."""
    if isinstance(milestones, (str, bytes)) or not isinstance(milestones, Sequence):
        raise TypeError(
            f"milestones must be a list or tuple, got {type(milestones).__name__}"
        )
    return milestones


def count_working_days(start: date, end: date) -> int:
    """Count Monday-Friday days in [start, end], both boundaries included."""
    if end < start:
        return 0
    days = (end - start).days + 1
    full_weeks, extra_days = divmod(days, 7)
    working = full_weeks * 5
    first_weekday = start.weekday()
    for offset in range(extra_days):
        if (first_weekday + offset) % 7 < 5:
            working += 1
    return working


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def derive_duration(milestones: Sequence[Any]) -> Optional[DurationSummary]:
    """
    Derive start/end dates and day counts from milestone dates.

    Milestones without a usable date are ignored. Returns None when no
    valid date remains; callers must treat that as "duration unknown".
    """
    milestones = ensure_milestone_sequence(milestones)
    dates = [
        parsed
        for parsed in (coerce_date(milestone_field(m, "date")) for m in milestones)
        if parsed is not None
    ]
    if not dates:
        return None

    start_date = min(dates)
    end_date = max(dates)
    return DurationSummary(
        start_date=start_date,
        end_date=end_date,
        total_days=inclusive_days(start_date, end_date),
        working_days=count_working_days(start_date, end_date),
    )


def _normalize_range(
    today: Any,
    start_date: Any,
    end_date: Any,
) -> Optional[tuple[date, date, date]]:
    today_value = coerce_date(today)
    start = coerce_date(start_date)
    end = coerce_date(end_date)
    if today_value is None:
        raise TypeError("today must be a date, datetime or ISO 8601 string")
    if start is None or end is None:
        return None
    if end < start:
        start, end = end, start
    return today_value, start, end


def time_remaining_percentage(
    today: Any,
    start_date: Any,
    end_date: Any,
) -> Optional[TimeRemaining]:
    """
    Percentage of the project's duration still ahead of today, in [0, 100].

    - today before start: 100 and project_starts_in_future
    - today after end: 0 and is_overdue
    - otherwise: inclusive days from today to end over total days

    Returns None when either date is unavailable.
    """
    normalized = _normalize_range(today, start_date, end_date)
    if normalized is None:
        return None
    today_value, start, end = normalized

    if today_value < start:
        return TimeRemaining(percentage=100, project_starts_in_future=True)
    if today_value > end:
        return TimeRemaining(percentage=0, is_overdue=True)

    days_to_end = inclusive_days(today_value, end)
    percentage = round_half_up(days_to_end / inclusive_days(start, end) * 100)
    return TimeRemaining(percentage=max(0, min(100, percentage)))


def remaining_days(
    today: Any,
    start_date: Any,
    end_date: Any,
) -> Optional[RemainingDays]:
    """
    Calendar and working days left in the project window.

    Counting starts at the later of today and the start date, so a project
    that has not started yet still has its whole duration remaining, and an
    overdue project has zero remaining days plus a days_overdue count.
    """
    normalized = _normalize_range(today, start_date, end_date)
    if normalized is None:
        return None
    today_value, start, end = normalized

    if today_value > end:
        return RemainingDays(
            total_days_remaining=0,
            working_days_remaining=0,
            days_overdue=(today_value - end).days,
        )

    window_start = max(today_value, start)
    return RemainingDays(
        total_days_remaining=inclusive_days(window_start, end),
        working_days_remaining=count_working_days(window_start, end),
    )


def project_duration_fields(milestones: Sequence[Any], today: Any) -> ProjectDurationFields:
    """Build the derived duration columns cached on the project row."""
    duration = derive_duration(milestones)
    if duration is None:
        return ProjectDurationFields()

    remaining = remaining_days(today, duration.start_date, duration.end_date)
    return ProjectDurationFields(
        calculated_start_date=duration.start_date,
        calculated_end_date=duration.end_date,
        total_days=duration.total_days,
        working_days=duration.working_days,
        total_days_remaining=remaining.total_days_remaining if remaining else None,
        working_days_remaining=remaining.working_days_remaining if remaining else None,
    )
