"""
Project health calculation.

Weighted completion across milestones and the green/yellow/red health
classifier built on top of the duration calculator. Both accept pydantic
models or plain mapping rows and never raise for malformed milestone data.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from statussheet.core.config import Settings, get_settings
from statussheet.models.enums import HealthCalculationType, ProjectStatus, StatusColor
from statussheet.models.health import HealthAssessment, HealthMetrics
from statussheet.models.milestone import DEFAULT_MILESTONE_WEIGHT
from statussheet.services.duration_calculator import (
    coerce_date,
    derive_duration,
    ensure_milestone_sequence,
    milestone_field,
    remaining_days,
    round_half_up,
    time_remaining_percentage,
)

MANUAL_OVERRIDE_REASONING = (
    "Manual override: the health color was set by the project owner "
    "and automatic signals are not applied"
)
INSUFFICIENT_DATA_REASONING = (
    "Insufficient milestone data: no milestone has a valid date, "
    "so health cannot be assessed"
)

_CLOSED_STATUSES = {ProjectStatus.COMPLETED.value, ProjectStatus.CANCELLED.value}


class HealthThresholds(BaseModel):
    """Tunable constants of the health classifier."""

    default_weight: int = Field(DEFAULT_MILESTONE_WEIGHT, ge=1)
    behind_schedule_margin: int = Field(15, ge=0, le=100)
    far_future_days: int = Field(30, ge=0)
    far_future_completion: int = Field(80, ge=0, le=100)
    min_recommended_milestones: int = Field(3, ge=0)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "HealthThresholds":
        settings = settings or get_settings()
        return cls(
            default_weight=settings.DEFAULT_MILESTONE_WEIGHT,
            behind_schedule_margin=settings.HEALTH_BEHIND_SCHEDULE_MARGIN,
            far_future_days=settings.FAR_FUTURE_MILESTONE_DAYS,
        )


def _coerce_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def effective_weight(milestone: Any, default_weight: int = DEFAULT_MILESTONE_WEIGHT) -> float:
    """Milestone weight, falling back to the default when missing or non-positive."""
    weight = _coerce_number(milestone_field(milestone, "weight"))
    if weight is None or weight <= 0:
        return float(default_weight)
    return weight


def effective_completion(milestone: Any) -> float:
    """Milestone completion clamped to [0, 100]; unusable values count as 0."""
    completion = _coerce_number(milestone_field(milestone, "completion"))
    if completion is None:
        return 0.0
    return max(0.0, min(100.0, completion))


def weighted_completion(
    milestones: Sequence[Any],
    default_weight: int = DEFAULT_MILESTONE_WEIGHT,
) -> int:
    """
    Weighted average completion of the milestones, 0-100.

    An empty list (or a zero total weight) yields 0, meaning "no progress".
    """
    milestones = ensure_milestone_sequence(milestones)
    weighted = [
        (effective_weight(milestone, default_weight), effective_completion(milestone))
        for milestone in milestones
    ]
    if not weighted:
        return 0

    # Scale by the largest weight so huge weights cannot overflow the sums
    largest = max(weight for weight, _ in weighted)
    total_weight = sum(weight / largest for weight, _ in weighted)
    weighted_sum = sum(completion * weight / largest for weight, completion in weighted)
    if total_weight <= 0:
        return 0
    average = weighted_sum / total_weight
    if not math.isfinite(average):
        return 0
    return max(0, min(100, round_half_up(average)))


def days_from_today(milestone: Any, today: date) -> Optional[int]:
    milestone_date = coerce_date(milestone_field(milestone, "date"))
    if milestone_date is None:
        return None
    return (milestone_date - today).days


def overdue_milestones(milestones: Sequence[Any], today: Any) -> list[Any]:
    """Milestones whose date has passed while still below 100% completion."""
    milestones = ensure_milestone_sequence(milestones)
    today_value = coerce_date(today)
    if today_value is None:
        raise TypeError("today must be a date, datetime or ISO 8601 string")
    result = []
    for milestone in milestones:
        offset = days_from_today(milestone, today_value)
        if offset is not None and offset < 0 and effective_completion(milestone) < 100:
            result.append(milestone)
    return result


def build_metrics(
    milestones: Sequence[Any],
    today: Any,
    default_weight: int = DEFAULT_MILESTONE_WEIGHT,
) -> HealthMetrics:
    """Metrics shown with every assessment, whichever path decided the color."""
    completion = weighted_completion(milestones, default_weight)
    duration = derive_duration(milestones)
    if duration is None:
        return HealthMetrics(weighted_completion=completion)

    time_remaining = time_remaining_percentage(today, duration.start_date, duration.end_date)
    remaining = remaining_days(today, duration.start_date, duration.end_date)
    return HealthMetrics(
        weighted_completion=completion,
        time_remaining_percentage=time_remaining.percentage,
        total_days=duration.total_days,
        working_days=duration.working_days,
        total_days_remaining=remaining.total_days_remaining,
        working_days_remaining=remaining.working_days_remaining,
        days_overdue=remaining.days_overdue,
        start_date=duration.start_date,
        end_date=duration.end_date,
        project_starts_in_future=time_remaining.project_starts_in_future,
        is_overdue=time_remaining.is_overdue,
    )


def _manual_color(project: Any) -> StatusColor:
    value = _enum_value(milestone_field(project, "manual_status_color"))
    try:
        return StatusColor(value)
    except ValueError:
        return StatusColor.GREEN


def _is_manual(project: Any) -> bool:
    value = _enum_value(milestone_field(project, "health_calculation_type"))
    return value == HealthCalculationType.MANUAL.value


def _classify_automatic(
    metrics: HealthMetrics,
    thresholds: HealthThresholds,
) -> tuple[StatusColor, str]:
    completion = metrics.weighted_completion
    if metrics.time_remaining_percentage is None:
        return StatusColor.YELLOW, INSUFFICIENT_DATA_REASONING

    if metrics.is_overdue and completion < 100:
        return (
            StatusColor.RED,
            f"Overdue and incomplete: end date {metrics.end_date.isoformat()} passed "
            f"{metrics.days_overdue} day(s) ago at {completion}% weighted completion",
        )

    expected = 100 - metrics.time_remaining_percentage
    if completion >= expected:
        if metrics.project_starts_in_future:
            return (
                StatusColor.GREEN,
                f"Future project: starts {metrics.start_date.isoformat()} with the full "
                f"duration remaining ({completion}% weighted completion)",
            )
        return (
            StatusColor.GREEN,
            f"On schedule: {completion}% complete with {expected}% of the timeline elapsed",
        )

    gap = expected - completion
    if gap < thresholds.behind_schedule_margin:
        return (
            StatusColor.YELLOW,
            f"Slightly behind schedule: {completion}% complete with {expected}% "
            f"of the timeline elapsed ({gap} points behind)",
        )
    return (
        StatusColor.RED,
        f"Behind schedule: {completion}% complete with {expected}% "
        f"of the timeline elapsed ({gap} points behind)",
    )


def _recommendations(
    project: Any,
    milestones: Sequence[Any],
    today: date,
    color: StatusColor,
    metrics: HealthMetrics,
    thresholds: HealthThresholds,
) -> list[str]:
    recommendations: list[str] = []
    closed = _enum_value(milestone_field(project, "status")) in _CLOSED_STATUSES
    time_left = metrics.time_remaining_percentage
    completion = metrics.weighted_completion

    if metrics.time_remaining_percentage is None:
        recommendations.append(
            "Add dates to milestones so duration and health can be calculated"
        )
    elif color != StatusColor.GREEN and not closed:
        if metrics.is_overdue:
            recommendations.append(
                f"Project is overdue by {metrics.days_overdue} day(s) - update milestone "
                "dates or mark completed milestones"
            )
        else:
            recommendations.append(
                f"Completion trailing schedule by {100 - time_left - completion}%"
            )
            if time_left > 50 and completion < 20:
                recommendations.append(
                    "Low completion with substantial time remaining - consider breaking "
                    "down milestones into smaller tasks"
                )
            elif time_left < 30 and completion < 60:
                recommendations.append(
                    "Limited time remaining with low completion - project may need "
                    "additional resources or scope adjustment"
                )

    if not milestones:
        recommendations.append(
            "No milestones defined - add milestones to get more accurate health calculations"
        )
    elif len(milestones) < thresholds.min_recommended_milestones:
        recommendations.append("Consider adding more milestones for better project tracking")

    overdue = overdue_milestones(milestones, today)
    if overdue:
        recommendations.append(
            f"{len(overdue)} milestone(s) are overdue but not marked as complete"
        )
        for milestone in overdue:
            name = milestone_field(milestone, "milestone") or "Unnamed milestone"
            due = coerce_date(milestone_field(milestone, "date"))
            recommendations.append(
                f"'{name}' was due {due.isoformat()} and is "
                f"{round_half_up(effective_completion(milestone))}% complete"
            )

    far_future = [
        m
        for m in milestones
        if (days_from_today(m, today) or 0) > thresholds.far_future_days
        and effective_completion(m) > thresholds.far_future_completion
    ]
    if far_future:
        recommendations.append(
            f"{len(far_future)} milestone(s) are far in the future but marked as highly complete"
        )

    return recommendations


def classify_health(
    project: Any,
    milestones: Sequence[Any],
    today: Any,
    thresholds: Optional[HealthThresholds] = None,
) -> HealthAssessment:
    """
    Classify a project as green, yellow or red.

    A manual project returns its manual color unchanged. Otherwise the color
    comes from weighted completion against the share of the timeline that
    has elapsed:

    - no dated milestones: yellow (insufficient data)
    - past the end date and below 100%: red
    - completion >= elapsed share: green
    - behind by less than the margin: yellow
    - otherwise: red

    Metrics are always computed and attached so the result has one shape.
    Raises TypeError only when milestones is not a sequence or today is
    not a date.
    """
    thresholds = thresholds or HealthThresholds()
    milestones = ensure_milestone_sequence(milestones)
    today_value = coerce_date(today)
    if today_value is None:
        raise TypeError("today must be a date, datetime or ISO 8601 string")

    metrics = build_metrics(milestones, today_value, thresholds.default_weight)

    if _is_manual(project):
        return HealthAssessment(
            color=_manual_color(project),
            calculation_type=HealthCalculationType.MANUAL,
            reasoning=MANUAL_OVERRIDE_REASONING,
            metrics=metrics,
        )

    color, reasoning = _classify_automatic(metrics, thresholds)
    return HealthAssessment(
        color=color,
        calculation_type=HealthCalculationType.AUTOMATIC,
        reasoning=reasoning,
        metrics=metrics,
        recommendations=_recommendations(
            project, milestones, today_value, color, metrics, thresholds
        ),
    )
