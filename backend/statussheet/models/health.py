"""
Duration and health result models.

These are the outputs of the duration/health calculators and of the
batch recalculation tools built on top of them.
"""

from datetime import date
from datetime import date as date_type
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from statussheet.models.enums import HealthCalculationType, IssueSeverity, StatusColor


class DurationSummary(BaseModel):
    """Date range and day counts derived from milestone dates."""

    start_date: date
    end_date: date
    total_days: int = Field(..., ge=1, description="Inclusive calendar days")
    working_days: int = Field(..., ge=0, description="Monday-Friday days, boundaries included")


class TimeRemaining(BaseModel):
    """Share of the project timeline still ahead of today."""

    percentage: int = Field(..., ge=0, le=100)
    project_starts_in_future: bool = False
    is_overdue: bool = False


class RemainingDays(BaseModel):
    """Calendar and working days left until the end date."""

    total_days_remaining: int = Field(..., ge=0)
    working_days_remaining: int = Field(..., ge=0)
    days_overdue: int = Field(0, ge=0)


class HealthMetrics(BaseModel):
    """Uniform metrics attached to every health assessment."""

    weighted_completion: int = 0
    time_remaining_percentage: Optional[int] = None
    total_days: Optional[int] = None
    working_days: Optional[int] = None
    total_days_remaining: Optional[int] = None
    working_days_remaining: Optional[int] = None
    days_overdue: int = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    project_starts_in_future: bool = False
    is_overdue: bool = False


class HealthAssessment(BaseModel):
    """Result of classifying a project's health."""

    color: StatusColor
    calculation_type: HealthCalculationType
    reasoning: str
    metrics: HealthMetrics
    recommendations: list[str] = Field(default_factory=list)


class MilestoneDetail(BaseModel):
    """Per-milestone view used by the health analyzer."""

    date: Optional[date_type] = None
    milestone: str = ""
    completion: int = 0
    weight: int = 3
    days_from_today: Optional[int] = None
    status: Optional[StatusColor] = None


class ProjectHealthAnalysis(BaseModel):
    """Assessment of one project plus the milestone breakdown behind it."""

    project_id: UUID
    project_title: str
    assessment: HealthAssessment
    stored_computed_color: Optional[StatusColor] = None
    discrepancy: bool = False
    milestone_count: int = 0
    milestone_details: list[MilestoneDetail] = Field(default_factory=list)


class HealthIssue(BaseModel):
    """Suspicious data pattern found while analyzing a project."""

    project_id: UUID
    project_title: str
    issue: str
    severity: IssueSeverity
    recommendation: str


class HealthIssueReport(BaseModel):
    """Health issues across all projects."""

    total_projects: int = 0
    issues_found: list[HealthIssue] = Field(default_factory=list)


class RecalculationResult(BaseModel):
    """Counts reported by batch recalculation tools."""

    updated_count: int = 0
    total_count: int = 0
    errors: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def success(self) -> bool:
        return not self.errors


class DurationStats(BaseModel):
    """Aggregate duration statistics over non-cancelled projects."""

    total_projects: int = 0
    projects_with_duration: int = 0
    projects_without_duration: int = 0
    average_total_days: int = 0
    average_working_days: int = 0


class DurationInconsistency(BaseModel):
    project_id: UUID
    issue: str


class DurationValidationReport(BaseModel):
    """Consistency check of stored duration columns."""

    valid_projects: int = 0
    invalid_projects: int = 0
    inconsistencies: list[DurationInconsistency] = Field(default_factory=list)


class ProjectsNeedingDurationUpdate(BaseModel):
    """Projects with missing derived duration columns."""

    project_ids: list[UUID] = Field(default_factory=list)
    count: int = 0
