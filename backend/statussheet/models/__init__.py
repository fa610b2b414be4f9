"""Pydantic models (schemas) for the application."""

from statussheet.models.enums import (
    ContentType,
    HealthCalculationType,
    IssueSeverity,
    ProjectStatus,
    StatusColor,
)
from statussheet.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate, SuggestedMilestone
from statussheet.models.project import Budget, Project, ProjectCreate, ProjectDurationFields, ProjectUpdate
from statussheet.models.content import ContentGenerationRequest, GeneratedContent, MilestoneQualityReport
from statussheet.models.health import (
    DurationSummary,
    HealthAssessment,
    HealthMetrics,
    RecalculationResult,
    TimeRemaining,
)

__all__ = [
    # Enums
    "ContentType",
    "HealthCalculationType",
    "IssueSeverity",
    "ProjectStatus",
    "StatusColor",
    # Milestone
    "Milestone",
    "MilestoneCreate",
    "MilestoneUpdate",
    "SuggestedMilestone",
    # Project
    "Budget",
    "Project",
    "ProjectCreate",
    "ProjectDurationFields",
    "ProjectUpdate",
    # Content
    "ContentGenerationRequest",
    "GeneratedContent",
    "MilestoneQualityReport",
    # Health
    "DurationSummary",
    "HealthAssessment",
    "HealthMetrics",
    "RecalculationResult",
    "TimeRemaining",
]
