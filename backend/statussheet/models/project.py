"""
Project model definitions.

A project is the status sheet: narrative fields, budget, and the derived
duration/health columns cached from its milestones.
"""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from statussheet.models.enums import HealthCalculationType, ProjectStatus, StatusColor


class Budget(BaseModel):
    """Budget figures of a project."""

    total: float = Field(default=0, ge=0)
    actuals: float = Field(default=0, ge=0)
    forecast: float = Field(default=0, ge=0)


class ProjectBase(BaseModel):
    """Base project fields."""

    title: str = Field(..., min_length=1, max_length=200, description="Project title")
    description: Optional[str] = Field(None, max_length=5000, description="Project description")
    value_statement: Optional[str] = Field(None, max_length=5000, description="Business value statement")
    department: Optional[str] = Field(None, max_length=200)
    status: ProjectStatus = Field(ProjectStatus.ACTIVE)
    budget: Budget = Field(default_factory=Budget)
    accomplishments: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
    next_period_activities: list[str] = Field(default_factory=list)
    health_calculation_type: HealthCalculationType = Field(
        HealthCalculationType.AUTOMATIC,
        description="automatic = derived from milestones, manual = manual_status_color wins",
    )
    manual_status_color: Optional[StatusColor] = Field(
        None,
        description="User-set color; only meaningful when health_calculation_type is manual",
    )


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""

    pass


class ProjectUpdate(BaseModel):
    """Schema for updating an existing project."""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    value_statement: Optional[str] = Field(None, max_length=5000)
    department: Optional[str] = Field(None, max_length=200)
    status: Optional[ProjectStatus] = None
    budget: Optional[Budget] = None
    accomplishments: Optional[list[str]] = None
    risks: Optional[list[str]] = None
    next_period_activities: Optional[list[str]] = None
    health_calculation_type: Optional[HealthCalculationType] = None
    manual_status_color: Optional[StatusColor] = None


class ProjectDurationFields(BaseModel):
    """Derived duration columns written back after each recalculation."""

    calculated_start_date: Optional[date] = None
    calculated_end_date: Optional[date] = None
    total_days: Optional[int] = None
    working_days: Optional[int] = None
    total_days_remaining: Optional[int] = None
    working_days_remaining: Optional[int] = None


class Project(ProjectBase, ProjectDurationFields):
    """Complete project model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str = Field(..., description="Creator user ID")
    computed_status_color: Optional[StatusColor] = Field(
        None,
        description="Last automatic health color written back by recalculation",
    )
    created_at: datetime
    updated_at: datetime
