"""
Milestone model definitions.

Milestones belong to a project and drive its duration and health.
"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from statussheet.models.enums import StatusColor

DEFAULT_MILESTONE_WEIGHT = 3


class MilestoneBase(BaseModel):
    """Base milestone fields."""

    project_id: UUID = Field(..., description="Project ID")
    date: Optional[date_type] = Field(None, description="Target date")
    milestone: str = Field(..., min_length=1, max_length=500, description="Milestone name")
    owner: Optional[str] = Field(None, max_length=200, description="Responsible role or person")
    completion: int = Field(default=0, ge=0, le=100, description="Completion percentage")
    weight: int = Field(
        default=DEFAULT_MILESTONE_WEIGHT,
        ge=1,
        description="Importance factor used for weighted completion",
    )
    status: Optional[StatusColor] = Field(
        None,
        description="Advisory status tag; completion is authoritative for progress",
    )


class MilestoneCreate(MilestoneBase):
    """Schema for creating a milestone."""

    pass


class MilestoneUpdate(BaseModel):
    """Schema for updating a milestone."""

    date: Optional[date_type] = None
    milestone: Optional[str] = Field(None, min_length=1, max_length=500)
    owner: Optional[str] = Field(None, max_length=200)
    completion: Optional[int] = Field(None, ge=0, le=100)
    weight: Optional[int] = Field(None, ge=1)
    status: Optional[StatusColor] = None


class Milestone(MilestoneBase):
    """Complete milestone model."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


class SuggestedMilestone(BaseModel):
    """Milestone proposed by AI generation (not yet persisted)."""

    date: date_type
    milestone: str
    owner: str = "Project Manager"
    completion: int = Field(default=0, ge=0, le=100)
    status: StatusColor = StatusColor.GREEN
