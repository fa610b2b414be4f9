"""
AI content generation request/response models.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from statussheet.models.enums import ContentType
from statussheet.models.milestone import SuggestedMilestone


class ContentGenerationRequest(BaseModel):
    """Request to generate narrative content or milestone suggestions."""

    type: ContentType
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    project_id: Optional[UUID] = Field(
        None,
        description="Project to summarize; required for analysis",
    )


class MilestoneQualityReport(BaseModel):
    """Quality assessment of AI-suggested milestones."""

    is_valid: bool
    issues: list[str] = Field(default_factory=list)
    score: int = Field(..., ge=0, le=100)


class GeneratedContent(BaseModel):
    """Result of a content generation request."""

    type: ContentType
    content: str
    milestones: Optional[list[SuggestedMilestone]] = None
    quality: Optional[MilestoneQualityReport] = None
    success: bool = True
    error_code: Optional[str] = None
    error_detail: Optional[str] = None
    model: Optional[str] = None
