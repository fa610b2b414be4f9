"""
Enum definitions for the application.

Values are the lowercase strings stored in the database and exchanged with clients.
"""

from enum import Enum


class StatusColor(str, Enum):
    """Tri-state health color."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class HealthCalculationType(str, Enum):
    """How a project's health color is decided."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


class ProjectStatus(str, Enum):
    """Project lifecycle state (orthogonal to health color)."""

    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    DRAFT = "draft"


class ContentType(str, Enum):
    """
    Kind of AI-generated content.

    ANALYSIS is the executive summary shown on the status sheet.
    """

    DESCRIPTION = "description"
    VALUE = "value"
    MILESTONES = "milestones"
    ANALYSIS = "analysis"


class IssueSeverity(str, Enum):
    """Severity of a detected health calculation issue."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
