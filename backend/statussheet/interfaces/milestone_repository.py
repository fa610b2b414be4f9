"""
Milestone repository interface.

Defines the contract for milestone data operations. Ownership is checked
through the parent project by callers.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from statussheet.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate


class IMilestoneRepository(ABC):
    """Interface for milestone repository operations."""

    @abstractmethod
    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        pass

    @abstractmethod
    async def get_by_id(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        pass

    @abstractmethod
    async def get_project_id(self, milestone_id: UUID) -> UUID | None:
        """Get the project ID of a milestone."""
        pass

    @abstractmethod
    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project, ordered by date."""
        pass

    @abstractmethod
    async def list_by_projects(self, project_ids: list[UUID]) -> dict[UUID, list[Milestone]]:
        """List milestones for several projects at once, keyed by project ID."""
        pass

    @abstractmethod
    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Update a milestone. Raises NotFoundError if missing."""
        pass

    @abstractmethod
    async def delete(self, milestone_id: UUID) -> bool:
        """Delete a milestone. Returns True if deleted, False if not found."""
        pass
