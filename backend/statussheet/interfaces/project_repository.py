"""
Project repository interface.

Defines the contract for project persistence operations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from statussheet.models.enums import StatusColor
from statussheet.models.project import Project, ProjectCreate, ProjectDurationFields, ProjectUpdate


class IProjectRepository(ABC):
    """Abstract interface for project persistence."""

    @abstractmethod
    async def create(self, user_id: str, project: ProjectCreate) -> Project:
        """
        Create a new project.

        Args:
            user_id: Owner user ID
            project: Project creation data

        Returns:
            Created project
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, project_id: UUID) -> Optional[Project]:
        """
        Get a project owned by the user.

        Returns:
            Project if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """
        Get a project by ID without user check (for admin/background processes).
        """
        pass

    @abstractmethod
    async def list(
        self,
        user_id: str,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Project]:
        """
        List the user's projects with optional filters.

        Args:
            user_id: Owner user ID
            status: Filter by lifecycle status
            limit: Maximum number of results
            offset: Pagination offset
        """
        pass

    @abstractmethod
    async def list_all(self, status: Optional[str] = None) -> list[Project]:
        """List every project regardless of owner (batch tools)."""
        pass

    @abstractmethod
    async def list_missing_duration(self) -> list[Project]:
        """List projects whose derived duration columns were never filled."""
        pass

    @abstractmethod
    async def update(
        self, user_id: str, project_id: UUID, update: ProjectUpdate
    ) -> Project:
        """
        Update user-editable fields of a project.

        Raises:
            NotFoundError: If project not found
        """
        pass

    @abstractmethod
    async def update_duration_fields(
        self, project_id: UUID, fields: ProjectDurationFields
    ) -> Project:
        """
        Overwrite the derived duration columns.

        Raises:
            NotFoundError: If project not found
        """
        pass

    @abstractmethod
    async def update_computed_status_color(
        self, project_id: UUID, color: Optional[StatusColor]
    ) -> Project:
        """
        Store the automatically computed health color.

        Never touches manual_status_color.

        Raises:
            NotFoundError: If project not found
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, project_id: UUID) -> bool:
        """
        Delete a project and its milestones.

        Returns:
            True if deleted, False if not found
        """
        pass
