"""
SQLite implementation of Milestone repository.
"""

from __future__ import annotations

from collections import defaultdict
from uuid import UUID, uuid4

from sqlalchemy import select

from statussheet.core.exceptions import NotFoundError
from statussheet.infrastructure.local.database import MilestoneORM, get_session_factory, utcnow
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate


class SqliteMilestoneRepository(IMilestoneRepository):
    """SQLite implementation of milestone repository."""

    def __init__(self, session_factory=None):
        """
        Initialize repository.

        Args:
            session_factory: Optional session factory (for testing)
        """
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: MilestoneORM) -> Milestone:
        """Convert ORM object to Pydantic model."""
        return Milestone.model_validate(orm, from_attributes=True)

    @staticmethod
    def _ordering():
        # Undated milestones sort last
        return (MilestoneORM.date.is_(None), MilestoneORM.date, MilestoneORM.created_at)

    async def create(self, milestone: MilestoneCreate) -> Milestone:
        """Create a new milestone."""
        async with self._session_factory() as session:
            orm = MilestoneORM(
                id=str(uuid4()),
                project_id=str(milestone.project_id),
                date=milestone.date,
                milestone=milestone.milestone,
                owner=milestone.owner,
                completion=milestone.completion,
                weight=milestone.weight,
                status=milestone.status.value if milestone.status else None,
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get_by_id(self, milestone_id: UUID) -> Milestone | None:
        """Get a milestone by ID."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_project_id(self, milestone_id: UUID) -> UUID | None:
        """Get project ID for a milestone."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM.project_id).where(MilestoneORM.id == str(milestone_id))
            )
            pid = result.scalar_one_or_none()
            return UUID(pid) if pid else None

    async def list_by_project(self, project_id: UUID) -> list[Milestone]:
        """List milestones for a project."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(MilestoneORM.project_id == str(project_id))
                .order_by(*self._ordering())
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_by_projects(self, project_ids: list[UUID]) -> dict[UUID, list[Milestone]]:
        """List milestones for several projects, keyed by project ID."""
        grouped: dict[UUID, list[Milestone]] = defaultdict(list)
        if not project_ids:
            return grouped
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM)
                .where(MilestoneORM.project_id.in_([str(pid) for pid in project_ids]))
                .order_by(*self._ordering())
            )
            for orm in result.scalars().all():
                grouped[UUID(orm.project_id)].append(self._orm_to_model(orm))
        return grouped

    async def update(self, milestone_id: UUID, update: MilestoneUpdate) -> Milestone:
        """Update a milestone."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                raise NotFoundError(f"Milestone {milestone_id} not found")

            update_data = update.model_dump(exclude_unset=True)
            for field, value in update_data.items():
                if value is None and field not in ("date", "owner", "status"):
                    continue
                if hasattr(value, "value"):
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, milestone_id: UUID) -> bool:
        """Delete a milestone. Returns True if deleted, False if not found."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(MilestoneORM).where(MilestoneORM.id == str(milestone_id))
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False
            await session.delete(orm)
            await session.commit()
            return True
