"""
SQLite implementation of Project repository.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import and_, delete, or_, select

from statussheet.core.exceptions import NotFoundError
from statussheet.infrastructure.local.database import (
    MilestoneORM,
    ProjectORM,
    get_session_factory,
    utcnow,
)
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.models.enums import HealthCalculationType, ProjectStatus, StatusColor
from statussheet.models.project import (
    Budget,
    Project,
    ProjectCreate,
    ProjectDurationFields,
    ProjectUpdate,
)


class SqliteProjectRepository(IProjectRepository):
    """SQLite implementation of project repository."""

    def __init__(self, session_factory=None):
        self._session_factory = session_factory or get_session_factory()

    def _orm_to_model(self, orm: ProjectORM) -> Project:
        """Convert ORM object to Pydantic model."""
        return Project(
            id=UUID(orm.id),
            user_id=orm.user_id,
            title=orm.title,
            description=orm.description,
            value_statement=orm.value_statement,
            department=orm.department,
            status=ProjectStatus(orm.status) if orm.status else ProjectStatus.ACTIVE,
            budget=Budget(
                total=orm.budget_total or 0,
                actuals=orm.budget_actuals or 0,
                forecast=orm.budget_forecast or 0,
            ),
            accomplishments=orm.accomplishments if orm.accomplishments is not None else [],
            risks=orm.risks if orm.risks is not None else [],
            next_period_activities=(
                orm.next_period_activities if orm.next_period_activities is not None else []
            ),
            health_calculation_type=(
                HealthCalculationType(orm.health_calculation_type)
                if orm.health_calculation_type
                else HealthCalculationType.AUTOMATIC
            ),
            manual_status_color=StatusColor(orm.manual_status_color) if orm.manual_status_color else None,
            computed_status_color=(
                StatusColor(orm.computed_status_color) if orm.computed_status_color else None
            ),
            calculated_start_date=orm.calculated_start_date,
            calculated_end_date=orm.calculated_end_date,
            total_days=orm.total_days,
            working_days=orm.working_days,
            total_days_remaining=orm.total_days_remaining,
            working_days_remaining=orm.working_days_remaining,
            created_at=orm.created_at,
            updated_at=orm.updated_at,
        )

    async def _get_orm(self, session, project_id: UUID, user_id: Optional[str] = None) -> ProjectORM:
        conditions = [ProjectORM.id == str(project_id)]
        if user_id is not None:
            conditions.append(ProjectORM.user_id == user_id)
        result = await session.execute(select(ProjectORM).where(and_(*conditions)))
        orm = result.scalar_one_or_none()
        if not orm:
            raise NotFoundError(f"Project {project_id} not found")
        return orm

    async def create(self, user_id: str, project: ProjectCreate) -> Project:
        """Create a new project."""
        async with self._session_factory() as session:
            orm = ProjectORM(
                id=str(uuid4()),
                user_id=user_id,
                title=project.title,
                description=project.description,
                value_statement=project.value_statement,
                department=project.department,
                status=project.status.value,
                budget_total=project.budget.total,
                budget_actuals=project.budget.actuals,
                budget_forecast=project.budget.forecast,
                accomplishments=project.accomplishments,
                risks=project.risks,
                next_period_activities=project.next_period_activities,
                health_calculation_type=project.health_calculation_type.value,
                manual_status_color=(
                    project.manual_status_color.value if project.manual_status_color else None
                ),
            )
            session.add(orm)
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def get(self, user_id: str, project_id: UUID) -> Optional[Project]:
        """Get a project owned by the user."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProjectORM).where(
                    and_(ProjectORM.id == str(project_id), ProjectORM.user_id == user_id)
                )
            )
            orm = result.scalar_one_or_none()
            return self._orm_to_model(orm) if orm else None

    async def get_by_id(self, project_id: UUID) -> Optional[Project]:
        """Get a project by ID without user check (for system/background processes)."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProjectORM).where(ProjectORM.id == str(project_id))
            )
            orm = result.scalars().first()
            return self._orm_to_model(orm) if orm else None

    async def list(
        self,
        user_id: str,
        status: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Project]:
        """List the user's projects with optional filters."""
        async with self._session_factory() as session:
            query = select(ProjectORM).where(ProjectORM.user_id == user_id)
            if status:
                query = query.where(ProjectORM.status == status)

            query = query.order_by(ProjectORM.created_at.desc())
            query = query.limit(limit).offset(offset)

            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_all(self, status: Optional[str] = None) -> list[Project]:
        """List every project regardless of owner."""
        async with self._session_factory() as session:
            query = select(ProjectORM)
            if status:
                query = query.where(ProjectORM.status == status)
            query = query.order_by(ProjectORM.created_at.desc())
            result = await session.execute(query)
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def list_missing_duration(self) -> list[Project]:
        """List projects with any derived duration column still empty."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProjectORM).where(
                    or_(
                        ProjectORM.calculated_start_date.is_(None),
                        ProjectORM.calculated_end_date.is_(None),
                        ProjectORM.total_days.is_(None),
                        ProjectORM.working_days.is_(None),
                        ProjectORM.total_days_remaining.is_(None),
                        ProjectORM.working_days_remaining.is_(None),
                    )
                )
            )
            return [self._orm_to_model(orm) for orm in result.scalars().all()]

    async def update(
        self, user_id: str, project_id: UUID, update: ProjectUpdate
    ) -> Project:
        """Update user-editable fields of a project."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, project_id, user_id)

            update_data = update.model_dump(exclude_unset=True)
            # Nested dump drops unset budget figures, so read the model itself
            update_data.pop("budget", None)
            if update.budget is not None:
                orm.budget_total = update.budget.total
                orm.budget_actuals = update.budget.actuals
                orm.budget_forecast = update.budget.forecast

            for field, value in update_data.items():
                if value is None and field != "manual_status_color":
                    continue
                if hasattr(value, "value"):
                    value = value.value
                setattr(orm, field, value)

            orm.updated_at = utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_duration_fields(
        self, project_id: UUID, fields: ProjectDurationFields
    ) -> Project:
        """Overwrite the derived duration columns (None clears them)."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, project_id)
            for field, value in fields.model_dump().items():
                setattr(orm, field, value)
            orm.updated_at = utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def update_computed_status_color(
        self, project_id: UUID, color: Optional[StatusColor]
    ) -> Project:
        """Store the automatically computed health color."""
        async with self._session_factory() as session:
            orm = await self._get_orm(session, project_id)
            orm.computed_status_color = color.value if color else None
            orm.updated_at = utcnow()
            await session.commit()
            await session.refresh(orm)
            return self._orm_to_model(orm)

    async def delete(self, user_id: str, project_id: UUID) -> bool:
        """Delete a project and its milestones."""
        async with self._session_factory() as session:
            result = await session.execute(
                select(ProjectORM).where(
                    and_(ProjectORM.id == str(project_id), ProjectORM.user_id == user_id)
                )
            )
            orm = result.scalar_one_or_none()
            if not orm:
                return False

            await session.execute(
                delete(MilestoneORM).where(MilestoneORM.project_id == str(project_id))
            )
            await session.delete(orm)
            await session.commit()
            return True
