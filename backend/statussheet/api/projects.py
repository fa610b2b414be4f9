"""
Project API endpoints.

CRUD for status sheets plus the health and duration views derived from
their milestones.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from statussheet.api.deps import (
    CurrentUser,
    DurationService,
    HealthService,
    MilestoneRepo,
    ProjectRepo,
    Today,
)
from statussheet.core.exceptions import NotFoundError
from statussheet.core.logger import setup_logger
from statussheet.interfaces.auth_provider import User
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.models.enums import ProjectStatus
from statussheet.models.health import HealthAssessment, ProjectHealthAnalysis
from statussheet.models.project import Project, ProjectCreate, ProjectUpdate
from statussheet.services.project_duration_service import ProjectDurationService
from statussheet.services.project_health_service import ProjectHealthService

logger = setup_logger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


async def require_project(
    user: User, project_id: UUID, project_repo: IProjectRepository
) -> Project:
    """Return the user's project or raise 404."""
    project = await project_repo.get(user.id, project_id)
    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project {project_id} not found",
        )
    return project


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    user: CurrentUser,
    repo: ProjectRepo,
) -> Project:
    """Create a new project."""
    created = await repo.create(user.id, project)
    logger.info(f"Project {created.id} created by {user.id}")
    return created


@router.get("", response_model=list[Project])
async def list_projects(
    user: CurrentUser,
    repo: ProjectRepo,
    status_filter: Optional[ProjectStatus] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[Project]:
    """List the user's projects."""
    return await repo.list(
        user.id,
        status=status_filter.value if status_filter else None,
        limit=limit,
        offset=offset,
    )


@router.get("/{project_id}", response_model=Project)
async def get_project(
    project_id: UUID,
    user: CurrentUser,
    repo: ProjectRepo,
) -> Project:
    """Get a project by ID."""
    return await require_project(user, project_id, repo)


@router.patch("/{project_id}", response_model=Project)
async def update_project(
    project_id: UUID,
    update: ProjectUpdate,
    user: CurrentUser,
    repo: ProjectRepo,
    health_service: HealthService,
    today: Today,
) -> Project:
    """
    Update a project.

    Switching between manual and automatic health (or changing the manual
    color) refreshes the stored computed color.
    """
    try:
        updated = await repo.update(user.id, project_id, update)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    fields = update.model_fields_set
    if "health_calculation_type" in fields or "manual_status_color" in fields:
        await health_service.update_computed_status_color(project_id, today)
        updated = await repo.get(user.id, project_id)
    return updated


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: UUID,
    user: CurrentUser,
    repo: ProjectRepo,
) -> None:
    """Delete a project and its milestones."""
    deleted = await repo.delete(user.id, project_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project {project_id} not found",
        )


@router.get("/{project_id}/health", response_model=HealthAssessment)
async def get_project_health(
    project_id: UUID,
    user: CurrentUser,
    repo: ProjectRepo,
    milestone_repo: MilestoneRepo,
    health_service: HealthService,
    today: Today,
) -> HealthAssessment:
    """Classify the project's health as of today (or the given date)."""
    project = await require_project(user, project_id, repo)
    milestones = await milestone_repo.list_by_project(project_id)
    return health_service.assess(project, milestones, today)


@router.get("/{project_id}/health/analysis", response_model=ProjectHealthAnalysis)
async def get_project_health_analysis(
    project_id: UUID,
    user: CurrentUser,
    repo: ProjectRepo,
    health_service: HealthService,
    today: Today,
) -> ProjectHealthAnalysis:
    """Health assessment with per-milestone details and stored-color check."""
    await require_project(user, project_id, repo)
    return await health_service.analyze_project(project_id, today)


@router.post("/{project_id}/duration", response_model=Project)
async def recalculate_project_duration(
    project_id: UUID,
    user: CurrentUser,
    repo: ProjectRepo,
    duration_service: DurationService,
    health_service: HealthService,
    today: Today,
) -> Project:
    """Recalculate the project's duration columns and computed color."""
    await require_project(user, project_id, repo)
    await refresh_derived_fields(project_id, today, duration_service, health_service)
    return await repo.get(user.id, project_id)


async def refresh_derived_fields(
    project_id: UUID,
    today: date,
    duration_service: ProjectDurationService,
    health_service: ProjectHealthService,
) -> None:
    """Write back duration columns, then the computed color."""
    await duration_service.update_project_duration(project_id, today)
    await health_service.update_computed_status_color(project_id, today)
