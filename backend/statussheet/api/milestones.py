"""
Milestone API endpoints.

Provides CRUD operations for milestones. Every change re-derives the
parent project's duration columns and computed health color.
"""

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
from statussheet.api.projects import refresh_derived_fields, require_project
from statussheet.core.exceptions import NotFoundError
from statussheet.interfaces.auth_provider import User
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate

router = APIRouter(prefix="/milestones", tags=["milestones"])


async def _require_milestone_project(
    user: User,
    milestone_id: UUID,
    repo: IMilestoneRepository,
    project_repo: IProjectRepository,
) -> UUID:
    project_id = await repo.get_project_id(milestone_id)
    if not project_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Milestone {milestone_id} not found",
        )
    await require_project(user, project_id, project_repo)
    return project_id


@router.post("", response_model=Milestone, status_code=status.HTTP_201_CREATED)
async def create_milestone(
    milestone: MilestoneCreate,
    user: CurrentUser,
    repo: MilestoneRepo,
    project_repo: ProjectRepo,
    duration_service: DurationService,
    health_service: HealthService,
    today: Today,
) -> Milestone:
    """Create a new milestone."""
    await require_project(user, milestone.project_id, project_repo)
    created = await repo.create(milestone)
    await refresh_derived_fields(milestone.project_id, today, duration_service, health_service)
    return created


@router.get("", response_model=list[Milestone])
async def list_milestones(
    user: CurrentUser,
    repo: MilestoneRepo,
    project_repo: ProjectRepo,
    project_id: UUID = Query(..., description="Project whose milestones to list"),
) -> list[Milestone]:
    """List milestones of a project, ordered by date."""
    await require_project(user, project_id, project_repo)
    return await repo.list_by_project(project_id)


@router.get("/{milestone_id}", response_model=Milestone)
async def get_milestone(
    milestone_id: UUID,
    user: CurrentUser,
    repo: MilestoneRepo,
    project_repo: ProjectRepo,
) -> Milestone:
    """Get a milestone by ID."""
    await _require_milestone_project(user, milestone_id, repo, project_repo)
    milestone = await repo.get_by_id(milestone_id)
    if not milestone:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Milestone {milestone_id} not found",
        )
    return milestone


@router.patch("/{milestone_id}", response_model=Milestone)
async def update_milestone(
    milestone_id: UUID,
    update: MilestoneUpdate,
    user: CurrentUser,
    repo: MilestoneRepo,
    project_repo: ProjectRepo,
    duration_service: DurationService,
    health_service: HealthService,
    today: Today,
) -> Milestone:
    """Update a milestone."""
    project_id = await _require_milestone_project(user, milestone_id, repo, project_repo)
    try:
        updated = await repo.update(milestone_id, update)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    await refresh_derived_fields(project_id, today, duration_service, health_service)
    return updated


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(
    milestone_id: UUID,
    user: CurrentUser,
    repo: MilestoneRepo,
    project_repo: ProjectRepo,
    duration_service: DurationService,
    health_service: HealthService,
    today: Today,
) -> None:
    """Delete a milestone."""
    project_id = await _require_milestone_project(user, milestone_id, repo, project_repo)
    deleted = await repo.delete(milestone_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Milestone {milestone_id} not found",
        )
    await refresh_derived_fields(project_id, today, duration_service, health_service)
