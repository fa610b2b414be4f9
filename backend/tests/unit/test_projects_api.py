"""
Tests for project and milestone routes.

Route functions are called directly with mocked repositories.
"""

from datetime import date, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException

from statussheet.api.milestones import create_milestone, delete_milestone, update_milestone
from statussheet.api.projects import (
    delete_project,
    get_project,
    get_project_health,
    list_projects,
    recalculate_project_duration,
    update_project,
)
from statussheet.core.exceptions import NotFoundError
from statussheet.models.enums import HealthCalculationType, ProjectStatus, StatusColor
from statussheet.models.milestone import Milestone, MilestoneCreate, MilestoneUpdate
from statussheet.models.project import Project, ProjectUpdate
from statussheet.services.health_calculator import HealthThresholds
from statussheet.services.project_health_service import ProjectHealthService

TODAY = date(2025, 3, 1)


def _project(**overrides) -> Project:
    now = datetime(2025, 1, 1)
    data = {
        "id": uuid4(),
        "user_id": "user-1",
        "title": "Project",
        "created_at": now,
        "updated_at": now,
    }
    data.update(overrides)
    return Project(**data)


def _milestone(project_id, milestone_date, completion) -> Milestone:
    now = datetime(2025, 1, 1)
    return Milestone(
        id=uuid4(),
        project_id=project_id,
        date=milestone_date,
        milestone="Milestone",
        completion=completion,
        created_at=now,
        updated_at=now,
    )


@pytest.mark.asyncio
async def test_list_projects_passes_status_filter():
    user = SimpleNamespace(id="user-1")
    repo = AsyncMock()
    repo.list.return_value = []

    await list_projects(
        user=user, repo=repo, status_filter=ProjectStatus.ON_HOLD, limit=10, offset=5
    )

    repo.list.assert_awaited_once_with("user-1", status="on_hold", limit=10, offset=5)


@pytest.mark.asyncio
async def test_get_project_not_found():
    user = SimpleNamespace(id="user-1")
    repo = AsyncMock()
    repo.get.return_value = None

    with pytest.raises(HTTPException) as exc_info:
        await get_project(project_id=uuid4(), user=user, repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_update_project_health_mode_refreshes_color():
    user = SimpleNamespace(id="user-1")
    project = _project(
        health_calculation_type=HealthCalculationType.MANUAL,
        manual_status_color=StatusColor.RED,
    )
    repo = AsyncMock()
    repo.update.return_value = project
    repo.get.return_value = project
    health_service = AsyncMock()
    update = ProjectUpdate(
        health_calculation_type=HealthCalculationType.MANUAL,
        manual_status_color=StatusColor.RED,
    )

    result = await update_project(
        project_id=project.id,
        update=update,
        user=user,
        repo=repo,
        health_service=health_service,
        today=TODAY,
    )

    assert result == project
    health_service.update_computed_status_color.assert_awaited_once_with(project.id, TODAY)


@pytest.mark.asyncio
async def test_update_project_title_keeps_color():
    user = SimpleNamespace(id="user-1")
    project = _project(title="Renamed")
    repo = AsyncMock()
    repo.update.return_value = project
    health_service = AsyncMock()

    result = await update_project(
        project_id=project.id,
        update=ProjectUpdate(title="Renamed"),
        user=user,
        repo=repo,
        health_service=health_service,
        today=TODAY,
    )

    assert result.title == "Renamed"
    health_service.update_computed_status_color.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_project_not_found():
    user = SimpleNamespace(id="user-1")
    repo = AsyncMock()
    repo.update.side_effect = NotFoundError("Project not found")

    with pytest.raises(HTTPException) as exc_info:
        await update_project(
            project_id=uuid4(),
            update=ProjectUpdate(title="x"),
            user=user,
            repo=repo,
            health_service=AsyncMock(),
            today=TODAY,
        )

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_not_found():
    user = SimpleNamespace(id="user-1")
    repo = AsyncMock()
    repo.delete.return_value = False

    with pytest.raises(HTTPException) as exc_info:
        await delete_project(project_id=uuid4(), user=user, repo=repo)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_project_health_uses_requested_day():
    user = SimpleNamespace(id="user-1")
    project = _project()
    repo = AsyncMock()
    repo.get.return_value = project
    milestone_repo = AsyncMock()
    milestone_repo.list_by_project.return_value = [
        _milestone(project.id, date(2025, 1, 1), 100),
        _milestone(project.id, date(2025, 6, 1), 0),
    ]
    health_service = ProjectHealthService(repo, milestone_repo, thresholds=HealthThresholds())

    on_track = await get_project_health(
        project_id=project.id,
        user=user,
        repo=repo,
        milestone_repo=milestone_repo,
        health_service=health_service,
        today=TODAY,
    )
    late = await get_project_health(
        project_id=project.id,
        user=user,
        repo=repo,
        milestone_repo=milestone_repo,
        health_service=health_service,
        today=date(2025, 7, 1),
    )

    assert on_track.color == StatusColor.GREEN
    assert on_track.metrics.time_remaining_percentage == 61
    assert late.color == StatusColor.RED


@pytest.mark.asyncio
async def test_recalculate_project_duration_refreshes_both_columns():
    user = SimpleNamespace(id="user-1")
    project = _project()
    repo = AsyncMock()
    repo.get.return_value = project
    duration_service = AsyncMock()
    health_service = AsyncMock()

    result = await recalculate_project_duration(
        project_id=project.id,
        user=user,
        repo=repo,
        duration_service=duration_service,
        health_service=health_service,
        today=TODAY,
    )

    assert result == project
    duration_service.update_project_duration.assert_awaited_once_with(project.id, TODAY)
    health_service.update_computed_status_color.assert_awaited_once_with(project.id, TODAY)


@pytest.mark.asyncio
async def test_create_milestone_refreshes_project():
    user = SimpleNamespace(id="user-1")
    project = _project()
    project_repo = AsyncMock()
    project_repo.get.return_value = project
    repo = AsyncMock()
    milestone = MilestoneCreate(project_id=project.id, milestone="Kickoff", date=TODAY)
    repo.create.return_value = _milestone(project.id, TODAY, 0)
    duration_service = AsyncMock()
    health_service = AsyncMock()

    await create_milestone(
        milestone=milestone,
        user=user,
        repo=repo,
        project_repo=project_repo,
        duration_service=duration_service,
        health_service=health_service,
        today=TODAY,
    )

    repo.create.assert_awaited_once_with(milestone)
    duration_service.update_project_duration.assert_awaited_once_with(project.id, TODAY)
    health_service.update_computed_status_color.assert_awaited_once_with(project.id, TODAY)


@pytest.mark.asyncio
async def test_create_milestone_on_foreign_project():
    user = SimpleNamespace(id="user-1")
    project_repo = AsyncMock()
    project_repo.get.return_value = None
    repo = AsyncMock()

    with pytest.raises(HTTPException) as exc_info:
        await create_milestone(
            milestone=MilestoneCreate(project_id=uuid4(), milestone="Kickoff"),
            user=user,
            repo=repo,
            project_repo=project_repo,
            duration_service=AsyncMock(),
            health_service=AsyncMock(),
            today=TODAY,
        )

    assert exc_info.value.status_code == 404
    repo.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_milestone_refreshes_project():
    user = SimpleNamespace(id="user-1")
    project = _project()
    updated = _milestone(project.id, TODAY, 80)
    repo = AsyncMock()
    repo.get_project_id.return_value = project.id
    repo.update.return_value = updated
    project_repo = AsyncMock()
    project_repo.get.return_value = project
    duration_service = AsyncMock()
    health_service = AsyncMock()

    result = await update_milestone(
        milestone_id=updated.id,
        update=MilestoneUpdate(completion=80),
        user=user,
        repo=repo,
        project_repo=project_repo,
        duration_service=duration_service,
        health_service=health_service,
        today=TODAY,
    )

    assert result.completion == 80
    duration_service.update_project_duration.assert_awaited_once_with(project.id, TODAY)
    health_service.update_computed_status_color.assert_awaited_once_with(project.id, TODAY)


@pytest.mark.asyncio
async def test_delete_unknown_milestone():
    user = SimpleNamespace(id="user-1")
    repo = AsyncMock()
    repo.get_project_id.return_value = None
    duration_service = AsyncMock()

    with pytest.raises(HTTPException) as exc_info:
        await delete_milestone(
            milestone_id=uuid4(),
            user=user,
            repo=repo,
            project_repo=AsyncMock(),
            duration_service=duration_service,
            health_service=AsyncMock(),
            today=TODAY,
        )

    assert exc_info.value.status_code == 404
    duration_service.update_project_duration.assert_not_awaited()
