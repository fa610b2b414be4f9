"""
Tests for SqliteMilestoneRepository.
"""

from datetime import date
from uuid import uuid4

import pytest

from statussheet.core.exceptions import NotFoundError
from statussheet.infrastructure.local.milestone_repository import SqliteMilestoneRepository
from statussheet.infrastructure.local.project_repository import SqliteProjectRepository
from statussheet.models.enums import StatusColor
from statussheet.models.milestone import MilestoneCreate, MilestoneUpdate
from statussheet.models.project import ProjectCreate


@pytest.fixture
def repo(session_factory):
    return SqliteMilestoneRepository(session_factory=session_factory)


@pytest.fixture
async def project(session_factory, test_user_id):
    project_repo = SqliteProjectRepository(session_factory=session_factory)
    return await project_repo.create(test_user_id, ProjectCreate(title="Project"))


@pytest.mark.asyncio
async def test_create_defaults(repo, project):
    created = await repo.create(MilestoneCreate(project_id=project.id, milestone="Kickoff"))

    assert created.project_id == project.id
    assert created.date is None
    assert created.completion == 0
    assert created.weight == 3
    assert created.status is None
    assert await repo.get_project_id(created.id) == project.id


@pytest.mark.asyncio
async def test_list_by_project_orders_by_date_with_undated_last(repo, project):
    await repo.create(MilestoneCreate(project_id=project.id, milestone="Undated"))
    await repo.create(
        MilestoneCreate(project_id=project.id, milestone="Closeout", date=date(2025, 6, 1))
    )
    await repo.create(
        MilestoneCreate(project_id=project.id, milestone="Kickoff", date=date(2025, 1, 1))
    )

    milestones = await repo.list_by_project(project.id)

    assert [m.milestone for m in milestones] == ["Kickoff", "Closeout", "Undated"]


@pytest.mark.asyncio
async def test_list_by_projects_groups_rows(repo, session_factory, project, test_user_id):
    other = await SqliteProjectRepository(session_factory=session_factory).create(
        test_user_id, ProjectCreate(title="Other")
    )
    await repo.create(MilestoneCreate(project_id=project.id, milestone="A"))
    await repo.create(MilestoneCreate(project_id=project.id, milestone="B"))
    await repo.create(MilestoneCreate(project_id=other.id, milestone="C"))

    grouped = await repo.list_by_projects([project.id, other.id])

    assert len(grouped[project.id]) == 2
    assert [m.milestone for m in grouped[other.id]] == ["C"]
    assert await repo.list_by_projects([]) == {}


@pytest.mark.asyncio
async def test_update_and_clear_date(repo, project):
    created = await repo.create(
        MilestoneCreate(
            project_id=project.id,
            milestone="Design",
            date=date(2025, 3, 1),
            status=StatusColor.GREEN,
        )
    )

    updated = await repo.update(created.id, MilestoneUpdate(completion=60, weight=5))
    cleared = await repo.update(created.id, MilestoneUpdate(date=None, status=None))

    assert updated.completion == 60
    assert updated.weight == 5
    assert updated.date == date(2025, 3, 1)
    assert cleared.date is None
    assert cleared.status is None
    assert cleared.completion == 60


@pytest.mark.asyncio
async def test_update_unknown_milestone_raises(repo):
    with pytest.raises(NotFoundError):
        await repo.update(uuid4(), MilestoneUpdate(completion=10))


@pytest.mark.asyncio
async def test_delete(repo, project):
    created = await repo.create(MilestoneCreate(project_id=project.id, milestone="Temp"))

    assert await repo.delete(created.id) is True
    assert await repo.delete(created.id) is False
    assert await repo.get_by_id(created.id) is None
