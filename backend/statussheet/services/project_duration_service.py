"""
Project duration service.

Writes the derived duration columns back to projects and provides the
batch/admin tools around them. Each project is recalculated independently;
a failure on one project is recorded and the batch continues.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from statussheet.core.logger import setup_logger
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.models.enums import ProjectStatus
from statussheet.models.health import (
    DurationInconsistency,
    DurationStats,
    DurationValidationReport,
    ProjectsNeedingDurationUpdate,
    RecalculationResult,
)
from statussheet.models.milestone import Milestone
from statussheet.services.duration_calculator import (
    inclusive_days,
    project_duration_fields,
    round_half_up,
)

logger = setup_logger(__name__)

# Stored total_days may differ from the recomputed span by this many days
TOTAL_DAYS_TOLERANCE = 1


class ProjectDurationService:
    """Keeps cached project duration columns in sync with milestone dates."""

    def __init__(self, project_repo: IProjectRepository, milestone_repo: IMilestoneRepository):
        self.project_repo = project_repo
        self.milestone_repo = milestone_repo

    async def _write_back(
        self, project_id: UUID, milestones: list[Milestone], today: date
    ) -> None:
        fields = project_duration_fields(milestones, today)
        await self.project_repo.update_duration_fields(project_id, fields)

    async def update_project_duration(self, project_id: UUID, today: date) -> bool:
        """
        Recalculate one project's duration columns from its milestones.

        Returns:
            True if written, False if the project does not exist
        """
        project = await self.project_repo.get_by_id(project_id)
        if not project:
            logger.warning(f"Duration update skipped, project {project_id} not found")
            return False

        milestones = await self.milestone_repo.list_by_project(project_id)
        await self._write_back(project_id, milestones, today)
        logger.debug(f"Updated duration for project {project_id} ({len(milestones)} milestones)")
        return True

    async def recalculate_all_project_durations(self, today: date) -> RecalculationResult:
        """Recalculate duration columns for every project."""
        projects = await self.project_repo.list_all()
        logger.info(f"Recalculating durations for {len(projects)} projects")

        milestones_by_project = await self.milestone_repo.list_by_projects(
            [project.id for project in projects]
        )

        result = RecalculationResult(total_count=len(projects))
        for project in projects:
            try:
                await self._write_back(
                    project.id, milestones_by_project.get(project.id, []), today
                )
                result.updated_count += 1
            except Exception as e:
                message = f"Error updating project {project.id}: {e}"
                logger.error(message)
                result.errors.append(message)

        logger.info(
            f"Duration recalculation finished: {result.updated_count}/{result.total_count} "
            f"updated, {len(result.errors)} errors"
        )
        return result

    async def update_multiple_project_durations(
        self, project_ids: list[UUID], today: date
    ) -> RecalculationResult:
        """Recalculate duration columns for the given projects."""
        result = RecalculationResult(total_count=len(project_ids))
        for project_id in project_ids:
            try:
                if await self.update_project_duration(project_id, today):
                    result.updated_count += 1
                else:
                    result.errors.append(f"Failed to update project: {project_id}")
            except Exception as e:
                message = f"Error updating project {project_id}: {e}"
                logger.error(message)
                result.errors.append(message)
        return result

    async def get_projects_needing_duration_update(self) -> ProjectsNeedingDurationUpdate:
        """Projects whose duration columns have never been (fully) filled."""
        projects = await self.project_repo.list_missing_duration()
        logger.info(f"Found {len(projects)} projects needing duration updates")
        return ProjectsNeedingDurationUpdate(
            project_ids=[project.id for project in projects],
            count=len(projects),
        )

    async def get_project_duration_stats(self) -> DurationStats:
        """Duration statistics over all projects that are not cancelled."""
        projects = [
            p
            for p in await self.project_repo.list_all()
            if p.status != ProjectStatus.CANCELLED
        ]
        with_duration = [
            p for p in projects if p.total_days is not None and p.working_days is not None
        ]

        def _average(values: list[int]) -> int:
            return round_half_up(sum(values) / len(values)) if values else 0

        return DurationStats(
            total_projects=len(projects),
            projects_with_duration=len(with_duration),
            projects_without_duration=len(projects) - len(with_duration),
            average_total_days=_average([p.total_days for p in with_duration]),
            average_working_days=_average([p.working_days for p in with_duration]),
        )

    async def validate_project_durations(self) -> DurationValidationReport:
        """
        Check stored duration columns for partial or contradictory data.

        Cancelled projects are skipped.
        """
        projects = [
            p
            for p in await self.project_repo.list_all()
            if p.status != ProjectStatus.CANCELLED
        ]

        report = DurationValidationReport()
        for project in projects:
            issues = self._duration_issues(project)
            report.inconsistencies.extend(
                DurationInconsistency(project_id=project.id, issue=issue) for issue in issues
            )
            if issues:
                report.invalid_projects += 1
            else:
                report.valid_projects += 1

        if report.invalid_projects:
            logger.warning(
                f"Duration validation found {report.invalid_projects} inconsistent projects"
            )
        return report

    @staticmethod
    def _duration_issues(project) -> list[str]:
        issues: list[str] = []
        has_start = project.calculated_start_date is not None
        has_end = project.calculated_end_date is not None
        has_total = project.total_days is not None
        has_working = project.working_days is not None

        if has_start != has_end:
            issues.append("Inconsistent start/end dates")
        if has_total != has_working:
            issues.append("Inconsistent total/working days")
        if (has_start and has_end) != (has_total and has_working):
            issues.append("Inconsistent date and duration data")

        if has_start and has_end and has_total:
            actual_days = inclusive_days(project.calculated_start_date, project.calculated_end_date)
            if abs(actual_days - project.total_days) > TOTAL_DAYS_TOLERANCE:
                issues.append(
                    f"Total days mismatch: calculated {actual_days}, stored {project.total_days}"
                )
        return issues

