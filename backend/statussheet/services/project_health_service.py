"""
Project health service.

Runs the health classifier for stored projects, writes the computed color
back, and reports suspicious health data across the portfolio.
"""

from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from statussheet.core.exceptions import NotFoundError
from statussheet.core.logger import setup_logger
from statussheet.interfaces.milestone_repository import IMilestoneRepository
from statussheet.interfaces.project_repository import IProjectRepository
from statussheet.models.enums import IssueSeverity, StatusColor
from statussheet.models.health import (
    HealthAssessment,
    HealthIssue,
    HealthIssueReport,
    MilestoneDetail,
    ProjectHealthAnalysis,
    RecalculationResult,
)
from statussheet.models.milestone import Milestone
from statussheet.models.project import Project
from statussheet.services.health_calculator import (
    HealthThresholds,
    classify_health,
    days_from_today,
    effective_completion,
    effective_weight,
    overdue_milestones,
)

logger = setup_logger(__name__)

# Issue scan: lots of time left but almost nothing done
LOW_PROGRESS_TIME_REMAINING = 70
LOW_PROGRESS_COMPLETION = 5


class ProjectHealthService:
    """Health analysis and computed color maintenance for projects."""

    def __init__(
        self,
        project_repo: IProjectRepository,
        milestone_repo: IMilestoneRepository,
        thresholds: Optional[HealthThresholds] = None,
    ):
        self.project_repo = project_repo
        self.milestone_repo = milestone_repo
        self.thresholds = thresholds or HealthThresholds.from_settings()

    async def _load(self, project_id: UUID) -> tuple[Project, list[Milestone]]:
        project = await self.project_repo.get_by_id(project_id)
        if not project:
            raise NotFoundError(f"Project {project_id} not found")
        milestones = await self.milestone_repo.list_by_project(project_id)
        return project, milestones

    def assess(self, project: Project, milestones: list[Milestone], today: date) -> HealthAssessment:
        return classify_health(project, milestones, today, self.thresholds)

    def _analysis(
        self, project: Project, milestones: list[Milestone], today: date
    ) -> ProjectHealthAnalysis:
        assessment = self.assess(project, milestones, today)
        details = [
            MilestoneDetail(
                date=m.date,
                milestone=m.milestone,
                completion=round(effective_completion(m)),
                weight=int(effective_weight(m, self.thresholds.default_weight)),
                days_from_today=days_from_today(m, today),
                status=m.status,
            )
            for m in milestones
        ]
        stored = project.computed_status_color
        return ProjectHealthAnalysis(
            project_id=project.id,
            project_title=project.title,
            assessment=assessment,
            stored_computed_color=stored,
            discrepancy=stored is not None and stored != assessment.color,
            milestone_count=len(milestones),
            milestone_details=details,
        )

    async def analyze_project(self, project_id: UUID, today: date) -> ProjectHealthAnalysis:
        """
        Assess a project and explain the result milestone by milestone.

        Raises:
            NotFoundError: If the project does not exist
        """
        project, milestones = await self._load(project_id)
        analysis = self._analysis(project, milestones, today)
        if analysis.discrepancy:
            logger.warning(
                f"Stored color {analysis.stored_computed_color.value} differs from "
                f"calculated {analysis.assessment.color.value} for project {project_id}"
            )
        return analysis

    async def update_computed_status_color(
        self, project_id: UUID, today: date
    ) -> StatusColor:
        """
        Store the current health color of a project in computed_status_color.

        Raises:
            NotFoundError: If the project does not exist
        """
        project, milestones = await self._load(project_id)
        color = self.assess(project, milestones, today).color
        if project.computed_status_color != color:
            await self.project_repo.update_computed_status_color(project_id, color)
            logger.info(
                f"Computed color of project {project_id}: "
                f"{project.computed_status_color.value if project.computed_status_color else None} -> {color.value}"
            )
        return color

    async def recalculate_all_computed_status_colors(self, today: date) -> RecalculationResult:
        """
        Recompute the health color of every project.

        Only changed colors are written; updated_count counts those writes.
        """
        projects = await self.project_repo.list_all()
        logger.info(f"Recalculating computed status colors for {len(projects)} projects")
        milestones_by_project = await self.milestone_repo.list_by_projects(
            [project.id for project in projects]
        )

        result = RecalculationResult(total_count=len(projects))
        for project in projects:
            try:
                color = self.assess(
                    project, milestones_by_project.get(project.id, []), today
                ).color
                if project.computed_status_color != color:
                    await self.project_repo.update_computed_status_color(project.id, color)
                    result.updated_count += 1
            except Exception as e:
                message = f"Error updating color for project {project.id}: {e}"
                logger.error(message)
                result.errors.append(message)

        logger.info(
            f"Color recalculation finished: {result.updated_count} changed of "
            f"{result.total_count}, {len(result.errors)} errors"
        )
        return result

    async def find_health_calculation_issues(self, today: date) -> HealthIssueReport:
        """
        Scan all projects for data patterns that distort health colors.

        A future project is flagged only when a manual override marks it
        yellow or red before any work is due.
        """
        projects = await self.project_repo.list_all()
        milestones_by_project = await self.milestone_repo.list_by_projects(
            [project.id for project in projects]
        )

        report = HealthIssueReport(total_projects=len(projects))
        for project in projects:
            milestones = milestones_by_project.get(project.id, [])
            report.issues_found.extend(self._issues(project, milestones, today))

        logger.info(
            f"Health issue scan: {len(report.issues_found)} issues in {len(projects)} projects"
        )
        return report

    def _issues(
        self, project: Project, milestones: list[Milestone], today: date
    ) -> list[HealthIssue]:
        assessment = self.assess(project, milestones, today)
        metrics = assessment.metrics
        issues = []

        def _issue(text: str, severity: IssueSeverity, recommendation: str) -> None:
            issues.append(
                HealthIssue(
                    project_id=project.id,
                    project_title=project.title,
                    issue=text,
                    severity=severity,
                    recommendation=recommendation,
                )
            )

        # Automatic projects expect no progress before their start and classify
        # green, so only a manual color can trigger this
        if metrics.project_starts_in_future and assessment.color != StatusColor.GREEN:
            _issue(
                "Future project with poor manual health status",
                IssueSeverity.MEDIUM,
                "Review milestone completion percentages for future projects",
            )

        if not milestones:
            _issue(
                "No milestones defined",
                IssueSeverity.LOW,
                "Add milestones to enable proper health tracking",
            )

        overdue = overdue_milestones(milestones, today)
        if overdue:
            _issue(
                f"{len(overdue)} overdue milestone(s) not marked complete",
                IssueSeverity.HIGH,
                "Update completion status for overdue milestones",
            )

        if (
            metrics.time_remaining_percentage is not None
            and metrics.time_remaining_percentage > LOW_PROGRESS_TIME_REMAINING
            and metrics.weighted_completion < LOW_PROGRESS_COMPLETION
        ):
            _issue(
                "Very low completion with substantial time remaining",
                IssueSeverity.LOW,
                "Consider if project timeline or milestone breakdown is realistic",
            )

        return issues

    async def quick_health_check(self, project_id: UUID, today: date) -> str:
        """One-line health summary of a project."""
        project = await self.project_repo.get_by_id(project_id)
        if not project:
            return "Project not found"
        milestones = await self.milestone_repo.list_by_project(project_id)
        assessment = self.assess(project, milestones, today)
        metrics = assessment.metrics
        time_left = (
            f"{metrics.time_remaining_percentage}%"
            if metrics.time_remaining_percentage is not None
            else "N/A"
        )
        return (
            f"{assessment.color.value.upper()}: {assessment.reasoning} "
            f"({metrics.weighted_completion}% complete, {time_left} time remaining)"
        )
