"""
Admin API endpoints.

Portfolio-wide batch tools: duration and computed color recalculation,
duration statistics and data consistency reports.
"""

from fastapi import APIRouter

from statussheet.api.deps import AdminUser, DurationService, HealthService, Today
from statussheet.core.logger import setup_logger
from statussheet.models.health import (
    DurationStats,
    DurationValidationReport,
    HealthIssueReport,
    ProjectsNeedingDurationUpdate,
    RecalculationResult,
)

logger = setup_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/recalculate-durations", response_model=RecalculationResult)
async def recalculate_durations(
    admin: AdminUser,
    duration_service: DurationService,
    today: Today,
) -> RecalculationResult:
    """Recalculate duration columns of every project."""
    logger.info(f"Duration recalculation requested by {admin.email or admin.id}")
    return await duration_service.recalculate_all_project_durations(today)


@router.post("/recalculate-health", response_model=RecalculationResult)
async def recalculate_health(
    admin: AdminUser,
    health_service: HealthService,
    today: Today,
) -> RecalculationResult:
    """Recompute the stored health color of every project."""
    logger.info(f"Health recalculation requested by {admin.email or admin.id}")
    return await health_service.recalculate_all_computed_status_colors(today)


@router.get("/duration-stats", response_model=DurationStats)
async def duration_stats(
    admin: AdminUser,
    duration_service: DurationService,
) -> DurationStats:
    """Duration statistics over non-cancelled projects."""
    return await duration_service.get_project_duration_stats()


@router.get("/duration-validation", response_model=DurationValidationReport)
async def duration_validation(
    admin: AdminUser,
    duration_service: DurationService,
) -> DurationValidationReport:
    """Consistency report of stored duration columns."""
    return await duration_service.validate_project_durations()


@router.get("/projects-needing-duration-update", response_model=ProjectsNeedingDurationUpdate)
async def projects_needing_duration_update(
    admin: AdminUser,
    duration_service: DurationService,
) -> ProjectsNeedingDurationUpdate:
    """Projects whose duration columns are still empty."""
    return await duration_service.get_projects_needing_duration_update()


@router.get("/health-issues", response_model=HealthIssueReport)
async def health_issues(
    admin: AdminUser,
    health_service: HealthService,
    today: Today,
) -> HealthIssueReport:
    """Scan every project for data that distorts its health color."""
    return await health_service.find_health_calculation_issues(today)
