"""
Background scheduler service for periodic jobs.

Remaining-day columns and computed colors depend on "today", so they go
stale every night. The scheduler recalculates them once a day.
Uses APScheduler for in-process scheduling without external dependencies.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from statussheet.core.config import get_settings
from statussheet.core.logger import logger
from statussheet.services.project_duration_service import ProjectDurationService
from statussheet.services.project_health_service import ProjectHealthService
from statussheet.utils.datetime_utils import get_user_today


class BackgroundScheduler:
    """
    Background scheduler for periodic jobs.

    Features:
    - Nightly duration + computed color recalculation (RECALCULATION_HOUR)
    - Startup fill of projects whose duration columns are still empty
    """

    def __init__(
        self,
        duration_service: ProjectDurationService,
        health_service: ProjectHealthService,
    ):
        self._duration_service = duration_service
        self._health_service = health_service
        self._scheduler: Optional[AsyncIOScheduler] = None

    async def start(self):
        """Start the scheduler and fill missing duration data."""
        settings = get_settings()

        # Only run scheduler in non-test environments
        if settings.ENVIRONMENT == "test":
            logger.info("Background scheduler disabled in test environment")
            return

        self._scheduler = AsyncIOScheduler(timezone=settings.APP_TIMEZONE)
        self._scheduler.add_job(
            self._run_nightly_recalculation,
            CronTrigger(hour=settings.RECALCULATION_HOUR, minute=0),
            id="nightly_health_recalculation",
            name="Nightly Duration and Health Recalculation",
            replace_existing=True,
        )
        self._scheduler.start()
        logger.info(
            "Background scheduler started:\n"
            f"  - Duration/health recalculation: daily {settings.RECALCULATION_HOUR:02d}:00 "
            f"({settings.APP_TIMEZONE})"
        )

        asyncio.create_task(self._fill_missing_durations_background())

    async def stop(self):
        """Stop the scheduler."""
        if self._scheduler:
            self._scheduler.shutdown(wait=False)
            logger.info("Background scheduler stopped")

    def _today(self) -> date:
        return get_user_today(get_settings().APP_TIMEZONE)

    async def _fill_missing_durations_background(self):
        """Background wrapper for the startup fill with error handling."""
        try:
            pending = await self._duration_service.get_projects_needing_duration_update()
            if not pending.count:
                return
            result = await self._duration_service.update_multiple_project_durations(
                pending.project_ids, self._today()
            )
            logger.info(
                f"Startup duration fill: {result.updated_count}/{result.total_count} updated"
            )
        except Exception as e:
            logger.error(f"Startup duration fill failed: {e}")

    async def _run_nightly_recalculation(self):
        today = self._today()
        logger.info(f"Nightly recalculation started for {today.isoformat()}")
        try:
            durations = await self._duration_service.recalculate_all_project_durations(today)
            colors = await self._health_service.recalculate_all_computed_status_colors(today)
        except Exception as e:
            logger.error(f"Nightly recalculation failed: {e}")
            return

        logger.info(
            f"Nightly recalculation finished: durations {durations.updated_count}/"
            f"{durations.total_count}, colors changed {colors.updated_count}, "
            f"errors {len(durations.errors) + len(colors.errors)}"
        )


# Global scheduler instance
_scheduler: Optional[BackgroundScheduler] = None


async def get_background_scheduler() -> BackgroundScheduler:
    """Get the global background scheduler instance."""
    global _scheduler
    if _scheduler is None:
        from statussheet.api.deps import get_milestone_repository, get_project_repository

        project_repo = get_project_repository()
        milestone_repo = get_milestone_repository()
        _scheduler = BackgroundScheduler(
            duration_service=ProjectDurationService(project_repo, milestone_repo),
            health_service=ProjectHealthService(project_repo, milestone_repo),
        )
    return _scheduler


async def start_background_scheduler():
    """Start the global background scheduler."""
    scheduler = await get_background_scheduler()
    await scheduler.start()


async def stop_background_scheduler():
    """Stop the global background scheduler."""
    global _scheduler
    if _scheduler:
        await _scheduler.stop()
        _scheduler = None
