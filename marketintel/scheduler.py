"""APScheduler-based daily runner.

Keeps the process alive and triggers one IntelEngine run per cron tick.
Runs never overlap, and a failed run is logged without stopping the
scheduler.
"""

import asyncio
from typing import Callable, Optional

import structlog
from apscheduler.job import Job
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from marketintel.config import Settings
from marketintel.engine import IntelEngine

logger = structlog.get_logger(__name__)

JOB_ID = "daily_intel_report"


class IntelScheduler:
    """Schedules the daily collection run."""

    def __init__(
        self,
        settings: Settings,
        engine_factory: Optional[Callable[[], IntelEngine]] = None,
    ):
        """Initialize scheduler.

        Args:
            settings: Process settings (SCHEDULE_CRON)
            engine_factory: Builds a fresh engine per run
        """
        self.settings = settings
        self.engine_factory = engine_factory or (lambda: IntelEngine(settings))
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        self.logger = logger.bind(service="intel_scheduler")
        self.runs = 0
        self.failures = 0

    def add_daily_job(self) -> Job:
        """Register the run job using ``SCHEDULE_CRON``."""
        trigger = CronTrigger.from_crontab(self.settings.SCHEDULE_CRON, timezone="UTC")
        job = self.scheduler.add_job(
            func=self._run_wrapper,
            trigger=trigger,
            id=JOB_ID,
            name="Daily intel report",
            replace_existing=True,
            max_instances=1,  # Prevent overlapping runs
            coalesce=True,
        )
        self.logger.info("daily_job_added", cron=self.settings.SCHEDULE_CRON)
        return job

    def start(self) -> None:
        if not self.scheduler.running:
            self.scheduler.start()
            self.logger.info("scheduler_started")
        else:
            self.logger.warning("scheduler_already_running")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            self.logger.info("scheduler_stopped")

    async def _run_wrapper(self) -> None:
        """Job body; exceptions are logged so the scheduler keeps running."""
        self.runs += 1
        try:
            result = await self.engine_factory().run()
            if not result.success:
                self.failures += 1
        except Exception as e:
            self.failures += 1
            self.logger.error("scheduled_run_failed", error=str(e), exc_info=True)

    async def serve_forever(self) -> None:
        """Start the scheduler and block until cancelled."""
        self.add_daily_job()
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            self.stop()
