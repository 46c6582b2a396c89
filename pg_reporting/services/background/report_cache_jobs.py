"""
Scheduled report cache jobs.

Two cron jobs keep the report cache filled for completed periods:
- weekly: the week before the current one, for every segment
- monthly: the month before the current one, for every segment

Each (segment, report type, period, year) is an independent unit. A failed
unit is logged and recorded in the run report, and the remaining units
still run. There are no retries; the next scheduled run or a manual
backfill covers a failed unit.
"""

import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from pg_reporting.config.logging import get_logger, report_context
from pg_reporting.config.settings import Settings, settings as default_settings
from pg_reporting.models.enums import PgType, ReportType
from pg_reporting.schemas.report import CompleteReport
from pg_reporting.services.analytics.report_orchestrator import ReportOrchestrator

logger = get_logger(__name__)

WEEKLY_JOB_ID = "weekly_report_cache"
MONTHLY_JOB_ID = "monthly_report_cache"


class CacheStatus(str, Enum):
    """Outcome of one cache-write unit."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class CacheExecution:
    """Execution record for one (segment, report type, period, year)."""
    pg_type: PgType
    report_type: ReportType
    period: int
    year: int
    status: CacheStatus
    duration_seconds: float
    error: Optional[str] = None


@dataclass
class JobRunReport:
    """Report of one cache job run."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    total_duration_seconds: float = 0.0
    executions: List[CacheExecution] = field(default_factory=list)

    @property
    def units_succeeded(self) -> int:
        return sum(1 for e in self.executions if e.status == CacheStatus.SUCCESS)

    @property
    def units_failed(self) -> int:
        return sum(1 for e in self.executions if e.status == CacheStatus.FAILED)

    @property
    def failures(self) -> List[CacheExecution]:
        return [e for e in self.executions if e.status == CacheStatus.FAILED]


class ReportCacheJobs:
    """
    Owns the APScheduler instance that drives the cache write path.

    The scheduler runs on the asyncio event loop of the host process, so
    `start()` must be called from within a running loop.
    """

    def __init__(
        self,
        orchestrator: ReportOrchestrator,
        config: Optional[Settings] = None,
        segments: Optional[Iterable[PgType]] = None,
    ):
        self.orchestrator = orchestrator
        self.config = config or default_settings
        self.segments = list(segments) if segments is not None else list(PgType)
        self._scheduler: Optional[AsyncIOScheduler] = None

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def _build_scheduler(self) -> AsyncIOScheduler:
        timezone = self.config.REPORT_TIMEZONE
        scheduler = AsyncIOScheduler(
            timezone=timezone,
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 3600,
            },
        )
        scheduler.add_job(
            self.cache_completed_periods,
            trigger=CronTrigger.from_crontab(self.config.WEEKLY_CACHE_CRON, timezone=timezone),
            kwargs={"report_types": [ReportType.WEEKLY]},
            id=WEEKLY_JOB_ID,
            name="Cache last completed week",
            replace_existing=True,
        )
        scheduler.add_job(
            self.cache_completed_periods,
            trigger=CronTrigger.from_crontab(self.config.MONTHLY_CACHE_CRON, timezone=timezone),
            kwargs={"report_types": [ReportType.MONTHLY]},
            id=MONTHLY_JOB_ID,
            name="Cache last completed month",
            replace_existing=True,
        )
        return scheduler

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Register both cron jobs and start the scheduler."""
        if not self.config.ENABLE_CACHE_JOBS:
            logger.info("Report cache jobs are disabled (ENABLE_CACHE_JOBS=false)")
            return

        if self.running:
            logger.warning("Report cache scheduler is already running")
            return

        if self._scheduler is None:
            self._scheduler = self._build_scheduler()
        self._scheduler.start()
        logger.info(
            f"Report cache scheduler started (weekly='{self.config.WEEKLY_CACHE_CRON}', "
            f"monthly='{self.config.MONTHLY_CACHE_CRON}', tz={self.config.REPORT_TIMEZONE})"
        )

    def shutdown(self, wait: bool = False) -> None:
        if not self.running:
            logger.warning("Report cache scheduler is not running")
            return
        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Report cache scheduler stopped")

    def get_status(self) -> Dict[str, Any]:
        """Running flag plus each registered job's trigger and next run time."""
        jobs = []
        if self._scheduler is not None:
            for job in self._scheduler.get_jobs():
                next_run = getattr(job, "next_run_time", None)
                jobs.append({
                    "id": job.id,
                    "name": job.name,
                    "trigger": str(job.trigger),
                    "next_run_time": next_run.isoformat() if next_run else None,
                })
        return {"running": self.running, "jobs": jobs}

    # ------------------------------------------------------------------ #
    # Job bodies
    # ------------------------------------------------------------------ #
    async def cache_completed_periods(
        self,
        report_types: Optional[List[ReportType]] = None,
    ) -> JobRunReport:
        """
        Recompute and cache the last completed period of each report type
        for every segment.
        """
        report_types = report_types or list(ReportType)
        resolver = self.orchestrator.resolver
        report = JobRunReport(started_at=resolver.now())
        start_clock = time.monotonic()

        for report_type in report_types:
            period, year = resolver.last_completed_period(report_type)
            for pg_type in self.segments:
                report.executions.append(
                    await self._run_unit(pg_type, report_type, period, year)
                )

        report.completed_at = resolver.now()
        report.total_duration_seconds = time.monotonic() - start_clock

        log = logger.error if report.units_failed else logger.info
        log(
            f"Report cache run finished: {report.units_succeeded} succeeded, "
            f"{report.units_failed} failed in {report.total_duration_seconds:.2f}s"
        )
        return report

    async def _run_unit(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> CacheExecution:
        context = report_context(pg_type, report_type, period, year)
        unit_start = time.monotonic()
        try:
            await self.orchestrator.recompute_and_cache(pg_type, report_type, period, year)
        except Exception as e:
            logger.error(
                f"Failed to cache {report_type.value} report for {pg_type.value} "
                f"{period}/{year}: {str(e)}",
                exc_info=True,
                extra=context,
            )
            return CacheExecution(
                pg_type=pg_type,
                report_type=report_type,
                period=period,
                year=year,
                status=CacheStatus.FAILED,
                duration_seconds=time.monotonic() - unit_start,
                error=str(e),
            )

        return CacheExecution(
            pg_type=pg_type,
            report_type=report_type,
            period=period,
            year=year,
            status=CacheStatus.SUCCESS,
            duration_seconds=time.monotonic() - unit_start,
        )

    async def run_manual(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> CompleteReport:
        """Operator backfill of a single period; failures propagate."""
        logger.info(
            f"Manual cache recompute requested for {pg_type.value} "
            f"{report_type.value} {period}/{year}",
            extra=report_context(pg_type, report_type, period, year),
        )
        return await self.orchestrator.recompute_and_cache(pg_type, report_type, period, year)
