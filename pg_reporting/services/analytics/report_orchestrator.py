"""
Report orchestrator.

Single entry point for report consumers. Resolves the period, serves
completed periods from the cache when present, and otherwise brings
payment statuses up to date and aggregates live.

The read path never writes to the cache; `recompute_and_cache` is the only
write path and is driven by the scheduled jobs and operator backfills.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from pg_reporting.config.logging import report_context
from pg_reporting.db.session import Database
from pg_reporting.models.enums import PgType, ReportType
from pg_reporting.repositories.card_metrics_repository import CardMetricsRepository
from pg_reporting.repositories.segment_repository import SegmentRepository
from pg_reporting.schemas.report import (
    CardMetrics,
    CompleteReport,
    PeriodWindow,
    ReportTable,
)
from pg_reporting.services.analytics.aggregation_engine import AggregationEngine
from pg_reporting.services.analytics.overdue_status import OverdueStatusSynchronizer
from pg_reporting.services.analytics.period_resolver import PeriodResolver
from pg_reporting.services.analytics.report_cache import ReportCache
from pg_reporting.services.analytics.trend_calculator import TrendCalculator

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    Composes period resolution, overdue sync, aggregation, trends and the
    report cache.

    Holds no state between calls beyond the database handle it was given.
    """

    def __init__(
        self,
        database: Database,
        clock: Optional[Callable[[], datetime]] = None,
        resolver: Optional[PeriodResolver] = None,
        cache: Optional[ReportCache] = None,
        synchronizer: Optional[OverdueStatusSynchronizer] = None,
        trends: Optional[TrendCalculator] = None,
    ):
        self.database = database
        self.resolver = resolver or PeriodResolver(clock)
        self.cache = cache or ReportCache()
        self.synchronizer = synchronizer or OverdueStatusSynchronizer()
        self.trends = trends or TrendCalculator()

    async def get_or_compute(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> CompleteReport:
        """
        Complete bundle for a period.

        Completed periods are answered from the cache when a row exists;
        current periods and cache misses are computed live.
        """
        window = self.resolver.resolve(report_type, period, year)
        is_current = self.resolver.is_current(report_type, period, year)

        async with self.database.session() as session:
            if not is_current:
                cached = await self.cache.get(session, pg_type, report_type, period, year)
                if cached is not None:
                    return cached

            return await self._compute(session, pg_type, report_type, period, year, window, is_current)

    async def recompute_and_cache(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> CompleteReport:
        """Compute a bundle unconditionally and overwrite its cache row."""
        context = report_context(pg_type, report_type, period, year)
        window = self.resolver.resolve(report_type, period, year)
        is_current = self.resolver.is_current(report_type, period, year)
        if is_current:
            logger.warning("Caching a period that is still in progress", extra=context)

        async with self.database.session() as session:
            report = await self._compute(session, pg_type, report_type, period, year, window, is_current)
            await self.cache.put(session, report)
        return report

    async def get_table(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
        table: Union[ReportTable, str],
    ) -> List:
        """
        One of the four tables. Uses the cached bundle for completed periods
        when present, otherwise computes only the requested view.
        """
        table = ReportTable(table)
        window = self.resolver.resolve(report_type, period, year)
        is_current = self.resolver.is_current(report_type, period, year)

        async with self.database.session() as session:
            if not is_current:
                cached = await self.cache.get(session, pg_type, report_type, period, year)
                if cached is not None:
                    return getattr(cached.tables, table.value)

            now = self.resolver.now()
            segments = SegmentRepository(session)
            pg_ids = await segments.get_pg_ids(pg_type)
            if not pg_ids:
                return []

            await self.synchronizer.sync(session, pg_ids, now)
            snapshot = await segments.load_snapshot(pg_ids, window)
            return AggregationEngine(report_type, window, now).compute_table(table, snapshot)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    async def _compute(
        self,
        session: AsyncSession,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
        window: PeriodWindow,
        is_current: bool,
    ) -> CompleteReport:
        context = report_context(pg_type, report_type, period, year)
        now = self.resolver.now()

        segments = SegmentRepository(session)
        pg_ids = await segments.get_pg_ids(pg_type)

        # statuses must be current before anything classifies payments
        await self.synchronizer.sync(session, pg_ids, now)

        snapshot = await segments.load_snapshot(pg_ids, window)
        tables = AggregationEngine(report_type, window, now).compute_tables(snapshot)

        card_metrics = CardMetricsRepository(session)
        current_cards = await card_metrics.get_card_metrics(pg_ids, window)
        previous_cards = await self._previous_cards(card_metrics, pg_ids, report_type, period, year)
        cards = self.trends.apply(current_cards, previous_cards)

        logger.info(
            f"Computed {report_type.value} report for {pg_type.value} "
            f"{period}/{year} over {len(pg_ids)} PG(s)",
            extra=context,
        )
        return CompleteReport(
            pg_type=pg_type,
            report_type=report_type,
            period=period,
            year=year,
            period_start=window.start,
            period_end=window.end,
            is_current_period=is_current,
            from_cache=False,
            cards=cards,
            tables=tables,
        )

    async def _previous_cards(
        self,
        card_metrics: CardMetricsRepository,
        pg_ids: List[str],
        report_type: ReportType,
        period: int,
        year: int,
    ) -> CardMetrics:
        """Raw cards of the preceding period, always computed live."""
        previous_period, previous_year = self.resolver.previous(report_type, period, year)
        if previous_year < 1:
            return CardMetrics()
        previous_window = self.resolver.resolve(report_type, previous_period, previous_year)
        return await card_metrics.get_card_metrics(pg_ids, previous_window)
