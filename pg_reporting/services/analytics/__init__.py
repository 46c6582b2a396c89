"""Period-based report aggregation and caching."""

from pg_reporting.services.analytics.aggregation_engine import AggregationEngine, is_active_in_window
from pg_reporting.services.analytics.overdue_status import (
    OverdueStatusSynchronizer,
    is_approved,
    is_overdue,
    is_pending,
)
from pg_reporting.services.analytics.period_resolver import PeriodResolver
from pg_reporting.services.analytics.report_cache import CACHE_SCHEMA_VERSION, ReportCache
from pg_reporting.services.analytics.report_orchestrator import ReportOrchestrator
from pg_reporting.services.analytics.trend_calculator import TrendCalculator, pct_change

__all__ = [
    "AggregationEngine",
    "CACHE_SCHEMA_VERSION",
    "OverdueStatusSynchronizer",
    "PeriodResolver",
    "ReportCache",
    "ReportOrchestrator",
    "TrendCalculator",
    "is_active_in_window",
    "is_approved",
    "is_overdue",
    "is_pending",
    "pct_change",
]
