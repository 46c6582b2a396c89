from pg_reporting.repositories.base import BaseRepository
from pg_reporting.repositories.card_metrics_repository import CardMetricsRepository
from pg_reporting.repositories.payment_repository import PaymentRepository
from pg_reporting.repositories.report_cache_repository import ReportCacheRepository
from pg_reporting.repositories.segment_repository import SegmentRepository, SegmentSnapshot

__all__ = [
    "BaseRepository",
    "CardMetricsRepository",
    "PaymentRepository",
    "ReportCacheRepository",
    "SegmentRepository",
    "SegmentSnapshot",
]
