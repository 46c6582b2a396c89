from pg_reporting.services.background.report_cache_jobs import (
    CacheExecution,
    CacheStatus,
    JobRunReport,
    ReportCacheJobs,
)

__all__ = ["CacheExecution", "CacheStatus", "JobRunReport", "ReportCacheJobs"]
