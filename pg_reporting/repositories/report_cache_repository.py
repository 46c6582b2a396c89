"""
Report cache repository.

Keyed storage of `CachedReport` rows; one row per
(segment, report type, period, year).
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from pg_reporting.models.cached_report import CachedReport
from pg_reporting.models.enums import PgType, ReportType
from pg_reporting.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class ReportCacheRepository(BaseRepository):

    def _key_stmt(self, pg_type: PgType, report_type: ReportType, period: int, year: int):
        return (
            select(CachedReport)
            .where(CachedReport.pg_type == pg_type)
            .where(CachedReport.report_type == report_type)
            .where(CachedReport.period == period)
            .where(CachedReport.year == year)
        )

    async def find(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> Optional[CachedReport]:
        """Exact-key lookup."""
        stmt = self._key_stmt(pg_type, report_type, period, year)
        result = await self._execute(stmt, "read cached report")
        return result.scalar_one_or_none()

    async def upsert(
        self,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
        values: Dict[str, Any],
    ) -> CachedReport:
        """
        Create or overwrite the row for a key. Last write wins; a concurrent
        insert of the same key is resolved by overwriting it.
        """
        existing = await self.find(pg_type, report_type, period, year)
        if existing is None:
            row = CachedReport(
                pg_type=pg_type,
                report_type=report_type,
                period=period,
                year=year,
                **values,
            )
            self.db.add(row)
            try:
                await self.db.flush()
                await self.commit()
                return row
            except IntegrityError:
                await self.db.rollback()
                logger.info(
                    f"Concurrent insert for {pg_type.value} {report_type.value} "
                    f"{period}/{year}; overwriting"
                )
                existing = await self.find(pg_type, report_type, period, year)
                if existing is None:
                    raise

        for key, value in values.items():
            setattr(existing, key, value)
        await self.commit()
        return existing
