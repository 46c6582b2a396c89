"""
Report cache.

Read-through storage for completed periods. Card values live in their own
columns; the four tables are stored as a version-tagged JSON document so a
change to the row schemas is detected instead of silently misread.
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from pg_reporting.config.logging import report_context
from pg_reporting.core.exceptions import CacheSchemaError, DatabaseError, ReportCacheError
from pg_reporting.models.cached_report import CachedReport
from pg_reporting.models.enums import PgType, ReportType
from pg_reporting.repositories.report_cache_repository import ReportCacheRepository
from pg_reporting.schemas.report import CompleteReport, ReportCards, ReportTables
from pg_reporting.services.analytics.trend_calculator import CARD_FIELDS

logger = logging.getLogger(__name__)

# Bump whenever a table row schema changes shape.
CACHE_SCHEMA_VERSION = 1


def encode_tables(tables: ReportTables) -> str:
    payload = {
        "version": CACHE_SCHEMA_VERSION,
        "tables": tables.model_dump(mode="json"),
    }
    return json.dumps(payload, separators=(",", ":"))


def decode_tables(schema_version: int, raw: str) -> ReportTables:
    """Parse a stored payload; raises CacheSchemaError on a version mismatch."""
    if schema_version != CACHE_SCHEMA_VERSION:
        raise CacheSchemaError(schema_version, CACHE_SCHEMA_VERSION)
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ReportCacheError(f"Cached report payload is not valid JSON: {str(e)}") from e

    if not isinstance(payload, dict) or payload.get("version") != CACHE_SCHEMA_VERSION:
        found = payload.get("version") if isinstance(payload, dict) else None
        raise CacheSchemaError(found, CACHE_SCHEMA_VERSION)
    try:
        return ReportTables.model_validate(payload.get("tables") or {})
    except ValidationError as e:
        raise ReportCacheError(
            "Cached report tables do not match the current row schemas",
            details={"errors": e.errors(include_url=False)},
        ) from e


def row_to_report(row: CachedReport) -> CompleteReport:
    cards = ReportCards(**{
        field: getattr(row, field)
        for name in CARD_FIELDS
        for field in (name, f"{name}_trend_percent")
    })
    return CompleteReport(
        pg_type=row.pg_type,
        report_type=row.report_type,
        period=row.period,
        year=row.year,
        period_start=row.period_start,
        period_end=row.period_end,
        is_current_period=False,
        from_cache=True,
        cards=cards,
        tables=decode_tables(row.schema_version, row.tables_payload),
    )


def report_to_values(report: CompleteReport) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "period_start": report.period_start,
        "period_end": report.period_end,
        "schema_version": CACHE_SCHEMA_VERSION,
        "tables_payload": encode_tables(report.tables),
    }
    for name in CARD_FIELDS:
        values[name] = getattr(report.cards, name)
        values[f"{name}_trend_percent"] = getattr(report.cards, f"{name}_trend_percent")
    return values


class ReportCache:
    """Keyed get/put of complete report bundles."""

    async def get(
        self,
        session: AsyncSession,
        pg_type: PgType,
        report_type: ReportType,
        period: int,
        year: int,
    ) -> Optional[CompleteReport]:
        """
        Exact-key lookup with no freshness check. A row written under another
        serialization version is treated as a miss.
        """
        context = report_context(pg_type, report_type, period, year)
        row = await ReportCacheRepository(session).find(pg_type, report_type, period, year)
        if row is None:
            logger.info("Report cache miss", extra=context)
            return None

        try:
            report = row_to_report(row)
        except CacheSchemaError as e:
            logger.warning(f"Ignoring cached report: {e.message}", extra=context)
            return None

        logger.info("Report cache hit", extra=context)
        return report

    async def put(self, session: AsyncSession, report: CompleteReport) -> None:
        """Create or overwrite the bundle for the report's key."""
        context = report_context(report.pg_type, report.report_type, report.period, report.year)
        try:
            await ReportCacheRepository(session).upsert(
                report.pg_type,
                report.report_type,
                report.period,
                report.year,
                report_to_values(report),
            )
        except DatabaseError as e:
            raise ReportCacheError(
                f"Failed to write cached report: {e.message}",
                details={**context, **e.details},
            ) from e
        logger.info("Report cached", extra=context)
