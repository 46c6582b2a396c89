import json
from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select, update

from pg_reporting.core.exceptions import CacheSchemaError
from pg_reporting.models import CachedReport, PgType, ReportType
from pg_reporting.schemas.report import (
    CashFlowStatus,
    CompleteReport,
    FinancialSummaryRow,
    PGPerformanceRow,
    ReportCards,
    ReportTables,
    RoomUtilizationRow,
)
from pg_reporting.services.analytics.period_resolver import PeriodResolver
from pg_reporting.services.analytics.report_cache import (
    CACHE_SCHEMA_VERSION,
    ReportCache,
    decode_tables,
    encode_tables,
)


def make_report(rent_collected="10000"):
    window = PeriodResolver.month_range(2, 2024)
    return CompleteReport(
        pg_type=PgType.MENS,
        report_type=ReportType.MONTHLY,
        period=2,
        year=2024,
        period_start=window.start,
        period_end=window.end,
        cards=ReportCards(
            new_members=4,
            rent_collected=Decimal(rent_collected),
            member_departures=1,
            total_expenses=Decimal("2500.50"),
            net_profit=Decimal(rent_collected) - Decimal("2500.50"),
            new_members_trend_percent=Decimal("33.33"),
            rent_collected_trend_percent=Decimal("100"),
            total_expenses_trend_percent=Decimal("-12.5"),
        ),
        tables=ReportTables(
            pg_performance=[
                PGPerformanceRow(
                    pg_id="pg-1",
                    pg_name="Alpha",
                    pg_location="Koramangala",
                    pg_type=PgType.MENS,
                    total_members=2,
                    total_rooms=1,
                    occupied_rooms=1,
                    occupancy_rate=Decimal("100"),
                    revenue=Decimal("5000"),
                )
            ],
            room_utilization=[
                RoomUtilizationRow(
                    pg_id="pg-1",
                    pg_name="Alpha",
                    pg_location="Koramangala",
                    room_id="room-1",
                    room_no="101",
                    capacity=2,
                    current_occupants=2,
                    is_fully_occupied=True,
                    revenue_efficiency=Decimal("1.25"),
                )
            ],
            financial_summary=[
                FinancialSummaryRow(
                    pg_id="pg-1",
                    pg_name="Alpha",
                    pg_location="Koramangala",
                    expected_revenue=Decimal("10000"),
                    cash_flow_status=CashFlowStatus.NEGATIVE,
                )
            ],
        ),
    )


def test_encoded_tables_are_version_tagged():
    report = make_report()
    payload = json.loads(encode_tables(report.tables))
    assert payload["version"] == CACHE_SCHEMA_VERSION
    assert set(payload["tables"]) == {
        "pg_performance",
        "room_utilization",
        "payment_analytics",
        "financial_summary",
    }


def test_decode_rejects_unknown_version():
    raw = json.dumps({"version": CACHE_SCHEMA_VERSION + 1, "tables": {}})
    with pytest.raises(CacheSchemaError):
        decode_tables(CACHE_SCHEMA_VERSION, raw)
    with pytest.raises(CacheSchemaError):
        decode_tables(CACHE_SCHEMA_VERSION + 1, encode_tables(ReportTables()))


async def test_put_then_get_preserves_bundle(database):
    cache = ReportCache()
    report = make_report()

    async with database.session() as session:
        await cache.put(session, report)

    async with database.session() as session:
        cached = await cache.get(session, PgType.MENS, ReportType.MONTHLY, 2, 2024)

    assert cached is not None
    assert cached.from_cache
    assert cached.tables == report.tables
    assert cached.cards == report.cards
    assert cached.period_start == report.period_start
    assert cached.period_end == report.period_end


async def test_get_misses_on_other_keys(database):
    cache = ReportCache()
    async with database.session() as session:
        await cache.put(session, make_report())

    async with database.session() as session:
        assert await cache.get(session, PgType.WOMENS, ReportType.MONTHLY, 2, 2024) is None
        assert await cache.get(session, PgType.MENS, ReportType.WEEKLY, 2, 2024) is None
        assert await cache.get(session, PgType.MENS, ReportType.MONTHLY, 2, 2023) is None


async def test_put_overwrites_existing_row(database):
    cache = ReportCache()
    async with database.session() as session:
        await cache.put(session, make_report("10000"))
    async with database.session() as session:
        await cache.put(session, make_report("12000"))

    async with database.session() as session:
        count = (await session.execute(select(func.count(CachedReport.id)))).scalar_one()
        cached = await cache.get(session, PgType.MENS, ReportType.MONTHLY, 2, 2024)

    assert count == 1
    assert cached.cards.rent_collected == Decimal("12000")


async def test_row_with_stale_schema_version_is_a_miss(database):
    cache = ReportCache()
    async with database.session() as session:
        await cache.put(session, make_report())
        await session.execute(update(CachedReport).values(schema_version=CACHE_SCHEMA_VERSION + 1))
        await session.commit()

    async with database.session() as session:
        assert await cache.get(session, PgType.MENS, ReportType.MONTHLY, 2, 2024) is None
