from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from pg_reporting.core.exceptions import InvalidPeriodError
from pg_reporting.models import (
    ApprovalStatus,
    CachedReport,
    LeavingRequestStatus,
    Payment,
    PaymentStatus,
    PgType,
    ReportType,
)
from pg_reporting.schemas.report import ReportTable
from pg_reporting.services.analytics.report_orchestrator import ReportOrchestrator


@pytest.fixture
def orchestrator(database, clock):
    return ReportOrchestrator(database, clock=clock)


async def count_cached(database):
    async with database.session() as session:
        return (await session.execute(select(func.count(CachedReport.id)))).scalar_one()


async def test_alpha_current_month(orchestrator, database, alpha):
    report = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 3, 2024)

    assert report.is_current_period
    assert not report.from_cache
    assert report.period_start == datetime(2024, 3, 1)

    [perf] = report.tables.pg_performance
    assert perf.pg_name == "Alpha"
    assert perf.revenue == Decimal("5000")
    assert perf.pending_payments == 0
    assert perf.overdue_payments == 1
    assert perf.occupancy_rate == Decimal("100")

    [analytics] = report.tables.payment_analytics
    [summary] = report.tables.financial_summary
    assert analytics.payments_overdue == perf.overdue_payments
    assert summary.overdue_revenue == Decimal("5000")

    assert report.cards.rent_collected == Decimal("5000")
    assert report.cards.rent_collected_trend_percent == Decimal("100")
    assert report.cards.total_expenses == Decimal("1500")
    assert report.cards.net_profit == Decimal("3500")
    assert report.cards.new_members == 0

    async with database.session() as session:
        lapsed = await session.get(Payment, alpha["lapsed_payment_id"])
    assert lapsed.payment_status == PaymentStatus.OVERDUE


async def test_past_period_without_cache_is_computed_live_every_time(orchestrator, database, alpha):
    first = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 3, 2023)
    second = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 3, 2023)

    for report in (first, second):
        assert not report.is_current_period
        assert not report.from_cache
        [perf] = report.tables.pg_performance
        assert perf.total_members == 0
        assert perf.revenue == 0

    assert await count_cached(database) == 0


async def test_cached_period_short_circuits(orchestrator, database, alpha):
    await orchestrator.recompute_and_cache(PgType.MENS, ReportType.MONTHLY, 2, 2024)
    assert await count_cached(database) == 1

    # a late payment for February does not show until the period is recomputed
    async with database.session() as session:
        session.add(
            Payment(
                member_id=alpha["member_ids"][0],
                pg_id=alpha["pg_id"],
                month=2,
                year=2024,
                amount=Decimal("5000"),
                due_date=datetime(2024, 2, 5),
                overdue_date=datetime(2024, 2, 10),
                payment_status=PaymentStatus.PAID,
                approval_status=ApprovalStatus.APPROVED,
                paid_date=datetime(2024, 2, 7),
                created_at=datetime(2024, 2, 1),
            )
        )
        await session.commit()

    cached = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 2, 2024)
    assert cached.from_cache
    assert cached.cards.rent_collected == 0

    await orchestrator.recompute_and_cache(PgType.MENS, ReportType.MONTHLY, 2, 2024)
    refreshed = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 2, 2024)
    assert refreshed.from_cache
    assert refreshed.cards.rent_collected == Decimal("5000")
    assert refreshed.tables.pg_performance[0].revenue == Decimal("5000")
    assert await count_cached(database) == 1


async def test_current_period_ignores_cache(orchestrator, database, alpha):
    await orchestrator.recompute_and_cache(PgType.MENS, ReportType.MONTHLY, 3, 2024)
    report = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 3, 2024)
    assert not report.from_cache


async def test_empty_segment_returns_zeroed_bundle(orchestrator, alpha):
    report = await orchestrator.get_or_compute(PgType.WOMENS, ReportType.MONTHLY, 3, 2024)

    assert report.tables.pg_performance == []
    assert report.tables.room_utilization == []
    assert report.tables.payment_analytics == []
    assert report.tables.financial_summary == []
    assert report.cards.rent_collected == 0
    assert report.cards.net_profit_trend_percent == 0

    rows = await orchestrator.get_table(
        PgType.WOMENS, ReportType.MONTHLY, 3, 2024, ReportTable.ROOM_UTILIZATION
    )
    assert rows == []


async def test_departure_card_counts_settled_requests(orchestrator, alpha, add_departure):
    ravi, arjun = alpha["member_ids"]
    await add_departure(alpha["pg_id"], ravi, datetime(2024, 3, 12))
    await add_departure(alpha["pg_id"], arjun, datetime(2024, 3, 14), status=LeavingRequestStatus.REJECTED)

    report = await orchestrator.get_or_compute(PgType.MENS, ReportType.MONTHLY, 3, 2024)

    assert report.cards.member_departures == 1
    assert report.cards.member_departures_trend_percent == Decimal("100")
    assert report.tables.pg_performance[0].approved_leaving_requests == 1


async def test_get_table_live_and_cached(orchestrator, alpha):
    live = await orchestrator.get_table(
        PgType.MENS, ReportType.MONTHLY, 3, 2024, ReportTable.PAYMENT_ANALYTICS
    )
    assert len(live) == 1
    assert live[0].payments_overdue == 1
    assert live[0].total_expected_revenue == Decimal("10000")

    await orchestrator.recompute_and_cache(PgType.MENS, ReportType.MONTHLY, 1, 2024)
    cached_rows = await orchestrator.get_table(
        PgType.MENS, ReportType.MONTHLY, 1, 2024, "room_utilization"
    )
    assert [row.room_no for row in cached_rows] == ["101"]


async def test_invalid_period_is_rejected(orchestrator):
    with pytest.raises(InvalidPeriodError):
        await orchestrator.get_or_compute(PgType.MENS, ReportType.WEEKLY, 60, 2024)
