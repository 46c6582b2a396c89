from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select

from pg_reporting.models import ApprovalStatus, Payment, PaymentStatus
from pg_reporting.services.analytics.overdue_status import (
    OverdueStatusSynchronizer,
    is_overdue,
    is_pending,
)

NOW = datetime(2024, 3, 20, 12, 0)


@dataclass
class P:
    payment_status: PaymentStatus
    approval_status: ApprovalStatus
    overdue_date: Optional[datetime]
    amount: Decimal = Decimal("1000")


def test_stored_overdue_status_wins():
    p = P(PaymentStatus.OVERDUE, ApprovalStatus.PENDING, NOW + timedelta(days=3))
    assert is_overdue(p, NOW)
    assert not is_pending(p, NOW)


def test_pending_past_overdue_date_is_overdue_before_sync():
    p = P(PaymentStatus.PENDING, ApprovalStatus.PENDING, NOW - timedelta(seconds=1))
    assert is_overdue(p, NOW)
    assert not is_pending(p, NOW)


def test_pending_within_grace_is_pending():
    p = P(PaymentStatus.PENDING, ApprovalStatus.PENDING, NOW)
    assert not is_overdue(p, NOW)
    assert is_pending(p, NOW)


def test_reviewed_payments_never_become_overdue_by_time():
    approved = P(PaymentStatus.PAID, ApprovalStatus.APPROVED, NOW - timedelta(days=30))
    rejected = P(PaymentStatus.PENDING, ApprovalStatus.REJECTED, NOW - timedelta(days=30))
    assert not is_overdue(approved, NOW)
    assert not is_overdue(rejected, NOW)
    assert not is_pending(rejected, NOW)


def test_compute_overdue_date_adds_grace_period():
    due = datetime(2024, 3, 5)
    assert Payment.compute_overdue_date(due, grace_days=7) == datetime(2024, 3, 12)


async def test_sync_marks_lapsed_payments_and_is_idempotent(database, alpha, now):
    synchronizer = OverdueStatusSynchronizer()

    async with database.session() as session:
        assert await synchronizer.sync(session, [alpha["pg_id"]], now) == 1

    async with database.session() as session:
        assert await synchronizer.sync(session, [alpha["pg_id"]], now) == 0

    async with database.session() as session:
        rows = {
            p.id: p for p in (await session.execute(select(Payment))).scalars().all()
        }
    assert rows[alpha["lapsed_payment_id"]].payment_status == PaymentStatus.OVERDUE
    assert rows[alpha["approved_payment_id"]].payment_status == PaymentStatus.PAID


async def test_sync_leaves_payments_within_grace(database, alpha):
    before_overdue = datetime(2024, 3, 18, 11, 0)
    async with database.session() as session:
        assert await OverdueStatusSynchronizer().sync(session, [alpha["pg_id"]], before_overdue) == 0


async def test_sync_with_no_pgs_is_a_no_op(database):
    async with database.session() as session:
        assert await OverdueStatusSynchronizer().sync(session, [], NOW) == 0
