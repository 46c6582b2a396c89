"""
Segment repository.

Loads everything the aggregate tables need for one segment and window in a
handful of flat queries.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import selectinload

from pg_reporting.models.enums import EntryType, PgType
from pg_reporting.models.expense import Expense
from pg_reporting.models.leaving_request import LeavingRequest
from pg_reporting.models.payment import Payment
from pg_reporting.models.pg import PG
from pg_reporting.models.room import Room
from pg_reporting.repositories.base import BaseRepository
from pg_reporting.schemas.report import PeriodWindow


@dataclass
class SegmentSnapshot:
    """
    PGs with their rooms and members, plus the window-restricted payments,
    cash-out expenses and leaving requests, grouped for lookup.
    """

    pgs: List[PG] = field(default_factory=list)
    payments_by_member: Dict[str, List[Payment]] = field(default_factory=dict)
    expenses_by_pg: Dict[str, List[Expense]] = field(default_factory=dict)
    leaving_requests_by_pg: Dict[str, List[LeavingRequest]] = field(default_factory=dict)

    def payments_for_member(self, member_id: str) -> List[Payment]:
        return self.payments_by_member.get(member_id, [])

    def payments_for_pg(self, pg: PG) -> List[Payment]:
        payments: List[Payment] = []
        for member in pg.members:
            payments.extend(self.payments_for_member(member.id))
        return payments

    def expenses_for_pg(self, pg_id: str) -> List[Expense]:
        return self.expenses_by_pg.get(pg_id, [])

    def leaving_requests_for_pg(self, pg_id: str) -> List[LeavingRequest]:
        return self.leaving_requests_by_pg.get(pg_id, [])


def in_window_clause(column, window: PeriodWindow):
    """Inclusive window bound on a datetime column."""
    return and_(column >= window.start, column <= window.end)


class SegmentRepository(BaseRepository):

    async def get_pg_ids(self, pg_type: PgType) -> List[str]:
        stmt = select(PG.id).where(PG.type == pg_type).order_by(PG.name, PG.id)
        result = await self._execute(stmt, "list PGs for segment")
        return list(result.scalars().all())

    async def load_snapshot(self, pg_ids: Sequence[str], window: PeriodWindow) -> SegmentSnapshot:
        if not pg_ids:
            return SegmentSnapshot()

        pg_ids = list(pg_ids)
        pgs_stmt = (
            select(PG)
            .where(PG.id.in_(pg_ids))
            .options(
                selectinload(PG.rooms).selectinload(Room.members),
                selectinload(PG.members),
            )
            .order_by(PG.name, PG.id)
        )
        pgs = list((await self._execute(pgs_stmt, "load PGs")).scalars().unique().all())

        # A payment belongs to the window if it was raised or falls due inside it.
        # Both bounds are inclusive on both columns, so a payment created in one
        # window and due in the next is counted in both.
        payments_stmt = (
            select(Payment)
            .where(Payment.pg_id.in_(pg_ids))
            .where(
                or_(
                    in_window_clause(Payment.created_at, window),
                    in_window_clause(Payment.due_date, window),
                )
            )
            .execution_options(populate_existing=True)
        )
        payments = (await self._execute(payments_stmt, "load payments in window")).scalars().all()

        expenses_stmt = (
            select(Expense)
            .where(Expense.pg_id.in_(pg_ids))
            .where(Expense.entry_type == EntryType.CASH_OUT)
            .where(in_window_clause(Expense.date, window))
        )
        expenses = (await self._execute(expenses_stmt, "load expenses in window")).scalars().all()

        leaving_stmt = (
            select(LeavingRequest)
            .where(LeavingRequest.pg_id.in_(pg_ids))
            .where(in_window_clause(LeavingRequest.created_at, window))
        )
        leaving_requests = (await self._execute(leaving_stmt, "load leaving requests in window")).scalars().all()

        payments_by_member: Dict[str, List[Payment]] = defaultdict(list)
        for payment in payments:
            payments_by_member[payment.member_id].append(payment)

        expenses_by_pg: Dict[str, List[Expense]] = defaultdict(list)
        for expense in expenses:
            expenses_by_pg[expense.pg_id].append(expense)

        leaving_by_pg: Dict[str, List[LeavingRequest]] = defaultdict(list)
        for request in leaving_requests:
            leaving_by_pg[request.pg_id].append(request)

        return SegmentSnapshot(
            pgs=pgs,
            payments_by_member=dict(payments_by_member),
            expenses_by_pg=dict(expenses_by_pg),
            leaving_requests_by_pg=dict(leaving_by_pg),
        )
