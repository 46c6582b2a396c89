"""
Card metrics repository.

Scalar aggregates behind the five report cards.
"""

from decimal import Decimal
from typing import Sequence

from sqlalchemy import func, select

from pg_reporting.models.enums import ApprovalStatus, EntryType, LeavingRequestStatus
from pg_reporting.models.expense import Expense
from pg_reporting.models.leaving_request import LeavingRequest
from pg_reporting.models.member import Member
from pg_reporting.models.payment import Payment
from pg_reporting.repositories.base import BaseRepository
from pg_reporting.repositories.segment_repository import in_window_clause
from pg_reporting.schemas.report import CardMetrics, PeriodWindow
from pg_reporting.utils.datetime_utils import to_decimal

SETTLED_DEPARTURE_STATUSES = (LeavingRequestStatus.APPROVED, LeavingRequestStatus.COMPLETED)


class CardMetricsRepository(BaseRepository):

    async def count_new_members(self, pg_ids: Sequence[str], window: PeriodWindow) -> int:
        stmt = (
            select(func.count(Member.id))
            .where(Member.pg_id.in_(list(pg_ids)))
            .where(in_window_clause(Member.created_at, window))
        )
        return int((await self._execute(stmt, "count new members")).scalar_one() or 0)

    async def count_departures(self, pg_ids: Sequence[str], window: PeriodWindow) -> int:
        stmt = (
            select(func.count(LeavingRequest.id))
            .where(LeavingRequest.pg_id.in_(list(pg_ids)))
            .where(LeavingRequest.status.in_(SETTLED_DEPARTURE_STATUSES))
            .where(in_window_clause(LeavingRequest.settled_date, window))
        )
        return int((await self._execute(stmt, "count member departures")).scalar_one() or 0)

    async def sum_rent_collected(self, pg_ids: Sequence[str], window: PeriodWindow) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.pg_id.in_(list(pg_ids)))
            .where(Payment.approval_status == ApprovalStatus.APPROVED)
            .where(in_window_clause(Payment.paid_date, window))
        )
        return to_decimal((await self._execute(stmt, "sum rent collected")).scalar_one())

    async def sum_expenses(self, pg_ids: Sequence[str], window: PeriodWindow) -> Decimal:
        stmt = (
            select(func.coalesce(func.sum(Expense.amount), 0))
            .where(Expense.pg_id.in_(list(pg_ids)))
            .where(Expense.entry_type == EntryType.CASH_OUT)
            .where(in_window_clause(Expense.date, window))
        )
        return to_decimal((await self._execute(stmt, "sum expenses")).scalar_one())

    async def get_card_metrics(self, pg_ids: Sequence[str], window: PeriodWindow) -> CardMetrics:
        """Raw card values for a window; all zero for an empty segment."""
        if not pg_ids:
            return CardMetrics()

        rent_collected = await self.sum_rent_collected(pg_ids, window)
        total_expenses = await self.sum_expenses(pg_ids, window)
        return CardMetrics(
            new_members=await self.count_new_members(pg_ids, window),
            rent_collected=rent_collected,
            member_departures=await self.count_departures(pg_ids, window),
            total_expenses=total_expenses,
            net_profit=rent_collected - total_expenses,
        )
