"""
Aggregation engine.

Computes the four per-PG report views for one segment and window from a
preloaded `SegmentSnapshot`:

- PG performance
- Room utilization
- Payment analytics
- Financial summary

The engine is pure: it performs no I/O and never raises on absent data.
Every division falls back to 0 on a zero denominator and percentages are
rounded half-up to two places.

Member activity follows one rule in every view: a member is active for a
window when they joined on or before its end and have not been relieved
before its start.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, List

from pg_reporting.models.enums import LeavingRequestStatus, ReportType
from pg_reporting.models.member import Member
from pg_reporting.models.payment import Payment
from pg_reporting.models.pg import PG
from pg_reporting.models.room import Room
from pg_reporting.repositories.segment_repository import SegmentSnapshot
from pg_reporting.schemas.report import (
    CashFlowStatus,
    FinancialSummaryRow,
    PaymentAnalyticsRow,
    PeriodWindow,
    PGPerformanceRow,
    ReportTable,
    ReportTables,
    RoomUtilizationRow,
)
from pg_reporting.services.analytics.overdue_status import is_approved, is_overdue, is_pending
from pg_reporting.utils.datetime_utils import percentage, round2, safe_ratio, to_decimal

logger = logging.getLogger(__name__)

# Multiplier bringing window revenue to a monthly equivalent
MONTHLY_EQUIVALENT_FACTOR: Dict[ReportType, int] = {
    ReportType.WEEKLY: 4,
    ReportType.MONTHLY: 1,
}

APPROVED_LEAVING_STATUSES = (LeavingRequestStatus.APPROVED, LeavingRequestStatus.COMPLETED)


def is_active_in_window(member: Member, window: PeriodWindow) -> bool:
    """Joined by the end of the window and not relieved before it started."""
    if member.date_of_joining is None or member.date_of_joining > window.end:
        return False
    return member.date_of_relieving is None or member.date_of_relieving >= window.start


def sum_amounts(payments: Iterable[Payment]) -> Decimal:
    return sum((to_decimal(p.amount) for p in payments), Decimal("0"))


class AggregationEngine:
    """Per-PG aggregate views over one window."""

    def __init__(self, report_type: ReportType, window: PeriodWindow, now: datetime):
        self.report_type = report_type
        self.window = window
        self.now = now

    # ------------------------------------------------------------------ #
    # Shared helpers
    # ------------------------------------------------------------------ #
    def active_members(self, members: Iterable[Member]) -> List[Member]:
        return [m for m in members if is_active_in_window(m, self.window)]

    def room_occupants(self, room: Room) -> List[Member]:
        return self.active_members(room.members)

    def expected_revenue(self, pg: PG) -> Decimal:
        """Room rent of every active member holding a room."""
        rooms = {room.id: room for room in pg.rooms}
        total = Decimal("0")
        for member in self.active_members(pg.members):
            room = rooms.get(member.room_id)
            if room is not None:
                total += to_decimal(room.rent)
        return total

    def _split_payments(self, payments: List[Payment]) -> Dict[str, List[Payment]]:
        return {
            "approved": [p for p in payments if is_approved(p)],
            "pending": [p for p in payments if is_pending(p, self.now)],
            "overdue": [p for p in payments if is_overdue(p, self.now)],
        }

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #
    def pg_performance(self, snapshot: SegmentSnapshot) -> List[PGPerformanceRow]:
        rows: List[PGPerformanceRow] = []
        for pg in snapshot.pgs:
            members = self.active_members(pg.members)
            new_members = [m for m in pg.members if self.window.contains(m.created_at)]

            total_rooms = len(pg.rooms)
            occupied = [room for room in pg.rooms if self.room_occupants(room)]
            occupied_rooms = len(occupied)

            payments = snapshot.payments_for_pg(pg)
            split = self._split_payments(payments)
            revenue = sum_amounts(split["approved"])

            total_expenses = sum(
                (to_decimal(e.amount) for e in snapshot.expenses_for_pg(pg.id)),
                Decimal("0"),
            )
            electricity = sum(
                (to_decimal(room.electricity_charge) for room in occupied),
                Decimal("0"),
            )
            total_rent = sum((to_decimal(room.rent) for room in pg.rooms), Decimal("0"))

            leaving = snapshot.leaving_requests_for_pg(pg.id)

            rows.append(
                PGPerformanceRow(
                    pg_id=pg.id,
                    pg_name=pg.name,
                    pg_location=pg.location,
                    pg_type=pg.type,
                    total_members=len(members),
                    new_members=len(new_members),
                    total_rooms=total_rooms,
                    occupied_rooms=occupied_rooms,
                    vacant_rooms=total_rooms - occupied_rooms,
                    occupancy_rate=percentage(occupied_rooms, total_rooms),
                    revenue=round2(revenue),
                    pending_payments=len(split["pending"]),
                    overdue_payments=len(split["overdue"]),
                    approval_rate=percentage(len(split["approved"]), len(payments)),
                    average_payment=round2(safe_ratio(revenue, len(split["approved"]))),
                    revenue_per_member=round2(safe_ratio(revenue, len(members))),
                    total_expenses=round2(total_expenses),
                    total_electricity_charges=round2(electricity),
                    pending_leaving_requests=sum(
                        1 for r in leaving if r.status == LeavingRequestStatus.PENDING
                    ),
                    approved_leaving_requests=sum(
                        1 for r in leaving if r.status in APPROVED_LEAVING_STATUSES
                    ),
                    net_revenue=round2(revenue - total_expenses),
                    avg_rent_per_room=round2(safe_ratio(total_rent, total_rooms)),
                )
            )
        return rows

    def room_utilization(self, snapshot: SegmentSnapshot) -> List[RoomUtilizationRow]:
        factor = MONTHLY_EQUIVALENT_FACTOR[self.report_type]
        rows: List[RoomUtilizationRow] = []
        for pg in snapshot.pgs:
            for room in pg.rooms:
                occupants = self.room_occupants(room)
                count = len(occupants)

                revenue = Decimal("0")
                for member in occupants:
                    revenue += sum_amounts(
                        p for p in snapshot.payments_for_member(member.id) if is_approved(p)
                    )

                rent = to_decimal(room.rent)
                electricity = to_decimal(room.electricity_charge)

                rows.append(
                    RoomUtilizationRow(
                        pg_id=pg.id,
                        pg_name=pg.name,
                        pg_location=pg.location,
                        room_id=room.id,
                        room_no=room.room_no,
                        capacity=room.capacity,
                        current_occupants=count,
                        utilization_rate=percentage(count, room.capacity),
                        is_fully_occupied=count >= room.capacity,
                        rent_amount=round2(rent),
                        electricity_charge=round2(electricity),
                        revenue=round2(revenue),
                        available_slots=max(room.capacity - count, 0),
                        total_monthly_earnings=round2(rent * room.capacity),
                        revenue_per_occupant=round2(safe_ratio(revenue, count)),
                        electricity_per_occupant=round2(safe_ratio(electricity, count)),
                        revenue_efficiency=round2(safe_ratio(revenue * factor, rent)),
                    )
                )
        return rows

    def payment_analytics(self, snapshot: SegmentSnapshot) -> List[PaymentAnalyticsRow]:
        rows: List[PaymentAnalyticsRow] = []
        for pg in snapshot.pgs:
            payments = snapshot.payments_for_pg(pg)
            split = self._split_payments(payments)

            received = sum_amounts(payments)
            approved = sum_amounts(split["approved"])
            expected = self.expected_revenue(pg)

            rows.append(
                PaymentAnalyticsRow(
                    pg_id=pg.id,
                    pg_name=pg.name,
                    pg_location=pg.location,
                    total_members=len(self.active_members(pg.members)),
                    payments_received=len(payments),
                    payments_approved=len(split["approved"]),
                    payments_pending=len(split["pending"]),
                    payments_overdue=len(split["overdue"]),
                    total_amount_received=round2(received),
                    total_amount_approved=round2(approved),
                    total_amount_pending=round2(sum_amounts(split["pending"])),
                    total_amount_overdue=round2(sum_amounts(split["overdue"])),
                    avg_payment_amount=round2(safe_ratio(received, len(payments))),
                    total_expected_revenue=round2(expected),
                    shortfall_amount=round2(max(expected - approved, Decimal("0"))),
                    collection_efficiency=percentage(approved, expected),
                )
            )
        return rows

    def financial_summary(self, snapshot: SegmentSnapshot) -> List[FinancialSummaryRow]:
        rows: List[FinancialSummaryRow] = []
        for pg in snapshot.pgs:
            split = self._split_payments(snapshot.payments_for_pg(pg))

            actual = sum_amounts(split["approved"])
            expected = self.expected_revenue(pg)
            advance = sum(
                (to_decimal(m.advance_amount) for m in pg.members if self.window.contains(m.created_at)),
                Decimal("0"),
            )
            inflow = actual + advance

            rows.append(
                FinancialSummaryRow(
                    pg_id=pg.id,
                    pg_name=pg.name,
                    pg_location=pg.location,
                    expected_revenue=round2(expected),
                    actual_revenue=round2(actual),
                    pending_revenue=round2(sum_amounts(split["pending"])),
                    overdue_revenue=round2(sum_amounts(split["overdue"])),
                    advance_collected=round2(advance),
                    total_cash_inflow=round2(inflow),
                    revenue_variance=percentage(actual - expected, expected),
                    cash_flow_status=(
                        CashFlowStatus.POSITIVE if inflow >= expected else CashFlowStatus.NEGATIVE
                    ),
                )
            )
        return rows

    def compute_table(self, table: ReportTable, snapshot: SegmentSnapshot) -> list:
        """Compute a single view by name."""
        builders: Dict[ReportTable, Callable[[SegmentSnapshot], list]] = {
            ReportTable.PG_PERFORMANCE: self.pg_performance,
            ReportTable.ROOM_UTILIZATION: self.room_utilization,
            ReportTable.PAYMENT_ANALYTICS: self.payment_analytics,
            ReportTable.FINANCIAL_SUMMARY: self.financial_summary,
        }
        return builders[table](snapshot)

    def compute_tables(self, snapshot: SegmentSnapshot) -> ReportTables:
        tables = ReportTables(
            pg_performance=self.pg_performance(snapshot),
            room_utilization=self.room_utilization(snapshot),
            payment_analytics=self.payment_analytics(snapshot),
            financial_summary=self.financial_summary(snapshot),
        )
        logger.debug(
            f"Aggregated {len(snapshot.pgs)} PG(s) for "
            f"{self.window.start.isoformat()} - {self.window.end.isoformat()}"
        )
        return tables
