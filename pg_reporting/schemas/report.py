"""
Report schemas: the four per-PG aggregate tables, the KPI cards and the
complete bundle returned to callers and stored in the report cache.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

from pydantic import Field

from pg_reporting.models.enums import PgType, ReportType
from pg_reporting.schemas.base import BaseSchema

__all__ = [
    "CashFlowStatus",
    "ReportTable",
    "PeriodWindow",
    "PGPerformanceRow",
    "RoomUtilizationRow",
    "PaymentAnalyticsRow",
    "FinancialSummaryRow",
    "CardMetrics",
    "ReportCards",
    "ReportTables",
    "CompleteReport",
]


class CashFlowStatus(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


class ReportTable(str, Enum):
    """Names of the four aggregate tables in a bundle."""
    PG_PERFORMANCE = "pg_performance"
    ROOM_UTILIZATION = "room_utilization"
    PAYMENT_ANALYTICS = "payment_analytics"
    FINANCIAL_SUMMARY = "financial_summary"


class PeriodWindow(BaseSchema):
    """Concrete, inclusive time window of a report period."""

    start: datetime
    end: datetime

    def contains(self, value: datetime | None) -> bool:
        """Inclusive at both ends; None is never inside."""
        return value is not None and self.start <= value <= self.end


class PGPerformanceRow(BaseSchema):
    """Per-PG occupancy, revenue and payment health for a window."""

    pg_id: str
    pg_name: str
    pg_location: str
    pg_type: PgType
    total_members: int = 0
    new_members: int = Field(0, description="Members created in the window")
    total_rooms: int = 0
    occupied_rooms: int = 0
    vacant_rooms: int = 0
    occupancy_rate: Decimal = Decimal("0")
    revenue: Decimal = Field(Decimal("0"), description="Approved payments in the window")
    pending_payments: int = 0
    overdue_payments: int = 0
    approval_rate: Decimal = Decimal("0")
    average_payment: Decimal = Decimal("0")
    revenue_per_member: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    total_electricity_charges: Decimal = Decimal("0")
    pending_leaving_requests: int = 0
    approved_leaving_requests: int = 0
    net_revenue: Decimal = Decimal("0")
    avg_rent_per_room: Decimal = Decimal("0")


class RoomUtilizationRow(BaseSchema):
    """Per-room occupancy and revenue efficiency for a window."""

    pg_id: str
    pg_name: str
    pg_location: str
    room_id: str
    room_no: str
    capacity: int
    current_occupants: int = 0
    utilization_rate: Decimal = Decimal("0")
    is_fully_occupied: bool = False
    rent_amount: Decimal = Decimal("0")
    electricity_charge: Decimal = Decimal("0")
    revenue: Decimal = Decimal("0")
    available_slots: int = 0
    total_monthly_earnings: Decimal = Decimal("0")
    revenue_per_occupant: Decimal = Decimal("0")
    electricity_per_occupant: Decimal = Decimal("0")
    revenue_efficiency: Decimal = Field(
        Decimal("0"),
        description="Monthly-equivalent window revenue divided by rent",
    )


class PaymentAnalyticsRow(BaseSchema):
    """Per-PG payment counts, amounts and collection efficiency."""

    pg_id: str
    pg_name: str
    pg_location: str
    total_members: int = 0
    payments_received: int = 0
    payments_approved: int = 0
    payments_pending: int = 0
    payments_overdue: int = 0
    total_amount_received: Decimal = Decimal("0")
    total_amount_approved: Decimal = Decimal("0")
    total_amount_pending: Decimal = Decimal("0")
    total_amount_overdue: Decimal = Decimal("0")
    avg_payment_amount: Decimal = Decimal("0")
    total_expected_revenue: Decimal = Decimal("0")
    shortfall_amount: Decimal = Decimal("0")
    collection_efficiency: Decimal = Decimal("0")


class FinancialSummaryRow(BaseSchema):
    """Per-PG expected versus actual revenue and cash inflow."""

    pg_id: str
    pg_name: str
    pg_location: str
    expected_revenue: Decimal = Decimal("0")
    actual_revenue: Decimal = Decimal("0")
    pending_revenue: Decimal = Decimal("0")
    overdue_revenue: Decimal = Decimal("0")
    advance_collected: Decimal = Decimal("0")
    total_cash_inflow: Decimal = Decimal("0")
    revenue_variance: Decimal = Decimal("0")
    cash_flow_status: CashFlowStatus = CashFlowStatus.POSITIVE


class CardMetrics(BaseSchema):
    """Raw scalar KPIs of one window, before trend comparison."""

    new_members: int = 0
    rent_collected: Decimal = Decimal("0")
    member_departures: int = 0
    total_expenses: Decimal = Decimal("0")
    net_profit: Decimal = Decimal("0")


class ReportCards(CardMetrics):
    """KPIs paired with their percentage change against the previous period."""

    new_members_trend_percent: Decimal = Decimal("0")
    rent_collected_trend_percent: Decimal = Decimal("0")
    member_departures_trend_percent: Decimal = Decimal("0")
    total_expenses_trend_percent: Decimal = Decimal("0")
    net_profit_trend_percent: Decimal = Decimal("0")


class ReportTables(BaseSchema):
    pg_performance: List[PGPerformanceRow] = Field(default_factory=list)
    room_utilization: List[RoomUtilizationRow] = Field(default_factory=list)
    payment_analytics: List[PaymentAnalyticsRow] = Field(default_factory=list)
    financial_summary: List[FinancialSummaryRow] = Field(default_factory=list)


class CompleteReport(BaseSchema):
    """Cards plus the four tables for one (segment, report type, period, year)."""

    pg_type: PgType
    report_type: ReportType
    period: int
    year: int
    period_start: datetime
    period_end: datetime
    is_current_period: bool = False
    from_cache: bool = False
    cards: ReportCards = Field(default_factory=ReportCards)
    tables: ReportTables = Field(default_factory=ReportTables)
