"""
Cached report model.

One row per (segment, report type, period, year) holding the card values
and a version-tagged JSON payload of the four report tables.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Integer, Numeric, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from pg_reporting.models.base import TimestampModel
from pg_reporting.models.enums import PgType, ReportType


class CachedReport(TimestampModel):
    """Persisted bundle for a completed period; written only by the cache jobs."""

    __tablename__ = "reports"
    __table_args__ = (
        UniqueConstraint("pg_type", "report_type", "period", "year", name="uq_reports_period_key"),
    )

    pg_type: Mapped[PgType] = mapped_column(Enum(PgType, name="pg_type_enum"), nullable=False)
    report_type: Mapped[ReportType] = mapped_column(Enum(ReportType, name="report_type_enum"), nullable=False)
    period: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    period_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    period_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    # Cards
    new_members: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    new_members_trend_percent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    rent_collected: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    rent_collected_trend_percent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    member_departures: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    member_departures_trend_percent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    total_expenses: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    total_expenses_trend_percent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    net_profit: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)
    net_profit_trend_percent: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=0)

    # Tables
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    tables_payload: Mapped[str] = mapped_column(Text, nullable=False, comment="Versioned JSON of the four tables")
