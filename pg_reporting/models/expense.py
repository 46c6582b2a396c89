"""
Expense ledger entry model.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_reporting.models.base import TimestampModel
from pg_reporting.models.enums import EntryType

if TYPE_CHECKING:
    from pg_reporting.models.pg import PG


class Expense(TimestampModel):
    """Cash-in / cash-out entry recorded against a PG."""

    __tablename__ = "expenses"

    pg_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("pgs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    entry_type: Mapped[EntryType] = mapped_column(
        Enum(EntryType, name="entry_type_enum"),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    pg: Mapped["PG"] = relationship(back_populates="expenses")
