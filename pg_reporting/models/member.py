"""
Member model.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_reporting.models.base import TimestampModel

if TYPE_CHECKING:
    from pg_reporting.models.payment import Payment
    from pg_reporting.models.pg import PG
    from pg_reporting.models.room import Room


class Member(TimestampModel):
    """Resident of a PG, optionally assigned to a room."""

    __tablename__ = "members"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    pg_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("pgs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    date_of_joining: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    date_of_relieving: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    advance_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    pg: Mapped["PG"] = relationship(back_populates="members")
    room: Mapped[Optional["Room"]] = relationship(back_populates="members")
    payments: Mapped[List["Payment"]] = relationship(back_populates="member")
