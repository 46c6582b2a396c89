"""
Room model.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_reporting.models.base import TimestampModel

if TYPE_CHECKING:
    from pg_reporting.models.member import Member
    from pg_reporting.models.pg import PG


class Room(TimestampModel):
    """
    Room within a PG. Occupancy is the number of members referencing it and
    is kept at or below capacity when members are assigned.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
    )

    pg_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("pgs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    room_no: Mapped[str] = mapped_column(String(50), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    rent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, comment="Monthly rent")
    electricity_charge: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2),
        nullable=True,
        comment="Optional recurring monthly charge",
    )

    pg: Mapped["PG"] = relationship(back_populates="rooms")
    members: Mapped[List["Member"]] = relationship(back_populates="room")
