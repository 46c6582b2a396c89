"""
PG (paying-guest housing unit) model.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_reporting.models.base import TimestampModel
from pg_reporting.models.enums import PgType

if TYPE_CHECKING:
    from pg_reporting.models.expense import Expense
    from pg_reporting.models.member import Member
    from pg_reporting.models.room import Room


class PG(TimestampModel):
    """
    A housing unit. Owns rooms and members; never deleted while it owns
    rooms, members or payments.
    """

    __tablename__ = "pgs"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[PgType] = mapped_column(
        Enum(PgType, name="pg_type_enum"),
        nullable=False,
        index=True,
        comment="Tenant segment",
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False, index=True)

    rooms: Mapped[List["Room"]] = relationship(back_populates="pg", order_by="Room.room_no")
    members: Mapped[List["Member"]] = relationship(back_populates="pg")
    expenses: Mapped[List["Expense"]] = relationship(back_populates="pg")
