"""
Leaving request model.

A member's request to depart; settled requests count as departures.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from pg_reporting.models.base import TimestampModel
from pg_reporting.models.enums import LeavingRequestStatus


class LeavingRequest(TimestampModel):
    __tablename__ = "leaving_requests"

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    pg_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("pgs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    status: Mapped[LeavingRequestStatus] = mapped_column(
        Enum(LeavingRequestStatus, name="leaving_request_status_enum"),
        nullable=False,
        default=LeavingRequestStatus.PENDING,
    )
    settled_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
