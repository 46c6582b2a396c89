"""
Payment model.

Rent payments raised against members. Approval is decided by staff outside
this engine; the pending -> overdue transition is derived from the clock.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pg_reporting.models.base import TimestampModel
from pg_reporting.models.enums import ApprovalStatus, PaymentStatus

if TYPE_CHECKING:
    from pg_reporting.models.member import Member


class Payment(TimestampModel):
    """Monthly rent payment for a member."""

    __tablename__ = "payments"
    __table_args__ = (
        Index("ix_payments_overdue_scan", "pg_id", "approval_status", "payment_status", "overdue_date"),
    )

    member_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("members.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    # denormalized from member for segment-wide scans
    pg_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("pgs.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    overdue_date: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="Due date plus the grace period",
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, name="payment_status_enum"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    approval_status: Mapped[ApprovalStatus] = mapped_column(
        Enum(ApprovalStatus, name="approval_status_enum"),
        nullable=False,
        default=ApprovalStatus.PENDING,
    )
    paid_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    member: Mapped["Member"] = relationship(back_populates="payments")

    @staticmethod
    def compute_overdue_date(due_date: datetime, grace_days: Optional[int] = None) -> datetime:
        """Overdue date for a due date, using the configured grace period by default."""
        if grace_days is None:
            from pg_reporting.config.settings import settings
            grace_days = settings.PAYMENT_GRACE_DAYS
        return due_date + timedelta(days=grace_days)
