"""
Payment overdue state.

Overdue detection is derived from wall-clock time, so stored statuses are
brought up to date right before any read that depends on them, and every
aggregate classifies payments through `is_overdue`.
"""

import logging
from datetime import datetime
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from pg_reporting.models.enums import ApprovalStatus, PaymentStatus
from pg_reporting.repositories.payment_repository import PaymentRepository

logger = logging.getLogger(__name__)


def is_overdue(payment: Any, now: datetime) -> bool:
    """Overdue by stored status, or still pending review past its overdue date."""
    if payment.payment_status == PaymentStatus.OVERDUE:
        return True
    return (
        payment.approval_status == ApprovalStatus.PENDING
        and payment.overdue_date is not None
        and now > payment.overdue_date
    )


def is_pending(payment: Any, now: datetime) -> bool:
    """Awaiting review and not yet overdue."""
    return payment.approval_status == ApprovalStatus.PENDING and not is_overdue(payment, now)


def is_approved(payment: Any) -> bool:
    return payment.approval_status == ApprovalStatus.APPROVED


class OverdueStatusSynchronizer:
    """
    Bulk pending -> overdue correction.

    The update re-evaluates row state in its WHERE clause, so running it
    repeatedly or from several processes at once converges to the same
    result.
    """

    async def sync(self, session: AsyncSession, pg_ids: Sequence[str], now: datetime) -> int:
        """Mark lapsed payments of the given PGs overdue; returns rows changed."""
        if not pg_ids:
            return 0

        repository = PaymentRepository(session)
        updated = await repository.mark_overdue(pg_ids, now)
        if updated:
            logger.info(f"Marked {updated} payment(s) overdue across {len(pg_ids)} PG(s)")
        else:
            logger.debug("No payments needed overdue correction")
        return updated
