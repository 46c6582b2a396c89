"""
Payment repository.
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import update

from pg_reporting.models.enums import ApprovalStatus, PaymentStatus
from pg_reporting.models.payment import Payment
from pg_reporting.repositories.base import BaseRepository


class PaymentRepository(BaseRepository):

    async def mark_overdue(self, pg_ids: Sequence[str], now: datetime) -> int:
        """
        Set payment status to overdue for pending, unreviewed payments whose
        overdue date has passed. Commits and returns the affected row count.
        """
        stmt = (
            update(Payment)
            .where(Payment.pg_id.in_(list(pg_ids)))
            .where(Payment.approval_status == ApprovalStatus.PENDING)
            .where(Payment.payment_status == PaymentStatus.PENDING)
            .where(Payment.overdue_date < now)
            .values(payment_status=PaymentStatus.OVERDUE)
            .execution_options(synchronize_session=False)
        )
        result = await self._execute(stmt, "mark payments overdue")
        await self.commit()
        return result.rowcount or 0
