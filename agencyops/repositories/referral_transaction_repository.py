"""
Referral transaction repository.

Data access layer for ReferralTransaction model.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.enums import ReferralTransactionStatus
from agencyops.models.referral_transaction import ReferralTransaction
from agencyops.repositories.base import BaseRepository


class ReferralTransactionRepository(BaseRepository[ReferralTransaction]):
    """Referral transaction repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral transaction repository."""
        super().__init__(ReferralTransaction, session)

    async def get_status_totals(
        self, referrer_user_id: uuid.UUID
    ) -> dict[str, Decimal]:
        """
        Sum commission amounts per status in a single query.

        Args:
            referrer_user_id: Member earning the commissions

        Returns:
            Dict mapping status to total, every status present
        """
        stmt = (
            select(
                ReferralTransaction.status,
                func.coalesce(
                    func.sum(ReferralTransaction.commission_amount), 0
                ).label("total"),
            )
            .where(ReferralTransaction.referrer_user_id == referrer_user_id)
            .group_by(ReferralTransaction.status)
        )
        result = await self.session.execute(stmt)

        totals = {status.value: Decimal("0") for status in ReferralTransactionStatus}
        for row in result.all():
            totals[row.status] = Decimal(str(row.total))
        return totals

    async def get_by_referrer_user(
        self, referrer_user_id: uuid.UUID
    ) -> list[ReferralTransaction]:
        """Get member's commissions, newest first."""
        stmt = (
            select(ReferralTransaction)
            .where(ReferralTransaction.referrer_user_id == referrer_user_id)
            .order_by(ReferralTransaction.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def release_matured(self, now: datetime) -> int:
        """
        Move pending commissions whose hold period ended to ready.

        Returns:
            Number of released transactions
        """
        stmt = (
            update(ReferralTransaction)
            .where(
                ReferralTransaction.status == ReferralTransactionStatus.PENDING.value,
                ReferralTransaction.ready_at <= now,
            )
            .values(status=ReferralTransactionStatus.READY.value)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
