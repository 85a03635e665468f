"""
Referral registration repository.

Data access layer for ReferralRegistration model.
"""

import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.referral_registration import ReferralRegistration
from agencyops.repositories.base import BaseRepository


class ReferralRegistrationRepository(BaseRepository[ReferralRegistration]):
    """Referral registration repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral registration repository."""
        super().__init__(ReferralRegistration, session)

    async def get_direct_referrer(
        self, referred_org_id: uuid.UUID
    ) -> ReferralRegistration | None:
        """
        Get the level 1 edge that brought an organization in.

        If an organization was registered more than once the earliest
        edge wins.

        Args:
            referred_org_id: Referred organization ID

        Returns:
            Level 1 registration or None
        """
        stmt = (
            select(ReferralRegistration)
            .where(
                ReferralRegistration.referred_org_id == referred_org_id,
                ReferralRegistration.level == 1,
            )
            .order_by(ReferralRegistration.created_at.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_for_referred(
        self, referred_org_id: uuid.UUID
    ) -> list[ReferralRegistration]:
        """
        Get all edges pointing at a referred organization.

        Returns:
            Registrations ordered by level
        """
        stmt = (
            select(ReferralRegistration)
            .where(ReferralRegistration.referred_org_id == referred_org_id)
            .order_by(
                ReferralRegistration.level.asc(),
                ReferralRegistration.created_at.asc(),
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_level_1_referrals(
        self, referrer_org_id: uuid.UUID
    ) -> list[ReferralRegistration]:
        """Get direct referrals of an organization, newest first."""
        stmt = (
            select(ReferralRegistration)
            .where(
                ReferralRegistration.referrer_org_id == referrer_org_id,
                ReferralRegistration.level == 1,
            )
            .order_by(ReferralRegistration.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_level_1(
        self, referrer_org_id: uuid.UUID, active_only: bool = False
    ) -> int:
        """
        Count direct referrals of an organization.

        Args:
            referrer_org_id: Referrer organization ID
            active_only: Count only referred organizations that paid

        Returns:
            Number of level 1 registrations
        """
        stmt = select(func.count(ReferralRegistration.id)).where(
            ReferralRegistration.referrer_org_id == referrer_org_id,
            ReferralRegistration.level == 1,
        )
        if active_only:
            stmt = stmt.where(ReferralRegistration.is_active.is_(True))

        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def mark_active(self, referred_org_id: uuid.UUID) -> int:
        """
        Mark every edge of a referred organization active.

        Returns:
            Number of updated rows
        """
        stmt = (
            update(ReferralRegistration)
            .where(
                ReferralRegistration.referred_org_id == referred_org_id,
                ReferralRegistration.is_active.is_(False),
            )
            .values(is_active=True)
        )
        result = await self.session.execute(stmt)
        return result.rowcount
