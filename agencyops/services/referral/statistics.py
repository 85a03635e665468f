"""
Affiliate statistics module.

Aggregates commission totals and referral counts for the affiliate
dashboard. Everything is recomputed per call.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.enums import ReferralTransactionStatus
from agencyops.repositories.organization_repository import (
    OrganizationRepository,
)
from agencyops.repositories.referral_registration_repository import (
    ReferralRegistrationRepository,
)
from agencyops.repositories.referral_transaction_repository import (
    ReferralTransactionRepository,
)
from agencyops.services.referral.tiers import RewardTierResult, get_reward_tier


@dataclass
class AffiliateStats:
    """Affiliate dashboard figures."""

    ready_to_pay: Decimal
    pending: Decimal
    total_paid: Decimal
    total_referred: int
    active_clients: int
    tier: RewardTierResult


@dataclass
class AffiliateTransaction:
    """Commission row with the paying organization's name."""

    id: uuid.UUID
    referred_org_id: uuid.UUID
    referred_org_name: str | None
    payment_amount: Decimal
    commission_percent: Decimal
    commission_amount: Decimal
    level: int
    status: str
    ready_at: datetime | None
    paid_at: datetime | None
    created_at: datetime


class AffiliateStatisticsManager:
    """Manages affiliate statistics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics manager."""
        self.session = session
        self.registration_repo = ReferralRegistrationRepository(session)
        self.transaction_repo = ReferralTransactionRepository(session)
        self.organization_repo = OrganizationRepository(session)

    async def get_affiliate_stats(
        self, organization_id: uuid.UUID, user_id: uuid.UUID
    ) -> AffiliateStats:
        """
        Get affiliate statistics for a member.

        Commission sums belong to the member, referral counts to the
        member's organization.

        Args:
            organization_id: Referrer organization
            user_id: Referrer member

        Returns:
            AffiliateStats
        """
        totals = await self.transaction_repo.get_status_totals(user_id)
        total_referred = await self.registration_repo.count_level_1(
            organization_id
        )
        active_clients = await self.registration_repo.count_level_1(
            organization_id, active_only=True
        )

        return AffiliateStats(
            ready_to_pay=totals[ReferralTransactionStatus.READY.value],
            pending=totals[ReferralTransactionStatus.PENDING.value],
            total_paid=totals[ReferralTransactionStatus.PAID.value],
            total_referred=total_referred,
            active_clients=active_clients,
            tier=get_reward_tier(active_clients),
        )

    async def get_transactions(
        self, user_id: uuid.UUID
    ) -> list[AffiliateTransaction]:
        """Get member's commissions, newest first."""
        transactions = await self.transaction_repo.get_by_referrer_user(user_id)
        names = await self.organization_repo.get_names(
            t.referred_org_id for t in transactions
        )

        return [
            AffiliateTransaction(
                id=t.id,
                referred_org_id=t.referred_org_id,
                referred_org_name=names.get(t.referred_org_id),
                payment_amount=t.payment_amount,
                commission_percent=t.commission_percent,
                commission_amount=t.commission_amount,
                level=t.level,
                status=t.status,
                ready_at=t.ready_at,
                paid_at=t.paid_at,
                created_at=t.created_at,
            )
            for t in transactions
        ]
