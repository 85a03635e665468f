"""
Referral earnings management module.

Creates commission transactions from payments of referred organizations
and moves them through pending -> ready -> paid.
"""

import uuid
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import LEVEL_SHARES
from agencyops.config.settings import settings
from agencyops.models.enums import ReferralTransactionStatus
from agencyops.models.organization import Organization
from agencyops.models.referral_registration import ReferralRegistration
from agencyops.models.referral_transaction import ReferralTransaction
from agencyops.repositories.organization_repository import (
    OrganizationRepository,
)
from agencyops.repositories.promo_code_repository import PromoCodeRepository
from agencyops.repositories.referral_registration_repository import (
    ReferralRegistrationRepository,
)
from agencyops.repositories.referral_transaction_repository import (
    ReferralTransactionRepository,
)
from agencyops.services.referral.tiers import get_reward_tier
from agencyops.utils.datetime_utils import utc_now
from agencyops.utils.db_decorators import with_rollback_on_error
from agencyops.utils.exceptions import NotFoundError, ValidationError


CENTS = Decimal("0.01")

PROMO_TRIAL_PLAN = "Professional"


def calculate_commission(
    payment_amount: Decimal, tier_percent: int, level: int
) -> tuple[Decimal, Decimal]:
    """
    Commission percent and amount for one chain level.

    Args:
        payment_amount: Payment of the referred organization
        tier_percent: Referrer's tier percent
        level: Chain level (1-3)

    Returns:
        Tuple of (commission_percent, commission_amount)
    """
    share = LEVEL_SHARES.get(level, Decimal("0"))
    percent = (Decimal(tier_percent) * share).quantize(CENTS)
    amount = (Decimal(payment_amount) * percent / 100).quantize(
        CENTS, rounding=ROUND_HALF_UP
    )
    return percent, amount


def _unique_edges(
    chain: list[ReferralRegistration],
) -> list[ReferralRegistration]:
    """Keep the first edge per (level, referrer) of a chain ordered by age."""
    seen = set()
    unique = []
    for edge in chain:
        key = (edge.level, edge.referrer_org_id)
        if key in seen:
            continue
        seen.add(key)
        unique.append(edge)
    return unique


class ReferralEarningsManager:
    """Manages referral commission operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize earnings manager."""
        self.session = session
        self.promo_repo = PromoCodeRepository(session)
        self.registration_repo = ReferralRegistrationRepository(session)
        self.transaction_repo = ReferralTransactionRepository(session)
        self.organization_repo = OrganizationRepository(session)

    @with_rollback_on_error
    async def record_payment(
        self, referred_org_id: uuid.UUID, payment_amount: Decimal
    ) -> list[ReferralTransaction]:
        """
        Record commissions for a payment of a referred organization.

        The paying organization becomes an active client of its
        referrers before tiers are looked up, so its own payment already
        counts towards the tier.

        Args:
            referred_org_id: Paying organization
            payment_amount: Paid amount

        Returns:
            Created pending transactions, one per chain level and referrer
        """
        if payment_amount <= 0:
            logger.warning(
                "Commission skipped: non-positive payment",
                extra={
                    "referred_org_id": str(referred_org_id),
                    "payment_amount": str(payment_amount),
                },
            )
            return []

        chain = _unique_edges(
            await self.registration_repo.get_for_referred(referred_org_id)
        )
        if not chain:
            return []

        await self.registration_repo.mark_active(referred_org_id)

        ready_at = utc_now() + timedelta(days=settings.referral_hold_days)
        transactions = []

        for edge in chain:
            active_clients = await self.registration_repo.count_level_1(
                edge.referrer_org_id, active_only=True
            )
            tier = get_reward_tier(active_clients)
            percent, amount = calculate_commission(
                payment_amount, tier.percent, edge.level
            )

            transaction = await self.transaction_repo.create(
                referrer_user_id=edge.referrer_user_id,
                referrer_org_id=edge.referrer_org_id,
                referred_org_id=referred_org_id,
                payment_amount=payment_amount,
                commission_percent=percent,
                commission_amount=amount,
                level=edge.level,
                status=ReferralTransactionStatus.PENDING.value,
                ready_at=ready_at,
            )
            transactions.append(transaction)

            if edge.level == 1 and edge.promo_code_id:
                await self.promo_repo.increment_payments(edge.promo_code_id)

        await self.session.commit()

        logger.info(
            "Referral commissions recorded",
            extra={
                "referred_org_id": str(referred_org_id),
                "payment_amount": str(payment_amount),
                "transactions": len(transactions),
            },
        )
        return transactions

    @with_rollback_on_error
    async def release_ready(self, now: datetime | None = None) -> int:
        """
        Release commissions whose hold period is over.

        Returns:
            Number of released transactions
        """
        released = await self.transaction_repo.release_matured(now or utc_now())
        await self.session.commit()

        if released:
            logger.info(
                "Referral commissions released",
                extra={"released": released},
            )
        return released

    @with_rollback_on_error
    async def mark_paid(self, transaction_id: uuid.UUID) -> ReferralTransaction:
        """
        Mark a ready commission as paid.

        Raises:
            NotFoundError: Unknown transaction
            ValidationError: Transaction is not ready
        """
        transaction = await self.transaction_repo.get_by_id(transaction_id)
        if not transaction:
            raise NotFoundError(f"Referral transaction {transaction_id} not found")

        if transaction.status != ReferralTransactionStatus.READY.value:
            raise ValidationError(
                f"Cannot pay commission in status {transaction.status}"
            )

        transaction = await self.transaction_repo.update(
            transaction_id,
            status=ReferralTransactionStatus.PAID.value,
            paid_at=utc_now(),
        )
        await self.session.commit()

        logger.info(
            "Referral commission paid",
            extra={
                "transaction_id": str(transaction_id),
                "amount": str(transaction.commission_amount),
            },
        )
        return transaction

    @with_rollback_on_error
    async def extend_trial_for_promo(
        self, organization_id: uuid.UUID
    ) -> Organization | None:
        """
        Extend the trial of an organization that signed up with a promo code.

        The extension is added to the current trial end, or to now if the
        organization has no trial yet.

        Returns:
            Updated organization or None if not found
        """
        organization = await self.organization_repo.get_by_id(organization_id)
        if not organization:
            return None

        base_date = organization.trial_end_date or utc_now()
        trial_end = base_date + timedelta(days=settings.promo_trial_extension_days)

        organization = await self.organization_repo.update(
            organization_id,
            plan_name=PROMO_TRIAL_PLAN,
            subscription_status="trial",
            trial_end_date=trial_end,
            trial_extended_until=trial_end,
            subscription_end_date=trial_end,
        )
        await self.session.commit()

        logger.info(
            "Trial extended for promo sign-up",
            extra={
                "organization_id": str(organization_id),
                "trial_end_date": trial_end.isoformat(),
            },
        )
        return organization
