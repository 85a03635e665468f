"""
Referral chain management module.

Registers referred organizations and materializes the referral chain as
flat level 1-3 edges.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import REFERRAL_DEPTH
from agencyops.models.referral_registration import ReferralRegistration
from agencyops.repositories.organization_repository import (
    OrganizationRepository,
)
from agencyops.repositories.promo_code_repository import PromoCodeRepository
from agencyops.repositories.referral_registration_repository import (
    ReferralRegistrationRepository,
)
from agencyops.services.referral.promo_code_manager import normalize_promo_code


@dataclass
class ReferralInfo:
    """Direct referral as shown to the referrer."""

    registration_id: uuid.UUID
    referred_org_id: uuid.UUID
    referred_org_name: str | None
    is_active: bool
    created_at: datetime


class ReferralChainManager:
    """Manages referral chain operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize chain manager."""
        self.session = session
        self.promo_repo = PromoCodeRepository(session)
        self.registration_repo = ReferralRegistrationRepository(session)
        self.organization_repo = OrganizationRepository(session)

    async def register_referral(
        self, promo_code: str, referred_org_id: uuid.UUID
    ) -> bool:
        """
        Register an organization that signed up with a promo code.

        Creates the level 1 edge from the code owner, then walks up the
        code owner's own referrers to add level 2 and level 3 edges.
        Every edge is committed on its own, so a failure on an upper
        level keeps the lower ones.

        Registering the same organization twice creates duplicate edges.

        Args:
            promo_code: Code entered at sign-up
            referred_org_id: Newly registered organization

        Returns:
            True if the level 1 edge was created
        """
        code = normalize_promo_code(promo_code)
        if not code:
            return False

        promo = await self.promo_repo.get_by_code(code, active_only=True)
        if not promo:
            logger.debug(
                "Referral skipped: promo code not found",
                extra={"code": code, "referred_org_id": str(referred_org_id)},
            )
            return False

        if promo.organization_id == referred_org_id:
            logger.warning(
                "Referral skipped: self-referral",
                extra={"code": code, "organization_id": str(referred_org_id)},
            )
            return False

        try:
            await self.registration_repo.create(
                referrer_user_id=promo.user_id,
                referrer_org_id=promo.organization_id,
                referred_org_id=referred_org_id,
                promo_code_id=promo.id,
                level=1,
            )
            await self.promo_repo.increment_registrations(promo.id)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to register referral",
                extra={
                    "code": code,
                    "referred_org_id": str(referred_org_id),
                    "error": str(e),
                },
            )
            return False

        levels_created = await self._extend_chain(
            promo.organization_id, referred_org_id, promo.id
        )

        logger.info(
            "Referral registered",
            extra={
                "code": code,
                "referrer_org_id": str(promo.organization_id),
                "referred_org_id": str(referred_org_id),
                "levels_created": levels_created,
            },
        )
        return True

    async def _extend_chain(
        self,
        direct_referrer_org_id: uuid.UUID,
        referred_org_id: uuid.UUID,
        promo_code_id: uuid.UUID,
    ) -> int:
        """
        Add level 2..REFERRAL_DEPTH edges above the direct referrer.

        Returns:
            Number of levels present after the walk
        """
        levels_created = 1
        current_org_id = direct_referrer_org_id

        for level in range(2, REFERRAL_DEPTH + 1):
            upstream = await self.registration_repo.get_direct_referrer(
                current_org_id
            )
            if not upstream:
                break

            if upstream.referrer_org_id == referred_org_id:
                logger.warning(
                    "Referral loop detected",
                    extra={
                        "referred_org_id": str(referred_org_id),
                        "upstream_org_id": str(upstream.referrer_org_id),
                        "level": level,
                    },
                )
                break

            try:
                await self.registration_repo.create(
                    referrer_user_id=upstream.referrer_user_id,
                    referrer_org_id=upstream.referrer_org_id,
                    referred_org_id=referred_org_id,
                    promo_code_id=promo_code_id,
                    level=level,
                )
                await self.session.commit()
            except SQLAlchemyError as e:
                await self.session.rollback()
                logger.error(
                    "Failed to create upper referral level",
                    extra={
                        "referred_org_id": str(referred_org_id),
                        "level": level,
                        "error": str(e),
                    },
                )
                break

            levels_created = level
            current_org_id = upstream.referrer_org_id

        return levels_created

    async def get_referral_chain(
        self, referred_org_id: uuid.UUID
    ) -> list[ReferralRegistration]:
        """Get every edge pointing at an organization, ordered by level."""
        chain = await self.registration_repo.get_for_referred(referred_org_id)

        logger.debug(
            "Referral chain retrieved",
            extra={
                "referred_org_id": str(referred_org_id),
                "chain_length": len(chain),
            },
        )
        return chain

    async def get_referrals(
        self, organization_id: uuid.UUID
    ) -> list[ReferralInfo]:
        """
        Get direct referrals of an organization, newest first.

        Args:
            organization_id: Referrer organization

        Returns:
            Referrals with the referred organization names
        """
        registrations = await self.registration_repo.get_level_1_referrals(
            organization_id
        )
        names = await self.organization_repo.get_names(
            r.referred_org_id for r in registrations
        )

        return [
            ReferralInfo(
                registration_id=r.id,
                referred_org_id=r.referred_org_id,
                referred_org_name=names.get(r.referred_org_id),
                is_active=r.is_active,
                created_at=r.created_at,
            )
            for r in registrations
        ]
