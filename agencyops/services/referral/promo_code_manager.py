"""
Promo code management module.

Handles creation, lookup and deactivation of referral promo codes.
"""

import re
import uuid

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.promo_code import PromoCode
from agencyops.repositories.promo_code_repository import PromoCodeRepository
from agencyops.utils.exceptions import ValidationError


WHITESPACE = re.compile(r"\s+")


def normalize_promo_code(code: str | None) -> str:
    """Lowercase a code and strip every whitespace character."""
    return WHITESPACE.sub("", (code or "").strip().lower())


class PromoCodeManager:
    """Manages promo code operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize promo code manager."""
        self.session = session
        self.promo_repo = PromoCodeRepository(session)

    async def create_promo_code(
        self, organization_id: uuid.UUID, user_id: uuid.UUID, code: str
    ) -> PromoCode:
        """
        Create promo code for an organization member.

        Codes are unique across all organizations.

        Args:
            organization_id: Owning organization
            user_id: Member credited with referrals
            code: Raw code as typed by the user

        Returns:
            Created promo code

        Raises:
            ValidationError: Code is empty or already taken
        """
        normalized = normalize_promo_code(code)
        if not normalized:
            raise ValidationError("Промокод не может быть пустым")

        if await self.promo_repo.get_by_code(normalized):
            raise ValidationError("Промокод уже существует")

        promo_code = await self.promo_repo.create(
            organization_id=organization_id,
            user_id=user_id,
            code=normalized,
        )
        await self.session.commit()

        logger.info(
            "Promo code created",
            extra={
                "organization_id": str(organization_id),
                "user_id": str(user_id),
                "code": normalized,
            },
        )

        return promo_code

    async def get_promo_codes(
        self, organization_id: uuid.UUID
    ) -> list[PromoCode]:
        """Get organization's promo codes, newest first."""
        return await self.promo_repo.get_by_organization(organization_id)

    async def validate_promo_code(
        self, code: str
    ) -> tuple[bool, PromoCode | None]:
        """
        Check whether a code can be used at sign-up.

        Returns:
            Tuple of (valid, promo_code)
        """
        normalized = normalize_promo_code(code)
        if not normalized:
            return False, None

        promo_code = await self.promo_repo.get_by_code(
            normalized, active_only=True
        )
        return promo_code is not None, promo_code

    async def deactivate_promo_code(
        self, organization_id: uuid.UUID, promo_code_id: uuid.UUID
    ) -> bool:
        """
        Deactivate promo code without deleting its history.

        Returns:
            True if the code belonged to the organization
        """
        promo_code = await self.promo_repo.get_by_id(promo_code_id)
        if not promo_code or promo_code.organization_id != organization_id:
            return False

        await self.promo_repo.update(promo_code_id, is_active=False)
        await self.session.commit()

        logger.info(
            "Promo code deactivated",
            extra={
                "organization_id": str(organization_id),
                "promo_code_id": str(promo_code_id),
            },
        )
        return True

    async def delete_promo_code(
        self, organization_id: uuid.UUID, promo_code_id: uuid.UUID
    ) -> bool:
        """
        Delete promo code (explicit admin action).

        Registrations keep their rows; their promo_code_id is cleared
        by the foreign key.

        Returns:
            True if deleted
        """
        promo_code = await self.promo_repo.get_by_id(promo_code_id)
        if not promo_code or promo_code.organization_id != organization_id:
            return False

        deleted = await self.promo_repo.delete(promo_code_id)
        await self.session.commit()

        logger.warning(
            "Promo code deleted",
            extra={
                "organization_id": str(organization_id),
                "promo_code_id": str(promo_code_id),
            },
        )
        return deleted
