"""
Promo code repository.

Data access layer for PromoCode model.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.promo_code import PromoCode
from agencyops.repositories.base import BaseRepository


class PromoCodeRepository(BaseRepository[PromoCode]):
    """Promo code repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize promo code repository."""
        super().__init__(PromoCode, session)

    async def get_by_code(
        self, code: str, active_only: bool = False
    ) -> PromoCode | None:
        """
        Get promo code by its normalized code.

        Args:
            code: Normalized code
            active_only: Ignore deactivated codes

        Returns:
            PromoCode or None
        """
        filters = {"code": code}
        if active_only:
            filters["is_active"] = True
        return await self.get_by(**filters)

    async def get_by_organization(
        self, organization_id: uuid.UUID
    ) -> list[PromoCode]:
        """Get organization's promo codes, newest first."""
        stmt = (
            select(PromoCode)
            .where(PromoCode.organization_id == organization_id)
            .order_by(PromoCode.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_registrations(self, promo_code_id: uuid.UUID) -> bool:
        """Atomically add one registration to the code."""
        return await self.increment(promo_code_id, "registrations_count")

    async def increment_payments(self, promo_code_id: uuid.UUID) -> bool:
        """Atomically add one payment to the code."""
        return await self.increment(promo_code_id, "payments_count")
