"""
Bonus rule repository.

Data access layer for BonusRule model.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.bonus_rule import BonusRule
from agencyops.repositories.base import BaseRepository


class BonusRuleRepository(BaseRepository[BonusRule]):
    """Bonus rule repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bonus rule repository."""
        super().__init__(BonusRule, session)

    async def get_active_by_owner(
        self, organization_id: uuid.UUID, owner_type: str, owner_id: str
    ) -> list[BonusRule]:
        """
        Get active rules of a job title or a user.

        Args:
            organization_id: Owning organization
            owner_type: jobTitle / user
            owner_id: Job title or user id

        Returns:
            Active rules, newest first
        """
        stmt = (
            select(BonusRule)
            .where(
                BonusRule.organization_id == organization_id,
                BonusRule.owner_type == owner_type,
                BonusRule.owner_id == owner_id,
                BonusRule.is_active.is_(True),
            )
            .order_by(BonusRule.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
