"""
Automation rule repository.

Data access layer for AutomationRule model.
"""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.automation_rule import AutomationRule
from agencyops.repositories.base import BaseRepository


class AutomationRuleRepository(BaseRepository[AutomationRule]):
    """Automation rule repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize automation rule repository."""
        super().__init__(AutomationRule, session)

    async def get_active_by_trigger(
        self, organization_id: uuid.UUID, trigger_type: str
    ) -> list[AutomationRule]:
        """Get active rules listening to a trigger."""
        stmt = (
            select(AutomationRule)
            .where(
                AutomationRule.organization_id == organization_id,
                AutomationRule.trigger_type == trigger_type,
                AutomationRule.is_active.is_(True),
            )
            .order_by(AutomationRule.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def record_execution(
        self, rule_id: uuid.UUID, executed_at: datetime
    ) -> bool:
        """Atomically bump execution_count and stamp last_executed_at."""
        return await self.increment(
            rule_id, "execution_count", last_executed_at=executed_at
        )
