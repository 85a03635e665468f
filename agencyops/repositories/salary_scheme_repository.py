"""
Salary scheme repository.

Data access layer for SalaryScheme model.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.salary_scheme import SalaryScheme
from agencyops.repositories.base import BaseRepository


class SalarySchemeRepository(BaseRepository[SalaryScheme]):
    """Salary scheme repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize salary scheme repository."""
        super().__init__(SalaryScheme, session)

    async def get_by_organization(
        self, organization_id: uuid.UUID
    ) -> list[SalaryScheme]:
        """Get organization's schemes, newest first."""
        stmt = (
            select(SalaryScheme)
            .where(SalaryScheme.organization_id == organization_id)
            .order_by(SalaryScheme.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_target(
        self, organization_id: uuid.UUID, target_type: str, target_id: str
    ) -> SalaryScheme | None:
        """Get the scheme of a job title or a user."""
        return await self.get_by(
            organization_id=organization_id,
            target_type=target_type,
            target_id=target_id,
        )
