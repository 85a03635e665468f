"""
Organization repository.

Data access layer for Organization model.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.organization import Organization
from agencyops.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    """Organization repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize organization repository."""
        super().__init__(Organization, session)

    async def get_names(
        self, organization_ids: Iterable[uuid.UUID]
    ) -> dict[uuid.UUID, str]:
        """Map organization ids to names in one query."""
        ids = list(set(organization_ids))
        if not ids:
            return {}

        stmt = select(Organization.id, Organization.name).where(
            Organization.id.in_(ids)
        )
        result = await self.session.execute(stmt)
        return {row.id: row.name for row in result.all()}
