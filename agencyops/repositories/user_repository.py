"""
User repository.

Data access layer for User model.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.user import User
from agencyops.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_by_ids(self, user_ids: Iterable[uuid.UUID]) -> list[User]:
        """Get users by id in one query."""
        ids = list(set(user_ids))
        if not ids:
            return []

        stmt = select(User).where(User.id.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_organization(self, organization_id: uuid.UUID) -> list[User]:
        """Get all members of an organization."""
        return await self.find_by(organization_id=organization_id)
