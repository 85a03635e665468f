"""
Content publication repository.

Data access layer for ContentPublication model.
"""

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.content_publication import ContentPublication
from agencyops.repositories.base import BaseRepository


class ContentPublicationRepository(BaseRepository[ContentPublication]):
    """Content publication repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize content publication repository."""
        super().__init__(ContentPublication, session)

    async def get_by_user(
        self,
        user_id: uuid.UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ContentPublication]:
        """
        Get publications credited to a user, newest first.

        Args:
            user_id: Assigned user
            start: Optional window start (inclusive)
            end: Optional window end (inclusive)

        Returns:
            Publications
        """
        stmt = select(ContentPublication).where(
            ContentPublication.assigned_user_id == user_id
        )
        if start is not None:
            stmt = stmt.where(ContentPublication.published_at >= start)
        if end is not None:
            stmt = stmt.where(ContentPublication.published_at <= end)

        stmt = stmt.order_by(ContentPublication.published_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_project(
        self, project_id: uuid.UUID
    ) -> list[ContentPublication]:
        """Get project publications, newest first."""
        stmt = (
            select(ContentPublication)
            .where(ContentPublication.project_id == project_id)
            .order_by(ContentPublication.published_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
