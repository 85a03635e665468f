"""
Notification repository.

Data access layer for Notification model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.notification import Notification
from agencyops.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification repository."""
        super().__init__(Notification, session)
