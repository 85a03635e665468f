"""
Core notification service.

Stores in-app notifications. Delivery is best effort: a failure is
logged and never reaches the caller.
"""

import uuid

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.notification import Notification
from agencyops.repositories.notification_repository import (
    NotificationRepository,
)


class NotificationService:
    """In-app notification service."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification service."""
        self.session = session
        self.notification_repo = NotificationRepository(session)

    async def notify(
        self,
        user_id: uuid.UUID | None,
        title: str,
        message: str,
        type: str = "info",
    ) -> Notification | None:
        """
        Create a notification for a user.

        Args:
            user_id: Recipient
            title: Short title
            message: Notification text
            type: info / success / warning / error

        Returns:
            Stored notification or None if it could not be created
        """
        if not user_id:
            logger.warning(
                "Notification skipped: no recipient",
                extra={"title": title},
            )
            return None

        try:
            notification = await self.notification_repo.create(
                user_id=user_id,
                title=title,
                message=message,
                type=type,
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Failed to create notification: {e}",
                extra={"user_id": str(user_id), "title": title},
            )
            return None

        logger.debug(
            "Notification created",
            extra={"user_id": str(user_id), "type": type},
        )
        return notification

    async def get_unread(self, user_id: uuid.UUID) -> list[Notification]:
        """Get unread notifications of a user."""
        return await self.notification_repo.find_by(user_id=user_id, is_read=False)
