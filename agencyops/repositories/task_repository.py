"""
Task repository.

Data access layer for Task model.
"""

import uuid
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import TASK_STATUS_DONE
from agencyops.models.task import Task
from agencyops.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Task repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository."""
        super().__init__(Task, session)

    async def count_completed(
        self, assignee_id: uuid.UUID, start: datetime, end: datetime
    ) -> int:
        """
        Count done tasks of a user completed inside a window.

        Args:
            assignee_id: User ID
            start: Window start (inclusive)
            end: Window end (inclusive)

        Returns:
            Number of completed tasks
        """
        stmt = select(func.count(Task.id)).where(
            Task.assignee_id == assignee_id,
            Task.status == TASK_STATUS_DONE,
            Task.completed_at.is_not(None),
            Task.completed_at >= start,
            Task.completed_at <= end,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def get_by_organization(self, organization_id: uuid.UUID) -> list[Task]:
        """Get all tasks of an organization."""
        return await self.find_by(organization_id=organization_id)
