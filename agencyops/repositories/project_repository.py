"""
Project repositories.

Data access layer for Project and ProjectRenewal models.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.project import Project, ProjectRenewal
from agencyops.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    """Project repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize project repository."""
        super().__init__(Project, session)

    async def get_owned(
        self, organization_id: uuid.UUID, project_id: uuid.UUID
    ) -> Project | None:
        """Get a project only if it belongs to the organization."""
        return await self.get_by(id=project_id, organization_id=organization_id)

    async def get_ended_for_member(
        self,
        organization_id: uuid.UUID,
        user_id: uuid.UUID,
        start: date,
        end: date,
    ) -> list[Project]:
        """
        Get projects of a team member that ended inside a window.

        Args:
            organization_id: Owning organization
            user_id: Team member
            start: First day (inclusive)
            end: Last day (inclusive)

        Returns:
            Projects
        """
        stmt = select(Project).where(
            Project.organization_id == organization_id,
            Project.team_ids.contains([user_id]),
            Project.end_date >= start,
            Project.end_date <= end,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class ProjectRenewalRepository(BaseRepository[ProjectRenewal]):
    """Project renewal repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize project renewal repository."""
        super().__init__(ProjectRenewal, session)

    async def get_for_projects(
        self, project_ids: list[uuid.UUID], start: datetime, end: datetime
    ) -> list[ProjectRenewal]:
        """Get renewals of projects inside a window."""
        if not project_ids:
            return []

        stmt = select(ProjectRenewal).where(
            ProjectRenewal.project_id.in_(project_ids),
            ProjectRenewal.renewal_date >= start,
            ProjectRenewal.renewal_date <= end,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
