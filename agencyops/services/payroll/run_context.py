"""
Per-run payroll state.

A PayrollRunContext lives for one payroll calculation (one user or one
batch of users) and caches the user lookups the content payroll needs.
Nothing is shared between runs.
"""

import uuid
from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.user import User
from agencyops.repositories.user_repository import UserRepository


class PayrollRunContext:
    """Read-through user cache scoped to one payroll run."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize run context."""
        self.user_repo = UserRepository(session)
        self._users: dict[uuid.UUID, User] = {}

    def remember(self, users: Iterable[User]) -> None:
        """Seed the cache with users the caller already loaded."""
        for user in users:
            self._users[user.id] = user

    async def get_users(self, user_ids: Iterable[uuid.UUID]) -> list[User]:
        """
        Get users by id, loading only the ones not cached yet.

        Unknown ids are skipped.
        """
        ids = list(dict.fromkeys(user_ids))
        missing = [user_id for user_id in ids if user_id not in self._users]
        if missing:
            self.remember(await self.user_repo.get_by_ids(missing))

        return [self._users[user_id] for user_id in ids if user_id in self._users]

    def invalidate(self, user_id: uuid.UUID | None = None) -> None:
        """Drop one cached user, or all of them."""
        if user_id is None:
            self._users.clear()
        else:
            self._users.pop(user_id, None)
