"""
Client repositories.

Data access layer for Client and FinancialTransaction models.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.client import Client, FinancialTransaction
from agencyops.repositories.base import BaseRepository


class ClientRepository(BaseRepository[Client]):
    """Client repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize client repository."""
        super().__init__(Client, session)

    async def get_owned(
        self, organization_id: uuid.UUID, client_id: uuid.UUID
    ) -> Client | None:
        """Get a client only if it belongs to the organization."""
        return await self.get_by(id=client_id, organization_id=organization_id)

    async def get_ids_by_manager(
        self, organization_id: uuid.UUID, manager_id: uuid.UUID
    ) -> list[uuid.UUID]:
        """Get ids of clients managed by a user."""
        stmt = select(Client.id).where(
            Client.organization_id == organization_id,
            Client.manager_id == manager_id,
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class FinancialTransactionRepository(BaseRepository[FinancialTransaction]):
    """Financial transaction repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize financial transaction repository."""
        super().__init__(FinancialTransaction, session)

    async def sum_verified_income(
        self, client_ids: list[uuid.UUID], start: datetime, end: datetime
    ) -> Decimal:
        """
        Sum verified income of clients inside a window.

        Args:
            client_ids: Clients to include
            start: Window start (inclusive)
            end: Window end (inclusive)

        Returns:
            Total income, 0 when there is none
        """
        if not client_ids:
            return Decimal("0")

        stmt = select(
            func.coalesce(func.sum(FinancialTransaction.amount), 0)
        ).where(
            FinancialTransaction.client_id.in_(client_ids),
            FinancialTransaction.type == "income",
            FinancialTransaction.is_verified.is_(True),
            FinancialTransaction.date >= start,
            FinancialTransaction.date <= end,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
