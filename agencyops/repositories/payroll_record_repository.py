"""
Payroll record repository.

Data access layer for PayrollRecord model.
"""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.enums import PayrollStatus
from agencyops.models.payroll_record import PayrollRecord
from agencyops.repositories.base import BaseRepository


class PayrollRecordRepository(BaseRepository[PayrollRecord]):
    """Payroll record repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payroll record repository."""
        super().__init__(PayrollRecord, session)

    async def get_by_user_and_month(
        self, organization_id: uuid.UUID, user_id: uuid.UUID, month: str
    ) -> PayrollRecord | None:
        """Get the record of a user for a month."""
        return await self.get_by(
            organization_id=organization_id, user_id=user_id, month=month
        )

    async def get_by_month(
        self, organization_id: uuid.UUID, month: str
    ) -> list[PayrollRecord]:
        """Get all records of an organization for a month."""
        return await self.find_by(organization_id=organization_id, month=month)

    async def get_by_user(
        self, organization_id: uuid.UUID, user_id: uuid.UUID
    ) -> list[PayrollRecord]:
        """Get a user's records, latest month first."""
        stmt = (
            select(PayrollRecord)
            .where(
                PayrollRecord.organization_id == organization_id,
                PayrollRecord.user_id == user_id,
            )
            .order_by(PayrollRecord.month.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def upsert(
        self, values: dict[str, Any], update_columns: list[str]
    ) -> PayrollRecord:
        """
        Insert or update the record for (organization, user, month).

        Uses INSERT ... ON CONFLICT DO UPDATE so repeated runs converge
        on one row. Only DRAFT rows are overwritten.

        Args:
            values: Column values, must include organization_id, user_id, month
            update_columns: Columns overwritten when the row exists

        Returns:
            The stored record
        """
        stmt = insert(PayrollRecord).values(**values)
        if update_columns:
            stmt = stmt.on_conflict_do_update(
                constraint="uq_payroll_records_org_user_month",
                set_={column: stmt.excluded[column] for column in update_columns},
                where=PayrollRecord.status == PayrollStatus.DRAFT.value,
            )
        else:
            stmt = stmt.on_conflict_do_nothing(
                constraint="uq_payroll_records_org_user_month",
            )

        await self.session.execute(stmt)
        await self.session.flush()

        refreshed = (
            select(PayrollRecord)
            .where(
                PayrollRecord.organization_id == values["organization_id"],
                PayrollRecord.user_id == values["user_id"],
                PayrollRecord.month == values["month"],
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(refreshed)
        return result.scalar_one()
