"""
Payroll record service.

Snapshots calculated payroll into one record per (organization, user,
month) and moves records through DRAFT -> FROZEN -> PAID. Frozen and
paid records never change their amounts.
"""

import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.enums import PayrollStatus
from agencyops.models.payroll_record import PayrollRecord
from agencyops.models.user import User
from agencyops.repositories.payroll_record_repository import (
    PayrollRecordRepository,
)
from agencyops.services.base_service import BaseService
from agencyops.services.payroll.payroll_aggregator import UserPayrollStats
from agencyops.utils.datetime_utils import parse_month, utc_now
from agencyops.utils.db_decorators import with_rollback_on_error
from agencyops.utils.exceptions import NotFoundError, ValidationError


SYNCED_COLUMNS = ["fix_salary", "calculated_kpi", "task_payments", "updated_at"]

ADJUSTMENT_FIELDS = ("manual_bonus", "manual_penalty", "advance")


class PayrollRecordService(BaseService):
    """Payroll record service."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize payroll record service."""
        super().__init__(session)
        self.record_repo = PayrollRecordRepository(session)

    @with_rollback_on_error
    async def sync_record(
        self,
        organization_id: uuid.UUID,
        user: User,
        stats: UserPayrollStats,
        month: str,
    ) -> PayrollRecord:
        """
        Store calculated payroll of a user.

        Creates the DRAFT record or refreshes its calculated amounts.
        Manual adjustments are kept. FROZEN and PAID records are returned
        unchanged.

        Args:
            organization_id: Organization
            user: Employee
            stats: Calculated payroll
            month: "YYYY-MM"

        Returns:
            Stored record
        """
        parse_month(month)

        existing = await self.record_repo.get_by_user_and_month(
            organization_id, user.id, month
        )
        if existing and existing.status != PayrollStatus.DRAFT.value:
            self.logger.debug(
                "Payroll record is locked, skipping sync",
                extra={
                    "user_id": str(user.id),
                    "month": month,
                    "status": existing.status,
                },
            )
            return existing

        task_payments = [detail.as_payment() for detail in stats.details]
        record = await self.record_repo.upsert(
            {
                "organization_id": organization_id,
                "user_id": user.id,
                "month": month,
                "fix_salary": stats.base_salary,
                "calculated_kpi": stats.kpi_earned + stats.bonuses_earned,
                "task_payments": task_payments,
                "balance_at_start": user.balance or Decimal("0"),
                "status": PayrollStatus.DRAFT.value,
                "updated_at": utc_now(),
            },
            SYNCED_COLUMNS,
        )
        await self.commit()

        self.logger.info(
            "Payroll record synced",
            extra={
                "user_id": str(user.id),
                "month": month,
                "fix_salary": str(record.fix_salary),
                "calculated_kpi": str(record.calculated_kpi),
            },
        )
        return record

    async def _get_owned(
        self, organization_id: uuid.UUID, record_id: uuid.UUID
    ) -> PayrollRecord:
        record = await self.record_repo.get_by_id(record_id)
        if not record or record.organization_id != organization_id:
            raise NotFoundError(f"Payroll record {record_id} not found")
        return record

    async def _transition(
        self,
        organization_id: uuid.UUID,
        record_id: uuid.UUID,
        expected: PayrollStatus,
        target: PayrollStatus,
        **values: object,
    ) -> PayrollRecord:
        record = await self._get_owned(organization_id, record_id)
        if record.status != expected.value:
            raise ValidationError(
                f"Cannot move payroll record from {record.status} to {target.value}"
            )

        record = await self.record_repo.update(record_id, status=target.value, **values)
        await self.commit()

        self.logger.info(
            "Payroll record status changed",
            extra={
                "record_id": str(record_id),
                "from": expected.value,
                "to": target.value,
            },
        )
        return record

    @with_rollback_on_error
    async def update_adjustments(
        self,
        organization_id: uuid.UUID,
        record_id: uuid.UUID,
        **adjustments: Decimal,
    ) -> PayrollRecord:
        """
        Set manual bonus, penalty or advance of a DRAFT record.

        Raises:
            NotFoundError: Unknown record
            ValidationError: Unknown field, negative amount or locked record
        """
        unknown = set(adjustments) - set(ADJUSTMENT_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown adjustment fields: {sorted(unknown)}")

        values = {name: Decimal(str(amount)) for name, amount in adjustments.items()}
        if any(amount < 0 for amount in values.values()):
            raise ValidationError("Adjustments must not be negative")

        record = await self._get_owned(organization_id, record_id)
        if record.status != PayrollStatus.DRAFT.value:
            raise ValidationError(
                f"Cannot adjust payroll record in status {record.status}"
            )

        record = await self.record_repo.update(record_id, **values)
        await self.commit()
        return record

    @with_rollback_on_error
    async def freeze(
        self, organization_id: uuid.UUID, record_id: uuid.UUID
    ) -> PayrollRecord:
        """DRAFT -> FROZEN."""
        return await self._transition(
            organization_id, record_id, PayrollStatus.DRAFT, PayrollStatus.FROZEN
        )

    @with_rollback_on_error
    async def mark_paid(
        self, organization_id: uuid.UUID, record_id: uuid.UUID
    ) -> PayrollRecord:
        """FROZEN -> PAID, stamping paid_at."""
        return await self._transition(
            organization_id,
            record_id,
            PayrollStatus.FROZEN,
            PayrollStatus.PAID,
            paid_at=utc_now(),
        )

    async def get_by_month(
        self, organization_id: uuid.UUID, month: str
    ) -> list[PayrollRecord]:
        """Get all records of an organization for a month."""
        parse_month(month)
        return await self.record_repo.get_by_month(organization_id, month)

    async def get_by_user(
        self, organization_id: uuid.UUID, user_id: uuid.UUID
    ) -> list[PayrollRecord]:
        """Get a user's records, latest month first."""
        return await self.record_repo.get_by_user(organization_id, user_id)
