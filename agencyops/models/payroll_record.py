"""
PayrollRecord model.

Snapshot of one user's earnings for one month.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base
from agencyops.models.enums import PayrollStatus
from agencyops.models.types import MoneyType


class PayrollRecord(Base):
    """
    PayrollRecord entity.

    One row per (organization, user, month). DRAFT rows follow the latest
    calculation; FROZEN and PAID rows keep their amounts.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        user_id: Employee
        month: "YYYY-MM"
        fix_salary: Base salary
        calculated_kpi: KPI + content + bonuses
        manual_bonus: Manual adjustment added to the total
        manual_penalty: Manual adjustment subtracted from the total
        advance: Advance already paid
        balance_at_start: Carried balance
        status: DRAFT / FROZEN / PAID
        paid_at: Payout timestamp
        task_payments: Per-task breakdown
    """

    __tablename__ = "payroll_records"
    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "user_id",
            "month",
            name="uq_payroll_records_org_user_month",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    month: Mapped[str] = mapped_column(String(7), nullable=False)
    fix_salary: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    calculated_kpi: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    manual_bonus: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    manual_penalty: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    advance: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    balance_at_start: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=PayrollStatus.DRAFT.value
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    task_payments: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PayrollRecord(user_id={self.user_id}, month={self.month}, "
            f"status={self.status})>"
        )

    @property
    def net_amount(self) -> Decimal:
        """Amount due: salary + KPI + bonus - penalty - advance."""
        return (
            (self.fix_salary or Decimal("0"))
            + (self.calculated_kpi or Decimal("0"))
            + (self.manual_bonus or Decimal("0"))
            - (self.manual_penalty or Decimal("0"))
            - (self.advance or Decimal("0"))
        )
