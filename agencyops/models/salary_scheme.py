"""
SalaryScheme model.

Base salary plus KPI rates for a job title or for one specific user.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base
from agencyops.models.types import MoneyType, PercentType


class SalaryScheme(Base):
    """
    SalaryScheme entity.

    target_type is "jobTitle" (target_id is the title) or "user"
    (target_id is the user id as text). A user scheme wins over a
    job title scheme for the same user.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        target_type: jobTitle / user
        target_id: Job title or user id
        base_salary: Fixed monthly salary
        kpi_rules: [{"taskType": str, "value": number, "unit": "task" | "hour"}]
        pm_bonus_percent: Optional project manager bonus percent
    """

    __tablename__ = "salary_schemes"
    __table_args__ = (
        Index(
            "idx_salary_schemes_target",
            "organization_id",
            "target_type",
            "target_id",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    target_type: Mapped[str] = mapped_column(String(16), nullable=False)
    target_id: Mapped[str] = mapped_column(String(255), nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    kpi_rules: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    pm_bonus_percent: Mapped[Decimal] = mapped_column(
        PercentType, nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<SalaryScheme(target_type={self.target_type}, "
            f"target_id={self.target_id!r}, base_salary={self.base_salary})>"
        )
