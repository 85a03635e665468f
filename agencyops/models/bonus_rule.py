"""
BonusRule model.

Conditional reward evaluated during payroll runs.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base
from agencyops.models.types import MoneyType


class BonusRule(Base):
    """
    BonusRule entity.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        owner_type: jobTitle / user
        owner_id: Job title or user id
        name: Rule name
        metric_source: sales_revenue, project_retention, tasks_completed, ...
        condition_type: always / threshold / tiered
        threshold_value: Threshold for threshold rules
        threshold_operator: >=, <=, =, >, <
        tiered_config: [{"min": n, "max": n, "reward": n}]
        reward_type: percent / fixed_amount
        reward_value: Reward percent or amount
        apply_to_base: Percent rewards use the metric base amount
        is_active: Only active rules are evaluated
        calculation_period: monthly / quarterly / per_transaction
        description: Free text
    """

    __tablename__ = "bonus_rules"
    __table_args__ = (
        Index(
            "idx_bonus_rules_owner",
            "organization_id",
            "owner_type",
            "owner_id",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    owner_type: Mapped[str] = mapped_column(String(16), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    metric_source: Mapped[str] = mapped_column(String(32), nullable=False)
    condition_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="always"
    )
    threshold_value: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True
    )
    threshold_operator: Mapped[str] = mapped_column(
        String(2), nullable=False, default=">="
    )
    tiered_config: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    reward_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="fixed_amount"
    )
    reward_value: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    apply_to_base: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    calculation_period: Mapped[str] = mapped_column(
        String(16), nullable=False, default="monthly"
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
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
            f"<BonusRule(id={self.id}, name={self.name!r}, "
            f"metric={self.metric_source}, active={self.is_active})>"
        )
