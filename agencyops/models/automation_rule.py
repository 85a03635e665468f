"""
AutomationRule model.

Trigger + conditions + action, fired by business events.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base


class AutomationRule(Base):
    """
    AutomationRule entity.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        name: Rule name
        trigger_type: Event that fires the rule
        trigger_config: Trigger parameters
        condition_config: {field: {"operator": str, "value": any}}
        action_type: create_task / send_whatsapp / webhook / ...
        action_config: Action parameters, string values may use {{field}}
        is_active: Only active rules fire
        execution_count: Times the action ran
        last_executed_at: Last time the action ran
    """

    __tablename__ = "automation_rules"
    __table_args__ = (
        Index(
            "idx_automation_rules_trigger",
            "organization_id",
            "trigger_type",
            "is_active",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    trigger_type: Mapped[str] = mapped_column(String(64), nullable=False)
    trigger_config: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
    condition_config: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
    action_type: Mapped[str] = mapped_column(String(64), nullable=False)
    action_config: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    execution_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    last_executed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AutomationRule(id={self.id}, trigger={self.trigger_type}, "
            f"action={self.action_type})>"
        )
