"""
Organization model.

Tenant root: every other row is scoped by organization_id.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base


class Organization(Base):
    """
    Organization entity.

    Attributes:
        id: Primary key
        name: Display name
        plan_name: Subscription plan
        subscription_status: trial / active / expired
        trial_end_date: End of the trial period
        trial_extended_until: Trial end after a promo extension
        subscription_end_date: End of the paid period
        referred_by_promo_code: Promo code used at registration
        created_at: Creation timestamp
    """

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    plan_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    subscription_status: Mapped[str | None] = mapped_column(
        String(32), nullable=True
    )
    trial_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    trial_extended_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscription_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    referred_by_promo_code: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Organization(id={self.id}, name={self.name!r})>"
