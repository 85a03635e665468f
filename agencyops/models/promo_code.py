"""
PromoCode model.

Referral identifier issued by an organization member.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base


class PromoCode(Base):
    """
    PromoCode entity.

    The code is unique across all organizations and stored normalized
    (lowercase, no whitespace).

    Attributes:
        id: Primary key
        organization_id: Organization issuing referrals
        user_id: Member who created the code and receives commissions
        code: Normalized code string
        registrations_count: Organizations registered with this code
        payments_count: Referred payments attributed to this code
        is_active: Inactive codes cannot register referrals
        created_at: Creation timestamp
    """

    __tablename__ = "promo_codes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    code: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True
    )
    registrations_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    payments_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PromoCode(id={self.id}, code={self.code!r}, "
            f"active={self.is_active})>"
        )
