"""
ReferralRegistration model.

Directed edge: referred organization was brought in by the referrer at a level.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base


class ReferralRegistration(Base):
    """
    ReferralRegistration entity.

    Rows are append-only facts. Level 1 edges start at the promo code owner;
    levels 2 and 3 are copied from the upstream referrer's own level 1 edge.

    Attributes:
        id: Primary key
        referrer_user_id: Member earning commissions for this edge
        referrer_org_id: Referrer organization
        referred_org_id: Organization that registered
        promo_code_id: Code used at registration
        level: 1 (direct), 2 or 3
        is_active: Referred organization has paid
        created_at: Registration timestamp
    """

    __tablename__ = "referral_registrations"
    __table_args__ = (
        CheckConstraint("level BETWEEN 1 AND 3", name="level_range"),
        CheckConstraint(
            "referrer_org_id <> referred_org_id", name="no_self_referral"
        ),
        Index("idx_referral_regs_referred_level", "referred_org_id", "level"),
        Index("idx_referral_regs_referrer_org_level", "referrer_org_id", "level"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    referrer_user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referrer_org_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    referred_org_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
    )
    promo_code_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("promo_codes.id", ondelete="SET NULL"),
        nullable=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralRegistration(referrer_org_id={self.referrer_org_id}, "
            f"referred_org_id={self.referred_org_id}, level={self.level})>"
        )
