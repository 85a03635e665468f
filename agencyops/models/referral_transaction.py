"""
ReferralTransaction model.

Commission earned by a referrer from a referred organization's payment.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base
from agencyops.models.enums import ReferralTransactionStatus
from agencyops.models.types import MoneyType, PercentType


class ReferralTransaction(Base):
    """
    ReferralTransaction entity.

    Status only moves forward: pending -> ready -> paid.

    Attributes:
        id: Primary key
        referrer_user_id: Member earning the commission
        referrer_org_id: Referrer organization
        referred_org_id: Organization whose payment generated it
        payment_amount: Original payment
        commission_percent: Rate applied
        commission_amount: payment_amount * commission_percent / 100
        level: Referral level the commission comes from
        status: pending / ready / paid
        ready_at: When the commission becomes payable
        paid_at: When it was paid out
    """

    __tablename__ = "referral_transactions"
    __table_args__ = (
        Index("idx_referral_tx_referrer", "referrer_user_id", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    referrer_user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    referrer_org_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referred_org_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    payment_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    commission_percent: Mapped[Decimal] = mapped_column(
        PercentType, nullable=False, default=Decimal("0")
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ReferralTransactionStatus.PENDING.value,
    )
    ready_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralTransaction(id={self.id}, level={self.level}, "
            f"amount={self.commission_amount}, status={self.status})>"
        )
