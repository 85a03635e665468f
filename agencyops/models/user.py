"""
User model.

Organization member whose payroll is calculated.
"""

import uuid
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base
from agencyops.models.types import MoneyType


class User(Base):
    """
    User entity.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        name: Full name
        email: Login email
        job_title: Job title, used to resolve salary schemes and bonus rules
        salary: Fallback base salary when no scheme applies
        balance: Running payroll balance carried into the next month
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    job_title: Mapped[str] = mapped_column(
        String(255), nullable=False, default=""
    )
    salary: Mapped[Decimal | None] = mapped_column(MoneyType, nullable=True)
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, name={self.name!r}, "
            f"job_title={self.job_title!r})>"
        )
