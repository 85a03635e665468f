"""
ContentPublication model.

One published post/story/reel attributed to one user.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from agencyops.models.base import Base


class ContentPublication(Base):
    """
    ContentPublication entity.

    Attributes:
        id: Primary key
        organization_id: Owning organization
        project_id: Project the content was published for
        content_type: post / reels / story / ...
        published_at: Publication timestamp
        assigned_user_id: Member credited for the publication
        description: Caption or note
    """

    __tablename__ = "content_publications"
    __table_args__ = (
        Index(
            "idx_content_publications_user_published",
            "assigned_user_id",
            "published_at",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content_type: Mapped[str] = mapped_column(String(64), nullable=False)
    published_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    assigned_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ContentPublication(project_id={self.project_id}, "
            f"type={self.content_type!r}, published_at={self.published_at})>"
        )
