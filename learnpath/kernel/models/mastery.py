"""
Mastery model - which concepts a user has, and which they want.
"""

import uuid

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from learnpath.kernel.models.base import Base, TimestampMixin, PAGE_ID_LENGTH


class UserMasteryPair(Base, TimestampMixin):
    """Per-user, per-concept mastery state."""

    __tablename__ = "user_mastery_pairs"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    mastery_id: Mapped[str] = mapped_column(
        String(PAGE_ID_LENGTH),
        primary_key=True,
    )

    has: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    wants: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Page that taught the mastery, empty when set by hand
    taught_by: Mapped[str] = mapped_column(String(PAGE_ID_LENGTH), nullable=False, default="")
