"""
Page models - wiki pages, the relationships between them, and lenses.

A page pair links a parent page to a child page:
- subject: the child page teaches the parent concept
- requirement: reading the child page requires the parent concept
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from learnpath.kernel.models.base import Base, TimestampMixin, PAGE_ID_LENGTH


class PagePairType(str, Enum):
    """Kinds of page relationships."""
    PARENT = "parent"
    TAG = "tag"
    REQUIREMENT = "requirement"
    SUBJECT = "subject"


class Page(Base, TimestampMixin):
    """A wiki page (concept)."""

    __tablename__ = "pages"

    page_id: Mapped[str] = mapped_column(
        String(PAGE_ID_LENGTH),
        primary_key=True,
    )
    alias: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(512),
        nullable=False,
        default="",
    )
    clickbait: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
    )

    def __repr__(self) -> str:
        return f"<Page {self.page_id} {self.alias}>"


class PagePair(Base):
    """Directed relationship between two pages."""

    __tablename__ = "page_pairs"

    # Autoincrement id keeps discovery order stable
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_id: Mapped[str] = mapped_column(String(PAGE_ID_LENGTH), nullable=False)
    child_id: Mapped[str] = mapped_column(String(PAGE_ID_LENGTH), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_page_pairs_parent_type", "parent_id", "type"),
        Index("ix_page_pairs_child_type", "child_id", "type"),
    )


class Lens(Base, TimestampMixin):
    """An alternate explanation (lens_id) shown as a tab of page_id."""

    __tablename__ = "lenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page_id: Mapped[str] = mapped_column(String(PAGE_ID_LENGTH), nullable=False, index=True)
    lens_id: Mapped[str] = mapped_column(String(PAGE_ID_LENGTH), nullable=False, unique=True)
    lens_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lens_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
