"""
Kernel Data Models

SQLAlchemy models for users, wiki pages, page relationships and masteries.
"""

from learnpath.kernel.models.base import Base, TimestampMixin, generate_uuid, PAGE_ID_LENGTH
from learnpath.kernel.models.user import User
from learnpath.kernel.models.page import Page, PagePair, PagePairType, Lens
from learnpath.kernel.models.mastery import UserMasteryPair

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "PAGE_ID_LENGTH",
    # User
    "User",
    # Pages
    "Page",
    "PagePair",
    "PagePairType",
    "Lens",
    # Mastery
    "UserMasteryPair",
]
