"""
Kernel Layer

Persistence models and learner identity shared by the engines and the API.
"""

from learnpath.kernel.models import (
    User,
    Page,
    PagePair,
    PagePairType,
    Lens,
    UserMasteryPair,
)

__all__ = [
    "User",
    "Page",
    "PagePair",
    "PagePairType",
    "Lens",
    "UserMasteryPair",
]
