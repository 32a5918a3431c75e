"""
Pydantic schemas for API request/response validation.
"""

from learnpath.schemas.common import HealthResponse
from learnpath.schemas.learn import (
    LearnRequest,
    LearnResponse,
    LearnNodeResponse,
    RequirementResponse,
    TutorResponse,
    PageSummaryResponse,
)
from learnpath.schemas.mastery import (
    MasteryUpdateRequest,
    MasteryItem,
    MasteriesResponse,
)

__all__ = [
    # Common
    "HealthResponse",
    # Learn
    "LearnRequest",
    "LearnResponse",
    "LearnNodeResponse",
    "RequirementResponse",
    "TutorResponse",
    "PageSummaryResponse",
    # Mastery
    "MasteryUpdateRequest",
    "MasteryItem",
    "MasteriesResponse",
]
