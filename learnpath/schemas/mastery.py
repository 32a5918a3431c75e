"""
Pydantic schemas for the mastery API.
"""

from typing import Dict, List

from pydantic import BaseModel


class MasteryUpdateRequest(BaseModel):
    """Concepts to mark, by page id or alias."""

    add_masteries: List[str] = []
    remove_masteries: List[str] = []
    wants_masteries: List[str] = []
    # Page that taught the added masteries, if any
    taught_by: str = ""


class MasteryItem(BaseModel):
    """Mastery state of one concept."""

    has: bool
    wants: bool


class MasteriesResponse(BaseModel):
    """Learner's masteries keyed by page id."""

    masteries: Dict[str, MasteryItem]
