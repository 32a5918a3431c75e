"""
Pydantic schemas for the learn API.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from learnpath.engines.learning.repositories import MasteryState


class LearnRequest(BaseModel):
    """Pages the learner wants to understand."""

    page_ids: List[str] = []
    page_aliases: List[str] = []
    # Keep only targets the learner marked as wanted
    only_wanted: bool = False
    # Client-side masteries (anonymous learners), merged with stored ones
    mastery_map: Dict[str, MasteryState] = Field(default_factory=dict)


class RequirementResponse(BaseModel):
    """A resolved requirement node."""

    page_id: str
    tutor_ids: List[str]
    best_tutor_id: str
    cost: int


class TutorResponse(BaseModel):
    """A resolved tutor node; requirement_ids cheapest first."""

    page_id: str
    requirement_ids: List[str]
    cost: int


class LearnNodeResponse(BaseModel):
    """One step of the learn map."""

    page_id: str
    taught_by_id: str
    requirement_ids: List[str]


class PageSummaryResponse(BaseModel):
    """Title-level metadata for a page on the path."""

    page_id: str
    alias: str
    title: str
    clickbait: str = ""


class LearnResponse(BaseModel):
    """Resolved learning path."""

    page_ids: List[str]
    requirements: Dict[str, RequirementResponse]
    tutors: Dict[str, TutorResponse]
    learn_map: Dict[str, LearnNodeResponse]
    study_order: List[str]
    pages: Dict[str, PageSummaryResponse]
