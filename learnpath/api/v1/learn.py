"""
Learn endpoint - the reading path to understand a set of pages.
"""

from fastapi import APIRouter, HTTPException, status

from learnpath.api.deps import DbSession, OptionalUser
from learnpath.engines.learning.service import LearningPath, LearningPathService
from learnpath.schemas.learn import (
    LearnNodeResponse,
    LearnRequest,
    LearnResponse,
    PageSummaryResponse,
    RequirementResponse,
    TutorResponse,
)

router = APIRouter()


def _path_to_response(path: LearningPath) -> LearnResponse:
    graph = path.graph
    return LearnResponse(
        page_ids=graph.page_ids,
        requirements={
            req_id: RequirementResponse(
                page_id=req.page_id,
                tutor_ids=req.tutor_ids,
                best_tutor_id=req.best_tutor_id,
                cost=req.cost,
            )
            for req_id, req in graph.requirement_map.items()
        },
        tutors={
            tutor_id: TutorResponse(
                page_id=tutor.page_id,
                requirement_ids=tutor.requirement_ids,
                cost=tutor.cost,
            )
            for tutor_id, tutor in graph.tutor_map.items()
        },
        learn_map={
            page_id: LearnNodeResponse(**node.model_dump())
            for page_id, node in path.learn_map.items()
        },
        study_order=path.study_order,
        pages={
            page_id: PageSummaryResponse(**summary.model_dump())
            for page_id, summary in path.pages.items()
        },
    )


@router.post("", response_model=LearnResponse)
async def compute_learn_path(
    body: LearnRequest,
    user: OptionalUser,
    db: DbSession,
):
    """
    Compute which pages to read, in which order, to understand the requested pages.

    Concepts the learner already has are skipped. Anonymous learners can send
    their masteries in mastery_map.
    """
    service = LearningPathService(db)
    try:
        path = await service.compute(
            page_ids=body.page_ids,
            page_aliases=body.page_aliases,
            user_id=user.id if user else None,
            mastery_map=body.mastery_map,
            only_wanted=body.only_wanted,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return _path_to_response(path)
