"""
Path Cost Resolver - assigns every node a cost and every requirement a tutor.

Cost model:
- requirement with no tutors: PENALTY_COST, no lens penalty, no tutor
- requirement: cheapest tutor cost (first one wins ties) + lens_index * LENS_COST
- tutor: sum of requirement costs + lens_index * LENS_COST + 1

Nodes are frozen in waves: a requirement once all its tutors are processed, a
tutor once all its requirements are processed. When a wave changes nothing the
pending nodes form cycles, and one requirement is forced through per stall.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from learnpath.engines.learning.nodes import (
    LENS_COST,
    PENALTY_COST,
    RequirementNode,
    TutorNode,
    sort_tutor_requirements,
)
from learnpath.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ResolutionStats:
    """Bookkeeping from one compute_learning_path run."""

    passes: int = 0
    # Requirements forced through to break cycles, in order
    forced_ids: List[str] = field(default_factory=list)


def _freeze_requirement(req: RequirementNode, tutor_map: Dict[str, TutorNode]) -> None:
    best_tutor_id = ""
    best_cost = PENALTY_COST
    for tutor_id in req.tutor_ids:
        cost = tutor_map[tutor_id].cost
        if not best_tutor_id or cost < best_cost:
            best_tutor_id = tutor_id
            best_cost = cost
    req.best_tutor_id = best_tutor_id
    req.cost = best_cost + req.lens_index * LENS_COST
    req.processed = True


def _freeze_tutor(tutor: TutorNode, requirement_map: Dict[str, RequirementNode]) -> None:
    cost_sum = sum(requirement_map[req_id].cost for req_id in tutor.requirement_ids)
    tutor.cost = cost_sum + tutor.lens_index * LENS_COST + 1
    tutor.processed = True
    sort_tutor_requirements(tutor, requirement_map)


def _walk_cycle(
    start: RequirementNode,
    requirement_map: Dict[str, RequirementNode],
    tutor_map: Dict[str, TutorNode],
) -> List[str]:
    """
    Follow first-unprocessed edges from start until a requirement repeats.

    Only used to report the cycle; returns the walked ids.
    """
    path: List[str] = []
    visited: set[str] = set()
    req = start
    while req.page_id not in visited:
        visited.add(req.page_id)
        path.append(req.page_id)
        tutor = next(
            (tutor_map[t] for t in req.tutor_ids if not tutor_map[t].processed),
            None,
        )
        if tutor is None:
            break
        path.append(tutor.page_id)
        next_req = next(
            (requirement_map[r] for r in tutor.requirement_ids if not requirement_map[r].processed),
            None,
        )
        if next_req is None:
            break
        req = next_req
    else:
        path.append(req.page_id)
    return path


def _force_requirement(req: RequirementNode) -> None:
    if not req.best_tutor_id:
        req.best_tutor_id = req.tutor_ids[0]
        req.cost = PENALTY_COST
    req.cost += req.lens_index * LENS_COST
    req.processed = True


def compute_learning_path(
    page_ids: Sequence[str],
    requirement_map: Dict[str, RequirementNode],
    tutor_map: Dict[str, TutorNode],
) -> ResolutionStats:
    """
    Resolve costs and best tutors in place.

    Runs until every target in page_ids is processed, then settles whatever
    is still pending so every node in both maps ends processed. Target ids
    must be present in requirement_map (KeyError otherwise).
    """
    stats = ResolutionStats()

    # Untaught requirements are settled before any lens penalty applies
    for req in requirement_map.values():
        if not req.processed and not req.tutor_ids:
            req.cost = PENALTY_COST
            req.best_tutor_id = ""
            req.processed = True

    missing = [page_id for page_id in page_ids if page_id not in requirement_map]
    if missing:
        raise KeyError(f"Targets missing from requirement map: {missing}")

    pending_reqs = [req for req in requirement_map.values() if not req.processed]
    pending_tutors = [tutor for tutor in tutor_map.values() if not tutor.processed]

    while pending_reqs or pending_tutors:
        stats.passes += 1
        graph_changed = False

        for req in pending_reqs:
            if all(tutor_map[t].processed for t in req.tutor_ids):
                _freeze_requirement(req, tutor_map)
                graph_changed = True
        pending_reqs = [req for req in pending_reqs if not req.processed]

        for tutor in pending_tutors:
            if all(requirement_map[r].processed for r in tutor.requirement_ids):
                _freeze_tutor(tutor, requirement_map)
                graph_changed = True
        pending_tutors = [tutor for tutor in pending_tutors if not tutor.processed]

        if graph_changed:
            continue

        # Stalled: every pending node waits on another pending node
        stuck = pending_reqs[0]
        path = _walk_cycle(stuck, requirement_map, tutor_map)
        logger.info(
            "Breaking learning path cycle at %s",
            stuck.page_id,
            extra={"cycle": path},
        )
        _force_requirement(stuck)
        stats.forced_ids.append(stuck.page_id)
        pending_reqs = pending_reqs[1:]

    logger.debug(
        "Resolved learning path",
        extra={"passes": stats.passes, "forced": len(stats.forced_ids)},
    )
    return stats
