"""
Learning Graph Builder - expands targets into the full requirement/tutor graph.

Rounds alternate between two questions:
1. Which pages teach these requirements?
2. What must be learned before reading these new tutors?

Expansion stops when a round finds no new tutor, or after max_rounds rounds.
Cycles are left for the cost resolver to break.
"""

from typing import List, Sequence

from learnpath.engines.learning.nodes import LearningGraph, MAX_EXPANSION_ROUNDS
from learnpath.engines.learning.relationships import RelationshipSource
from learnpath.logging_config import get_logger

logger = get_logger(__name__)


class LearningGraphBuilder:
    """Builds a fresh LearningGraph per call from a RelationshipSource."""

    def __init__(self, source: RelationshipSource, max_rounds: int = MAX_EXPANSION_ROUNDS):
        self.source = source
        self.max_rounds = max_rounds

    async def build(self, page_ids: Sequence[str]) -> LearningGraph:
        """
        Discover every requirement and tutor needed to reach page_ids.

        page_ids should already exclude concepts the learner has mastered.
        Errors raised by the source propagate; no partial graph is returned.
        """
        targets = list(dict.fromkeys(page_ids))
        graph = LearningGraph(page_ids=targets)
        for page_id in targets:
            graph.add_requirement_node(page_id)

        requirement_ids: List[str] = list(targets)
        for round_index in range(self.max_rounds):
            if not requirement_ids:
                break
            logger.debug("Round %d requirement ids: %s", round_index, requirement_ids)

            tutor_ids: List[str] = []
            for relation in await self.source.load_tutors(requirement_ids):
                logger.debug("Found tutor: %s %s", relation.parent_id, relation.child_id)
                if graph.add_tutor(relation.parent_id, relation.child_id, relation.lens_index):
                    tutor_ids.append(relation.child_id)

            # Only the requested targets fall back to teaching themselves
            if round_index == 0:
                for req_id in requirement_ids:
                    if graph.requirement_map[req_id].tutor_ids:
                        continue
                    logger.debug("Requirement %s has no tutors, teaching itself", req_id)
                    if graph.add_tutor(req_id, req_id):
                        tutor_ids.append(req_id)

            if not tutor_ids:
                break
            logger.debug("Round %d tutor ids: %s", round_index, tutor_ids)

            requirement_ids = []
            for relation in await self.source.load_requirements(tutor_ids):
                logger.debug("Found requirement: %s %s", relation.parent_id, relation.child_id)
                if graph.add_requirement(relation.child_id, relation.parent_id, relation.lens_index):
                    requirement_ids.append(relation.parent_id)

            if round_index >= self.max_rounds - 2:
                logger.warning(
                    "Learning graph expansion close to round limit",
                    extra={"round": round_index, "max_rounds": self.max_rounds},
                )

        logger.debug(
            "Built learning graph",
            extra={
                "target_count": len(targets),
                "requirement_count": len(graph.requirement_map),
                "tutor_count": len(graph.tutor_map),
            },
        )
        return graph
