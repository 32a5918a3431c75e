"""
Learn map - the chosen tutors laid out as a tree from the targets down.
"""

from typing import Dict, List, Set

from pydantic import BaseModel

from learnpath.engines.learning.nodes import LearningGraph


class LearnNode(BaseModel):
    """To understand page_id, read taught_by_id, which needs requirement_ids."""

    page_id: str
    taught_by_id: str = ""
    requirement_ids: List[str] = []


def build_learn_map(graph: LearningGraph) -> Dict[str, LearnNode]:
    """
    Walk best tutors breadth-first from the targets.

    Each requirement appears once; requirement_ids keep the tutor's
    cheapest-first order.
    """
    learn_map: Dict[str, LearnNode] = {}
    requirement_ids = list(graph.page_ids)
    while requirement_ids:
        next_ids: List[str] = []
        for req_id in requirement_ids:
            if req_id in learn_map:
                continue
            node = LearnNode(page_id=req_id)
            learn_map[req_id] = node

            node.taught_by_id = graph.requirement_map[req_id].best_tutor_id
            tutor = graph.tutor_map.get(node.taught_by_id)
            if tutor is not None:
                node.requirement_ids = list(tutor.requirement_ids)
                next_ids.extend(tutor.requirement_ids)
        requirement_ids = next_ids
    return learn_map


def study_order(graph: LearningGraph, learn_map: Dict[str, LearnNode]) -> List[str]:
    """
    Tutor pages in reading order: every tutor after the tutors of its requirements.

    Requirements nobody teaches contribute no page. A cycle is cut where the
    walk re-enters a requirement it is still expanding.
    """
    order: List[str] = []
    listed: Set[str] = set()
    expanding: Set[str] = set()
    done: Set[str] = set()

    def visit(req_id: str) -> None:
        if req_id in expanding or req_id in done:
            return
        node = learn_map.get(req_id)
        if node is None or not node.taught_by_id:
            done.add(req_id)
            return
        expanding.add(req_id)
        for child_id in node.requirement_ids:
            visit(child_id)
        expanding.discard(req_id)
        done.add(req_id)
        if node.taught_by_id not in listed:
            listed.add(node.taught_by_id)
            order.append(node.taught_by_id)

    for page_id in graph.page_ids:
        visit(page_id)
    return order
