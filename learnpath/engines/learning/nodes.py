"""
Learning graph nodes.

The graph is bipartite:
- RequirementNode -> TutorNode: "can be taught by"
- TutorNode -> RequirementNode: "requires"

A page may be both a requirement and a tutor (a requirement may teach itself).
Nodes are created by the graph builder and only mutated by the cost resolver.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import BaseModel, Field

# Cost of a requirement nothing can teach; also the initial cost of every node
PENALTY_COST = 10_000_000
# Added per lens position once a node is resolved
LENS_COST = 10
# Bound on builder expansion rounds
MAX_EXPANSION_ROUNDS = 20


class RequirementNode(BaseModel):
    """A concept the learner needs before reading some tutor page."""

    page_id: str
    lens_index: int = Field(default=0, exclude=True)
    # Pages that can teach this requirement (may repeat)
    tutor_ids: List[str] = []
    # Cheapest tutor, set when processed
    best_tutor_id: str = ""
    cost: int = PENALTY_COST
    processed: bool = Field(default=False, exclude=True)


class TutorNode(BaseModel):
    """A page that teaches one or more requirements."""

    page_id: str
    lens_index: int = Field(default=0, exclude=True)
    # To read this page, the learner needs these requirements
    requirement_ids: List[str] = []
    cost: int = PENALTY_COST
    processed: bool = Field(default=False, exclude=True)


def sort_tutor_requirements(
    tutor: TutorNode,
    requirement_map: Dict[str, RequirementNode],
) -> None:
    """Order a tutor's requirements cheapest first (stable)."""
    tutor.requirement_ids.sort(key=lambda req_id: requirement_map[req_id].cost)


@dataclass
class LearningGraph:
    """
    Node arena for a single resolution.

    page_ids is the filtered list of targets the learner asked for. Every target
    has an entry in requirement_map.
    """

    page_ids: List[str] = field(default_factory=list)
    requirement_map: Dict[str, RequirementNode] = field(default_factory=dict)
    tutor_map: Dict[str, TutorNode] = field(default_factory=dict)

    def add_requirement_node(self, page_id: str, lens_index: int = 0) -> bool:
        """Create a requirement node unless one exists. Returns True if created."""
        if page_id in self.requirement_map:
            return False
        self.requirement_map[page_id] = RequirementNode(page_id=page_id, lens_index=lens_index)
        return True

    def add_tutor_node(self, page_id: str, lens_index: int = 0) -> bool:
        """Create a tutor node unless one exists. Returns True if created."""
        if page_id in self.tutor_map:
            return False
        self.tutor_map[page_id] = TutorNode(page_id=page_id, lens_index=lens_index)
        return True

    def add_tutor(self, requirement_id: str, tutor_id: str, lens_index: int = 0) -> bool:
        """
        Record that tutor_id teaches requirement_id.

        Returns True if the tutor node is new to the graph.
        """
        self.requirement_map[requirement_id].tutor_ids.append(tutor_id)
        return self.add_tutor_node(tutor_id, lens_index)

    def add_requirement(self, tutor_id: str, requirement_id: str, lens_index: int = 0) -> bool:
        """
        Record that tutor_id requires requirement_id.

        Returns True if the requirement node is new to the graph.
        """
        self.tutor_map[tutor_id].requirement_ids.append(requirement_id)
        return self.add_requirement_node(requirement_id, lens_index)

    @property
    def node_count(self) -> int:
        return len(self.requirement_map) + len(self.tutor_map)
