"""
Learning Engine - prerequisite discovery and learning path costs.

- Graph builder: expands targets into requirement and tutor nodes
- Path resolver: cheapest tutor per requirement, cycles broken by force
- Learn map: the chosen tutors as a tree and a reading order
"""

from learnpath.engines.learning.nodes import (
    LENS_COST,
    MAX_EXPANSION_ROUNDS,
    PENALTY_COST,
    LearningGraph,
    RequirementNode,
    TutorNode,
    sort_tutor_requirements,
)
from learnpath.engines.learning.graph_builder import LearningGraphBuilder
from learnpath.engines.learning.path_resolver import ResolutionStats, compute_learning_path
from learnpath.engines.learning.learn_map import LearnNode, build_learn_map, study_order
from learnpath.engines.learning.relationships import (
    PagePairRelationshipSource,
    PageRelation,
    RelationshipSource,
)
from learnpath.engines.learning.repositories import (
    MasteryRepository,
    MasteryState,
    PageRepository,
    PageSummary,
)
from learnpath.engines.learning.service import LearningPath, LearningPathService

__all__ = [
    "LENS_COST",
    "MAX_EXPANSION_ROUNDS",
    "PENALTY_COST",
    "LearningGraph",
    "RequirementNode",
    "TutorNode",
    "sort_tutor_requirements",
    "LearningGraphBuilder",
    "ResolutionStats",
    "compute_learning_path",
    "LearnNode",
    "build_learn_map",
    "study_order",
    "PagePairRelationshipSource",
    "PageRelation",
    "RelationshipSource",
    "MasteryRepository",
    "MasteryState",
    "PageRepository",
    "PageSummary",
    "LearningPath",
    "LearningPathService",
]
