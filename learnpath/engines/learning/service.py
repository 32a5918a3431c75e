"""
Learning Path Service - resolves one learner's path to a set of target pages.

Steps:
1. Turn requested ids and aliases into target page ids
2. Drop targets the learner already has (optionally keep only wanted ones)
3. Build the requirement/tutor graph and resolve its costs
4. Lay out the learn map and reading order, load page titles
"""

import uuid
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from learnpath.config import get_settings
from learnpath.engines.learning.graph_builder import LearningGraphBuilder
from learnpath.engines.learning.learn_map import LearnNode, build_learn_map, study_order
from learnpath.engines.learning.nodes import LearningGraph
from learnpath.engines.learning.path_resolver import ResolutionStats, compute_learning_path
from learnpath.engines.learning.relationships import PagePairRelationshipSource
from learnpath.engines.learning.repositories import (
    MasteryRepository,
    MasteryState,
    PageRepository,
    PageSummary,
)
from learnpath.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class LearningPath:
    """Everything computed for one learn request."""

    graph: LearningGraph
    learn_map: Dict[str, LearnNode]
    study_order: List[str]
    pages: Dict[str, PageSummary]
    stats: ResolutionStats


class LearningPathService:
    """Orchestrates target filtering, graph building and cost resolution."""

    def __init__(self, session: AsyncSession, max_rounds: Optional[int] = None):
        self.session = session
        self.max_rounds = (
            max_rounds if max_rounds is not None else get_settings().learn_max_expansion_rounds
        )
        self.page_repository = PageRepository(session)
        self.mastery_repository = MasteryRepository(session)

    async def resolve_target_ids(
        self,
        page_ids: Sequence[str] = (),
        page_aliases: Sequence[str] = (),
    ) -> List[str]:
        """
        Merge explicit ids with resolved aliases, keeping request order.

        Raises:
            ValueError: If nothing was requested or an alias is unknown
        """
        if not page_ids and not page_aliases:
            raise ValueError("Need at least one page id or alias")

        alias_map = await self.page_repository.load_alias_map(page_aliases)
        unknown = [alias for alias in page_aliases if alias not in alias_map]
        if unknown:
            raise ValueError(f"Unknown page aliases: {', '.join(unknown)}")

        return list(dict.fromkeys([*page_ids, *(alias_map[a] for a in page_aliases)]))

    async def filter_targets(
        self,
        target_ids: Sequence[str],
        user_id: Optional[uuid.UUID] = None,
        mastery_map: Optional[Mapping[str, MasteryState]] = None,
        only_wanted: bool = False,
    ) -> Tuple[List[str], Set[str]]:
        """
        Drop targets the learner already has.

        Stored masteries and the request's mastery_map are merged; a concept
        counts as known (or wanted) if either source says so.

        Returns:
            Tuple of (remaining target ids, ids known only from mastery_map)
        """
        mastery_map = mastery_map or {}
        masteries: Dict[str, MasteryState] = {}
        if user_id is not None:
            masteries = await self.mastery_repository.load_masteries(user_id, target_ids)
        for page_id, state in mastery_map.items():
            stored = masteries.get(page_id, MasteryState())
            masteries[page_id] = MasteryState(
                has=stored.has or state.has,
                wants=stored.wants or state.wants,
            )

        targets = [t for t in target_ids if not masteries.get(t, MasteryState()).has]
        if only_wanted:
            targets = [t for t in targets if masteries.get(t, MasteryState()).wants]

        mastered_ids = {page_id for page_id, state in mastery_map.items() if state.has}
        return targets, mastered_ids

    async def compute(
        self,
        *,
        page_ids: Sequence[str] = (),
        page_aliases: Sequence[str] = (),
        user_id: Optional[uuid.UUID] = None,
        mastery_map: Optional[Mapping[str, MasteryState]] = None,
        only_wanted: bool = False,
    ) -> LearningPath:
        """Compute the learning path for the requested pages."""
        target_ids = await self.resolve_target_ids(page_ids, page_aliases)
        targets, mastered_ids = await self.filter_targets(
            target_ids, user_id, mastery_map, only_wanted
        )

        source = PagePairRelationshipSource(
            self.session,
            user_id=user_id,
            mastered_ids=mastered_ids,
        )
        graph = await LearningGraphBuilder(source, self.max_rounds).build(targets)
        stats = compute_learning_path(graph.page_ids, graph.requirement_map, graph.tutor_map)

        learn_map = build_learn_map(graph)
        order = study_order(graph, learn_map)

        page_ids_to_load = list(learn_map)
        page_ids_to_load.extend(n.taught_by_id for n in learn_map.values() if n.taught_by_id)
        pages = await self.page_repository.load_summaries(page_ids_to_load)

        logger.info(
            "Computed learning path",
            extra={
                "requested": len(target_ids),
                "targets": len(targets),
                "nodes": graph.node_count,
                "passes": stats.passes,
                "forced": len(stats.forced_ids),
            },
        )
        return LearningPath(
            graph=graph,
            learn_map=learn_map,
            study_order=order,
            pages=pages,
            stats=stats,
        )
