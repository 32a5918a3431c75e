"""Unit tests for learning graph expansion."""

from typing import Dict, List, Sequence, Tuple

import pytest

from learnpath.engines.learning.graph_builder import LearningGraphBuilder
from learnpath.engines.learning.path_resolver import compute_learning_path
from learnpath.engines.learning.relationships import PageRelation


class FakeRelationshipSource:
    """In-memory relationship source recording every query."""

    def __init__(
        self,
        tutors: Dict[str, List[Tuple[str, int]]] = None,
        requirements: Dict[str, List[Tuple[str, int]]] = None,
        mastered: Sequence[str] = (),
    ):
        # requirement id -> [(tutor id, lens index)]
        self.tutors = tutors or {}
        # tutor id -> [(requirement id, lens index)]
        self.requirements = requirements or {}
        self.mastered = set(mastered)
        self.tutor_queries: List[List[str]] = []
        self.requirement_queries: List[List[str]] = []

    async def load_tutors(self, requirement_ids):
        self.tutor_queries.append(list(requirement_ids))
        return [
            PageRelation(req_id, tutor_id, lens)
            for req_id in requirement_ids
            for tutor_id, lens in self.tutors.get(req_id, [])
        ]

    async def load_requirements(self, tutor_ids):
        self.requirement_queries.append(list(tutor_ids))
        return [
            PageRelation(req_id, tutor_id, lens)
            for tutor_id in tutor_ids
            for req_id, lens in self.requirements.get(tutor_id, [])
            if req_id not in self.mastered
        ]


class FailingRelationshipSource(FakeRelationshipSource):
    async def load_requirements(self, tutor_ids):
        raise ConnectionError("storage unavailable")


def _chain_source(length: int) -> FakeRelationshipSource:
    """r0 <- t0 -> r1 <- t1 -> r2 ... each tutor needs the next requirement."""
    return FakeRelationshipSource(
        tutors={f"r{i}": [(f"t{i}", 0)] for i in range(length)},
        requirements={f"t{i}": [(f"r{i + 1}", 0)] for i in range(length)},
    )


class TestLearningGraphBuilder:
    @pytest.mark.asyncio
    async def test_single_tutor(self):
        source = FakeRelationshipSource(tutors={"1": [("2", 0)]})
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.page_ids == ["1"]
        assert graph.requirement_map["1"].tutor_ids == ["2"]
        assert graph.tutor_map["2"].requirement_ids == []
        assert source.requirement_queries == [["2"]]

    @pytest.mark.asyncio
    async def test_untaught_target_teaches_itself(self):
        source = FakeRelationshipSource(requirements={"1": [("5", 0)]})
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.requirement_map["1"].tutor_ids == ["1"]
        assert "1" in graph.tutor_map
        # the self tutor's own requirements are loaded
        assert graph.tutor_map["1"].requirement_ids == ["5"]
        assert "5" in graph.requirement_map

    @pytest.mark.asyncio
    async def test_only_targets_teach_themselves(self):
        """Requirements found after the first round stay untaught."""
        source = FakeRelationshipSource(
            tutors={"1": [("2", 0)]},
            requirements={"2": [("3", 0)]},
        )
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.requirement_map["3"].tutor_ids == []
        assert "3" not in graph.tutor_map

        compute_learning_path(graph.page_ids, graph.requirement_map, graph.tutor_map)
        assert graph.requirement_map["3"].best_tutor_id == ""

    @pytest.mark.asyncio
    async def test_transitive_expansion(self):
        source = _chain_source(4)
        graph = await LearningGraphBuilder(source).build(["r0"])

        assert set(graph.requirement_map) == {"r0", "r1", "r2", "r3", "r4"}
        assert set(graph.tutor_map) == {"t0", "t1", "t2", "t3"}
        assert graph.tutor_map["t2"].requirement_ids == ["r3"]
        assert source.tutor_queries == [["r0"], ["r1"], ["r2"], ["r3"], ["r4"]]

    @pytest.mark.asyncio
    async def test_lens_index_recorded(self):
        source = FakeRelationshipSource(
            tutors={"1": [("lens", 2)]},
            requirements={"lens": [("9", 1)]},
        )
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.tutor_map["lens"].lens_index == 2
        assert graph.requirement_map["9"].lens_index == 1
        assert graph.requirement_map["1"].lens_index == 0

    @pytest.mark.asyncio
    async def test_known_tutor_not_reloaded(self):
        """A tutor shared by two requirements is queried once."""
        source = FakeRelationshipSource(
            tutors={"1": [("t", 0)], "2": [("t", 0)], "3": [("t", 0)]},
            requirements={"t": [("3", 0)]},
        )
        graph = await LearningGraphBuilder(source).build(["1", "2"])

        assert source.requirement_queries == [["t"]]
        assert graph.requirement_map["3"].tutor_ids == ["t"]
        assert graph.tutor_map["t"].requirement_ids == ["3"]

    @pytest.mark.asyncio
    async def test_duplicate_tutor_edges_kept(self):
        source = FakeRelationshipSource(tutors={"1": [("2", 0), ("2", 0)]})
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.requirement_map["1"].tutor_ids == ["2", "2"]
        assert list(graph.tutor_map) == ["2"]

    @pytest.mark.asyncio
    async def test_round_limit(self, caplog):
        source = _chain_source(10)
        with caplog.at_level("WARNING"):
            graph = await LearningGraphBuilder(source, max_rounds=3).build(["r0"])

        assert len(source.tutor_queries) == 3
        assert set(graph.tutor_map) == {"t0", "t1", "t2"}
        # discovered in the last round, never expanded
        assert graph.requirement_map["r3"].tutor_ids == []
        assert any("round limit" in r.getMessage() for r in caplog.records)

        compute_learning_path(graph.page_ids, graph.requirement_map, graph.tutor_map)
        assert all(req.processed for req in graph.requirement_map.values())

    @pytest.mark.asyncio
    async def test_cycle_stops_expansion(self):
        source = FakeRelationshipSource(
            tutors={"A": [("B", 0)]},
            requirements={"B": [("A", 0)]},
        )
        graph = await LearningGraphBuilder(source).build(["A"])

        assert len(source.tutor_queries) == 1
        assert graph.tutor_map["B"].requirement_ids == ["A"]
        assert graph.requirement_map["A"].tutor_ids == ["B"]

    @pytest.mark.asyncio
    async def test_mastered_requirements_skipped(self):
        source = FakeRelationshipSource(
            tutors={"1": [("2", 0)]},
            requirements={"2": [("3", 0), ("4", 0)]},
            mastered=["3"],
        )
        graph = await LearningGraphBuilder(source).build(["1"])

        assert graph.tutor_map["2"].requirement_ids == ["4"]
        assert "3" not in graph.requirement_map

    @pytest.mark.asyncio
    async def test_source_error_propagates(self):
        source = FailingRelationshipSource(tutors={"1": [("2", 0)]})
        with pytest.raises(ConnectionError):
            await LearningGraphBuilder(source).build(["1"])

    @pytest.mark.asyncio
    async def test_duplicate_targets_collapsed(self):
        source = FakeRelationshipSource(tutors={"1": [("2", 0)]})
        graph = await LearningGraphBuilder(source).build(["1", "1"])

        assert graph.page_ids == ["1"]
        assert source.tutor_queries == [["1"]]

    @pytest.mark.asyncio
    async def test_no_targets(self):
        source = FakeRelationshipSource()
        graph = await LearningGraphBuilder(source).build([])

        assert graph.node_count == 0
        assert source.tutor_queries == []
