"""Tests for ConflictDetector and ConflictResolver."""

import pytest

from agent_studio.resolution import (
    ConflictDetector,
    ConflictKind,
    ConflictRecord,
    ConflictResolver,
    DependencyGraph,
    DependencyGraphBuilder,
)


@pytest.fixture
def detector():
    """Create a conflict detector."""
    return ConflictDetector()


@pytest.fixture
def resolver():
    """Create a conflict resolver."""
    return ConflictResolver()


@pytest.fixture
def build(make_catalog):
    """Build a graph from catalog data and requested ids."""

    def _build(agents: dict, requested: list[str]) -> DependencyGraph:
        return DependencyGraphBuilder(make_catalog(agents)).build(requested)

    return _build


# =============================================================================
# Detection
# =============================================================================


class TestConflictDetector:
    """Tests for conflict detection."""

    def test_direct_conflict(self, marketplace_catalog, detector):
        """Test a declared conflict between present agents is reported."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(
            ["marketplace-architect", "simple-architect"]
        )

        conflicts = detector.detect(graph)

        assert conflicts == [
            ConflictRecord(ConflictKind.DIRECT, "marketplace-architect", "simple-architect"),
        ]

    def test_conflict_with_absent_agent_ignored(self, marketplace_catalog, detector):
        """Test conflicts with agents outside the graph are not reported."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(["marketplace-architect"])

        assert detector.detect(graph) == []

    def test_symmetric_declarations_both_reported(self, build, detector):
        """Test each declaration yields its own record."""
        graph = build(
            {"a": {"conflicts": ("b",)}, "b": {"conflicts": ("a",)}},
            ["a", "b"],
        )

        conflicts = detector.detect_direct(graph)

        assert [(c.agent_a, c.agent_b) for c in conflicts] == [("a", "b"), ("b", "a")]

    def test_capability_overlap(self, build, detector):
        """Test shared capabilities are reported once per pair."""
        graph = build(
            {
                "a": {"provides": ("x", "y", "z")},
                "b": {"provides": ("z", "y")},
                "c": {"provides": ("w",)},
            },
            ["a", "b", "c"],
        )

        conflicts = detector.detect(graph)

        assert conflicts == [
            ConflictRecord(ConflictKind.CAPABILITY_OVERLAP, "a", "b", ("y", "z")),
        ]

    def test_direct_records_precede_overlaps(self, build, detector):
        """Test the direct pass runs before the overlap pass."""
        graph = build(
            {
                "a": {"provides": ("x",)},
                "b": {"provides": ("x",), "conflicts": ("c",)},
                "c": {},
            },
            ["a", "b", "c"],
        )

        kinds = [c.kind for c in detector.detect(graph)]

        assert kinds == [ConflictKind.DIRECT, ConflictKind.CAPABILITY_OVERLAP]


# =============================================================================
# Resolution
# =============================================================================


class TestConflictResolver:
    """Tests for conflict resolution policy."""

    def test_lower_priority_removed(self, marketplace_catalog, detector, resolver):
        """Test the lower-priority agent is dropped with one warning."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(
            ["marketplace-architect", "simple-architect"]
        )

        resolution = resolver.resolve(detector.detect(graph), graph)

        assert "simple-architect" not in resolution.graph
        assert resolution.removed == ["simple-architect"]
        assert resolution.warnings == [
            "Direct conflict between marketplace-architect and simple-architect: "
            "removed simple-architect, kept marketplace-architect"
        ]

    def test_input_graph_unmodified(self, marketplace_catalog, detector, resolver):
        """Test resolution works on a copy."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(
            ["marketplace-architect", "simple-architect"]
        )

        resolver.resolve(detector.detect(graph), graph)

        assert "simple-architect" in graph

    def test_equal_priority_keeps_earlier_id(self, build, detector, resolver):
        """Test ties keep the lexicographically earlier id."""
        graph = build(
            {"beta": {"conflicts": ("alpha",)}, "alpha": {}},
            ["beta", "alpha"],
        )

        resolution = resolver.resolve(detector.detect(graph), graph)

        assert resolution.graph.agent_ids == ["alpha"]
        assert resolution.removed == ["beta"]

    def test_symmetric_records_resolved_once(self, build, detector, resolver):
        """Test duplicate symmetric records produce a single removal."""
        graph = build(
            {"a": {"conflicts": ("b",), "priority": 3}, "b": {"conflicts": ("a",), "priority": 6}},
            ["a", "b"],
        )

        resolution = resolver.resolve(detector.detect(graph), graph)

        assert resolution.removed == ["a"]
        assert len(resolution.warnings) == 1
        assert len(resolution.skipped) == 1

    def test_records_with_removed_agents_skipped(self, build, detector, resolver):
        """Test a later record naming a removed agent is treated as resolved."""
        graph = build(
            {
                "a": {"conflicts": ("b",), "priority": 10},
                "b": {"conflicts": ("c",), "priority": 5},
                "c": {"priority": 1},
            },
            ["a", "b", "c"],
        )

        resolution = resolver.resolve(detector.detect(graph), graph)

        assert resolution.graph.agent_ids == ["a", "c"]
        assert resolution.removed == ["b"]

    def test_overlap_keeps_both_agents(self, build, detector, resolver):
        """Test capability overlaps never remove agents."""
        graph = build(
            {"a": {"provides": ("x", "y")}, "b": {"provides": ("y",)}},
            ["a", "b"],
        )

        resolution = resolver.resolve(detector.detect(graph), graph)

        assert resolution.graph.agent_ids == ["a", "b"]
        assert resolution.removed == []
        assert resolution.warnings == ["Capability overlap between a and b: y"]

    def test_resolution_is_idempotent(self, build, detector, resolver):
        """Test resolving an already-resolved graph changes nothing."""
        graph = build(
            {
                "a": {"conflicts": ("b",), "priority": 4},
                "b": {"conflicts": ("a",), "priority": 4},
                "c": {"conflicts": ("a",), "priority": 9},
            },
            ["a", "b", "c"],
        )
        conflicts = detector.detect_direct(graph)

        first = resolver.resolve(conflicts, graph)
        second = resolver.resolve(conflicts, first.graph)

        assert first.removed
        assert second.removed == []
        assert second.warnings == []
        assert second.graph.agent_ids == first.graph.agent_ids

    def test_overlap_warning_not_repeated(self, build, detector, resolver):
        """Test re-resolving a graph with overlaps repeats no warnings."""
        graph = build(
            {
                "a": {"provides": ("x",), "conflicts": ("c",), "priority": 7},
                "b": {"provides": ("x",)},
                "c": {"priority": 2},
            },
            ["a", "b", "c"],
        )

        first = resolver.resolve(detector.detect(graph), graph)
        second = resolver.resolve(detector.detect(first.graph), first.graph)

        assert first.warnings == [
            "Direct conflict between a and c: removed c, kept a",
            "Capability overlap between a and b: x",
        ]
        assert second.removed == []
        assert second.warnings == []
        assert second.graph.agent_ids == ["a", "b"]

    def test_overlap_acknowledgement_not_shared_with_input(self, build, detector, resolver):
        """Test the input graph is left unmodified by overlap resolution."""
        graph = build({"a": {"provides": ("x",)}, "b": {"provides": ("x",)}}, ["a", "b"])

        resolver.resolve(detector.detect(graph), graph)

        assert graph.acknowledged_overlaps == set()
        assert resolver.resolve(detector.detect(graph), graph).warnings == [
            "Capability overlap between a and b: x"
        ]

    def test_pick_winner(self, build):
        """Test winner selection by priority."""
        graph = build({"a": {"priority": 2}, "b": {"priority": 7}}, ["a", "b"])

        assert ConflictResolver.pick_winner("a", "b", graph) == ("b", "a")
