"""Tests for DependencyGraphBuilder."""

import pytest

from agent_studio.resolution import DependencyGraphBuilder


class TestBuild:
    """Tests for building closed dependency graphs."""

    def test_closure_scenario(self, marketplace_catalog):
        """Test every transitively required agent is pulled in."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(["marketplace-architect"])

        assert graph.agent_ids == [
            "marketplace-architect",
            "cultural-expert",
            "payment-specialist",
            "security-expert",
        ]
        assert graph.is_closed()

    def test_closure_for_every_default_agent(self, default_catalog):
        """Test closure holds for each agent of the built-in catalog."""
        builder = DependencyGraphBuilder(default_catalog)

        for descriptor in default_catalog:
            graph = builder.build([descriptor.id])
            assert graph.is_closed(), descriptor.id
            for agent_id in graph:
                for dependency in graph[agent_id].requires:
                    assert dependency in graph

    def test_shared_dependency_visited_once(self, make_catalog):
        """Test a diamond keeps a single node for the shared dependency."""
        catalog = make_catalog({
            "top": {"requires": ("left", "right")},
            "left": {"requires": ("base",)},
            "right": {"requires": ("base",)},
            "base": {},
        })

        graph = DependencyGraphBuilder(catalog).build(["top"])

        assert graph.agent_ids == ["top", "left", "base", "right"]

    def test_unregistered_agents_become_leaves(self, make_catalog):
        """Test unknown ids become empty leaves and are reported."""
        catalog = make_catalog({"known": {"requires": ("ghost",)}})

        graph = DependencyGraphBuilder(catalog).build(["known", "ad-hoc"])

        assert graph.agent_ids == ["known", "ghost", "ad-hoc"]
        assert graph.unregistered == ["ghost", "ad-hoc"]
        assert graph["ghost"].requires == ()
        assert graph.is_closed()

    def test_cycle_does_not_loop(self, make_catalog):
        """Test the visited set stops infinite recursion on cycles."""
        catalog = make_catalog({
            "a": {"requires": ("b",)},
            "b": {"requires": ("a",)},
        })

        graph = DependencyGraphBuilder(catalog).build(["a"])

        assert graph.agent_ids == ["a", "b"]

    def test_set_input_is_sorted(self, marketplace_catalog):
        """Test unordered inputs produce a reproducible graph."""
        builder = DependencyGraphBuilder(marketplace_catalog)

        first = builder.build({"simple-architect", "cultural-expert", "security-expert"})
        second = builder.build({"security-expert", "simple-architect", "cultural-expert"})

        assert first.agent_ids == second.agent_ids == [
            "cultural-expert",
            "security-expert",
            "simple-architect",
        ]

    def test_string_input_rejected(self, marketplace_catalog):
        """Test a bare string is not mistaken for a list of ids."""
        with pytest.raises(TypeError):
            DependencyGraphBuilder(marketplace_catalog).build("marketplace-architect")


class TestDependencyGraph:
    """Tests for DependencyGraph helpers."""

    def test_missing_requirements_after_removal(self, marketplace_catalog):
        """Test removing a node exposes the dangling requirement."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(["marketplace-architect"])
        graph.remove("payment-specialist")

        assert graph.missing_requirements() == {"marketplace-architect": ["payment-specialist"]}
        assert not graph.is_closed()
        assert graph.present_requirements("marketplace-architect") == ["cultural-expert"]

    def test_copy_is_independent(self, marketplace_catalog):
        """Test copies do not share node storage."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(["payment-specialist"])
        clone = graph.copy()
        clone.remove("security-expert")

        assert "security-expert" in graph
        assert "security-expert" not in clone

    def test_to_networkx_edges(self, marketplace_catalog):
        """Test edges run from requirement to dependent."""
        graph = DependencyGraphBuilder(marketplace_catalog).build(["payment-specialist"])

        dag = graph.to_networkx()

        assert list(dag.edges) == [("security-expert", "payment-specialist")]
        assert dag.nodes["payment-specialist"]["priority"] == 9
