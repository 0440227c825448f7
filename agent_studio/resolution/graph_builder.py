"""Dependency Graph Builder.

Pulls the requirements of a requested agent set out of the catalog,
depth-first, until the set is closed under `requires`.
"""

from collections.abc import Iterable

import structlog

from ..catalog import CapabilityCatalog
from .models import DependencyGraph

logger = structlog.get_logger(__name__)


class DependencyGraphBuilder:
    """Builds closed dependency graphs from a capability catalog.

    Example:
        builder = DependencyGraphBuilder(catalog)
        graph = builder.build(["marketplace-architect"])
        assert graph.is_closed()
    """

    def __init__(self, catalog: CapabilityCatalog):
        self.catalog = catalog
        self.log = logger.bind(component="graph_builder")

    def build(self, requested_ids: Iterable[str]) -> DependencyGraph:
        """Build the dependency graph for a requested agent set.

        Each agent is recorded before its requirements are visited, so
        graph key order is requested-agent order with requirements
        following depth-first. Unordered inputs (sets) are sorted first
        to keep the result reproducible.

        Args:
            requested_ids: Agent ids to activate

        Returns:
            Graph closed under `requires`; unregistered agents appear as
            empty leaf nodes and are listed in `graph.unregistered`
        """
        if isinstance(requested_ids, (str, bytes)):
            raise TypeError("requested_ids must be a collection of agent ids, not a string")
        if isinstance(requested_ids, (set, frozenset)):
            requested = sorted(requested_ids)
        else:
            requested = list(requested_ids)

        graph = DependencyGraph()
        visited: set[str] = set()
        unregistered: list[str] = []

        def visit(agent_id: str) -> None:
            if agent_id in visited:
                return
            visited.add(agent_id)

            descriptor = self.catalog.lookup(agent_id)
            if descriptor is None:
                unregistered.append(agent_id)
                descriptor = self.catalog.describe(agent_id)

            graph.add(descriptor)
            for dependency in descriptor.requires:
                visit(dependency)

        for agent_id in requested:
            visit(agent_id)

        graph.unregistered = unregistered

        if unregistered:
            self.log.warning(
                "Unregistered agents treated as leaf nodes",
                agents=unregistered,
            )
        self.log.debug(
            "Dependency graph built",
            requested=len(requested),
            node_count=len(graph),
        )
        return graph
