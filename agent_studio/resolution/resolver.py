"""Agent Dependency Resolver.

Facade over the resolution pipeline:

    requested ids -> DependencyGraphBuilder -> ConflictDetector
                  -> ConflictResolver -> TopologicalSorter -> ordered ids

Example usage:
    ```python
    from agent_studio.catalog import CapabilityCatalog
    from agent_studio.resolution import AgentDependencyResolver

    resolver = AgentDependencyResolver(CapabilityCatalog.default())
    resolved = await resolver.resolve(["marketplace-architect"])
    print(resolved.ordered_agents)
    ```
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

import structlog

from ..catalog import CapabilityCatalog
from .conflict_detector import ConflictDetector
from .conflict_resolver import ConflictResolver
from .exceptions import InvalidProfileError
from .graph_builder import DependencyGraphBuilder
from .models import ConflictRecord, DependencyGraph
from .topological_sorter import TopologicalSorter

logger = structlog.get_logger(__name__)


@dataclass
class DependencyResolution:
    """Intermediate and final products of one resolution run."""

    graph: DependencyGraph
    conflicts: list[ConflictRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    resolved_conflicts: int = 0
    ordered_agents: list[str] = field(default_factory=list)


class AgentDependencyResolver:
    """Resolves a requested agent set into an ordered, conflict-free list.

    All collaborators are injected so tests can run against isolated
    catalogs.
    """

    def __init__(
        self,
        catalog: CapabilityCatalog,
        builder: Optional[DependencyGraphBuilder] = None,
        detector: Optional[ConflictDetector] = None,
        conflict_resolver: Optional[ConflictResolver] = None,
        sorter: Optional[TopologicalSorter] = None,
    ):
        self.catalog = catalog
        self.builder = builder or DependencyGraphBuilder(catalog)
        self.detector = detector or ConflictDetector()
        self.conflict_resolver = conflict_resolver or ConflictResolver()
        self.sorter = sorter or TopologicalSorter()
        self.log = logger.bind(component="dependency_resolver")

    def build_resolved_graph(self, requested_ids: Iterable[str]) -> DependencyResolution:
        """Build the graph and apply conflict resolution, without ordering.

        Raises:
            InvalidProfileError: If `requested_ids` is not a collection of ids
        """
        validate_requested_ids(requested_ids)
        graph = self.builder.build(requested_ids)
        conflicts = self.detector.detect(graph)
        resolution = self.conflict_resolver.resolve(conflicts, graph)

        warnings = [
            f"Agent {agent_id} is not registered in the catalog; treated as a leaf"
            for agent_id in graph.unregistered
        ]
        warnings.extend(resolution.warnings)

        return DependencyResolution(
            graph=resolution.graph,
            conflicts=conflicts,
            warnings=warnings,
            removed=resolution.removed,
            resolved_conflicts=len(resolution.applied),
        )

    def order(self, graph: DependencyGraph) -> list[str]:
        """Topologically order a resolved graph."""
        return self.sorter.sort(graph)

    def resolve_sync(self, requested_ids: Iterable[str]) -> DependencyResolution:
        """Run the full pipeline synchronously."""
        resolution = self.build_resolved_graph(requested_ids)
        resolution.ordered_agents = self.order(resolution.graph)

        self.log.info(
            "Agent dependencies resolved",
            agent_count=len(resolution.ordered_agents),
            removed=resolution.removed,
            conflicts=len(resolution.conflicts),
        )
        return resolution

    async def resolve(self, requested_ids: Iterable[str]) -> DependencyResolution:
        """Run the full pipeline.

        Raises:
            CircularDependencyError: If the requires-graph has a cycle
        """
        return self.resolve_sync(requested_ids)


def validate_requested_ids(requested_ids: object) -> None:
    """Fail fast on anything that is not a collection of agent id strings."""
    if isinstance(requested_ids, (str, bytes)) or not isinstance(requested_ids, Iterable):
        raise InvalidProfileError(
            f"Requested agents must be a collection of agent ids, got {type(requested_ids).__name__}"
        )
    if isinstance(requested_ids, Iterator):
        raise InvalidProfileError("Requested agents must be a collection, not a one-shot iterator")

    invalid = [agent_id for agent_id in requested_ids if not isinstance(agent_id, str) or not agent_id]
    if invalid:
        raise InvalidProfileError(f"Invalid agent ids: {invalid!r}")
