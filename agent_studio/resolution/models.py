"""Data models for dependency resolution.

- DependencyGraph: Agent id -> descriptor, closed under `requires`
- ConflictKind / ConflictRecord: Output of the conflict detector
- ConflictResolution: Output of the conflict resolver
- ResolutionResult: Final ordered agent list plus warnings and confidence
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

import networkx as nx

from ..catalog.models import AgentDescriptor
from ..fallback.models import FallbackOutcome


class DependencyGraph:
    """Insertion-ordered mapping of agent id to descriptor.

    Key order is the tie-break order of the topological sort, so it must
    only ever be produced deterministically.
    """

    def __init__(
        self,
        nodes: Optional[Iterable[AgentDescriptor]] = None,
        unregistered: Iterable[str] = (),
        acknowledged_overlaps: Iterable[frozenset[str]] = (),
    ):
        self._nodes: dict[str, AgentDescriptor] = {}
        self.unregistered: list[str] = list(dict.fromkeys(unregistered))
        # Overlapping pairs already reported by the conflict resolver
        self.acknowledged_overlaps: set[frozenset[str]] = set(acknowledged_overlaps)
        for descriptor in nodes or ():
            self.add(descriptor)

    def add(self, descriptor: AgentDescriptor) -> None:
        """Add a node; an existing id keeps its original position."""
        self._nodes[descriptor.id] = descriptor

    def remove(self, agent_id: str) -> Optional[AgentDescriptor]:
        """Remove a node and return its descriptor, if present."""
        return self._nodes.pop(agent_id, None)

    def get(self, agent_id: str) -> Optional[AgentDescriptor]:
        return self._nodes.get(agent_id)

    def __getitem__(self, agent_id: str) -> AgentDescriptor:
        return self._nodes[agent_id]

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        return f"DependencyGraph({list(self._nodes)!r})"

    @property
    def agent_ids(self) -> list[str]:
        return list(self._nodes)

    def descriptors(self) -> list[AgentDescriptor]:
        return list(self._nodes.values())

    def copy(self) -> "DependencyGraph":
        return DependencyGraph(
            self._nodes.values(),
            unregistered=self.unregistered,
            acknowledged_overlaps=self.acknowledged_overlaps,
        )

    def present_requirements(self, agent_id: str) -> list[str]:
        """Requirements of a node that are themselves in the graph."""
        return [dep for dep in self._nodes[agent_id].requires if dep in self._nodes]

    def missing_requirements(self) -> dict[str, list[str]]:
        """Map each node with absent requirements to those requirements."""
        missing: dict[str, list[str]] = {}
        for agent_id, descriptor in self._nodes.items():
            absent = [dep for dep in descriptor.requires if dep not in self._nodes]
            if absent:
                missing[agent_id] = absent
        return missing

    def is_closed(self) -> bool:
        return not self.missing_requirements()

    def to_networkx(self) -> nx.DiGraph:
        """Directed graph with an edge from each requirement to its dependent."""
        graph = nx.DiGraph()
        for agent_id, descriptor in self._nodes.items():
            graph.add_node(agent_id, priority=descriptor.priority, provides=list(descriptor.provides))
        for agent_id in self._nodes:
            for dep in self.present_requirements(agent_id):
                graph.add_edge(dep, agent_id)
        return graph


class ConflictKind(str, Enum):
    """Kinds of conflicts between agents."""

    DIRECT = "direct"  # One agent declares it cannot coexist with the other
    CAPABILITY_OVERLAP = "capability_overlap"  # Both provide the same capability


@dataclass(frozen=True)
class ConflictRecord:
    """A conflict found in a dependency graph."""

    kind: ConflictKind
    agent_a: str
    agent_b: str
    shared_capabilities: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "agent_a": self.agent_a,
            "agent_b": self.agent_b,
            "shared_capabilities": list(self.shared_capabilities),
        }


@dataclass
class ConflictResolution:
    """Outcome of applying the conflict resolution policy."""

    graph: DependencyGraph
    warnings: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    applied: list[ConflictRecord] = field(default_factory=list)
    skipped: list[ConflictRecord] = field(default_factory=list)


@dataclass
class ResolutionResult:
    """Final result of resolving a project's agents.

    Attributes:
        ordered_agents: Dependency-respecting, conflict-free activation order
        warnings: Human-readable warnings in the order they were raised
        confidence: Score in [0, 1]; below the threshold needs review
        needs_manual_review: Confidence fell below the validation threshold
        manually_reviewed: A review handler accepted the result
        domain: Detected project domain
        removed_agents: Agents dropped by conflict resolution
        unregistered_agents: Agents with no catalog entry
        missing_capabilities: Required capabilities no agent provides
        activation_stages: Agents grouped by dependency depth
        fallbacks: Fallback outcome per unavailable dependency
        from_cache: Result was served by the configuration cache
    """

    ordered_agents: list[str]
    warnings: list[str] = field(default_factory=list)
    confidence: float = 1.0
    needs_manual_review: bool = False
    manually_reviewed: bool = False
    domain: Optional[str] = None
    removed_agents: list[str] = field(default_factory=list)
    unregistered_agents: list[str] = field(default_factory=list)
    missing_capabilities: list[str] = field(default_factory=list)
    activation_stages: list[list[str]] = field(default_factory=list)
    fallbacks: dict[str, FallbackOutcome] = field(default_factory=dict)
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "ordered_agents": list(self.ordered_agents),
            "warnings": list(self.warnings),
            "confidence": round(self.confidence, 4),
            "needs_manual_review": self.needs_manual_review,
            "manually_reviewed": self.manually_reviewed,
            "domain": self.domain,
            "removed_agents": list(self.removed_agents),
            "unregistered_agents": list(self.unregistered_agents),
            "missing_capabilities": list(self.missing_capabilities),
            "activation_stages": [list(stage) for stage in self.activation_stages],
            "fallbacks": {agent: outcome.to_dict() for agent, outcome in self.fallbacks.items()},
            "from_cache": self.from_cache,
        }
