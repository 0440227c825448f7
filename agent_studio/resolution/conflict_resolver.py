"""Conflict Resolver.

Applies one policy per conflict kind:
- DIRECT: the lower-priority agent is removed (ties keep the
  lexicographically earlier id)
- CAPABILITY_OVERLAP: both agents are kept and a warning is emitted so a
  human can decide later

Removing an agent does not cascade to its dependents. Callers check
`DependencyGraph.missing_requirements()` afterwards and route any gap
through the fallback manager.
"""

from collections.abc import Callable, Iterable

import structlog

from .models import (
    ConflictKind,
    ConflictRecord,
    ConflictResolution,
    DependencyGraph,
)

logger = structlog.get_logger(__name__)

ConflictStrategy = Callable[[ConflictRecord, DependencyGraph, ConflictResolution], None]


class ConflictResolver:
    """Resolves detected conflicts against a dependency graph.

    Records are applied in detection order. A record whose agents are no
    longer both in the graph was already resolved and is skipped. Reported
    overlaps are remembered on the graph, so re-running the resolver on its
    own output emits no further warnings.
    """

    def __init__(self) -> None:
        self.log = logger.bind(component="conflict_resolver")
        self._strategies: dict[ConflictKind, ConflictStrategy] = {
            ConflictKind.DIRECT: self._resolve_direct,
            ConflictKind.CAPABILITY_OVERLAP: self._resolve_overlap,
        }

    def resolve(
        self,
        conflicts: Iterable[ConflictRecord],
        graph: DependencyGraph,
    ) -> ConflictResolution:
        """Apply the resolution policy to each conflict.

        Args:
            conflicts: Conflict records in detection order
            graph: Graph the conflicts were detected on (left unmodified)

        Returns:
            ConflictResolution holding a resolved copy of the graph
        """
        resolution = ConflictResolution(graph=graph.copy())
        seen: set[tuple[ConflictKind, frozenset[str]]] = set()

        for conflict in conflicts:
            pair = frozenset((conflict.agent_a, conflict.agent_b))
            key = (conflict.kind, pair)
            still_present = conflict.agent_a in resolution.graph and conflict.agent_b in resolution.graph
            acknowledged = (
                conflict.kind is ConflictKind.CAPABILITY_OVERLAP and pair in resolution.graph.acknowledged_overlaps
            )

            if key in seen or not still_present or acknowledged:
                resolution.skipped.append(conflict)
                continue

            seen.add(key)
            self._strategies[conflict.kind](conflict, resolution.graph, resolution)
            resolution.applied.append(conflict)

        return resolution

    def _resolve_direct(
        self,
        conflict: ConflictRecord,
        graph: DependencyGraph,
        resolution: ConflictResolution,
    ) -> None:
        keep, drop = self.pick_winner(conflict.agent_a, conflict.agent_b, graph)

        graph.remove(drop)
        resolution.removed.append(drop)
        resolution.warnings.append(
            f"Direct conflict between {conflict.agent_a} and {conflict.agent_b}: "
            f"removed {drop}, kept {keep}"
        )
        self.log.warning(
            "Direct conflict resolved",
            kept=keep,
            removed=drop,
            kept_priority=graph[keep].priority,
        )

    def _resolve_overlap(
        self,
        conflict: ConflictRecord,
        graph: DependencyGraph,
        resolution: ConflictResolution,
    ) -> None:
        shared = ", ".join(conflict.shared_capabilities)
        graph.acknowledged_overlaps.add(frozenset((conflict.agent_a, conflict.agent_b)))
        resolution.warnings.append(
            f"Capability overlap between {conflict.agent_a} and {conflict.agent_b}: {shared}"
        )
        self.log.info(
            "Capability overlap kept for review",
            agent_a=conflict.agent_a,
            agent_b=conflict.agent_b,
            shared_capabilities=list(conflict.shared_capabilities),
        )

    @staticmethod
    def pick_winner(agent_a: str, agent_b: str, graph: DependencyGraph) -> tuple[str, str]:
        """Return (kept, removed) for a direct conflict."""
        priority_a = graph[agent_a].priority
        priority_b = graph[agent_b].priority

        if priority_a != priority_b:
            return (agent_a, agent_b) if priority_a > priority_b else (agent_b, agent_a)
        return (agent_a, agent_b) if agent_a < agent_b else (agent_b, agent_a)
