"""Conflict Detector.

Scans a closed dependency graph for direct conflict declarations and for
capability overlaps between agents.
"""

from itertools import combinations

import structlog

from .models import ConflictKind, ConflictRecord, DependencyGraph

logger = structlog.get_logger(__name__)


class ConflictDetector:
    """Finds conflicts between the agents of a dependency graph."""

    def __init__(self) -> None:
        self.log = logger.bind(component="conflict_detector")

    def detect(self, graph: DependencyGraph) -> list[ConflictRecord]:
        """Detect direct conflicts and capability overlaps.

        Direct conflicts are reported per declaration, so a symmetric
        declaration yields two records. Overlaps are reported once per
        unordered pair. All direct records precede all overlap records,
        and both passes follow graph key order.

        Args:
            graph: Dependency graph to scan

        Returns:
            Ordered list of conflict records
        """
        conflicts = self.detect_direct(graph) + self.detect_overlaps(graph)

        if conflicts:
            self.log.info(
                "Conflicts detected",
                direct=sum(1 for c in conflicts if c.kind == ConflictKind.DIRECT),
                overlaps=sum(1 for c in conflicts if c.kind == ConflictKind.CAPABILITY_OVERLAP),
            )
        return conflicts

    def detect_direct(self, graph: DependencyGraph) -> list[ConflictRecord]:
        records = []
        for agent_id in graph:
            for other in graph[agent_id].conflicts:
                if other in graph:
                    records.append(ConflictRecord(
                        kind=ConflictKind.DIRECT,
                        agent_a=agent_id,
                        agent_b=other,
                    ))
        return records

    def detect_overlaps(self, graph: DependencyGraph) -> list[ConflictRecord]:
        records = []
        for a, b in combinations(graph.descriptors(), 2):
            other_provides = set(b.provides)
            shared = tuple(cap for cap in a.provides if cap in other_provides)
            if shared:
                records.append(ConflictRecord(
                    kind=ConflictKind.CAPABILITY_OVERLAP,
                    agent_a=a.id,
                    agent_b=b.id,
                    shared_capabilities=shared,
                ))
        return records
