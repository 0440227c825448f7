"""Topological Sorter.

Orders agents so that every agent follows all of the agents it requires,
and groups them into activation stages by dependency depth.
"""

from enum import Enum

import networkx as nx
import structlog

from .exceptions import CircularDependencyError
from .models import DependencyGraph

logger = structlog.get_logger(__name__)


class _Mark(Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


class TopologicalSorter:
    """Depth-first topological sort with three-color marking.

    Roots are taken in graph key order and requirements in declaration
    order, so the same graph always yields the same sequence.
    """

    def __init__(self) -> None:
        self.log = logger.bind(component="topological_sorter")

    def sort(self, graph: DependencyGraph) -> list[str]:
        """Order the graph so requirements precede their dependents.

        Requirements that are not in the graph are ignored.

        Args:
            graph: Dependency graph to order

        Returns:
            Agent ids in activation order

        Raises:
            CircularDependencyError: If a back-edge into an in-progress
                node is found
        """
        marks = {agent_id: _Mark.UNVISITED for agent_id in graph}
        ordered: list[str] = []
        path: list[str] = []

        def visit(agent_id: str) -> None:
            mark = marks[agent_id]
            if mark is _Mark.DONE:
                return
            if mark is _Mark.IN_PROGRESS:
                cycle = path[path.index(agent_id):] + [agent_id]
                self.log.error("Circular dependency detected", agent_id=agent_id, cycle=cycle)
                raise CircularDependencyError(agent_id, cycle)

            marks[agent_id] = _Mark.IN_PROGRESS
            path.append(agent_id)
            for dependency in graph.present_requirements(agent_id):
                visit(dependency)
            path.pop()

            marks[agent_id] = _Mark.DONE
            ordered.append(agent_id)

        for agent_id in graph:
            if marks[agent_id] is _Mark.UNVISITED:
                visit(agent_id)

        return ordered

    def stages(self, graph: DependencyGraph, order: list[str] | None = None) -> list[list[str]]:
        """Group agents by dependency depth.

        Agents in the same stage have no requirements on each other and
        can be activated together. Within a stage, agents keep their
        position from `order`.

        Args:
            graph: Dependency graph
            order: Activation order (computed with `sort` if omitted)

        Returns:
            Stages from depth 0 upwards
        """
        order = order if order is not None else self.sort(graph)
        dag = graph.to_networkx()
        if not nx.is_directed_acyclic_graph(dag):
            raise CircularDependencyError(next(iter(nx.find_cycle(dag)))[0])

        depths: dict[str, int] = {}
        for agent_id in order:
            predecessors = list(dag.predecessors(agent_id))
            depths[agent_id] = max((depths[p] for p in predecessors), default=-1) + 1

        max_depth = max(depths.values(), default=-1)
        groups: list[list[str]] = [[] for _ in range(max_depth + 1)]
        for agent_id in order:
            groups[depths[agent_id]].append(agent_id)
        return groups
