"""Agent dependency resolution: graph building, conflicts, ordering."""

from .conflict_detector import ConflictDetector
from .conflict_resolver import ConflictResolver
from .exceptions import (
    CircularDependencyError,
    ConfigurationRejectedError,
    InvalidProfileError,
    ResolutionError,
)
from .graph_builder import DependencyGraphBuilder
from .models import (
    ConflictKind,
    ConflictRecord,
    ConflictResolution,
    DependencyGraph,
    ResolutionResult,
)
from .resolver import AgentDependencyResolver, DependencyResolution, validate_requested_ids
from .topological_sorter import TopologicalSorter

__all__ = [
    # Models
    "ConflictKind",
    "ConflictRecord",
    "ConflictResolution",
    "DependencyGraph",
    "ResolutionResult",
    # Errors
    "CircularDependencyError",
    "ConfigurationRejectedError",
    "InvalidProfileError",
    "ResolutionError",
    # Pipeline
    "AgentDependencyResolver",
    "ConflictDetector",
    "ConflictResolver",
    "DependencyGraphBuilder",
    "DependencyResolution",
    "TopologicalSorter",
    "validate_requested_ids",
]
