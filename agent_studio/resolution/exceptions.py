"""Error taxonomy for agent resolution."""

from typing import Optional, Sequence


class ResolutionError(Exception):
    """Base exception for agent resolution errors."""

    pass


class CircularDependencyError(ResolutionError):
    """Raised when the requires-graph contains a cycle.

    Fatal for the resolution request: the catalog data is at fault.
    """

    def __init__(self, agent_id: str, cycle: Optional[Sequence[str]] = None):
        self.agent_id = agent_id
        self.cycle = list(cycle or [])
        path = " -> ".join(self.cycle) if self.cycle else agent_id
        super().__init__(f"Circular dependency detected at agent {agent_id}: {path}")


class InvalidProfileError(ResolutionError):
    """Raised when the project profile or agent list is unusable."""

    pass


class ConfigurationRejectedError(ResolutionError):
    """Raised when a reviewer rejects a low-confidence configuration."""

    def __init__(self, message: str, confidence: float):
        super().__init__(message)
        self.confidence = confidence
