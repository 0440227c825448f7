"""Data models for the capability catalog.

- AgentDomain: Coarse domain an agent belongs to
- AgentDescriptor: One named capability provider
- AdditionValidation: Result of checking whether an agent can be added
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional


class CatalogError(Exception):
    """Raised when catalog data is malformed."""

    pass


class AgentDomain(str, Enum):
    """Coarse domains used for generic fallback agents."""

    ARCHITECTURE = "architecture"
    DEVELOPMENT = "development"
    SECURITY = "security"
    ANALYSIS = "analysis"
    TESTING = "testing"
    GENERAL = "general"  # No generic substitute exists for this domain


def _unique(values: Iterable[str]) -> tuple[str, ...]:
    """Deduplicate while keeping declaration order."""
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class AgentDescriptor:
    """A named capability provider.

    Sequences keep their declaration order so that graph construction
    and therefore the final activation order are reproducible.

    Attributes:
        id: Unique, stable identifier (e.g. "marketplace-architect")
        requires: Agent ids that must be present and activated first
        conflicts: Agent ids that must not be present at the same time
        provides: Capability tags this agent satisfies
        priority: Used only to break direct conflicts (higher wins)
        description: Human-readable summary for the generated bundle
        domain: Explicit domain tag; overrides name-based classification
    """

    id: str
    requires: tuple[str, ...] = ()
    conflicts: tuple[str, ...] = ()
    provides: tuple[str, ...] = ()
    priority: int = 5
    description: str = ""
    domain: Optional[AgentDomain] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise CatalogError("Agent id must be a non-empty string")

        object.__setattr__(self, "requires", _unique(self.requires))
        object.__setattr__(self, "conflicts", _unique(self.conflicts))
        object.__setattr__(self, "provides", _unique(self.provides))

        if self.id in self.requires:
            raise CatalogError(f"Agent {self.id} cannot require itself")
        if self.id in self.conflicts:
            raise CatalogError(f"Agent {self.id} cannot conflict with itself")

    @classmethod
    def leaf(cls, agent_id: str) -> "AgentDescriptor":
        """Create an empty descriptor for an unregistered agent."""
        return cls(id=agent_id, description=f"Specialized agent: {agent_id}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "requires": list(self.requires),
            "conflicts": list(self.conflicts),
            "provides": list(self.provides),
            "priority": self.priority,
            "description": self.description,
            "domain": self.domain.value if self.domain else None,
        }


@dataclass
class AdditionValidation:
    """Result of validating that an agent can join an existing set."""

    valid: bool = True
    conflicts: list[str] = field(default_factory=list)
    missing_dependencies: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CapabilitySuggestion:
    """An agent that could fill a missing capability."""

    agent_id: str
    capability: str
    priority: int
