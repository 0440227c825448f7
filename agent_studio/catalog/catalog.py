"""Capability Catalog.

Static source of truth mapping agent id to the agents it requires, the
agents it conflicts with, the capabilities it provides and its priority.
The catalog is immutable once constructed; tests and callers build their
own instances instead of mutating a shared one.

Example usage:
    ```python
    from agent_studio.catalog import CapabilityCatalog

    catalog = CapabilityCatalog.default()

    descriptor = catalog.lookup("marketplace-architect")
    if descriptor is None:
        print("unregistered agent")

    print(catalog.providers_of("payment_integration"))
    ```
"""

import json
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError

from .defaults import DEFAULT_AGENTS
from .models import (
    AdditionValidation,
    AgentDescriptor,
    AgentDomain,
    CapabilitySuggestion,
    CatalogError,
)

logger = structlog.get_logger(__name__)


class CatalogEntry(BaseModel):
    """Schema for one agent in a catalog file."""

    requires: list[str] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)
    provides: list[str] = Field(default_factory=list)
    priority: int = 5
    description: str = ""
    domain: Optional[AgentDomain] = None


class CatalogFile(BaseModel):
    """Schema for a catalog file."""

    agents: dict[str, CatalogEntry]


class CapabilityCatalog:
    """Read-only registry of agent descriptors.

    Unknown ids are not errors: `lookup` returns None so the caller can
    tell the unregistered case apart, and `describe` synthesizes an
    empty leaf descriptor so dependency closure never breaks.
    """

    def __init__(self, descriptors: Iterable[AgentDescriptor]):
        """Initialize the catalog.

        Args:
            descriptors: Agent descriptors; ids must be unique

        Raises:
            CatalogError: If an id is declared twice
        """
        agents: dict[str, AgentDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.id in agents:
                raise CatalogError(f"Duplicate agent id in catalog: {descriptor.id}")
            agents[descriptor.id] = descriptor

        self._agents: Mapping[str, AgentDescriptor] = MappingProxyType(agents)

    @classmethod
    def default(cls) -> "CapabilityCatalog":
        """Create a catalog from the built-in agent table."""
        return cls(DEFAULT_AGENTS)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CapabilityCatalog":
        """Create a catalog from a parsed catalog document.

        Args:
            data: Mapping with an `agents` key (id -> entry)

        Raises:
            CatalogError: If the document does not match the schema
        """
        try:
            parsed = CatalogFile.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog data: {e}") from e

        return cls(
            AgentDescriptor(
                id=agent_id,
                requires=tuple(entry.requires),
                conflicts=tuple(entry.conflicts),
                provides=tuple(entry.provides),
                priority=entry.priority,
                description=entry.description,
                domain=entry.domain,
            )
            for agent_id, entry in parsed.agents.items()
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "CapabilityCatalog":
        """Load a catalog from a YAML or JSON file.

        Args:
            path: Path to the catalog file

        Raises:
            CatalogError: If the file is missing or malformed
        """
        path = Path(path)
        if not path.is_file():
            raise CatalogError(f"Catalog file not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text)
            else:
                data = yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise CatalogError(f"Could not parse catalog file {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise CatalogError(f"Catalog file {path} must contain a mapping")

        catalog = cls.from_mapping(data)
        logger.info("Catalog loaded", path=str(path), agent_count=len(catalog))
        return catalog

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def lookup(self, agent_id: str) -> Optional[AgentDescriptor]:
        """Return the descriptor for an agent, or None if unregistered."""
        return self._agents.get(agent_id)

    def describe(self, agent_id: str) -> AgentDescriptor:
        """Return the registered descriptor or an empty leaf descriptor."""
        descriptor = self.lookup(agent_id)
        if descriptor is None:
            return AgentDescriptor.leaf(agent_id)
        return descriptor

    def priority_of(self, agent_id: str) -> int:
        """Priority of an agent; unregistered agents get the default."""
        return self.describe(agent_id).priority

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __iter__(self) -> Iterator[AgentDescriptor]:
        return iter(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)

    @property
    def agent_ids(self) -> list[str]:
        return list(self._agents)

    # -------------------------------------------------------------------------
    # Capability queries
    # -------------------------------------------------------------------------

    def available_capabilities(self, agent_ids: Iterable[str]) -> list[str]:
        """Capabilities provided by a set of agents, first-seen order."""
        capabilities: dict[str, None] = {}
        for agent_id in agent_ids:
            descriptor = self.lookup(agent_id)
            if descriptor is not None:
                capabilities.update(dict.fromkeys(descriptor.provides))
        return list(capabilities)

    def providers_of(self, capability: str) -> list[str]:
        """Agent ids that provide a capability, in catalog order."""
        return [d.id for d in self._agents.values() if capability in d.provides]

    def suggest_agents_for_capabilities(
        self,
        required_capabilities: Iterable[str],
        current_agents: Iterable[str],
    ) -> list[CapabilitySuggestion]:
        """Suggest agents that would fill missing capabilities.

        Args:
            required_capabilities: Capabilities the project needs
            current_agents: Agents already selected

        Returns:
            Suggestions sorted by priority (highest first), then agent id
        """
        current = list(current_agents)
        covered = set(self.available_capabilities(current))
        suggestions = []

        for capability in dict.fromkeys(required_capabilities):
            if capability in covered:
                continue
            for agent_id in self.providers_of(capability):
                if agent_id not in current:
                    suggestions.append(CapabilitySuggestion(
                        agent_id=agent_id,
                        capability=capability,
                        priority=self.priority_of(agent_id),
                    ))

        return sorted(suggestions, key=lambda s: (-s.priority, s.agent_id, s.capability))

    def validate_agent_addition(
        self,
        agent_id: str,
        existing_agents: Iterable[str],
    ) -> AdditionValidation:
        """Check whether an agent can join an existing agent set.

        An agent is invalid when one of its requirements is absent or
        when it conflicts with an agent already present (in either
        direction).
        """
        existing = list(existing_agents)
        validation = AdditionValidation()

        descriptor = self.lookup(agent_id)
        if descriptor is None:
            validation.warnings.append(f"No catalog entry for agent {agent_id}")
            return validation

        for dependency in descriptor.requires:
            if dependency not in existing:
                validation.missing_dependencies.append(dependency)

        for other in existing:
            other_descriptor = self.lookup(other)
            declared_by_other = other_descriptor is not None and agent_id in other_descriptor.conflicts
            if other in descriptor.conflicts or declared_by_other:
                validation.conflicts.append(other)

        validation.valid = not (validation.missing_dependencies or validation.conflicts)
        return validation
