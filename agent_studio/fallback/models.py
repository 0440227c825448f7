"""Data models for the fallback chain.

This module defines the structures produced when a required agent cannot
be activated:
- FallbackKind: Which strategy produced an outcome
- AlternativeAgent: A single substitute agent from the alternatives table
- GenericAgent: A generic per-domain agent with reduced capabilities
- PartialFunctionality: A reduced feature set for the missing agent
- ManualEscalation: Terminal outcome with an intervention plan
- FallbackAttempt: One attempt recorded by the tracker
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Optional, Union

from ..catalog.models import AgentDomain


class FallbackKind(str, Enum):
    """Fallback strategies, in the order they are attempted."""

    ALTERNATIVE_AGENT = "alternative_agent"  # Static one-to-one substitute
    GENERIC_AGENT = "generic_agent"  # Generic agent for the detected domain
    PARTIAL_FUNCTIONALITY = "partial_functionality"  # Reduced feature flags
    MANUAL_ESCALATION = "manual_escalation"  # Always succeeds


class Urgency(str, Enum):
    """Urgency of a manual intervention."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class CapabilityDiff:
    """Capabilities lost and gained by substituting one agent for another."""

    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)

    @classmethod
    def between(cls, original: list[str], substitute: list[str]) -> "CapabilityDiff":
        return cls(
            missing=[cap for cap in original if cap not in substitute],
            extra=[cap for cap in substitute if cap not in original],
        )

    def limitations(self) -> list[str]:
        """Human-readable summary of the difference."""
        notes = []
        if self.missing:
            notes.append(f"Missing capabilities: {', '.join(self.missing)}")
        if self.extra:
            notes.append(f"Additional capabilities: {', '.join(self.extra)}")
        return notes

    def to_dict(self) -> dict[str, Any]:
        return {"missing": list(self.missing), "extra": list(self.extra)}


@dataclass
class AlternativeAgent:
    """Substitute agent taken from the alternatives table."""

    agent_id: str
    original_agent: str
    capabilities: list[str] = field(default_factory=list)
    capability_diff: CapabilityDiff = field(default_factory=CapabilityDiff)

    kind = FallbackKind.ALTERNATIVE_AGENT

    @property
    def message(self) -> str:
        return f"Using {self.agent_id} as an alternative to {self.original_agent}"

    @property
    def limitations(self) -> list[str]:
        return self.capability_diff.limitations()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "agent_id": self.agent_id,
            "original_agent": self.original_agent,
            "message": self.message,
            "capabilities": list(self.capabilities),
            "capability_diff": self.capability_diff.to_dict(),
            "limitations": self.limitations,
        }


@dataclass
class GenericAgent:
    """Generic domain agent with a reduced, fixed capability set."""

    agent_id: str
    original_agent: str
    domain: AgentDomain
    capabilities: list[str] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)

    kind = FallbackKind.GENERIC_AGENT

    @property
    def message(self) -> str:
        return f"Activating generic {self.domain.value} agent for {self.original_agent}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "agent_id": self.agent_id,
            "original_agent": self.original_agent,
            "message": self.message,
            "domain": self.domain.value,
            "capabilities": list(self.capabilities),
            "limitations": list(self.limitations),
        }


@dataclass
class PartialFunctionality:
    """Reduced feature set standing in for a missing agent."""

    original_agent: str
    features: list[str] = field(default_factory=list)
    limitations: list[str] = field(default_factory=list)

    kind = FallbackKind.PARTIAL_FUNCTIONALITY

    @property
    def message(self) -> str:
        return f"Enabling partial functionality for {self.original_agent}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "original_agent": self.original_agent,
            "message": self.message,
            "features": list(self.features),
            "limitations": list(self.limitations),
        }


@dataclass(frozen=True)
class InterventionPhase:
    """One phase of a manual intervention plan."""

    phase: str
    description: str
    estimated_time: str
    priority: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase,
            "description": self.description,
            "estimated_time": self.estimated_time,
            "priority": self.priority,
        }


@dataclass
class InterventionPlan:
    """Four-phase plan for replacing an agent by hand."""

    steps: list[InterventionPhase] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "steps": [step.to_dict() for step in self.steps],
            "resources": list(self.resources),
            "risks": list(self.risks),
        }


@dataclass(frozen=True)
class EffortEstimate:
    """Estimated manual effort (hour range and complexity bucket)."""

    hours: str
    complexity: str

    def to_dict(self) -> dict[str, Any]:
        return {"hours": self.hours, "complexity": self.complexity}


@dataclass(frozen=True)
class ImpactAssessment:
    """Expected impact of running without an agent."""

    timeline: str
    quality: str
    cost: str
    risk: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timeline": self.timeline,
            "quality": self.quality,
            "cost": self.cost,
            "risk": self.risk,
        }


@dataclass
class ManualEscalation:
    """Terminal fallback: a human has to provide the missing agent."""

    original_agent: str
    plan: InterventionPlan
    urgency: Urgency
    estimated_effort: EffortEstimate
    impact: ImpactAssessment
    required_actions: list[str] = field(default_factory=list)

    kind = FallbackKind.MANUAL_ESCALATION

    @property
    def message(self) -> str:
        return f"Manual intervention required to replace {self.original_agent}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "original_agent": self.original_agent,
            "message": self.message,
            "plan": self.plan.to_dict(),
            "urgency": self.urgency.value,
            "estimated_effort": self.estimated_effort.to_dict(),
            "impact": self.impact.to_dict(),
            "required_actions": list(self.required_actions),
        }


FallbackOutcome = Union[AlternativeAgent, GenericAgent, PartialFunctionality, ManualEscalation]


@dataclass
class FallbackAttempt:
    """A single strategy attempt recorded by the tracker."""

    agent_id: str
    strategy: FallbackKind
    success: bool
    reason: Optional[str] = None
    solution: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "strategy": self.strategy.value,
            "success": self.success,
            "reason": self.reason,
            "solution": self.solution,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class FallbackStats:
    """Aggregate fallback statistics."""

    total_failures: int = 0
    agent_failures: dict[str, int] = field(default_factory=dict)
    successful_fallbacks: int = 0
    strategy_successes: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_failures": self.total_failures,
            "agent_failures": dict(self.agent_failures),
            "successful_fallbacks": self.successful_fallbacks,
            "strategy_successes": dict(self.strategy_successes),
        }
