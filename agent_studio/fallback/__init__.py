"""Fallback chain for agents that cannot be activated."""

from .classifier import classify_agent_domain
from .manager import AgentFallbackManager
from .models import (
    AlternativeAgent,
    CapabilityDiff,
    EffortEstimate,
    FallbackAttempt,
    FallbackKind,
    FallbackOutcome,
    FallbackStats,
    GenericAgent,
    ImpactAssessment,
    InterventionPhase,
    InterventionPlan,
    ManualEscalation,
    PartialFunctionality,
    Urgency,
)
from .tracker import FallbackTracker

__all__ = [
    "AgentFallbackManager",
    "AlternativeAgent",
    "CapabilityDiff",
    "EffortEstimate",
    "FallbackAttempt",
    "FallbackKind",
    "FallbackOutcome",
    "FallbackStats",
    "FallbackTracker",
    "GenericAgent",
    "ImpactAssessment",
    "InterventionPhase",
    "InterventionPlan",
    "ManualEscalation",
    "PartialFunctionality",
    "Urgency",
    "classify_agent_domain",
]
