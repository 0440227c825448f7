"""Agent Fallback Manager.

Degrades gracefully when a required agent cannot be activated. Strategies
are tried in order and the first one that produces an outcome wins:

1. Alternative agent (static one-to-one substitute)
2. Generic agent (reduced capabilities for the agent's domain)
3. Partial functionality (reduced feature flags)
4. Manual escalation (always succeeds)

Example usage:
    ```python
    from agent_studio.catalog import CapabilityCatalog
    from agent_studio.fallback import AgentFallbackManager

    manager = AgentFallbackManager(CapabilityCatalog.default())
    outcome = await manager.handle_unavailable("marketplace-architect")

    print(outcome.kind, outcome.message)
    print(manager.tracker.get_stats().to_dict())
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Optional

import structlog

from ..catalog import AgentDomain, CapabilityCatalog
from ..catalog import defaults
from .classifier import classify_agent_domain
from .models import (
    AlternativeAgent,
    CapabilityDiff,
    EffortEstimate,
    FallbackKind,
    FallbackOutcome,
    GenericAgent,
    ImpactAssessment,
    InterventionPhase,
    InterventionPlan,
    ManualEscalation,
    PartialFunctionality,
    Urgency,
)
from .tracker import FallbackTracker

if TYPE_CHECKING:
    from ..selection.profile import ProjectProfile

logger = structlog.get_logger(__name__)

# Capabilities assumed for an agent the catalog knows nothing about
UNKNOWN_AGENT_CAPABILITIES = ["general_support"]

RISK_BY_URGENCY: dict[Urgency, str] = {
    Urgency.HIGH: "High risk of project failure",
    Urgency.MEDIUM: "Moderate risk to project goals",
    Urgency.LOW: "Low risk, alternatives available",
}

Strategy = Callable[[str, Optional["ProjectProfile"]], Optional[FallbackOutcome]]


class AgentFallbackManager:
    """Walks the fallback chain for unavailable agents.

    The static tables are injected so that tests and alternative catalogs
    can supply their own; the defaults come from `catalog.defaults`.
    """

    def __init__(
        self,
        catalog: CapabilityCatalog,
        tracker: Optional[FallbackTracker] = None,
        alternatives: Optional[Mapping[str, str]] = None,
        generic_capabilities: Optional[Mapping[AgentDomain, tuple[str, ...]]] = None,
        partial_features: Optional[Mapping[str, tuple[str, ...]]] = None,
        critical_agents: Optional[frozenset[str]] = None,
        effort_estimates: Optional[Mapping[str, tuple[str, str]]] = None,
    ):
        """Initialize the manager.

        Args:
            catalog: Catalog used for capability lookups and domain tags
            tracker: Attempt tracker shared across calls (new one if omitted)
            alternatives: Unavailable agent id -> substitute id
            generic_capabilities: Domain -> generic capability set
            partial_features: Agent id -> reduced feature flags
            critical_agents: Agents whose absence is always high urgency
            effort_estimates: Agent id -> (hours, complexity)
        """
        self.catalog = catalog
        self.tracker = tracker or FallbackTracker()
        self.alternatives = dict(defaults.ALTERNATIVE_AGENTS if alternatives is None else alternatives)
        self.generic_capabilities = dict(
            defaults.GENERIC_CAPABILITIES if generic_capabilities is None else generic_capabilities
        )
        self.partial_features = dict(defaults.PARTIAL_FEATURES if partial_features is None else partial_features)
        self.critical_agents = defaults.CRITICAL_AGENTS if critical_agents is None else critical_agents
        self.effort_estimates = dict(defaults.EFFORT_ESTIMATES if effort_estimates is None else effort_estimates)
        self.log = logger.bind(component="fallback_manager")

        self._strategies: list[tuple[FallbackKind, Strategy]] = [
            (FallbackKind.ALTERNATIVE_AGENT, self.find_alternative_agent),
            (FallbackKind.GENERIC_AGENT, self.activate_generic_agent),
            (FallbackKind.PARTIAL_FUNCTIONALITY, self.enable_partial_functionality),
        ]

    async def handle_unavailable(
        self,
        agent_id: str,
        profile: Optional[ProjectProfile] = None,
    ) -> FallbackOutcome:
        """Find a replacement for an agent that cannot be activated.

        Never raises for unknown agents: an id absent from every table
        ends in a ManualEscalation.

        Args:
            agent_id: The unavailable agent
            profile: Project profile (its complexity drives urgency)

        Returns:
            Outcome of the first strategy that succeeded
        """
        self.log.warning("Agent unavailable", agent_id=agent_id)

        for kind, strategy in self._strategies:
            outcome = strategy(agent_id, profile)
            if outcome is None:
                self.tracker.record_failure(agent_id, kind, f"No {kind.value} available")
                continue

            self.tracker.record_success(agent_id, kind, _solution_of(outcome))
            return outcome

        escalation = self.escalate_to_manual(agent_id, profile)
        self.tracker.record_success(agent_id, FallbackKind.MANUAL_ESCALATION, "manual_intervention")
        return escalation

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def find_alternative_agent(
        self,
        agent_id: str,
        profile: Optional[ProjectProfile] = None,
    ) -> Optional[AlternativeAgent]:
        """Look up a direct substitute in the alternatives table."""
        alternative = self.alternatives.get(agent_id)
        if alternative is None:
            return None

        substitute_capabilities = self.capabilities_of(alternative)
        return AlternativeAgent(
            agent_id=alternative,
            original_agent=agent_id,
            capabilities=substitute_capabilities,
            capability_diff=CapabilityDiff.between(self.capabilities_of(agent_id), substitute_capabilities),
        )

    def activate_generic_agent(
        self,
        agent_id: str,
        profile: Optional[ProjectProfile] = None,
    ) -> Optional[GenericAgent]:
        """Activate the generic agent for the unavailable agent's domain."""
        domain = classify_agent_domain(agent_id, self.catalog.lookup(agent_id))
        capabilities = self.generic_capabilities.get(domain)
        if not capabilities:
            return None

        return GenericAgent(
            agent_id=f"generic-{domain.value}",
            original_agent=agent_id,
            domain=domain,
            capabilities=list(capabilities),
            limitations=list(defaults.GENERIC_LIMITATIONS),
        )

    def enable_partial_functionality(
        self,
        agent_id: str,
        profile: Optional[ProjectProfile] = None,
    ) -> Optional[PartialFunctionality]:
        """Fall back to a reduced feature set, if one is defined."""
        features = self.partial_features.get(agent_id)
        if not features:
            return None

        return PartialFunctionality(
            original_agent=agent_id,
            features=list(features),
            limitations=list(defaults.PARTIAL_LIMITATIONS),
        )

    def escalate_to_manual(
        self,
        agent_id: str,
        profile: Optional[ProjectProfile] = None,
    ) -> ManualEscalation:
        """Build the terminal manual-intervention report."""
        urgency = self.assess_urgency(agent_id, profile)
        escalation = ManualEscalation(
            original_agent=agent_id,
            plan=self.create_intervention_plan(agent_id),
            urgency=urgency,
            estimated_effort=self.estimate_effort(agent_id),
            impact=self.assess_impact(agent_id, urgency),
            required_actions=[
                f"Install or configure agent {agent_id} manually",
                "Check system dependencies",
                "Contact technical support if needed",
                "Consider an alternative architecture",
            ],
        )

        self.log.error(
            "Manual escalation required",
            agent_id=agent_id,
            urgency=urgency.value,
            effort_hours=escalation.estimated_effort.hours,
        )
        return escalation

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def capabilities_of(self, agent_id: str) -> list[str]:
        """Catalog capabilities of an agent, or a generic placeholder."""
        descriptor = self.catalog.lookup(agent_id)
        if descriptor is None or not descriptor.provides:
            return list(UNKNOWN_AGENT_CAPABILITIES)
        return list(descriptor.provides)

    def create_intervention_plan(self, agent_id: str) -> InterventionPlan:
        return InterventionPlan(
            steps=[
                InterventionPhase(
                    phase="Analysis",
                    description=f"Analyze the needs covered by {agent_id}",
                    estimated_time="2-4 hours",
                    priority="high",
                ),
                InterventionPhase(
                    phase="Research",
                    description="Identify alternative solutions or external experts",
                    estimated_time="4-8 hours",
                    priority="medium",
                ),
                InterventionPhase(
                    phase="Implementation",
                    description="Put the alternative solution in place",
                    estimated_time="1-3 days",
                    priority="high",
                ),
                InterventionPhase(
                    phase="Validation",
                    description="Test and validate the replacement",
                    estimated_time="4-8 hours",
                    priority="medium",
                ),
            ],
            resources=[
                "Technical documentation for the missing agent",
                "External expertise if needed",
                "Appropriate development tooling",
            ],
            risks=[
                "Delivery timeline affected",
                "Potentially reduced quality",
                "Possible additional costs",
            ],
        )

    def assess_urgency(self, agent_id: str, profile: Optional[ProjectProfile] = None) -> Urgency:
        """Critical agents are always high; complex projects raise the rest to medium."""
        if agent_id in self.critical_agents:
            return Urgency.HIGH

        complexity = profile.business.complexity.value if profile is not None else "moderate"
        if complexity in defaults.COMPLEX_LEVELS:
            return Urgency.MEDIUM
        return Urgency.LOW

    def estimate_effort(self, agent_id: str) -> EffortEstimate:
        hours, complexity = self.effort_estimates.get(agent_id, defaults.DEFAULT_EFFORT)
        return EffortEstimate(hours=hours, complexity=complexity)

    def assess_impact(self, agent_id: str, urgency: Urgency) -> ImpactAssessment:
        return ImpactAssessment(
            timeline=defaults.TIMELINE_IMPACT.get(agent_id, defaults.DEFAULT_TIMELINE_IMPACT),
            quality=defaults.QUALITY_IMPACT.get(agent_id, defaults.DEFAULT_QUALITY_IMPACT),
            cost=defaults.COST_IMPACT,
            risk=RISK_BY_URGENCY[urgency],
        )


def _solution_of(outcome: FallbackOutcome) -> str:
    if isinstance(outcome, (AlternativeAgent, GenericAgent)):
        return outcome.agent_id
    if isinstance(outcome, PartialFunctionality):
        return ", ".join(outcome.features)
    return "manual_intervention"
