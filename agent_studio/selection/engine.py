"""Agent Selection Engine.

Turns a project profile into a resolved, ordered agent list:

1. Return the cached result for the profile, if any
2. Select the initial agents from the domain, complexity, stack and flags
3. Build the dependency graph, detect and resolve conflicts
4. Route dependencies lost to conflict resolution through the fallback chain
5. Order the agents and group them into activation stages
6. Score confidence; low confidence goes to the review handler
7. Cache and return the result

Example usage:
    ```python
    from agent_studio.catalog import CapabilityCatalog
    from agent_studio.selection import AgentSelectionEngine, ProjectProfile

    engine = AgentSelectionEngine(CapabilityCatalog.default())
    profile = ProjectProfile.model_validate({"context": {"domain": "marketplace"}})

    result = await engine.resolve_project_agents(profile)
    print(result.ordered_agents, result.confidence)
    ```
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any, Optional, Union

import structlog

from ..cache import ConfigurationCache
from ..catalog import AgentDescriptor, CapabilityCatalog
from ..catalog import defaults
from ..config import Settings
from ..fallback import AgentFallbackManager, AlternativeAgent, FallbackOutcome, GenericAgent
from ..resolution import (
    AgentDependencyResolver,
    ConfigurationRejectedError,
    DependencyGraph,
    ResolutionError,
    ResolutionResult,
)
from ..utils.logging import log_operation
from .domain import detect_project_domain, extract_required_capabilities
from .profile import ProjectProfile
from .review import AutoAcceptReviewHandler, ReviewHandler

logger = structlog.get_logger(__name__)

# Profiles resolved by `warmup` when none are given
COMMON_PROFILES: tuple[dict[str, Any], ...] = (
    {
        "context": {"domain": "marketplace"},
        "business": {"complexity": "moderate"},
        "technical": {"stack": ["nextjs", "odoo"]},
    },
    {
        "context": {"domain": "web_app"},
        "business": {"complexity": "simple"},
        "technical": {"stack": ["react"]},
    },
    {
        "context": {"domain": "saas"},
        "business": {"complexity": "complex"},
        "technical": {"stack": ["nodejs", "postgresql"]},
    },
)


class AgentSelectionEngine:
    """Selects and resolves the agents for a project.

    Every collaborator can be injected; anything omitted is built from
    the catalog and settings.
    """

    def __init__(
        self,
        catalog: CapabilityCatalog,
        settings: Optional[Settings] = None,
        resolver: Optional[AgentDependencyResolver] = None,
        fallback_manager: Optional[AgentFallbackManager] = None,
        cache: Optional[ConfigurationCache] = None,
        review_handler: Optional[ReviewHandler] = None,
        domain_rules: Optional[Mapping[str, tuple[str, ...]]] = None,
    ):
        self.catalog = catalog
        self.settings = settings or Settings()
        self.resolver = resolver or AgentDependencyResolver(catalog)
        self.fallback_manager = fallback_manager or AgentFallbackManager(catalog)
        if cache is None and self.settings.cache_enabled:
            cache = ConfigurationCache(
                max_size=self.settings.cache_max_size,
                ttl_seconds=self.settings.cache_ttl_seconds,
            )
        self.cache = cache
        self.review_handler = review_handler or AutoAcceptReviewHandler()
        self.domain_rules = dict(defaults.DOMAIN_AGENT_RULES if domain_rules is None else domain_rules)
        self.log = logger.bind(component="selection_engine")

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def select_agents(self, profile: ProjectProfile) -> list[str]:
        """Initial agent selection for a profile, without dependencies."""
        domain = detect_project_domain(profile)
        selected = list(self.domain_rules.get(domain, self.domain_rules[defaults.DEFAULT_DOMAIN]))

        if profile.business.complexity.value in defaults.COMPLEX_LEVELS:
            selected.extend(defaults.COMPLEXITY_AGENTS)

        stack = {tech.lower() for tech in profile.technical.stack}
        for tech, agent_id in defaults.STACK_AGENTS.items():
            if tech in stack:
                selected.append(agent_id)

        for flag, agent_id in defaults.FLAG_AGENTS.items():
            if getattr(profile.context, flag, False):
                selected.append(agent_id)

        return list(dict.fromkeys(selected))

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    async def resolve_project_agents(
        self,
        profile: Union[ProjectProfile, Mapping[str, Any], None],
    ) -> ResolutionResult:
        """Resolve the agents for a project.

        Args:
            profile: Project profile (a validated model or raw mapping)

        Returns:
            ResolutionResult with the ordered agents, warnings and confidence

        Raises:
            InvalidProfileError: If the profile is missing or malformed
            CircularDependencyError: If the catalog's requires-graph has a cycle
            ConfigurationRejectedError: If the review handler rejects the result
        """
        profile = self._coerce_profile(profile)

        if self.cache is not None:
            cached = self.cache.get(profile)
            if cached is not None:
                self.log.info("Resolution served from cache", agent_count=len(cached.ordered_agents))
                return replace(cached, from_cache=True)

        domain = detect_project_domain(profile)
        with log_operation("resolve_project_agents", logger=self.log, domain=domain) as op:
            result = await self._resolve(profile, domain)
            op["agent_count"] = len(result.ordered_agents)
            op["confidence"] = round(result.confidence, 4)

        if self.cache is not None:
            self.cache.set(profile, result)
        return result

    async def _resolve(self, profile: ProjectProfile, domain: str) -> ResolutionResult:
        requested = self.select_agents(profile)
        resolution = self.resolver.build_resolved_graph(requested)
        graph = resolution.graph
        warnings = list(resolution.warnings)

        fallbacks, unfilled = await self._fill_dependency_gaps(graph, profile, warnings)

        ordered = self.resolver.order(graph)
        stages = self.resolver.sorter.stages(graph, ordered)

        provided = {capability for descriptor in graph.descriptors() for capability in descriptor.provides}
        missing_capabilities = [
            capability for capability in extract_required_capabilities(profile) if capability not in provided
        ]

        result = ResolutionResult(
            ordered_agents=ordered,
            warnings=warnings,
            domain=domain,
            removed_agents=list(resolution.removed),
            unregistered_agents=list(graph.unregistered),
            missing_capabilities=missing_capabilities,
            activation_stages=stages,
            fallbacks=fallbacks,
        )
        self._score(result, resolution.resolved_conflicts, unfilled)

        if result.confidence < self.settings.validation_threshold:
            await self._request_review(result)
        return result

    def _score(self, result: ResolutionResult, resolved_conflicts: int, unfilled_gaps: int) -> None:
        """Apply the confidence penalties and their warnings."""
        settings = self.settings
        confidence = 1.0

        for capability in result.missing_capabilities:
            result.warnings.append(f"Missing capability: {capability}")
            confidence -= settings.missing_capability_penalty

        # A dependency nothing could replace counts like a missing capability
        confidence -= settings.missing_capability_penalty * unfilled_gaps

        if resolved_conflicts:
            result.warnings.append(f"{resolved_conflicts} conflicts detected and resolved")
            confidence -= settings.conflict_penalty * resolved_conflicts

        if len(result.ordered_agents) > settings.max_agents_before_penalty:
            result.warnings.append(
                f"Complex configuration with {len(result.ordered_agents)} agents"
            )
            confidence -= settings.oversize_penalty

        result.confidence = round(min(1.0, max(0.0, confidence)), 4)

    async def _request_review(self, result: ResolutionResult) -> None:
        result.needs_manual_review = True
        self.log.warning(
            "Configuration needs manual review",
            confidence=result.confidence,
            threshold=self.settings.validation_threshold,
            warning_count=len(result.warnings),
        )

        decision = await self.review_handler.review(result)
        if not decision.accepted:
            raise ConfigurationRejectedError(
                f"Configuration rejected by {decision.reviewer}"
                + (f": {decision.notes}" if decision.notes else ""),
                confidence=result.confidence,
            )
        result.manually_reviewed = True

    # -------------------------------------------------------------------------
    # Dependency gaps
    # -------------------------------------------------------------------------

    async def _fill_dependency_gaps(
        self,
        graph: DependencyGraph,
        profile: ProjectProfile,
        warnings: list[str],
    ) -> tuple[dict[str, FallbackOutcome], int]:
        """Replace requirements removed by conflict resolution.

        Each missing dependency goes through the fallback chain once.
        Alternative and generic agents are substituted into the graph
        when they bring no direct conflict with them; every other outcome
        leaves the gap open with a warning.

        Returns:
            Outcome per missing dependency and the number of gaps left open
        """
        fallbacks: dict[str, FallbackOutcome] = {}
        unfilled = 0

        while True:
            pending = [
                (dependent, dependency)
                for dependent, missing in graph.missing_requirements().items()
                for dependency in missing
                if dependency not in fallbacks
            ]
            if not pending:
                break

            dependent, dependency = pending[0]
            outcome = await self.fallback_manager.handle_unavailable(dependency, profile)
            fallbacks[dependency] = outcome

            if isinstance(outcome, (AlternativeAgent, GenericAgent)) and self._substitute(
                graph, dependency, outcome, warnings
            ):
                warnings.append(
                    f"Dependency {dependency} of {dependent} is unavailable; substituted {outcome.agent_id}"
                )
                continue

            unfilled += 1
            warnings.append(
                f"Dependency {dependency} of {dependent} is unavailable; {outcome.kind.value}: {outcome.message}"
            )

        return fallbacks, unfilled

    def _substitute(
        self,
        graph: DependencyGraph,
        dependency: str,
        outcome: Union[AlternativeAgent, GenericAgent],
        warnings: list[str],
    ) -> bool:
        """Add a substitute agent and point dependents at it.

        Unregistered agents pulled in with an alternative's requirements are
        reported the same way as unregistered requested agents.
        """
        dependents = [agent_id for agent_id in graph if dependency in graph[agent_id].requires]
        if outcome.agent_id in dependents:
            return False

        if isinstance(outcome, AlternativeAgent):
            closure = self.resolver.builder.build([outcome.agent_id])
            additions = closure.descriptors()
            unregistered = closure.unregistered
        else:
            unregistered = []
            additions = [
                AgentDescriptor(
                    id=outcome.agent_id,
                    provides=tuple(outcome.capabilities),
                    description=outcome.message,
                    domain=outcome.domain,
                )
            ]

        new_nodes = [descriptor for descriptor in additions if descriptor.id not in graph]
        if self._introduces_conflict(graph, new_nodes):
            self.log.info(
                "Fallback substitute rejected",
                dependency=dependency,
                substitute=outcome.agent_id,
            )
            return False

        for descriptor in new_nodes:
            graph.add(descriptor)

        new_ids = {descriptor.id for descriptor in new_nodes}
        for agent_id in unregistered:
            if agent_id in new_ids and agent_id not in graph.unregistered:
                graph.unregistered.append(agent_id)
                warnings.append(f"Agent {agent_id} is not registered in the catalog; treated as a leaf")

        for agent_id in dependents:
            descriptor = graph[agent_id]
            requires = tuple(outcome.agent_id if dep == dependency else dep for dep in descriptor.requires)
            graph.add(replace(descriptor, requires=requires))
        return True

    @staticmethod
    def _introduces_conflict(graph: DependencyGraph, new_nodes: Iterable[AgentDescriptor]) -> bool:
        new_nodes = list(new_nodes)
        new_ids = {descriptor.id for descriptor in new_nodes}
        for descriptor in new_nodes:
            if any(other in graph for other in descriptor.conflicts):
                return True
        return any(new_id in existing.conflicts for existing in graph.descriptors() for new_id in new_ids)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def warmup(
        self,
        profiles: Optional[Iterable[Union[ProjectProfile, Mapping[str, Any]]]] = None,
    ) -> int:
        """Resolve and cache common profiles.

        Profiles that fail to resolve are logged and skipped.

        Returns:
            Number of profiles resolved
        """
        profiles = COMMON_PROFILES if profiles is None else profiles
        warmed = 0

        for raw in profiles:
            try:
                await self.resolve_project_agents(raw)
            except ResolutionError as e:
                self.log.warning("Cache warmup failed for profile", error=str(e))
                continue
            warmed += 1

        self.log.info("Cache warmed up", profiles=warmed)
        return warmed

    @staticmethod
    def _coerce_profile(profile: Union[ProjectProfile, Mapping[str, Any], None]) -> ProjectProfile:
        if isinstance(profile, ProjectProfile):
            return profile
        if isinstance(profile, Mapping):
            profile = dict(profile)
        return ProjectProfile.from_mapping(profile)
