"""Best-effort domain classification for agents.

An explicit `domain` on the descriptor always wins. Otherwise the id is
matched against substrings, first match wins.
"""

from typing import Optional

from ..catalog.models import AgentDescriptor, AgentDomain

_DOMAIN_SUBSTRINGS: tuple[tuple[AgentDomain, tuple[str, ...]], ...] = (
    (AgentDomain.ARCHITECTURE, ("architect",)),
    (AgentDomain.DEVELOPMENT, ("dev", "developer")),
    (AgentDomain.SECURITY, ("security",)),
    (AgentDomain.ANALYSIS, ("analyst", "expert")),
    (AgentDomain.TESTING, ("qa", "test")),
)


def classify_agent_domain(
    agent_id: str,
    descriptor: Optional[AgentDescriptor] = None,
) -> AgentDomain:
    """Classify an agent into a coarse domain.

    Args:
        agent_id: Agent id to classify
        descriptor: Catalog descriptor, if the agent is registered

    Returns:
        The detected domain, or AgentDomain.GENERAL
    """
    if descriptor is not None and descriptor.domain is not None:
        return descriptor.domain

    for domain, needles in _DOMAIN_SUBSTRINGS:
        if any(needle in agent_id for needle in needles):
            return domain
    return AgentDomain.GENERAL
