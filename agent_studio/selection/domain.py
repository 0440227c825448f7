"""Project domain detection and capability requirements."""

from collections.abc import Mapping

from ..catalog import defaults
from .profile import ProjectProfile


def detect_project_domain(
    profile: ProjectProfile,
    keywords: tuple[tuple[str, tuple[str, ...]], ...] = defaults.DOMAIN_KEYWORDS,
    default: str = defaults.DEFAULT_DOMAIN,
) -> str:
    """Detect the project domain.

    An explicit `context.domain` wins. Otherwise the business description
    and project types are searched for domain keywords, in table order.
    """
    if profile.context.domain:
        return profile.context.domain

    description = profile.business.description.lower()
    project_types = [t.lower() for t in profile.business.project_types]

    for domain, needles in keywords:
        if any(needle in description for needle in needles):
            return domain
        if any(needle in project_types for needle in needles):
            return domain
    return default


def extract_required_capabilities(
    profile: ProjectProfile,
    domain_capabilities: Mapping[str, tuple[str, ...]] = defaults.DOMAIN_CAPABILITIES,
) -> list[str]:
    """Capabilities the final agent set is expected to cover."""
    domain = detect_project_domain(profile)
    capabilities = list(
        domain_capabilities.get(domain, domain_capabilities[defaults.DEFAULT_DOMAIN])
    )

    if profile.context.cultural_requirements:
        capabilities.append("cultural_analysis")
    if profile.business.complexity.value in defaults.COMPLEX_LEVELS:
        capabilities.extend(["performance_optimization", "scalability_planning"])
    if profile.technical.security_requirements:
        capabilities.append("security_expertise")

    return list(dict.fromkeys(capabilities))
