"""Agent selection: project profiles, domain detection and the engine."""

from .domain import detect_project_domain, extract_required_capabilities
from .engine import COMMON_PROFILES, AgentSelectionEngine
from .profile import (
    BusinessContext,
    Complexity,
    ProjectContext,
    ProjectProfile,
    TechnicalContext,
    load_profile,
)
from .review import AutoAcceptReviewHandler, ReviewDecision, ReviewHandler

__all__ = [
    "AgentSelectionEngine",
    "AutoAcceptReviewHandler",
    "BusinessContext",
    "COMMON_PROFILES",
    "Complexity",
    "ProjectContext",
    "ProjectProfile",
    "ReviewDecision",
    "ReviewHandler",
    "TechnicalContext",
    "detect_project_domain",
    "extract_required_capabilities",
    "load_profile",
]
