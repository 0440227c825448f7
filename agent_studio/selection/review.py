"""Manual review hook for low-confidence resolutions.

When confidence falls below the validation threshold the selection engine
hands the result to a ReviewHandler instead of silently accepting it.
Interactive front ends implement the protocol to prompt a human; the
default handler logs the warnings and accepts.
"""

from dataclasses import dataclass
from typing import Optional, Protocol

import structlog

from ..resolution.models import ResolutionResult

logger = structlog.get_logger(__name__)


@dataclass
class ReviewDecision:
    """Outcome of a manual review."""

    accepted: bool
    reviewer: str = "auto"
    notes: Optional[str] = None


class ReviewHandler(Protocol):
    """Protocol for reviewing low-confidence resolutions."""

    async def review(self, result: ResolutionResult) -> ReviewDecision:
        """Review a result that needs manual review.

        Args:
            result: The resolution awaiting a decision

        Returns:
            Decision; a rejection aborts the resolution
        """
        ...


class AutoAcceptReviewHandler:
    """Accepts every result after logging why it needed review."""

    def __init__(self) -> None:
        self.log = logger.bind(component="auto_review")

    async def review(self, result: ResolutionResult) -> ReviewDecision:
        self.log.warning(
            "Low-confidence configuration accepted automatically",
            confidence=round(result.confidence, 2),
            warnings=result.warnings,
        )
        return ReviewDecision(accepted=True, notes="Accepted automatically")
