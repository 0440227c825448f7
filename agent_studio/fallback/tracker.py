"""Fallback attempt tracker.

Accumulates failed and successful fallback attempts per agent id across
resolution calls. Read-modify-write sequences run under a lock so the
tracker can be shared between threads.
"""

import threading
from collections import defaultdict

import structlog

from .models import FallbackAttempt, FallbackKind, FallbackStats

logger = structlog.get_logger(__name__)


class FallbackTracker:
    """Records fallback attempts for later statistics.

    Example:
        tracker = FallbackTracker()
        tracker.record_failure("cultural-expert", FallbackKind.PARTIAL_FUNCTIONALITY, "no features")
        tracker.record_success("cultural-expert", FallbackKind.ALTERNATIVE_AGENT, "analyst")
        stats = tracker.get_stats()
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._failures: dict[str, list[FallbackAttempt]] = defaultdict(list)
        self._successes: dict[str, list[FallbackAttempt]] = defaultdict(list)
        self.log = logger.bind(component="fallback_tracker")

    def record_failure(self, agent_id: str, strategy: FallbackKind, reason: str) -> FallbackAttempt:
        """Record a strategy that did not produce an outcome."""
        attempt = FallbackAttempt(agent_id=agent_id, strategy=strategy, success=False, reason=reason)
        with self._lock:
            self._failures[agent_id].append(attempt)

        self.log.debug(
            "Fallback strategy failed",
            agent_id=agent_id,
            strategy=strategy.value,
            reason=reason,
        )
        return attempt

    def record_success(self, agent_id: str, strategy: FallbackKind, solution: str) -> FallbackAttempt:
        """Record the strategy that produced the outcome."""
        attempt = FallbackAttempt(agent_id=agent_id, strategy=strategy, success=True, solution=solution)
        with self._lock:
            self._successes[agent_id].append(attempt)

        self.log.info(
            "Fallback succeeded",
            agent_id=agent_id,
            strategy=strategy.value,
            solution=solution,
        )
        return attempt

    def attempts_for(self, agent_id: str) -> list[FallbackAttempt]:
        """All attempts for an agent, oldest first."""
        with self._lock:
            attempts = self._failures.get(agent_id, []) + self._successes.get(agent_id, [])
        return sorted(attempts, key=lambda attempt: attempt.timestamp)

    def get_stats(self) -> FallbackStats:
        """Aggregate statistics over every recorded attempt."""
        stats = FallbackStats()
        with self._lock:
            for agent_id, failures in self._failures.items():
                stats.agent_failures[agent_id] = len(failures)
                stats.total_failures += len(failures)

            for successes in self._successes.values():
                stats.successful_fallbacks += len(successes)
                for attempt in successes:
                    key = attempt.strategy.value
                    stats.strategy_successes[key] = stats.strategy_successes.get(key, 0) + 1
        return stats

    def reset(self) -> None:
        """Forget every recorded attempt."""
        with self._lock:
            self._failures.clear()
            self._successes.clear()
