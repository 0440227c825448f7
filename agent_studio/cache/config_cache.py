"""Configuration Cache.

In-memory memoization of resolution results keyed by a hash of the
project profile. Entries expire after a TTL and the least recently used
entry is evicted when the cache is full.

Example usage:
    ```python
    cache = ConfigurationCache(max_size=128, ttl_seconds=1800)

    result = cache.get(profile)
    if result is None:
        result = await engine.resolve_project_agents(profile)
        cache.set(profile, result)

    print(cache.stats().to_dict())
    ```
"""

from __future__ import annotations

import copy
import hashlib
import threading
import time
from collections import OrderedDict, deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

import structlog

from ..resolution.models import ResolutionResult

if TYPE_CHECKING:
    from ..selection.profile import ProjectProfile

logger = structlog.get_logger(__name__)

DEFAULT_MAX_SIZE = 128
DEFAULT_TTL_SECONDS = 30 * 60
HIT_RATE_WINDOW = 100


@dataclass
class CacheEntry:
    """A cached resolution result."""

    key: str
    value: ResolutionResult
    created_at: float
    ttl: float
    metadata: dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl


@dataclass
class CacheStats:
    """Cache statistics snapshot."""

    size: int
    max_size: int
    hits: int
    misses: int
    evictions: int
    expirations: int
    hit_rate: float
    recent_hit_rate: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "size": self.size,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": round(self.hit_rate, 4),
            "recent_hit_rate": round(self.recent_hit_rate, 4),
        }


class HitRateTracker:
    """Counts hits and misses overall and over a sliding window."""

    def __init__(self, window: int = HIT_RATE_WINDOW):
        self.hits = 0
        self.misses = 0
        self._recent: deque[bool] = deque(maxlen=window)

    def record_hit(self) -> None:
        self.hits += 1
        self._recent.append(True)

    def record_miss(self) -> None:
        self.misses += 1
        self._recent.append(False)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0

    @property
    def recent_hit_rate(self) -> float:
        if not self._recent:
            return 0.0
        return sum(self._recent) / len(self._recent)

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self._recent.clear()


def generate_cache_key(profile: ProjectProfile) -> str:
    """Hash the profile fields that influence agent selection.

    Stack and project types are order-insensitive. The business
    description is included because it drives domain detection when no
    explicit domain is given.
    """
    components = [
        profile.context.domain or "unknown",
        profile.business.complexity.value,
        ",".join(sorted(profile.technical.stack)) or "default",
        ",".join(sorted(profile.business.project_types)) or "none",
        profile.business.description.strip().lower(),
        "cultural" if profile.context.cultural_requirements else "",
        "payment" if profile.context.payment_integration else "",
        "security" if profile.technical.security_requirements else "",
    ]
    key_string = "|".join(components)
    return hashlib.sha256(key_string.encode("utf-8")).hexdigest()


class ConfigurationCache:
    """TTL + LRU cache of resolution results.

    Check-then-insert sequences run under a lock, so one cache can be
    shared by several threads.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the cache.

        Args:
            max_size: Maximum number of entries
            ttl_seconds: Lifetime of an entry
            clock: Monotonic time source (injectable for tests)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._tracker = HitRateTracker()
        self._evictions = 0
        self._expirations = 0
        self.log = logger.bind(component="config_cache")

    def get(self, profile: ProjectProfile) -> Optional[ResolutionResult]:
        """Return a private copy of the cached result for a profile, or None."""
        key = generate_cache_key(profile)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock()):
                del self._entries[key]
                self._expirations += 1
                self.log.debug("Cache entry expired", key=key[:8])
                entry = None

            if entry is None:
                self._tracker.record_miss()
                self.log.debug("Cache miss", key=key[:8])
                return None

            self._entries.move_to_end(key)
            self._tracker.record_hit()

        self.log.debug("Cache hit", key=key[:8])
        return copy.deepcopy(entry.value)

    def set(self, profile: ProjectProfile, result: ResolutionResult) -> str:
        """Store a result, evicting the least recently used entry if full.

        The cache keeps its own copy, so later changes to `result` do not
        reach cached lookups.

        Returns:
            The cache key
        """
        key = generate_cache_key(profile)
        entry = CacheEntry(
            key=key,
            value=copy.deepcopy(result),
            created_at=self._clock(),
            ttl=self.ttl_seconds,
            metadata={
                "domain": result.domain,
                "complexity": profile.business.complexity.value,
                "agent_count": len(result.ordered_agents),
            },
        )

        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                self.log.debug("Cache entry evicted", key=evicted[:8])

            self._entries[key] = entry
            self._entries.move_to_end(key)

        self.log.debug("Configuration cached", key=key[:8], agent_count=len(result.ordered_agents))
        return key

    def invalidate(self, profile: ProjectProfile) -> bool:
        """Drop the entry for a profile. Returns True if one existed."""
        key = generate_cache_key(profile)
        with self._lock:
            removed = self._entries.pop(key, None) is not None

        if removed:
            self.log.debug("Cache entry invalidated", key=key[:8])
        return removed

    def clear(self) -> int:
        """Drop every entry and reset statistics. Returns the number dropped."""
        with self._lock:
            size = len(self._entries)
            self._entries.clear()
            self._tracker.reset()
            self._evictions = 0
            self._expirations = 0

        self.log.info("Cache cleared", entries=size)
        return size

    def cleanup_expired(self) -> int:
        """Remove expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
            self._expirations += len(expired)

        if expired:
            self.log.debug("Expired cache entries removed", count=len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                max_size=self.max_size,
                hits=self._tracker.hits,
                misses=self._tracker.misses,
                evictions=self._evictions,
                expirations=self._expirations,
                hit_rate=self._tracker.hit_rate,
                recent_hit_rate=self._tracker.recent_hit_rate,
            )

    def export(self) -> dict[str, dict[str, Any]]:
        """Snapshot of live entries (key -> result and metadata)."""
        now = self._clock()
        with self._lock:
            live = [entry for entry in self._entries.values() if not entry.is_expired(now)]

        return {
            entry.key: {
                "result": entry.value.to_dict(),
                "metadata": dict(entry.metadata),
                "age_seconds": round(now - entry.created_at, 3),
            }
            for entry in live
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, profile: ProjectProfile) -> bool:
        key = generate_cache_key(profile)
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())
