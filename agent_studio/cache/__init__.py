"""In-memory configuration cache."""

from .config_cache import (
    CacheEntry,
    CacheStats,
    ConfigurationCache,
    HitRateTracker,
    generate_cache_key,
)

__all__ = [
    "CacheEntry",
    "CacheStats",
    "ConfigurationCache",
    "HitRateTracker",
    "generate_cache_key",
]
