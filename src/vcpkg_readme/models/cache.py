from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """One cached value owned by MemoryCache."""

    value: Any
    inserted_at_ms: int
    ttl_ms: int
    size_bytes: int  # Serialization-length estimate, computed once on set

    def is_live(self, now_ms: int) -> bool:
        return now_ms < self.inserted_at_ms + self.ttl_ms


@dataclass
class CacheStats:
    """Counters reported by MemoryCache.stats(). Always a copy."""

    hits: int = 0
    misses: int = 0
    approx_size_bytes: int = 0
    max_size_bytes: int = 0
