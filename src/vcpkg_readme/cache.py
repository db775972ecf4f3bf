"""In-process TTL cache with approximate size accounting.

Entries expire ``ttl_ms`` after insertion; reads never refresh that time.
Expired entries are dropped lazily by ``get``/``has`` and in bulk by
``cleanup``, which the server runs on an interval (see schedulers.py).

Size accounting is an estimate (twice the JSON length of the value) and only
drives eviction. When an insert would exceed ``max_size_bytes``, exactly one
entry is evicted, the one with the oldest insertion time, and the new entry is
inserted regardless of whether that single eviction made enough room.

All access happens on the server's event loop, so no locking is done.
"""

from __future__ import annotations

import json
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel

from vcpkg_readme.models.cache import CacheEntry, CacheStats

if TYPE_CHECKING:
    from collections.abc import Callable

log = structlog.get_logger()

DEFAULT_MAX_SIZE_BYTES = 104_857_600  # 100 MB
DEFAULT_TTL_MS = 3_600_000  # 1 hour
FALLBACK_SIZE_ESTIMATE = 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return str(value)


def estimate_size(value: Any) -> int:
    """Rough byte size of ``value``: two bytes per serialized character.

    Falls back to a fixed estimate for values that cannot be serialized
    (circular references, unserializable keys). Never raises.
    """
    try:
        return len(json.dumps(value, default=_json_default)) * 2
    except (TypeError, ValueError, RecursionError):
        return FALLBACK_SIZE_ESTIMATE


class MemoryCache:
    """Bounded-lifetime, size-bounded key-value store implementing CacheProtocol."""

    def __init__(
        self,
        *,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._stats = CacheStats(max_size_bytes=max_size_bytes)
        self._default_ttl_ms = default_ttl_ms
        self._clock = clock

    @property
    def default_ttl_ms(self) -> int:
        return self._default_ttl_ms

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key`` or ``None``. Counts a hit or a miss."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats.misses += 1
            log.debug("cache_miss", key=key)
            return None

        if not entry.is_live(self._clock()):
            del self._entries[key]
            self._update_size()
            self._stats.misses += 1
            log.debug("cache_expired", key=key)
            return None

        self._stats.hits += 1
        log.debug("cache_hit", key=key)
        return entry.value

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        if ttl_ms is None:
            ttl_ms = self._default_ttl_ms

        size = estimate_size(value)
        if self._stats.approx_size_bytes + size > self._stats.max_size_bytes:
            self._evict_oldest()

        self._entries[key] = CacheEntry(
            value=value,
            inserted_at_ms=self._clock(),
            ttl_ms=ttl_ms,
            size_bytes=size,
        )
        self._update_size()
        log.debug("cache_set", key=key, ttl_ms=ttl_ms)

    def has(self, key: str) -> bool:
        """Like ``get`` but leaves the hit/miss counters untouched."""
        entry = self._entries.get(key)
        if entry is None:
            return False

        if not entry.is_live(self._clock()):
            del self._entries[key]
            self._update_size()
            return False

        return True

    def delete(self, key: str) -> bool:
        if self._entries.pop(key, None) is None:
            return False
        self._update_size()
        log.debug("cache_delete", key=key)
        return True

    def clear(self) -> None:
        """Drop every entry. Hit/miss counters are kept."""
        self._entries.clear()
        self._stats.approx_size_bytes = 0
        log.debug("cache_cleared")

    def cleanup(self) -> int:
        """Remove every expired entry in one pass. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if not entry.is_live(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            self._update_size()
            log.debug("cache_cleanup", expired_count=len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        return replace(self._stats)

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update_size(self) -> None:
        self._stats.approx_size_bytes = sum(e.size_bytes for e in self._entries.values())

    def _evict_oldest(self) -> None:
        if not self._entries:
            return
        oldest_key = min(self._entries, key=lambda k: self._entries[k].inserted_at_ms)
        del self._entries[oldest_key]
        log.debug("cache_eviction", key=oldest_key)
