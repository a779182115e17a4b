from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 60.0
DEFAULT_MAX_ENTRIES = 512
# Entries older than this many freshness windows are swept on write.
SWEEP_AFTER_WINDOWS = 5


@dataclass
class CacheEntry:
    payload: Any
    stored_at: float


class ResponseCache:
    """
    Keyed store for decoded read responses.
    - An entry is fresh while its age is strictly below ttl_seconds.
    - Stale entries are ignored on read, swept on write once they are
      SWEEP_AFTER_WINDOWS windows old, and the oldest entries are dropped
      when the store grows past max_entries.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for key if it is still fresh."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry

    def set(self, key: str, payload: Any) -> CacheEntry:
        now = self._clock()
        self._sweep(now)
        # Re-insert so dict order tracks write recency.
        self._entries.pop(key, None)
        entry = CacheEntry(payload=payload, stored_at=now)
        self._entries[key] = entry
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def _sweep(self, now: float) -> None:
        horizon = self.ttl_seconds * SWEEP_AFTER_WINDOWS
        expired = [k for k, e in self._entries.items() if now - e.stored_at >= horizon]
        for k in expired:
            del self._entries[k]


__all__ = ["CacheEntry", "ResponseCache", "DEFAULT_TTL_SECONDS", "DEFAULT_MAX_ENTRIES"]
