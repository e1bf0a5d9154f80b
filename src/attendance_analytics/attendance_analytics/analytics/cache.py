from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    stored_at: float


class AnalyticsCache:
    """Bounded in-process map from filter signature to computed bundle.

    Entries expire ``ttl_seconds`` after being stored; stale entries are
    dropped on read and purged on write. When full, the oldest entry goes.
    No locking: two concurrent misses for one key both compute and the last
    write wins, which is harmless because results are deterministic.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = float(ttl_seconds)
        self._max_entries = max(1, int(max_entries))
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return (now - entry.stored_at) < self._ttl

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        now = self._clock()
        for stale in [k for k, e in self._entries.items() if not self._is_fresh(e, now)]:
            del self._entries[stale]

        self._entries.pop(key, None)
        while len(self._entries) >= self._max_entries:
            self._entries.popitem(last=False)
        self._entries[key] = CacheEntry(value=value, stored_at=now)

    def clear(self) -> None:
        self._entries.clear()
