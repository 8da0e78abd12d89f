"""Bounded in-memory TTL store used by the HTTP handlers.

Each handler gets its own store. Entries are served only while
``now() - stored_at < ttl``; expired and least-recently-used entries are
evicted by the underlying ``cachetools.TTLCache``.
"""

import time
from typing import Any, Callable

from cachetools import TTLCache


class TTLStore:
    def __init__(
        self,
        ttl: float,
        maxsize: int = 256,
        timer: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl
        self._timer = timer
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    def now(self) -> float:
        return self._timer()

    def get(self, key: str) -> Any | None:
        return self._cache.get(key)

    def set(self, key: str, payload: Any) -> None:
        self._cache[key] = payload

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        # Drop stale entries first so the count reflects what get() would serve.
        self._cache.expire()
        return len(self._cache)
