"""
backend/app/services/cache_service.py

Purpose:
    Key-value cache with per-entry TTL used by the sports provider for list
    endpoints. Entries expire passively; there is no invalidation API.

Dependencies:
    - time
"""

from __future__ import annotations

import time
from typing import Any, Callable, Protocol


class CacheBackend(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...


class InMemoryTTLCache:
    """Process-local TTL cache. Expired entries are swept on every write."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, dict[str, Any]] = {}

    async def get(self, key: str) -> Any | None:
        entry = self._data.get(key)
        if not entry:
            return None
        if entry["expires_at"] <= self._clock():
            del self._data[key]
            return None
        return entry["value"]

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        now = self._clock()
        self._data[key] = {"value": value, "expires_at": now + max(0, int(ttl_seconds))}
        self._cleanup(now)

    def _cleanup(self, now: float) -> None:
        expired = [k for k, v in self._data.items() if v["expires_at"] <= now]
        for k in expired:
            del self._data[k]

    def __len__(self) -> int:
        return len(self._data)


cache_service = InMemoryTTLCache()
