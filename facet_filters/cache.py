"""Time-boxed cache for unconstrained aggregate results."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Fetch = Callable[[], Awaitable[Any]]

DEFAULT_TTL_SECONDS = 300.0


class CacheStatus(str, Enum):
    EMPTY = "empty"
    VALID = "valid"
    STALE = "stale"


@dataclass
class CacheEntry(Generic[T]):
    """Cached value stamped with the time its refresh started."""

    data: T
    timestamp: float

    def age(self, now: float) -> float:
        return now - self.timestamp

    def is_valid(self, now: float, ttl_seconds: float) -> bool:
        return self.age(now) <= ttl_seconds


@dataclass
class BaselineCache:
    """Process-wide ``key -> CacheEntry`` map with lazy, concurrent refresh.

    There is no lock. Two readers that both find a key stale each refresh it;
    the later write wins. Refresh failures propagate and leave the previous
    entry in place.
    """

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    clock: Clock = time.monotonic
    _entries: dict[str, CacheEntry[Any]] = field(default_factory=dict)

    def status(self, key: str) -> CacheStatus:
        entry = self._entries.get(key)
        if entry is None:
            return CacheStatus.EMPTY
        if entry.is_valid(self.clock(), self.ttl_seconds):
            return CacheStatus.VALID
        return CacheStatus.STALE

    def peek(self, key: str) -> CacheEntry[Any] | None:
        """Return the raw entry without refreshing, even if stale."""
        return self._entries.get(key)

    def put(self, key: str, data: Any, timestamp: float | None = None) -> None:
        self._entries[key] = CacheEntry(
            data=data, timestamp=self.clock() if timestamp is None else timestamp
        )

    async def get_cached(self, key: str, fetch: Fetch) -> Any:
        """Return fresh data for ``key``, awaiting ``fetch`` if it is missing or stale."""
        results = await self.get_many({key: fetch})
        return results[key]

    async def get_many(self, fetchers: Mapping[str, Fetch]) -> dict[str, Any]:
        """Return data for every key, refreshing all stale keys concurrently."""
        now = self.clock()
        stale = [
            key
            for key in fetchers
            if key not in self._entries
            or not self._entries[key].is_valid(now, self.ttl_seconds)
        ]
        if stale:
            logger.debug("Refreshing %d cache key(s): %s", len(stale), ", ".join(stale))
            await asyncio.gather(*(self._refresh(key, fetchers[key], now) for key in stale))
        else:
            logger.debug("Serving %d cache key(s) from memory", len(fetchers))
        return {key: self._entries[key].data for key in fetchers}

    async def _refresh(self, key: str, fetch: Fetch, now: float) -> None:
        data = await fetch()
        self._entries[key] = CacheEntry(data=data, timestamp=now)

    def info(self) -> dict[str, dict[str, Any]]:
        """Age and freshness per key, for diagnostics."""
        now = self.clock()
        return {
            key: {
                "age_seconds": int(entry.age(now)),
                "age_human": _format_age(entry.age(now)),
                "fresh": entry.is_valid(now, self.ttl_seconds),
            }
            for key, entry in sorted(self._entries.items())
        }


def _format_age(seconds: float) -> str:
    if seconds < 60:
        return f"{int(seconds)}s"
    if seconds < 3600:
        return f"{int(seconds / 60)}m"
    if seconds < 86400:
        return f"{seconds / 3600:.1f}h"
    return f"{seconds / 86400:.1f}d"
