"""Keyed TTL cache with positive and negative entries."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


def cache_key(alias: str, lane: str, versus: Optional[str] = None) -> str:
    """``alias:lane`` or ``alias:lane:versus``."""
    parts = [alias, lane]
    if versus:
        parts.append(versus)
    return ":".join(parts)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """One stored lookup.

    Positive entries carry ``value``. Negative entries record that the slice
    had no data; they keep the last good value in ``fallback`` so it can
    still be served once every live attempt has failed.
    """

    value: Optional[T]
    stored_at: float
    ttl: float
    negative: bool = False
    fallback: Optional[T] = None

    def is_live(self, now: float) -> bool:
        return now - self.stored_at < self.ttl

    @property
    def last_good(self) -> Optional[T]:
        return self.fallback if self.negative else self.value


class TTLCache(Generic[T]):
    """Process-lifetime map of query key → entry, one per data domain.

    Expired entries are not evicted on read: ``get`` reports a miss but the
    value stays reachable through ``stale`` until it is replaced or the
    cache is cleared.
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        negative_ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        if not 0 < negative_ttl < ttl:
            raise ValueError(f"negative_ttl must be in (0, {ttl}), got {negative_ttl}")
        self.name = name
        self.ttl = ttl
        self.negative_ttl = negative_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[CacheEntry[T]]:
        """Live entry for ``key`` or None on a miss (absent or expired)."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_live(self._clock()):
            return None
        return entry

    def stale(self, key: str) -> Optional[T]:
        """Last positive value stored under ``key``, regardless of age."""
        entry = self._entries.get(key)
        return entry.last_good if entry else None

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> CacheEntry[T]:
        entry = CacheEntry(value=value, stored_at=self._clock(), ttl=ttl or self.ttl)
        self._entries[key] = entry
        return entry

    def set_negative(self, key: str, ttl: Optional[float] = None) -> CacheEntry[T]:
        entry = CacheEntry(
            value=None,
            stored_at=self._clock(),
            ttl=ttl or self.negative_ttl,
            negative=True,
            fallback=self.stale(key),
        )
        self._entries[key] = entry
        logger.debug(f"{self.name}: negative entry for {key} ({entry.ttl:.0f}s)")
        return entry

    def clear(self) -> None:
        if self._entries:
            logger.info(f"{self.name}: cleared {len(self._entries)} entries")
        self._entries.clear()
