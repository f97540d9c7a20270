"""Shared plumbing for the per-domain extraction pipelines."""
from __future__ import annotations

from functools import partial
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from config import settings
from domain.enums import Channel, Lane
from domain.interfaces import IReferenceData
from infrastructure.api import LolalyticsClient
from infrastructure.cache import TTLCache, cache_key
from .fallback_chain import FallbackChain, QueryAttempt

T = TypeVar("T")

# Extractors call this on every value they read. JSON payloads are already
# plain data; page state passes ``SerializedState.expand`` so references
# left unresolved at the depth bound are followed one more step.
Resolve = Callable[[Any], Any]


def plain(value: Any) -> Any:
    return value


class StatsService(Generic[T]):
    """Base class: one data domain, one cache, two channels.

    Subclasses implement ``fetch_primary`` (JSON endpoint) and
    ``fetch_secondary`` (server-rendered page). Both run exactly one request
    and raise ``StatsUnavailableError`` subclasses when the result is not
    usable.
    """

    def __init__(
        self,
        client: LolalyticsClient,
        reference: IReferenceData,
        chain: FallbackChain,
        cache: TTLCache[T],
        *,
        patch: Optional[str] = None,
    ) -> None:
        self.client = client
        self.reference = reference
        self.chain = chain
        self.cache = cache
        self._patch = patch

    # ── Query slice ────────────────────────────────────────────────────

    def current_patch(self) -> str:
        return self._patch or settings.PATCH_OVERRIDE or self.reference.patch()

    def query_params(self, alias: str, lane: Lane, patch: str) -> Dict[str, str]:
        return {
            "patch": patch,
            "c": alias,
            "lane": lane.api_lane,
            "tier": settings.TIER,
            "queue": "450" if lane.is_aram else settings.QUEUE,
            "region": settings.REGION,
        }

    @staticmethod
    def page_params(lane: Lane) -> Optional[Dict[str, str]]:
        if lane.is_aram or lane is Lane.DEFAULT:
            return None
        return {"lane": lane.value}

    def primary_variants(self, lane: Lane) -> List[Tuple[str, Lane]]:
        """Exact patch first, then the trailing window, then the champion's own lane."""
        current = self.current_patch()
        variants = [(current, lane)]
        if current != settings.TRAILING_PATCH:
            variants.append((settings.TRAILING_PATCH, lane))
        if lane not in (Lane.DEFAULT, Lane.ARAM):
            variants.append((current, Lane.DEFAULT))
        return variants

    @staticmethod
    def secondary_variants(lane: Lane) -> List[Lane]:
        if lane in (Lane.DEFAULT, Lane.ARAM):
            return [lane]
        return [lane, Lane.DEFAULT]

    def attempts(self, alias: str, lane: Lane) -> List[QueryAttempt[T]]:
        out: List[QueryAttempt[T]] = []
        for patch, variant_lane in self.primary_variants(lane):
            out.append(QueryAttempt(
                label=f"json patch={patch} lane={variant_lane.api_lane}",
                channel=Channel.PRIMARY,
                run=partial(self.fetch_primary, alias, variant_lane, patch),
            ))
        for variant_lane in self.secondary_variants(lane):
            out.append(QueryAttempt(
                label=f"page lane={variant_lane.value}",
                channel=Channel.SECONDARY,
                run=partial(self.fetch_secondary, alias, variant_lane),
            ))
        return out

    async def fetch(self, alias: str, lane: Lane) -> Optional[T]:
        """Cached value for the slice, or the result of the fallback chain."""
        return await self.chain.resolve(cache_key(alias, lane.value), self.attempts(alias, lane), self.cache)

    # ── Channels ───────────────────────────────────────────────────────

    async def fetch_primary(self, alias: str, lane: Lane, patch: str) -> T:
        raise NotImplementedError

    async def fetch_secondary(self, alias: str, lane: Lane) -> T:
        raise NotImplementedError
