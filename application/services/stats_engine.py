"""Statistics engine: owns the throttle, the client and the caches."""
from __future__ import annotations

import asyncio
import time
from typing import Callable, Iterable, List, Optional, Sequence

from config import settings
from core.logging.context import context
from core.logging.logger import get_logger
from domain.entities import (
    BuildRecord,
    BuildSummary,
    MatchupRecord,
    PickSuggestion,
    RunePageRecord,
    SkillPlanRecord,
    SummonerSpellRecord,
    to_alias,
)
from domain.enums import Lane
from domain.interfaces import IReferenceData
from infrastructure.api import LolalyticsClient, TokenBucketRateLimiter
from infrastructure.cache import TTLCache
from .circuit_breaker import CircuitBreaker
from .fallback_chain import FallbackChain
from .item_build_service import ItemBuildService
from .matchup_service import MatchupService
from .pick_advisor import best_overall_pick, build_team_profile, invert, sort_counters
from .retry_policy import RetryPolicy
from .rune_service import RuneService

logger = get_logger(__name__, service="stats")


class StatsEngine:
    """Async query surface for matchups, builds, runes and skills.

    Every public query returns a populated or empty result and never raises;
    failures are logged. One engine is meant to live for the whole process;
    ``clear_cache`` is the new-match signal.
    """

    def __init__(
        self,
        reference: IReferenceData,
        client: LolalyticsClient,
        *,
        retry_policy: Optional[RetryPolicy] = None,
        patch: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.reference = reference
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy.from_env()
        self.matchup_cache: TTLCache[List[MatchupRecord]] = TTLCache(
            "matchups", settings.CACHE_TTL_S, settings.NEGATIVE_CACHE_TTL_S, clock)
        self.build_cache: TTLCache[BuildRecord] = TTLCache(
            "builds", settings.CACHE_TTL_S, settings.NEGATIVE_CACHE_TTL_S, clock)
        self.summary_cache: TTLCache[BuildSummary] = TTLCache(
            "summaries", settings.CACHE_TTL_S, settings.NEGATIVE_CACHE_TTL_S, clock)

        def chain() -> FallbackChain:
            breaker = CircuitBreaker(
                failure_threshold=settings.BREAKER_THRESHOLD,
                reset_timeout_s=settings.BREAKER_RESET_S,
                clock=clock,
            )
            return FallbackChain(self.retry_policy, breaker, logger=logger)

        self.matchups = MatchupService(client, reference, chain(), self.matchup_cache, patch=patch)
        self.builds = ItemBuildService(client, reference, chain(), self.build_cache, patch=patch)
        self.runes = RuneService(client, reference, chain(), self.summary_cache, patch=patch)
        self._background: set[asyncio.Task] = set()

    @classmethod
    def create(
        cls,
        reference: IReferenceData,
        *,
        patch: Optional[str] = None,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        **client_kwargs,
    ) -> "StatsEngine":
        """Engine with a client and throttle built from settings."""
        limiter = rate_limiter or TokenBucketRateLimiter(
            capacity=settings.THROTTLE_CAPACITY,
            refill_period=settings.THROTTLE_REFILL_MS / 1000.0,
        )
        return cls(reference, LolalyticsClient(limiter, **client_kwargs), patch=patch)

    async def __aenter__(self) -> "StatsEngine":
        return self

    async def __aexit__(self, *_) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        for task in list(self._background):
            task.cancel()
        await self.client.aclose()

    # ── Matchups ───────────────────────────────────────────────────────

    @staticmethod
    def _slice(alias: str, lane: str | Lane) -> tuple[str, Lane]:
        return to_alias(alias), lane if isinstance(lane, Lane) else Lane.from_string(lane)

    async def _matchups(self, alias: str, lane: str | Lane) -> List[MatchupRecord]:
        alias, lane_ = self._slice(alias, lane)
        with context(alias=alias, lane=lane_.value):
            return await self.matchups.get_matchups(alias, lane_)

    async def get_counters(self, alias: str, lane: str | Lane) -> List[MatchupRecord]:
        """Opponents that counter ``alias``, strongest first."""
        try:
            return sort_counters(await self._matchups(alias, lane))
        except Exception as e:
            logger.error(lambda: f"get_counters({alias}, {lane}) failed: {e!r}", exc_info=True)
            return []

    async def get_best_counterpicks(self, alias: str, lane: str | Lane) -> List[MatchupRecord]:
        """Best picks against ``alias``; ``win_rate`` is the pick's win rate."""
        try:
            return invert(await self._matchups(alias, lane))
        except Exception as e:
            logger.error(lambda: f"get_best_counterpicks({alias}, {lane}) failed: {e!r}", exc_info=True)
            return []

    async def get_best_overall_pick(
        self,
        enemy_aliases: Sequence[str],
        lane: str | Lane,
        ally_keys: Optional[Iterable[int | str]] = None,
    ) -> List[PickSuggestion]:
        """Candidates ranked against every enemy at once, adjusted for ally synergy."""
        if not enemy_aliases:
            return []
        try:
            counterpicks = await asyncio.gather(*(self.get_best_counterpicks(e, lane) for e in enemy_aliases))
            ally_keys = list(ally_keys or [])
            profile = build_team_profile(ally_keys, self.reference) if ally_keys else None
            return best_overall_pick(counterpicks, self.reference, profile)
        except Exception as e:
            logger.error(lambda: f"get_best_overall_pick({list(enemy_aliases)}, {lane}) failed: {e!r}", exc_info=True)
            return []

    # ── Builds ─────────────────────────────────────────────────────────

    async def get_build(self, alias: str, lane: str | Lane) -> Optional[BuildRecord]:
        try:
            alias, lane_ = self._slice(alias, lane)
            with context(alias=alias, lane=lane_.value):
                return await self.builds.get_build(alias, lane_)
        except Exception as e:
            logger.error(lambda: f"get_build({alias}, {lane}) failed: {e!r}", exc_info=True)
            return None

    # ── Runes & skills ─────────────────────────────────────────────────

    async def get_build_summary(self, alias: str, lane: str | Lane) -> Optional[BuildSummary]:
        try:
            alias, lane_ = self._slice(alias, lane)
            with context(alias=alias, lane=lane_.value):
                return await self.runes.get_summary(alias, lane_)
        except Exception as e:
            logger.error(lambda: f"get_build_summary({alias}, {lane}) failed: {e!r}", exc_info=True)
            return None

    async def get_recommended_runes(self, alias: str, lane: str | Lane) -> List[RunePageRecord]:
        summary = await self.get_build_summary(alias, lane)
        return list(summary.runes) if summary else []

    async def get_summoner_spells(self, alias: str, lane: str | Lane) -> List[SummonerSpellRecord]:
        summary = await self.get_build_summary(alias, lane)
        return list(summary.summoner_spells) if summary else []

    async def get_skill_plans(self, alias: str, lane: str | Lane) -> List[SkillPlanRecord]:
        summary = await self.get_build_summary(alias, lane)
        return list(summary.skill_plans) if summary else []

    # ── Lifecycle ──────────────────────────────────────────────────────

    def clear_cache(self) -> None:
        """Drop every cached slice, e.g. when a new match starts."""
        for cache in (self.matchup_cache, self.build_cache, self.summary_cache):
            cache.clear()
        logger.info("stats caches cleared")

    def prefetch(self, alias: str, lane: str | Lane) -> asyncio.Task:
        """Warm all three caches for a slice in the background."""
        async def warm() -> None:
            await asyncio.gather(
                self.get_counters(alias, lane),
                self.get_build(alias, lane),
                self.get_build_summary(alias, lane),
                return_exceptions=True,
            )

        task = asyncio.create_task(warm())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
