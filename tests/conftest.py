"""Shared fixtures: reference tables, a controllable clock and mocked HTTP."""
from __future__ import annotations

import json
from typing import Any, Callable, List

import httpx
import pytest

from application.services import RetryPolicy, StatsEngine
from domain.entities import ChampionInfo
from infrastructure.api import LolalyticsClient, TokenBucketRateLimiter
from infrastructure.reference import ReferenceTables

Handler = Callable[[httpx.Request], httpx.Response]

CHAMPIONS = [
    ChampionInfo("Aatrox", 266, "Aatrox", attack=8, defense=4, magic=3, tags=("Fighter", "Tank")),
    ChampionInfo("Tryndamere", 23, "Tryndamere", attack=10, defense=5, magic=2, tags=("Fighter", "Assassin")),
    ChampionInfo("Darius", 122, "Darius", attack=9, defense=5, magic=1, tags=("Fighter", "Tank")),
    ChampionInfo("Malphite", 54, "Malphite", attack=5, defense=9, magic=7, tags=("Tank", "Fighter")),
    ChampionInfo("Annie", 1, "Annie", attack=2, defense=3, magic=10, tags=("Mage",)),
    ChampionInfo("Ahri", 103, "Ahri", attack=3, defense=4, magic=8, tags=("Mage", "Assassin")),
    ChampionInfo("Garen", 86, "Garen", attack=7, defense=7, magic=1, tags=("Fighter", "Tank")),
    ChampionInfo("Teemo", 17, "Teemo", attack=5, defense=3, magic=7, tags=("Marksman", "Assassin")),
    ChampionInfo("MasterYi", 11, "Master Yi", attack=10, defense=4, magic=2, tags=("Assassin", "Fighter")),
    ChampionInfo("DrMundo", 36, "Dr. Mundo", attack=5, defense=7, magic=6, tags=("Tank", "Fighter")),
]

ITEMS = {
    1054: {"name": "Doran's Shield", "gold": 450},
    1055: {"name": "Doran's Blade", "gold": 450},
    1056: {"name": "Doran's Ring", "gold": 400},
    2003: {"name": "Health Potion", "gold": 50},
    3047: {"name": "Plated Steelcaps", "gold": 1200},
    3053: {"name": "Sterak's Gage", "gold": 3200},
    3065: {"name": "Spirit Visage", "gold": 2900},
    3068: {"name": "Sunfire Aegis", "gold": 2700},
    3071: {"name": "Black Cleaver", "gold": 3000},
    3078: {"name": "Trinity Force", "gold": 3333},
    3111: {"name": "Mercury's Treads", "gold": 1250},
    6333: {"name": "Death's Dance", "gold": 3300},
    6617: {"name": "Moonstone Renewer", "gold": 2200},
    6653: {"name": "Liandry's Torment", "gold": 3000},
}


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def reference() -> ReferenceTables:
    return ReferenceTables("14.24.1", CHAMPIONS, ITEMS)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fast_retry() -> RetryPolicy:
    """Three attempts per variant without sleeping between them."""
    return RetryPolicy(max_attempts=3, backoff_base_ms=0, backoff_factor=2.0)


@pytest.fixture
def make_client() -> Callable[[Handler], LolalyticsClient]:
    def _make(handler: Handler) -> LolalyticsClient:
        limiter = TokenBucketRateLimiter(capacity=1000, refill_period=0.001)
        return LolalyticsClient(limiter, transport=httpx.MockTransport(handler))
    return _make


@pytest.fixture
def make_engine(reference, fast_retry, make_client, clock) -> Callable[[Handler], StatsEngine]:
    def _make(handler: Handler) -> StatsEngine:
        return StatsEngine(reference, make_client(handler), retry_policy=fast_retry, clock=clock)
    return _make


@pytest.fixture
def qwik_page() -> Callable[[List[Any]], str]:
    """Wrap a node array in a minimal server-rendered page."""
    def _page(objs: List[Any], body: str = "") -> str:
        state = json.dumps({"refs": {}, "ctx": {}, "objs": objs, "subs": []})
        return (
            "<!DOCTYPE html><html><head><title>LoLalytics</title></head><body>"
            f"<main>{body}</main>"
            f'<script type="qwik/json">{state}</script>'
            "</body></html>"
        )
    return _page
