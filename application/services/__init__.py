"""Application services root exports."""
from .retry_policy import RetryPolicy
from .circuit_breaker import CircuitBreaker
from .fallback_chain import FallbackChain, QueryAttempt
from .matchup_service import MatchupService
from .item_build_service import ItemBuildService
from .rune_service import RuneService
from .stats_engine import StatsEngine

__all__ = [
    "RetryPolicy",
    "CircuitBreaker",
    "FallbackChain",
    "QueryAttempt",
    "MatchupService",
    "ItemBuildService",
    "RuneService",
    "StatsEngine",
]
