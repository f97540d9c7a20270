"""Infrastructure layer - HTTP client, throttle, cache, state resolver, reference data."""
from .api import LolalyticsClient, TokenBucketRateLimiter
from .cache import TTLCache, CacheEntry, cache_key
from .serialization import SerializedState, extract_state_block
from .reference import ReferenceTables, DataDragonLoader

__all__ = [
    'LolalyticsClient',
    'TokenBucketRateLimiter',
    'TTLCache',
    'CacheEntry',
    'cache_key',
    'SerializedState',
    'extract_state_block',
    'ReferenceTables',
    'DataDragonLoader',
]
