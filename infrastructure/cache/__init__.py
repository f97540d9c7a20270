"""Infrastructure cache module."""
from .ttl_cache import TTLCache, CacheEntry, cache_key

__all__ = [
    'TTLCache',
    'CacheEntry',
    'cache_key',
]
