"""Infrastructure API module."""
from .lolalytics_client import LolalyticsClient
from .rate_limiter import TokenBucketRateLimiter

__all__ = [
    'LolalyticsClient',
    'TokenBucketRateLimiter',
]
