"""Ordered variant/channel fallback with retries and cache write-through."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from core.logging.context import context
from core.logging.logger import StructuredLogger, get_logger
from domain.enums import Channel
from domain.errors import InsufficientDataError, StatsUnavailableError
from infrastructure.cache import TTLCache
from .circuit_breaker import CircuitBreaker
from .retry_policy import RetryPolicy

T = TypeVar("T")


@dataclass(frozen=True)
class QueryAttempt(Generic[T]):
    """One variant: a channel plus the parameters baked into ``run``.

    ``run`` performs a single request and extraction. It raises a
    ``StatsUnavailableError`` when the attempt produced nothing usable.
    """

    label: str
    channel: Channel
    run: Callable[[], Awaitable[T]]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    is_empty = getattr(value, "is_empty", None)
    if isinstance(is_empty, bool):
        return is_empty
    try:
        return len(value) == 0
    except TypeError:
        return False


def _retryable(error: BaseException, _status: Optional[int]) -> bool:
    # transport, shape and sample failures are all treated alike
    return isinstance(error, StatsUnavailableError)


class FallbackChain:
    """Runs attempts in order and stops at the first non-empty result.

    Each attempt gets the full retry budget of ``retry_policy``. When every
    attempt is exhausted the key is negatively cached and the last good value
    (if any) is returned instead.
    """

    def __init__(
        self,
        retry_policy: RetryPolicy,
        breaker: Optional[CircuitBreaker] = None,
        *,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.retry_policy = retry_policy
        self.breaker = breaker
        self.logger = logger or get_logger(__name__, service="stats")

    async def resolve(
        self,
        key: str,
        attempts: Sequence[QueryAttempt[T]],
        cache: TTLCache[T],
        *,
        is_empty: Callable[[Any], bool] = _is_empty,
    ) -> Optional[T]:
        entry = cache.get(key)
        if entry is not None:
            if entry.negative:
                self.logger.debug(lambda: f"{cache.name}: negative hit for {key}")
                return entry.fallback
            self.logger.trace(lambda: f"{cache.name}: hit for {key}")
            return entry.value

        for attempt in attempts:
            with context(key=key, channel=attempt.channel.value, variant=attempt.label):
                result = await self._try(attempt, is_empty)
            if result is not None:
                cache.set(key, result)
                self.logger.success(lambda: f"{cache.name}: {key} served by {attempt.label}")
                return result

        cache.set_negative(key)
        stale = cache.stale(key)
        self.logger.warning(
            lambda: f"{cache.name}: every variant failed for {key}"
            + (", serving stale value" if stale is not None else "")
        )
        return stale

    async def _try(self, attempt: QueryAttempt[T], is_empty: Callable[[Any], bool]) -> Optional[T]:
        channel = attempt.channel.value
        if self.breaker is not None and not self.breaker.allow(channel):
            self.logger.info(lambda: f"channel {channel} is open, skipping {attempt.label}")
            return None

        async def checked() -> T:
            value = await attempt.run()
            if is_empty(value):
                raise InsufficientDataError(f"{attempt.label}: empty result")
            return value

        try:
            result = await self.retry_policy.run(
                checked,
                is_transient=_retryable,
                logger=self.logger,
                context={"channel": channel, "variant": attempt.label},
            )
        except InsufficientDataError:
            # the channel answered; the slice just has no data
            if self.breaker is not None:
                self.breaker.record_success(channel)
            return None
        except StatsUnavailableError as exc:
            self.logger.info(lambda: f"variant {attempt.label} exhausted: {exc}")
            if self.breaker is not None:
                self.breaker.record_failure(channel)
            return None
        except Exception as exc:
            self.logger.error(lambda: f"variant {attempt.label} crashed: {exc!r}", exc_info=True)
            if self.breaker is not None:
                self.breaker.record_failure(channel)
            return None

        if self.breaker is not None:
            self.breaker.record_success(channel)
        return result
