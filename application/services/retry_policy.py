from __future__ import annotations

import asyncio
import math
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from config import settings
from core.logging.logger import StructuredLogger


TransientPredicate = Callable[[BaseException, Optional[int]], bool]
Supplier = Callable[[], Awaitable[Any]]


@dataclass(slots=True)
class RetryPolicy:
    """Retry a single upstream attempt with exponential backoff.

    ``max_attempts`` counts the first try, so ``MAX_RETRIES=2`` means three
    requests in total. The wait before attempt ``k`` (k >= 2) is
    ``backoff_base_ms * backoff_factor ** (k - 2)``, raised to the server's
    ``Retry-After`` when a 429 supplied one.
    """

    max_attempts: int
    backoff_base_ms: int
    backoff_factor: float
    jitter_ms: int = 0

    @classmethod
    def from_env(cls) -> "RetryPolicy":
        """Create policy from settings, with ``RETRY_JITTER_MS`` as an extra knob."""
        try:
            jitter = int(os.getenv("RETRY_JITTER_MS", "0"))
        except ValueError:
            jitter = 0
        return cls(
            max_attempts=settings.MAX_RETRIES + 1,
            backoff_base_ms=settings.RETRY_BACKOFF_MS,
            backoff_factor=settings.RETRY_FACTOR,
            jitter_ms=jitter,
        )

    def backoff_ms(self, attempt: int, error: Optional[BaseException] = None) -> int:
        """Delay after failed ``attempt`` (1-based)."""
        delay = int(self.backoff_base_ms * math.pow(self.backoff_factor, attempt - 1)) + self.jitter_ms
        retry_after = getattr(error, "retry_after_ms", None)
        if isinstance(retry_after, int) and retry_after > delay:
            delay = retry_after
        return delay

    async def run(
        self,
        supplier: Supplier,
        *,
        is_transient: TransientPredicate,
        logger: StructuredLogger,
        context: dict[str, Any] | None = None,
    ) -> Any:
        """Execute an async supplier, retrying transient errors.

        The last error is re-raised once attempts run out or a terminal error
        is seen.
        """
        extra = dict(context or {})
        for attempt in range(1, self.max_attempts + 1):
            try:
                if attempt == 1:
                    logger.trace(lambda: "retry-start", extra=extra)
                return await supplier()
            except Exception as e:
                status = getattr(e, "status_code", None)
                transient = is_transient(e, status)
                logger.warning(
                    lambda: f"attempt {attempt}/{self.max_attempts} {'transient' if transient else 'terminal'}: {e}",
                    extra={**extra, "attempt": attempt, "status": status},
                )
                if attempt >= self.max_attempts or not transient:
                    raise
                await asyncio.sleep(self.backoff_ms(attempt, e) / 1000.0)
