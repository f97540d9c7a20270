"""Lolalytics HTTP client."""
import asyncio
import logging
import time
from typing import Optional, Dict, Any
import httpx

from config import settings
from domain.errors import ShapeError, TransportError
from .rate_limiter import TokenBucketRateLimiter

logger = logging.getLogger(__name__)


class LolalyticsClient:
    """Asynchronous client for the analytics site, gated by the shared throttle.

    The client makes exactly one request per call. Retries, variants and
    fallbacks belong to the caller; failures surface as ``TransportError``
    or ``ShapeError``.
    """

    def __init__(
        self,
        rate_limiter: Optional[TokenBucketRateLimiter] = None,
        *,
        base_url: str = settings.LOLALYTICS_BASE,
        api_url: str = settings.LOLALYTICS_API,
        timeout: float = settings.REQUEST_TIMEOUT,
        page_timeout: float = settings.PAGE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rate_limiter = rate_limiter or TokenBucketRateLimiter(
            capacity=settings.THROTTLE_CAPACITY,
            refill_period=settings.THROTTLE_REFILL_MS / 1000.0,
        )
        self.base_url = base_url.rstrip("/")
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.page_timeout = page_timeout
        self.session: Optional[httpx.AsyncClient] = None
        self.last_status_code: Optional[int] = None
        self._transport = transport
        self._cooldown_until = 0.0

    async def __aenter__(self):
        self._open()
        return self

    async def __aexit__(self, *_):
        await self.aclose()

    def _open(self) -> httpx.AsyncClient:
        if self.session is None or self.session.is_closed:
            self.session = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": settings.USER_AGENT},
                follow_redirects=True,
                transport=self._transport,
            )
        return self.session

    async def aclose(self) -> None:
        if self.session is not None:
            await self.session.aclose()
            self.session = None

    # ── Requests ───────────────────────────────────────────────────────

    async def _get(self, url: str, params: Optional[Dict[str, str]], timeout: float, accept: str) -> httpx.Response:
        # honour a Retry-After received on any earlier request
        wait = self._cooldown_until - time.monotonic()
        if wait > 0:
            await asyncio.sleep(wait)

        await self.rate_limiter.acquire()
        session = self._open()
        try:
            response = await session.get(url, params=params, timeout=timeout, headers={"Accept": accept})
        except httpx.TimeoutException as exc:
            raise TransportError(f"timeout after {timeout}s: {url}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"network error: {exc}") from exc

        self.last_status_code = response.status_code
        if response.status_code == 429:
            retry_after_ms = self._retry_after_ms(response)
            self._cooldown_until = time.monotonic() + retry_after_ms / 1000.0
            logger.warning(f"429 rate-limited, cooling down {retry_after_ms}ms")
            raise TransportError("HTTP 429", status_code=429, retry_after_ms=retry_after_ms)
        if not response.is_success:
            raise TransportError(f"HTTP {response.status_code} for {response.url}", status_code=response.status_code)
        return response

    @staticmethod
    def _retry_after_ms(response: httpx.Response) -> int:
        try:
            return int(float(response.headers.get("Retry-After", "5")) * 1000)
        except ValueError:
            return 5000

    async def query(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """JSON query endpoint: ``<api>/mega/?ep=<endpoint>&v=1&...``."""
        url = f"{self.api_url}{settings.QUERY_PATH}"
        response = await self._get(url, {"ep": endpoint, "v": "1", **params}, self.timeout, "application/json")
        try:
            payload = response.json()
        except ValueError as exc:
            raise ShapeError(f"{endpoint}: response is not JSON") from exc
        if not isinstance(payload, dict):
            raise ShapeError(f"{endpoint}: expected a JSON object, got {type(payload).__name__}")
        return payload

    async def page(self, path: str, params: Optional[Dict[str, str]] = None) -> str:
        """Server-rendered page, e.g. ``/lol/aatrox/build/``."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = await self._get(url, params, self.page_timeout, "text/html")
        return response.text
