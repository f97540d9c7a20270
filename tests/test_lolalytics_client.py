"""Tests for the Lolalytics HTTP client."""
import httpx
import pytest

from domain.errors import ShapeError, TransportError
from infrastructure.api import LolalyticsClient, TokenBucketRateLimiter


class TestLolalyticsClient:
    """One request per call; failures surface as typed errors."""

    @pytest.mark.asyncio
    async def test_query_sends_endpoint_and_slice(self, make_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"counters": []})

        client = make_client(handler)
        payload = await client.query("counter", {"patch": "14.24", "c": "aatrox", "lane": "top"})
        await client.aclose()

        assert payload == {"counters": []}
        request = seen[0]
        assert request.url.path == "/mega/"
        assert request.url.params["ep"] == "counter"
        assert request.url.params["v"] == "1"
        assert request.url.params["c"] == "aatrox"
        assert request.headers["Accept"] == "application/json"
        assert "Mozilla" in request.headers["User-Agent"]

    @pytest.mark.asyncio
    async def test_non_success_status_is_transport_error(self, make_client):
        client = make_client(lambda r: httpx.Response(500, text="boom"))
        with pytest.raises(TransportError) as exc_info:
            await client.query("counter", {})
        assert exc_info.value.status_code == 500
        assert client.last_status_code == 500
        await client.aclose()

    @pytest.mark.asyncio
    async def test_429_carries_retry_after(self, make_client):
        client = make_client(lambda r: httpx.Response(429, headers={"Retry-After": "0"}))
        with pytest.raises(TransportError) as exc_info:
            await client.query("counter", {})
        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after_ms == 0
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_retry_after_uses_default(self, make_client):
        client = make_client(lambda r: httpx.Response(429, headers={"Retry-After": "soon"}))
        with pytest.raises(TransportError) as exc_info:
            await client.query("counter", {})
        assert exc_info.value.retry_after_ms == 5000
        await client.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=[1, 2, 3]),
    ])
    async def test_unusable_body_is_shape_error(self, make_client, response):
        client = make_client(lambda r: response)
        with pytest.raises(ShapeError):
            await client.query("summary", {})
        await client.aclose()

    @pytest.mark.asyncio
    async def test_page_returns_html(self, make_client):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="<html>ok</html>")

        client = make_client(handler)
        html = await client.page("/lol/aatrox/build/", {"lane": "top"})
        await client.aclose()

        assert html == "<html>ok</html>"
        assert seen[0].url.host == "lolalytics.com"
        assert seen[0].url.path == "/lol/aatrox/build/"
        assert seen[0].url.params["lane"] == "top"

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError) as exc_info:
            await client.page("/lol/aatrox/build/")
        assert exc_info.value.status_code is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_connection_error_is_transport_error(self, make_client):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        with pytest.raises(TransportError):
            await client.query("counter", {})
        await client.aclose()

    @pytest.mark.asyncio
    async def test_every_request_takes_a_token(self):
        limiter = TokenBucketRateLimiter(capacity=5, refill_period=60)
        transport = httpx.MockTransport(lambda r: httpx.Response(500))
        async with LolalyticsClient(limiter, transport=transport) as client:
            for _ in range(2):
                with pytest.raises(TransportError):
                    await client.query("counter", {})
        assert limiter.tokens == 3
        assert client.session is None
