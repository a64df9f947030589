from __future__ import annotations

import asyncio

import httpx
from aiolimiter import AsyncLimiter

from tracker_sync.adapters.http_resilience import ResilientClient
from tracker_sync.config.http_resilience import RateLimit, ResilienceConfig


def test_client_applies_base_url_and_default_headers() -> None:
    config = ResilienceConfig(
        name="graph",
        base_url="https://graph.example.test/v1.0/",
        timeout_seconds=5.0,
        default_headers={"Accept": "application/json"},
    )

    async def scenario() -> httpx.AsyncClient:
        async with ResilientClient(config) as client:
            return client._client  # noqa: SLF001  # type: ignore[reportPrivateUsage]

    inner = asyncio.run(scenario())

    assert str(inner.base_url) == "https://graph.example.test/v1.0/"
    assert inner.headers["Accept"] == "application/json"
    assert inner.is_closed


def test_rate_limited_requests_pass_through_the_limiter() -> None:
    seen: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="eventbrite",
        base_url="https://api.example.test/",
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        retry=None,
    )
    client = ResilientClient(config)
    client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
        base_url="https://api.example.test/",
        transport=httpx.MockTransport(handler),
    )

    async def scenario() -> list[int]:
        async with client:
            first = await client.get("events/1/")
            second = await client.post("events/2/", json={})
        return [first.status_code, second.status_code]

    assert asyncio.run(scenario()) == [200, 200]
    assert seen == ["/events/1/", "/events/2/"]
    assert isinstance(client._limiter, AsyncLimiter)  # noqa: SLF001  # type: ignore[reportPrivateUsage]


def test_client_without_rate_limit_has_no_limiter() -> None:
    client = ResilientClient(ResilienceConfig(name="plain"))

    assert client._limiter is None  # noqa: SLF001  # type: ignore[reportPrivateUsage]
    asyncio.run(client.aclose())
