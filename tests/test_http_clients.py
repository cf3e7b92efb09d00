"""Tests for HTTP-based adapters."""

import asyncio
import json

import httpx
import pytest

from fitness_tracker.adapters.fdc_client import HttpxFdcClient

BASE_URL = "https://fdc.example.test/fdc/v1"


def test_fdc_client_search_posts_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"foods": [{"fdcId": 1}]})

    transport = httpx.MockTransport(handler)
    client = HttpxFdcClient(
        api_key="key",
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=transport),
    )

    result = asyncio.run(client.search_foods("rice", page_size=5))

    assert result == {"foods": [{"fdcId": 1}]}
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/fdc/v1/foods/search"
    assert request.url.params["api_key"] == "key"
    body = json.loads(request.content)
    assert body["query"] == "rice"
    assert body["pageSize"] == 5
    assert body["dataType"] == ["Foundation", "SR Legacy", "Branded"]


def test_fdc_client_get_food() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/fdc/v1/food/171077"
        return httpx.Response(200, json={"fdcId": 171077})

    transport = httpx.MockTransport(handler)
    client = HttpxFdcClient(
        api_key="key",
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=transport),
    )

    assert asyncio.run(client.get_food(171077)) == {"fdcId": 171077}


def test_fdc_client_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "rate limited"})

    transport = httpx.MockTransport(handler)
    client = HttpxFdcClient(
        api_key="key",
        base_url=BASE_URL,
        http_client=httpx.AsyncClient(transport=transport),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_food(1))
