"""Tests for the AI service adapters."""

import asyncio
import json

import httpx
import pytest

from meal_genie.adapters.fdc_client import HttpxFdcClient
from meal_genie.adapters.openai_analysis_client import OpenAIAnalysisClient
from meal_genie.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from meal_genie.adapters.openrouter_client import HttpxOpenRouterClient
from meal_genie.domain.errors import AnalysisClientError


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = "```json\n{\"items\": []}\n```") -> None:
        self.responses = _FakeResponses(output_text)


def test_openai_client_returns_raw_text() -> None:
    fake = _FakeOpenAI()
    client = OpenAIAnalysisClient(client=fake)

    result = asyncio.run(
        client.analyze_image(
            model="gpt-test",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
            prompt="Analyze",
        )
    )

    assert result == "```json\n{\"items\": []}\n```"
    payload = fake.responses.last_payload
    assert payload is not None
    assert payload["model"] == "gpt-test"
    assert payload["store"] is False
    content = payload["input"][0]["content"]
    assert content[1]["image_url"] == "data:image/jpeg;base64,ZmFrZQ=="


def test_openai_client_empty_reply_raises() -> None:
    client = OpenAIAnalysisClient(client=_FakeOpenAI(output_text=""))

    with pytest.raises(AnalysisClientError):
        asyncio.run(
            client.analyze_image(model="gpt-test", image_data_url="x", prompt="p")
        )


def _openrouter(handler) -> HttpxOpenRouterClient:  # type: ignore[no-untyped-def]
    transport = httpx.MockTransport(handler)
    return HttpxOpenRouterClient(
        api_key="key",
        base_url="https://openrouter.test/api/v1",
        http_client=httpx.AsyncClient(transport=transport),
    )


def test_openrouter_client_posts_image_and_returns_content() -> None:
    seen: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer key"
        seen.append(json.loads(request.content.decode()))
        return httpx.Response(
            200, json={"choices": [{"message": {"content": '{"items": []}'}}]}
        )

    client = _openrouter(handler)

    result = asyncio.run(
        client.analyze_image(
            model="google/gemini-2.5-flash",
            image_data_url="data:image/png;base64,ZmFrZQ==",
            prompt="Analyze",
        )
    )

    assert result == '{"items": []}'
    parts = seen[0]["messages"][0]["content"]
    assert parts[0] == {"type": "text", "text": "Analyze"}
    assert parts[1]["image_url"]["url"] == "data:image/png;base64,ZmFrZQ=="


def test_openrouter_client_surfaces_api_error_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(402, json={"error": {"message": "Insufficient credits"}})

    client = _openrouter(handler)

    with pytest.raises(AnalysisClientError, match="Insufficient credits"):
        asyncio.run(client.analyze_image(model="m", image_data_url="x", prompt="p"))


def test_openrouter_client_error_without_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="upstream down")

    client = _openrouter(handler)

    with pytest.raises(AnalysisClientError, match="API error: 503"):
        asyncio.run(client.analyze_image(model="m", image_data_url="x", prompt="p"))


def test_openrouter_client_empty_content_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": []})

    client = _openrouter(handler)

    with pytest.raises(AnalysisClientError, match="empty"):
        asyncio.run(client.analyze_image(model="m", image_data_url="x", prompt="p"))


def test_openrouter_client_wraps_transport_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _openrouter(handler)

    with pytest.raises(AnalysisClientError, match="connection refused"):
        asyncio.run(client.analyze_image(model="m", image_data_url="x", prompt="p"))


def test_fdc_client_searches_with_key_and_page_size() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/fdc/v1/foods/search"
        assert request.url.params["api_key"] == "key"
        assert request.url.params["query"] == "brown rice"
        assert request.url.params["pageSize"] == "1"
        return httpx.Response(200, json={"foods": []})

    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test/fdc/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    assert asyncio.run(client.search_foods("brown rice")) == {"foods": []}


def test_fdc_client_raises_for_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": "bad key"})

    client = HttpxFdcClient(
        api_key="key",
        base_url="https://api.test/fdc/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.search_foods("rice"))


def test_openfoodfacts_client_fetches_product_json() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v0/product/3017620422003.json"
        assert request.headers["Accept"] == "application/json"
        return httpx.Response(200, json={"status": 1, "product": {}})

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    result = asyncio.run(client.get_product("3017620422003"))

    assert result == {"status": 1, "product": {}}


def test_openfoodfacts_client_raises_for_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="down")

    client = HttpxOpenFoodFactsClient(
        base_url="https://off.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(client.get_product("123"))
