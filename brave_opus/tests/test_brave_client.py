"""Tests for BraveClient, query params and response schemas (mocked HTTP)."""

from __future__ import annotations

import httpx
import pytest

from brave_opus.core.errors import ApiError, ConfigurationError, DeserializeError, RequestError
from brave_opus.search.client import Auth, BraveClient
from brave_opus.search.params import SuggestSearchParams, WebSearchParams
from brave_opus.search.schemas import PostalAddress, Review, SearchResult, WebSearchApiResponse

WEB_RESPONSE = {
    "type": "search",
    "query": {"original": "rust sse", "is_navigational": False},
    "web": {
        "type": "search",
        "results": [
            {
                "title": "SSE in Rust",
                "url": "https://example.com/sse",
                "description": "Server-sent events",
                "age": "2 days ago",
            }
        ],
    },
    "summarizer": {"type": "summarizer", "key": "{\"query\": \"rust sse\"}"},
}

SUMMARY_RESPONSE = {
    "type": "summarizer",
    "status": "complete",
    "title": "Rust SSE",
    "results": [{"type": "token", "summary": "SSE is a push protocol."}],
}


def _client(handler) -> BraveClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return BraveClient(Auth("brave-token"), http_client=http)


def test_auth_requires_token():
    with pytest.raises(ConfigurationError):
        Auth("  ")
    with pytest.raises(ConfigurationError):
        Auth.from_env()


def test_auth_from_env(monkeypatch):
    monkeypatch.setenv("BRAVE_SUBSCRIPTION_TOKEN", "tok")
    assert Auth.from_env().subscription_token == "tok"


def test_web_params_only_set_values_in_field_order():
    params = WebSearchParams(q="rust sse", spellcheck=False, count=5, country="ALL")
    assert params.to_query_params() == [
        ("q", "rust sse"),
        ("country", "ALL"),
        ("count", "5"),
        ("spellcheck", "false"),
    ]
    assert WebSearchParams.new("x").to_query_params() == [("q", "x")]


def test_suggest_params_render_bools():
    params = SuggestSearchParams(q="pyth", rich=True, count=3)
    assert params.to_query_params() == [("q", "pyth"), ("count", "3"), ("rich", "true")]


def test_schema_keeps_unknown_fields():
    response = WebSearchApiResponse.model_validate(WEB_RESPONSE)
    result = response.web.results[0]
    assert result.url == "https://example.com/sse"
    assert result.model_dump()["age"] == "2 days ago"


def test_schema_product_review_discriminator():
    result = SearchResult.model_validate({"product": {"type": "Review", "name": "Widget"}})
    assert isinstance(result.product, Review)


def test_schema_postal_address_aliases():
    address = PostalAddress.model_validate({"postalCode": "94107", "addressLocality": "SF"})
    assert address.postal_code == "94107"
    assert address.model_dump(by_alias=True, exclude_none=True) == {
        "postalCode": "94107",
        "addressLocality": "SF",
    }


@pytest.mark.asyncio
async def test_search():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=WEB_RESPONSE)

    async with _client(handler) as client:
        response = await client.search(WebSearchParams(q="rust sse", count=5))
    assert response.web.results[0].title == "SSE in Rust"
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/res/v1/web/search"
    assert request.url.params.multi_items() == [("q", "rust sse"), ("count", "5")]
    assert request.headers["x-subscription-token"] == "brave-token"
    assert request.headers["accept-encoding"] == "gzip"
    assert "api-version" not in request.headers


@pytest.mark.asyncio
async def test_search_sends_api_version():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=WEB_RESPONSE)

    async with _client(handler) as client:
        await client.search(WebSearchParams.new("q"), version="2023-01-01")
    assert seen[0].headers["api-version"] == "2023-01-01"


@pytest.mark.asyncio
async def test_summarize_fetches_summary_by_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/web/search"):
            return httpx.Response(200, json=WEB_RESPONSE)
        return httpx.Response(200, json=SUMMARY_RESPONSE)

    async with _client(handler) as client:
        summary = await client.summarize(WebSearchParams.new("rust sse"))
    assert summary.status == "complete"
    assert summary.results[0].summary == "SSE is a push protocol."
    assert seen[0].url.params["summary"] == "true"
    assert seen[1].url.path == "/res/v1/summarizer/search"
    assert seen[1].url.params.multi_items() == [
        ("key", WEB_RESPONSE["summarizer"]["key"]),
        ("entity_info", "1"),
    ]


@pytest.mark.asyncio
async def test_summarize_without_summarizer_key():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"type": "search", "web": {"results": []}})

    async with _client(handler) as client:
        with pytest.raises(ApiError, match="No summarizer found"):
            await client.summarize(WebSearchParams.new("rust sse"))


@pytest.mark.asyncio
async def test_suggest():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "type": "suggest",
                "query": {"original": "pyth"},
                "results": [{"query": "python", "is_entity": True}],
            },
        )

    async with _client(handler) as client:
        response = await client.suggest(SuggestSearchParams(q="pyth", rich=True))
    assert [r.query for r in response.results] == ["python"]
    assert seen[0].url.path == "/res/v1/suggest/search"
    assert seen[0].url.params["rich"] == "true"


@pytest.mark.asyncio
async def test_error_status_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"error": {"code": "VALIDATION"}})

    async with _client(handler) as client:
        with pytest.raises(ApiError) as exc_info:
            await client.search(WebSearchParams.new("x"))
    assert exc_info.value.status_code == 422
    assert exc_info.value.detail == {"error": {"code": "VALIDATION"}}
    assert "web/search" in exc_info.value.url


@pytest.mark.asyncio
async def test_transport_error_raises_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out")

    async with _client(handler) as client:
        with pytest.raises(RequestError):
            await client.search(WebSearchParams.new("x"))


@pytest.mark.asyncio
async def test_non_json_body_raises_deserialize_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    async with _client(handler) as client:
        with pytest.raises(DeserializeError):
            await client.search(WebSearchParams.new("x"))
