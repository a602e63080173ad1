"""Tests for the RAG pipeline (mocked Anthropic/Brave clients and page fetches)."""

from __future__ import annotations

import asyncio
import io
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from brave_opus.config.loader import RagSettings
from brave_opus.core.errors import ApiError
from brave_opus.models.messages import Content, MessageResponse
from brave_opus.rag.pipeline import RagPipeline, answer_prompt
from brave_opus.search.schemas import Search, SearchResult, WebSearchApiResponse

PAGES = {
    "https://a.test/1": "<html><body><h1>One</h1><p>Page one body</p></body></html>",
    "https://a.test/3": "<p>Page three body</p>",
}


def _response(text: str) -> MessageResponse:
    return MessageResponse(
        id="msg",
        type="message",
        role="assistant",
        content=[Content(type="text", text=text)],
        model="claude-3-haiku-20240307",
    )


def _web(*urls: str) -> WebSearchApiResponse:
    return WebSearchApiResponse(web=Search(results=[SearchResult(url=u) for u in urls]))


async def _deltas(*texts: str):
    for text in texts:
        yield text


def _page_handler(request: httpx.Request) -> httpx.Response:
    html = PAGES.get(str(request.url))
    if html is None:
        return httpx.Response(404, text="not found")
    return httpx.Response(200, text=html, headers={"content-type": "text/html"})


def _anthropic() -> MagicMock:
    async def create(body):
        content = body.messages[0].content
        if "Google search queries" in content:
            return _response('"q one"\n\nq two\nq three\n')
        if "Page one body" in content:
            return _response("extracted one")
        return _response("extracted other")

    anthropic = MagicMock()
    anthropic.message_create = AsyncMock(side_effect=create)
    anthropic.message_delta_stream = MagicMock(side_effect=lambda body: _deltas("The", "", " answer"))
    return anthropic


def _brave() -> MagicMock:
    by_query = {
        "q one": _web("https://a.test/1"),
        "q two": _web("https://a.test/2"),
        "q three": _web(),
    }
    brave = MagicMock()
    brave.search = AsyncMock(side_effect=lambda params: by_query[params.q])
    return brave


def _pipeline(anthropic=None, brave=None, handler=_page_handler, **kwargs) -> RagPipeline:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RagPipeline(
        anthropic or _anthropic(),
        brave or _brave(),
        http,
        answer_model="claude-3-opus-20240229",
        out=kwargs.pop("out", io.StringIO()),
        **kwargs,
    )


def test_answer_prompt_layout():
    assert answer_prompt("Why?", ["a", "b"]) == "Context:\n\n ```a\n\nb```\n\nPrompt: Why?"


@pytest.mark.asyncio
async def test_generate_search_queries_strips_quotes_and_blank_lines():
    queries = await _pipeline().generate_search_queries("What is SSE?")
    assert queries == ["q one", "q two", "q three"]


@pytest.mark.asyncio
async def test_search_uses_count_and_country():
    brave = _brave()
    results = await _pipeline(brave=brave).search("q one", count=7)
    assert [r.url for r in results] == ["https://a.test/1"]
    params = brave.search.await_args.args[0]
    assert params.count == 7
    assert params.country == "ALL"


@pytest.mark.asyncio
async def test_search_without_web_raises():
    brave = MagicMock()
    brave.search = AsyncMock(return_value=WebSearchApiResponse())
    with pytest.raises(ApiError, match="can't find `web` in response"):
        await _pipeline(brave=brave).search("x")


@pytest.mark.asyncio
async def test_search_without_results_raises():
    brave = MagicMock()
    brave.search = AsyncMock(return_value=WebSearchApiResponse(web=Search()))
    with pytest.raises(ApiError, match="can't find `results` in `web`"):
        await _pipeline(brave=brave).search("x")


@pytest.mark.asyncio
async def test_extract_context_renders_page_for_the_model():
    anthropic = _anthropic()
    context = await _pipeline(anthropic=anthropic).extract_context(SearchResult(url="https://a.test/1"))
    assert context == "extracted one"
    prompt = anthropic.message_create.await_args.args[0].messages[0].content
    assert "```\n# One\n\nPage one body\n```" in prompt
    assert "RETURN ONLY THE RELEVANT TEXT" in prompt


@pytest.mark.asyncio
async def test_extract_context_failed_fetch_contributes_nothing():
    anthropic = _anthropic()
    pipeline = _pipeline(anthropic=anthropic)
    assert await pipeline.extract_context(SearchResult(url="https://a.test/404")) == ""
    assert await pipeline.extract_context(SearchResult(title="no url")) == ""
    anthropic.message_create.assert_not_awaited()


@pytest.mark.asyncio
async def test_extract_context_failed_extraction_contributes_nothing():
    anthropic = _anthropic()
    anthropic.message_create = AsyncMock(side_effect=ApiError("overloaded", status_code=529))
    assert await _pipeline(anthropic=anthropic).extract_context(SearchResult(url="https://a.test/1")) == ""


@pytest.mark.asyncio
async def test_fetches_respect_concurrency_limit():
    active = 0
    peak = 0

    async def slow_handler(request: httpx.Request) -> httpx.Response:
        nonlocal active, peak
        active += 1
        peak = max(peak, active)
        await asyncio.sleep(0.01)
        active -= 1
        return httpx.Response(200, text="<p>Page three body</p>")

    pipeline = _pipeline(handler=slow_handler, settings=RagSettings(fetch_concurrency=2))
    results = [SearchResult(url=f"https://a.test/{n}") for n in range(6)]
    contexts = await asyncio.gather(*(pipeline.extract_context(r) for r in results))
    assert contexts == ["extracted other"] * 6
    assert peak == 2


@pytest.mark.asyncio
async def test_run_end_to_end():
    anthropic = _anthropic()
    out = io.StringIO()
    pipeline = _pipeline(anthropic=anthropic, out=out)

    answer = await pipeline.run("What is SSE?", count=5)

    assert answer == "The answer"
    printed = out.getvalue()
    assert printed.startswith("# Search Prompts\n\nq one\nq two\nq three\n")
    assert "\n# Context\n\nextracted one\n" in printed
    assert printed.endswith("\n# Answer\n\nThe answer\n")

    body = anthropic.message_delta_stream.call_args.args[0]
    assert body.model == "claude-3-opus-20240229"
    assert body.stream is True
    assert body.messages[0].content == answer_prompt("What is SSE?", ["extracted one", ""])
