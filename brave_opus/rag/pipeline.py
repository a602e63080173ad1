"""Answer a prompt with Claude using Brave web results as retrieved context.

Flow: prompt -> three search queries (query model) -> Brave web search per query
-> fetch + render + extract each result page (query model) -> streamed answer
(answer model) over the joined contexts.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import AsyncIterator, Sequence, TextIO

import httpx

from brave_opus.config.loader import RagSettings
from brave_opus.core.errors import ApiError, BraveOpusError
from brave_opus.models.anthropic_api import AnthropicClient
from brave_opus.models.messages import Message, MessageBody, Role
from brave_opus.models.streaming import write_deltas
from brave_opus.rag.html_text import html_to_text
from brave_opus.search.client import BraveClient
from brave_opus.search.params import WebSearchParams
from brave_opus.search.schemas import SearchResult

logger = logging.getLogger(__name__)

DEFAULT_QUERY_MODEL = "claude-3-haiku-20240307"
DEFAULT_ANSWER_MODEL = "claude-3-opus-20240229"

SEARCH_QUERIES_PROMPT = '''
Transform this prompt into three perfect Google search queries to get the information necessary to
answer the user request included on the snippet between triple quotes. The queries should focus on techniques
like using relevant keywords, operators, modifiers, and filters to find the most relevant articles,
documentation, news, and informational sites. The results should cater to experienced users looking
to refine their search skills and find the most useful and reliable information.

RETURN JUST THREE UPDATED PROMPTS SEPARATED BY A SINGLE NEW LINE WITHOUT QUOTES OR ANY ADDITIONAL COMMENTS OR PREAMBLE!!!**
"""
{prompt}
"""'''

EXTRACT_PROMPT = """
You will receive text extracted from a website using a web crawler. Most HTML formatting will be removed, but some contextual tags may remain. Your task is to process this scraped text and return a plain text output containing only the page's most relevant content.

To do this:
1. Discard any remaining HTML tags and the content inside them completely.
2. Filter out extraneous page elements like:
   - Navigation menus and links
   - Advertisements and promotional content
   - Footers, sidebars, and other peripheral content
3. Identify and retain the key informational content that reflects the page's main purpose, such as:
   - Article titles and body text
   - Product names, descriptions, specifications, and key details
   - Step-by-step instructions
   - Important facts and data points
4. If the relevant content is split across multiple sections or tabs of the page, attempt to consolidate it into a single, coherent output.
5. Return the final result as plain text. Strip out any remaining HTML, but keep basic formatting like paragraph breaks for readability where helpful.

The goal is to distill the scraped text to only the most essential and informative parts so that the output is clear, concise, and focused.

RETURN ONLY THE RELEVANT TEXT WITHOUT ANY FURTHER COMMENTS!!!

```
{text}
```"""


def answer_prompt(prompt: str, contexts: Sequence[str]) -> str:
    joined = "\n\n".join(contexts)
    return f"Context:\n\n ```{joined}```\n\nPrompt: {prompt}"


class RagPipeline:
    """Search, read and answer. Searches and page reads run behind separate semaphores."""

    def __init__(
        self,
        anthropic: AnthropicClient,
        brave: BraveClient,
        http_client: httpx.AsyncClient,
        *,
        query_model: str = DEFAULT_QUERY_MODEL,
        answer_model: str = DEFAULT_ANSWER_MODEL,
        max_tokens: int = 4096,
        settings: RagSettings | None = None,
        out: TextIO | None = None,
    ) -> None:
        self.anthropic = anthropic
        self.brave = brave
        self._http = http_client
        self.query_model = query_model
        self.answer_model = answer_model
        self.max_tokens = max_tokens
        self.settings = settings or RagSettings()
        self._out = out or sys.stdout
        self._search_sem = asyncio.Semaphore(self.settings.search_concurrency)
        self._fetch_sem = asyncio.Semaphore(self.settings.fetch_concurrency)

    def _print(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    def _body(self, content: str) -> MessageBody:
        return MessageBody.new(
            self.query_model, [Message(role=Role.USER, content=content)], self.max_tokens
        )

    async def generate_search_queries(self, prompt: str) -> list[str]:
        response = await self.anthropic.message_create(
            self._body(SEARCH_QUERIES_PROMPT.format(prompt=prompt))
        )
        text = response.text.replace('"', "")
        return [line.strip() for line in text.split("\n") if line.strip()]

    async def search(self, query: str, count: int | None = None) -> list[SearchResult]:
        params = WebSearchParams(
            q=query,
            count=count or self.settings.count,
            country=self.settings.country,
        )
        async with self._search_sem:
            response = await self.brave.search(params)
        if response.web is None:
            raise ApiError("can't find `web` in response")
        if response.web.results is None:
            raise ApiError("can't find `results` in `web`")
        logger.info("Search %r: %d result(s)", query, len(response.web.results))
        return response.web.results

    async def fetch_page_text(self, url: str) -> str:
        response = await self._http.get(
            url, follow_redirects=True, timeout=self.settings.fetch_timeout
        )
        response.raise_for_status()
        return html_to_text(response.text, self.settings.page_width)

    async def extract_context(self, result: SearchResult) -> str:
        """Relevant page content for one result; ``""`` if the page can't be read."""
        url = result.url or ""
        if not url:
            logger.warning("Skipping result without url: %r", result.title)
            return ""
        async with self._fetch_sem:
            try:
                text = await self.fetch_page_text(url)
                response = await self.anthropic.message_create(
                    self._body(EXTRACT_PROMPT.format(text=text))
                )
            except (httpx.HTTPError, BraveOpusError) as e:
                logger.warning("Skipping %s: %s", url, e)
                return ""
        context = response.text
        self._print(context)
        return context

    def answer(self, prompt: str, contexts: Sequence[str]) -> AsyncIterator[str]:
        body = MessageBody.with_stream(
            self.answer_model,
            [Message(role=Role.USER, content=answer_prompt(prompt, contexts))],
            self.max_tokens,
        )
        return self.anthropic.message_delta_stream(body)

    async def run(self, prompt: str, count: int | None = None) -> str:
        """Run every stage, printing each section to ``out``; return the answer text."""
        queries = await self.generate_search_queries(prompt)
        self._print("# Search Prompts\n\n" + "\n".join(queries))

        batches = await asyncio.gather(*(self.search(q, count) for q in queries))
        results = [r for batch in batches for r in batch]

        self._print("\n# Context\n")
        contexts = await asyncio.gather(*(self.extract_context(r) for r in results))

        self._print("\n# Answer\n")
        answer = await write_deltas(self.answer(prompt, contexts), self._out)
        self._print("")
        return answer
