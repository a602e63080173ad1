"""Brave Search API client over httpx.

Wraps ``httpx.AsyncClient`` with:
- subscription-token auth (``x-subscription-token``), injected via :class:`Auth`
- optional per-call ``Api-Version`` header
- error mapping to :class:`ApiError` / :class:`RequestError` / :class:`DeserializeError`
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Sequence, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from brave_opus.core.errors import ApiError, ConfigurationError, DeserializeError, RequestError
from brave_opus.core.http import check_headers, deal_response, join_url
from brave_opus.search.params import SuggestSearchParams, WebSearchParams
from brave_opus.search.schemas import (
    SuggestSearchApiResponse,
    SummarizerSearchApiResponse,
    WebSearchApiResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.search.brave.com/res/v1"
WEB_SEARCH = "web/search"
SUMMARIZER = "summarizer/search"
SUGGEST = "suggest/search"

_ModelT = TypeVar("_ModelT", bound=BaseModel)


@dataclass(frozen=True)
class Auth:
    subscription_token: str

    def __post_init__(self) -> None:
        if not self.subscription_token.strip():
            raise ConfigurationError("Missing BRAVE_SUBSCRIPTION_TOKEN")

    @classmethod
    def from_env(cls) -> Auth:
        token = os.getenv("BRAVE_SUBSCRIPTION_TOKEN")
        if not token:
            raise ConfigurationError("Missing BRAVE_SUBSCRIPTION_TOKEN")
        return cls(subscription_token=token)


def _parse(model: type[_ModelT], data: Any) -> _ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DeserializeError(f"deserialize error: {e}") from e


class BraveClient:
    """Async client for the web search, summarizer and suggest endpoints."""

    def __init__(
        self,
        auth: Auth,
        api_url: str = DEFAULT_API_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.auth = auth
        self.api_url = api_url
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        check_headers(self._headers())

    async def __aenter__(self) -> BraveClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _headers(self, version: str | None = None) -> dict[str, str]:
        headers = {
            "content-type": "application/json",
            "accept-encoding": "gzip",
            "x-subscription-token": self.auth.subscription_token,
        }
        if version:
            headers["Api-Version"] = version
        return headers

    async def query(
        self,
        sub_url: str,
        query_pairs: Sequence[tuple[str, str]] | None = None,
        version: str | None = None,
    ) -> Any:
        """GET ``sub_url`` with ``query_pairs`` and return the decoded JSON body."""
        pairs = list(query_pairs or [])
        logger.info("GET %s?%s", sub_url, "&".join(f"{k}={v}" for k, v in pairs))
        try:
            response = await self._http.get(
                join_url(self.api_url, sub_url),
                params=pairs,
                headers=self._headers(version),
            )
        except httpx.TransportError as e:
            logger.error("Error api: %s, error: %s", sub_url, e)
            raise RequestError(f"Request Error: {e}") from e
        return deal_response(response, sub_url)

    async def search(
        self, params: WebSearchParams, version: str | None = None
    ) -> WebSearchApiResponse:
        res = await self.query(WEB_SEARCH, params.to_query_params(), version)
        return _parse(WebSearchApiResponse, res)

    async def summarize(
        self, params: WebSearchParams, version: str | None = None
    ) -> SummarizerSearchApiResponse:
        """Web search with summary keys enabled, then fetch the summary for the returned key."""
        search = await self.search(params.model_copy(update={"summary": True}), version)
        if search.summarizer is None:
            raise ApiError("No summarizer found")
        res = await self.query(
            SUMMARIZER, [("key", search.summarizer.key), ("entity_info", "1")], version
        )
        logger.debug("Summarizer response: %s", res)
        return _parse(SummarizerSearchApiResponse, res)

    async def suggest(
        self, params: SuggestSearchParams, version: str | None = None
    ) -> SuggestSearchApiResponse:
        res = await self.query(SUGGEST, params.to_query_params(), version)
        return _parse(SuggestSearchApiResponse, res)
