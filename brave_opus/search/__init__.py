"""Brave Search API: query parameters, response schemas and the async client."""

from brave_opus.search.client import BraveClient, Auth
from brave_opus.search.params import SuggestSearchParams, WebSearchParams
from brave_opus.search.schemas import (
    SearchResult,
    SuggestSearchApiResponse,
    SummarizerSearchApiResponse,
    WebSearchApiResponse,
)

__all__ = [
    "Auth",
    "BraveClient",
    "SearchResult",
    "SuggestSearchApiResponse",
    "SuggestSearchParams",
    "SummarizerSearchApiResponse",
    "WebSearchApiResponse",
    "WebSearchParams",
]
