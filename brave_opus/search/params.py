"""Query parameters for the Brave Search endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


def _render(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _QueryParams(BaseModel):
    def to_query_params(self) -> list[tuple[str, str]]:
        """Ordered ``(name, value)`` pairs; ``q`` first, unset options left out."""
        return [
            (name, _render(value))
            for name, value in self.model_dump().items()
            if value is not None
        ]


class WebSearchParams(_QueryParams):
    """``GET web/search`` parameters. Only ``q`` is required."""

    q: str
    country: Optional[str] = None
    search_lang: Optional[str] = None
    ui_lang: Optional[str] = None
    count: Optional[int] = None
    offset: Optional[int] = None
    safesearch: Optional[str] = None
    freshness: Optional[str] = None
    text_decorations: Optional[bool] = None
    spellcheck: Optional[bool] = None
    result_filter: Optional[str] = None
    goggles_id: Optional[str] = None
    units: Optional[str] = None
    extra_snippets: Optional[bool] = None
    summary: Optional[bool] = None

    @classmethod
    def new(cls, q: str) -> WebSearchParams:
        return cls(q=q)


class SuggestSearchParams(_QueryParams):
    """``GET suggest/search`` parameters."""

    q: str
    country: Optional[str] = None
    lang: Optional[str] = None
    count: Optional[int] = None
    rich: Optional[bool] = None
