"""Anthropic Messages API client over httpx.

The API key is injected through :class:`Auth` at construction time; a missing
key is a :class:`ConfigurationError` before any request is made. One
``httpx.AsyncClient`` serves both the request/response path and the event
stream, and may be shared between concurrent calls.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, AsyncIterator

import httpx
from pydantic import ValidationError

from brave_opus.core.errors import ConfigurationError, DeserializeError, RequestError
from brave_opus.core.http import check_headers, deal_response, join_url
from brave_opus.models.messages import MessageBody, MessageEvent, MessageResponse
from brave_opus.models.sse import EventSource, RawFrame, ReconnectPolicy
from brave_opus.models.streaming import decode_events, project_deltas

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.anthropic.com/v1/"
DEFAULT_API_VERSION = "2023-06-01"
MESSAGES_BETA = "messages-2023-12-15"
MESSAGES_CREATE = "messages"


@dataclass(frozen=True)
class Auth:
    api_key: str
    version: str | None = None

    def __post_init__(self) -> None:
        if not self.api_key.strip():
            raise ConfigurationError("Missing ANTHROPIC_API_KEY")

    @classmethod
    def from_env(cls) -> Auth:
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ConfigurationError("Missing ANTHROPIC_API_KEY")
        return cls(api_key=api_key, version=os.getenv("ANTHROPIC_API_VERSION") or None)


class AnthropicClient:
    """Messages API: one-shot ``message_create`` plus three views of the event stream."""

    def __init__(
        self,
        auth: Auth,
        api_url: str = DEFAULT_API_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
        reconnect: ReconnectPolicy | None = None,
        timeout: float = 600.0,
    ) -> None:
        self.auth = auth
        self.api_url = api_url
        self._reconnect = reconnect or ReconnectPolicy()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        check_headers(self._headers())

    async def __aenter__(self) -> AnthropicClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            "anthropic-version": self.auth.version or DEFAULT_API_VERSION,
            "content-type": "application/json",
            "x-api-key": self.auth.api_key,
        }

    # -- raw requests --------------------------------------------------------

    async def post(self, sub_url: str, body: dict[str, Any]) -> Any:
        """POST ``body`` as JSON and return the decoded response body."""
        logger.info("POST %s", sub_url)
        logger.debug("POST %s body: %s", sub_url, body)
        try:
            response = await self._http.post(
                join_url(self.api_url, sub_url),
                headers=self._headers(),
                content=json.dumps(body),
            )
        except httpx.TransportError as e:
            logger.error("Error api: %s, error: %s", sub_url, e)
            raise RequestError(f"Request Error: {e}") from e
        return deal_response(response, sub_url)

    def stream(self, sub_url: str, body: dict[str, Any]) -> AsyncIterator[RawFrame]:
        """Open a reconnecting event stream. The body is serialized once and reused."""
        headers = self._headers()
        headers["anthropic-beta"] = MESSAGES_BETA
        source = EventSource(
            self._http,
            join_url(self.api_url, sub_url),
            method="POST",
            headers=headers,
            body=json.dumps(body),
            policy=self._reconnect,
        )
        return source.frames()

    # -- Messages API ----------------------------------------------------------

    async def message_create(self, message_body: MessageBody) -> MessageResponse:
        body = message_body.model_copy(update={"stream": None}).to_request()
        res = await self.post(MESSAGES_CREATE, body)
        try:
            return MessageResponse.model_validate(res)
        except ValidationError as e:
            raise DeserializeError(f"deserialize error: {e}") from e

    def message_stream(self, message_body: MessageBody) -> AsyncIterator[MessageEvent]:
        """Decoded events; malformed payloads arrive as ``error``-typed events."""
        body = message_body.model_copy(update={"stream": True}).to_request()
        logger.debug("request_body: %s", body)
        return decode_events(self.stream(MESSAGES_CREATE, body))

    def message_delta_stream(self, message_body: MessageBody) -> AsyncIterator[str]:
        """Text deltas only; every non-delta event yields ``""``."""
        return project_deltas(self.message_stream(message_body))
