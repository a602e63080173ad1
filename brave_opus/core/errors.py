"""Exceptions for the Brave and Anthropic clients.

Configuration problems and first-attempt connection failures reach the
caller. Mid-stream drops (``TransientStreamError`` and its subclasses) are
absorbed by the event-stream reconnect loop and never reach the consumer.
Payload decode failures are not exceptions at all: the decoder turns them
into ``error``-typed ``MessageEvent`` objects.
"""

from __future__ import annotations

from typing import Any


class BraveOpusError(Exception):
    """Base class for all library errors."""


class ConfigurationError(BraveOpusError):
    """Missing/invalid credential or header value. Raised before any request is made."""


class StreamConnectionError(BraveOpusError):
    """The event stream could not be opened (or was refused with a non-retryable status)."""

    def __init__(self, detail: str, status_code: int | None = None, url: str = "") -> None:
        self.detail = detail
        self.status_code = status_code
        self.url = url
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"stream connection failed: {prefix}{detail}")


class TransientStreamError(BraveOpusError):
    """Recoverable stream failure; triggers a reconnect with backoff."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class FrameParseError(TransientStreamError):
    """Malformed SSE framing (invalid UTF-8, unexpected EOF inside a frame)."""


class ApiError(BraveOpusError):
    """Raised when a provider returns a non-2xx response on a request/response call."""

    def __init__(self, detail: Any, status_code: int | None = None, url: str = "") -> None:
        self.detail = detail
        self.status_code = status_code
        self.url = url
        if status_code is None:
            super().__init__(f"API Error: {detail}")
        else:
            super().__init__(f"API Error {status_code}: {detail} ({url})")


class RequestError(BraveOpusError):
    """Transport-level failure unrelated to the API (DNS, TCP, TLS, timeout)."""


class DeserializeError(BraveOpusError):
    """A response body could not be decoded into the expected model."""
