"""Server-sent event transport: wire framing plus a reconnecting connector.

:class:`SSEParser` turns response bytes into raw frames (:class:`SSEEvent` or
:class:`SSEComment`). :class:`EventSource` owns one streaming session over a
shared ``httpx.AsyncClient`` and re-issues the request with exponential
backoff when the connection drops. Neither looks inside ``data`` payloads;
that is the decoder's job (see :mod:`brave_opus.models.streaming`).

The iterator is pull based: frames are read from the socket only as fast as
the consumer asks for them. Calling ``aclose()`` on it (or cancelling the
consuming task) closes the response and cancels a pending reconnect delay.
There is no per-frame timeout; a connection that stays open but silent is
only bounded by the HTTP client's read timeout.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Mapping, Union

import httpx

from brave_opus.core.errors import (
    ConfigurationError,
    FrameParseError,
    StreamConnectionError,
    TransientStreamError,
)
from brave_opus.core.http import check_headers

logger = logging.getLogger(__name__)

_LINE_END = re.compile(rb"\r\n|\r|\n")
_RETRYABLE_STATUSES = frozenset({408, 429})


@dataclass(frozen=True)
class SSEEvent:
    """A dispatched event: ``data`` lines joined with ``\\n``."""

    data: str
    event: str | None = None
    id: str | None = None


@dataclass(frozen=True)
class SSEComment:
    """A ``:``-prefixed line. Servers use these as keep-alives."""

    text: str


RawFrame = Union[SSEEvent, SSEComment]


@dataclass(frozen=True)
class ReconnectPolicy:
    """Backoff settings for one stream session.

    ``retry_initial=False`` surfaces a failure of the very first connection
    attempt instead of retrying it. Once a connection has succeeded, every
    later drop is retried. Attempts are never capped by count; ``max_delay``
    only caps the wait between them.

    The failure count goes back to zero only when a connection stayed up for
    at least ``reset_interval`` seconds before it dropped. A server that
    accepts and then hangs up right away keeps backing off.
    """

    reconnect: bool = True
    retry_initial: bool = False
    initial_delay: float = 1.0
    backoff_factor: float = 2.0
    max_delay: float = 60.0
    reset_interval: float = 60.0

    def __post_init__(self) -> None:
        if self.initial_delay < 0 or self.max_delay < 0 or self.reset_interval < 0:
            raise ConfigurationError("reconnect delays must be non-negative")
        if self.backoff_factor < 1:
            raise ConfigurationError("backoff_factor must be >= 1")

    def delay_for(self, attempt: int) -> float:
        """Delay before reconnect attempt ``attempt`` (1-based, counted since the last healthy connection)."""
        if attempt < 1:
            raise ValueError("attempt is 1-based")
        try:
            delay = self.initial_delay * self.backoff_factor ** (attempt - 1)
        except OverflowError:
            return self.max_delay
        return min(delay, self.max_delay)


class SSEParser:
    """Incremental SSE line parser.

    Feed it raw chunks as they arrive; it returns every frame completed by
    that chunk. Chunks may split lines, CRLF pairs or multi-byte characters
    anywhere.
    """

    def __init__(self) -> None:
        self._buffer = b""
        self._skip_lf = False
        self._first_line = True
        self._data: list[str] = []
        self._has_data = False
        self._event: str | None = None
        self._last_id: str | None = None

    def feed(self, chunk: bytes) -> list[RawFrame]:
        frames: list[RawFrame] = []
        for raw in self._split_lines(chunk):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise FrameParseError(f"invalid line: {raw[:80]!r}") from e
            if self._first_line:
                line = line.removeprefix("\ufeff")
                self._first_line = False
            frame = self._process_line(line)
            if frame is not None:
                frames.append(frame)
        return frames

    def close(self) -> None:
        """Signal end of input. A half-received frame means the stream was cut."""
        if self._buffer or self._has_data or self._event is not None:
            raise FrameParseError("unexpected eof")

    def _split_lines(self, chunk: bytes) -> list[bytes]:
        if self._skip_lf and chunk.startswith(b"\n"):
            chunk = chunk[1:]
        self._skip_lf = False
        buf = self._buffer + chunk
        lines = []
        start = 0
        for m in _LINE_END.finditer(buf):
            lines.append(buf[start : m.start()])
            start = m.end()
            # a lone CR at the end of a chunk may be the first half of CRLF
            if m.group() == b"\r" and m.end() == len(buf):
                self._skip_lf = True
        self._buffer = buf[start:]
        return lines

    def _process_line(self, line: str) -> RawFrame | None:
        if not line:
            return self._dispatch()
        if line.startswith(":"):
            return SSEComment(text=line[1:].removeprefix(" "))
        field, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if field == "data":
            self._data.append(value)
            self._has_data = True
        elif field == "event":
            self._event = value
        elif field == "id":
            if "\0" not in value:
                self._last_id = value
        # "retry" and unknown fields are ignored
        return None

    def _dispatch(self) -> SSEEvent | None:
        frame = None
        if self._has_data:
            frame = SSEEvent(data="\n".join(self._data), event=self._event, id=self._last_id)
        self._data = []
        self._has_data = False
        self._event = None
        return frame


class EventSource:
    """Reconnecting SSE connector over a shared ``httpx.AsyncClient``.

    The request body is serialized once by the caller and re-sent verbatim on
    every reconnect, along with ``last-event-id`` when the server sent ids.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        method: str = "POST",
        headers: Mapping[str, str] | None = None,
        body: str | bytes | None = None,
        policy: ReconnectPolicy | None = None,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._url = url
        self._method = method
        self._headers = check_headers(headers or {})
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        self._policy = policy or ReconnectPolicy()
        self._sleep = sleep
        self._clock = clock
        self._last_event_id: str | None = None

    @property
    def last_event_id(self) -> str | None:
        return self._last_event_id

    def __aiter__(self) -> AsyncIterator[RawFrame]:
        return self.frames()

    def _request_headers(self) -> dict[str, str]:
        headers = {"accept": "text/event-stream", "cache-control": "no-cache"}
        headers.update(self._headers)
        if self._last_event_id:
            headers["last-event-id"] = self._last_event_id
        return headers

    async def _check_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        status = response.status_code
        body = (await response.aread()).decode("utf-8", errors="replace")[:500]
        if status >= 500 or status in _RETRYABLE_STATUSES:
            raise TransientStreamError(f"server responded {status}: {body}", status_code=status)
        raise StreamConnectionError(body or f"HTTP {status}", status_code=status, url=self._url)

    async def frames(self) -> AsyncIterator[RawFrame]:
        """Yield frames until the server closes the stream cleanly."""
        failures = 0
        established = False
        connected_at: float | None = None
        while True:
            try:
                async with self._client.stream(
                    self._method,
                    self._url,
                    headers=self._request_headers(),
                    content=self._body,
                ) as response:
                    await self._check_status(response)
                    if established:
                        logger.info(
                            "Event stream reconnected after %d consecutive failure(s): %s",
                            failures,
                            self._url,
                        )
                    else:
                        logger.info("Event stream connected: %s %s", self._method, self._url)
                    established = True
                    connected_at = self._clock()
                    parser = SSEParser()
                    async for chunk in response.aiter_bytes():
                        for frame in parser.feed(chunk):
                            if isinstance(frame, SSEEvent) and frame.id is not None:
                                self._last_event_id = frame.id
                            yield frame
                    parser.close()
                logger.info("Event stream closed by server: %s", self._url)
                return
            except (httpx.TransportError, TransientStreamError) as exc:
                if not self._policy.reconnect or not (established or self._policy.retry_initial):
                    raise StreamConnectionError(
                        str(exc) or type(exc).__name__,
                        status_code=getattr(exc, "status_code", None),
                        url=self._url,
                    ) from exc
                if connected_at is not None:
                    if self._clock() - connected_at >= self._policy.reset_interval:
                        failures = 0
                connected_at = None
                failures += 1
                delay = self._policy.delay_for(failures)
                logger.warning(
                    "Event stream error (%s: %s); reconnecting in %.1fs [attempt %d]",
                    type(exc).__name__,
                    exc,
                    delay,
                    failures,
                )
                await self._sleep(delay)
