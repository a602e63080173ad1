"""Streaming contract for Messages API responses.

Pipeline, one stage per function, each a lazy async sequence:

- transport (:class:`brave_opus.models.sse.EventSource`) yields raw SSE frames;
- :func:`decode_events` maps each frame 1:1 to a :class:`MessageEvent`;
- :func:`project_deltas` maps each event to the text the user should see.

Decoding is fail-soft: a frame whose payload is not a valid event becomes an
``error``-typed event carrying the raw payload in ``comment``, and the stream
keeps going. The projector never fails and emits ``""`` for anything that is
not a text delta, so consumers just skip empty strings.

Deltas are emitted in wire order. Nothing is grouped by content-block
``index``; interleaved blocks would come out interleaved.

Expected event order (not enforced)::

    message_start
      (content_block_start content_block_delta* content_block_stop)*
    message_delta
    message_stop

with ``ping``/``comment`` anywhere and ``error`` in place of any single step.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from typing import AsyncIterable, AsyncIterator, Protocol, TextIO, runtime_checkable

from pydantic import ValidationError

from brave_opus.models.messages import MessageBody, MessageEvent, MessageEventType
from brave_opus.models.sse import RawFrame, SSEComment

logger = logging.getLogger(__name__)


@runtime_checkable
class DeltaStreaming(Protocol):
    """Anything that can stream plain-text deltas for a message body."""

    def message_delta_stream(self, message_body: MessageBody) -> AsyncIterator[str]:
        ...


def decode_frame(frame: RawFrame) -> MessageEvent:
    """Decode one raw frame. Never raises."""
    if isinstance(frame, SSEComment):
        return MessageEvent.with_comment(frame.text)
    try:
        return MessageEvent.model_validate_json(frame.data)
    except ValidationError as e:
        logger.error("Error parsing event: %r (%d error(s))", frame.data[:200], e.error_count())
        return MessageEvent(
            type=MessageEventType.ERROR,
            comment=f"fail to deserialize event: {frame.data}",
        )


def project_delta(event: MessageEvent) -> str:
    if event.type is MessageEventType.CONTENT_BLOCK_DELTA and event.delta is not None:
        return event.delta.text or ""
    if event.type is MessageEventType.COMMENT:
        logger.debug("Comment: %s", event.comment)
    return ""


async def _close_upstream(source: AsyncIterable[object]) -> None:
    # closing a stage must close the HTTP response behind it right away, not at GC time
    aclose = getattr(source, "aclose", None)
    if aclose is not None:
        await aclose()


async def decode_events(frames: AsyncIterable[RawFrame]) -> AsyncIterator[MessageEvent]:
    try:
        async for frame in frames:
            yield decode_frame(frame)
    finally:
        await _close_upstream(frames)


async def project_deltas(events: AsyncIterable[MessageEvent]) -> AsyncIterator[str]:
    try:
        async for event in events:
            yield project_delta(event)
    finally:
        await _close_upstream(events)


async def write_deltas(deltas: AsyncIterator[str], out: TextIO) -> str:
    """Write each non-empty delta to ``out`` as it arrives; return the full text.

    The stream is closed on exit, so an interrupted consumer drops the connection.
    """
    parts: list[str] = []
    async with aclosing(deltas) as stream:
        async for text in stream:
            if not text:
                continue
            out.write(text)
            out.flush()
            parts.append(text)
    return "".join(parts)
