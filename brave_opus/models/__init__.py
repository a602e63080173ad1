"""Anthropic Messages API: payload models, SSE transport and the delta pipeline."""

from brave_opus.models.anthropic_api import AnthropicClient, Auth
from brave_opus.models.messages import (
    Content,
    Delta,
    Message,
    MessageBody,
    MessageEvent,
    MessageEventType,
    MessageResponse,
    Role,
    Usage,
)
from brave_opus.models.sse import EventSource, ReconnectPolicy, SSEComment, SSEEvent, SSEParser
from brave_opus.models.streaming import (
    decode_events,
    decode_frame,
    project_delta,
    project_deltas,
    write_deltas,
)

__all__ = [
    "AnthropicClient",
    "Auth",
    "Content",
    "Delta",
    "EventSource",
    "Message",
    "MessageBody",
    "MessageEvent",
    "MessageEventType",
    "MessageResponse",
    "ReconnectPolicy",
    "Role",
    "SSEComment",
    "SSEEvent",
    "SSEParser",
    "Usage",
    "decode_events",
    "decode_frame",
    "project_delta",
    "project_deltas",
    "write_deltas",
]
