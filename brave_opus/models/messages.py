"""Messages API payloads. All request/response/event shapes are Pydantic models.

See https://docs.anthropic.com/claude/reference/messages_post and
https://docs.anthropic.com/claude/reference/messages-streaming
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    role: Role
    content: str


class Usage(BaseModel):
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None


class Content(BaseModel):
    """A content block; ``type`` determines the shape (``text`` for plain output)."""

    type: str
    text: Optional[str] = None


class MessageBody(BaseModel):
    """Request body for ``POST /messages``. Unset optionals are left out of the JSON."""

    model: str = Field(description="Model that will complete the prompt")
    messages: list[Message]
    max_tokens: int = Field(description="Maximum number of tokens to generate before stopping")
    metadata: Optional[dict[str, str]] = None
    stop_sequences: Optional[list[str]] = None
    stream: Optional[bool] = Field(default=None, description="Stream the response as SSE")
    system: Optional[str] = None
    temperature: Optional[float] = None
    top_k: Optional[int] = None
    top_p: Optional[float] = None

    @classmethod
    def new(cls, model: str, messages: list[Message], max_tokens: int) -> MessageBody:
        return cls(model=model, messages=messages, max_tokens=max_tokens)

    @classmethod
    def with_stream(cls, model: str, messages: list[Message], max_tokens: int) -> MessageBody:
        return cls(model=model, messages=messages, max_tokens=max_tokens, stream=True)

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class MessageResponse(BaseModel):
    """Non-streaming response."""

    id: str
    type: str
    role: str
    content: list[Content] = Field(default_factory=list)
    model: str
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage = Field(default_factory=Usage)

    @property
    def text(self) -> str:
        """Concatenated text of all ``text`` content blocks."""
        return "".join(c.text or "" for c in self.content if c.type == "text")


class MessageEventResponse(BaseModel):
    """Message envelope carried by ``message_start``; content starts empty."""

    id: str
    type: str
    role: str
    content: list[Content] = Field(default_factory=list)
    model: str
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None
    usage: Usage = Field(default_factory=Usage)


class Delta(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None
    stop_reason: Optional[str] = None
    stop_sequence: Optional[str] = None


class MessageEventType(str, Enum):
    ERROR = "error"
    MESSAGE_START = "message_start"
    MESSAGE_DELTA = "message_delta"
    MESSAGE_STOP = "message_stop"
    PING = "ping"
    CONTENT_BLOCK_START = "content_block_start"
    CONTENT_BLOCK_DELTA = "content_block_delta"
    CONTENT_BLOCK_STOP = "content_block_stop"
    COMMENT = "comment"


class MessageEvent(BaseModel):
    """One decoded stream event. Which optional field is set depends on ``type``."""

    type: MessageEventType = MessageEventType.ERROR
    message: Optional[MessageEventResponse] = None
    index: Optional[int] = None
    content_block: Optional[Content] = None
    delta: Optional[Delta] = None
    usage: Optional[Usage] = None
    comment: Optional[str] = None
    error: Optional[dict[str, Any]] = Field(
        default=None, description="Provider error object on a wire 'error' event"
    )

    @classmethod
    def with_comment(cls, comment: str) -> MessageEvent:
        return cls(type=MessageEventType.COMMENT, comment=comment)
