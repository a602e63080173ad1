"""Pytest fixtures and config."""

import logging

import httpx
import pytest

_PROVIDER_ENV = (
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_API_VERSION",
    "BRAVE_API_KEY",
    "BRAVE_SUBSCRIPTION_TOKEN",
    "BRAVE_WEB_SEARCH_DATA_FOR_AI_API_KEY",
    "BRAVE_SUGGEST_API_KEY",
    "BRAVE_OPUS_ENV",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def env_cleanup(monkeypatch):
    """Never pick up real credentials from the developer's shell."""
    for name in _PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_root_logging():
    """CLI entry points install handlers on the root logger; drop them after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class ChunkStream(httpx.AsyncByteStream):
    """Response body served chunk by chunk; optionally fails after the last chunk."""

    def __init__(self, chunks, error=None):
        self.chunks = list(chunks)
        self.error = error
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error

    async def aclose(self):
        self.closed = True


@pytest.fixture
def chunk_stream():
    return ChunkStream


def sse_bytes(*events: str) -> bytes:
    """``data:`` frames, one per JSON payload."""
    return "".join(f"data: {e}\n\n" for e in events).encode()


@pytest.fixture
def sse():
    return sse_bytes
