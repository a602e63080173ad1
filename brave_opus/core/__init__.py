from brave_opus.core.errors import (
    ApiError,
    BraveOpusError,
    ConfigurationError,
    DeserializeError,
    FrameParseError,
    RequestError,
    StreamConnectionError,
    TransientStreamError,
)

__all__ = [
    "ApiError",
    "BraveOpusError",
    "ConfigurationError",
    "DeserializeError",
    "FrameParseError",
    "RequestError",
    "StreamConnectionError",
    "TransientStreamError",
]
