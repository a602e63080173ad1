"""Shared HTTP helpers for the Brave and Anthropic clients."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import httpx

from brave_opus.core.errors import ApiError, ConfigurationError, DeserializeError

logger = logging.getLogger(__name__)


def join_url(base: str, sub_url: str) -> str:
    """``https://host/v1/`` + ``messages`` -> ``https://host/v1/messages`` (one slash, either side)."""
    return f"{base.rstrip('/')}/{sub_url.lstrip('/')}"


def check_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Validate header values up front so a bad credential never reaches the wire."""
    out: dict[str, str] = {}
    for name, value in headers.items():
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(f"Missing value for header {name!r}")
        if "\r" in value or "\n" in value:
            raise ConfigurationError(f"Invalid value for header {name!r}")
        out[name] = value
    return out


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text[:500] if response.text else f"HTTP {response.status_code}"


def deal_response(response: httpx.Response, sub_url: str) -> Any:
    """Return the decoded JSON body of a 2xx response, or raise :class:`ApiError`."""
    if response.is_success:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DeserializeError(f"deserialize into error: {e}") from e
        logger.debug("Done api: %s, resp: %s", sub_url, body)
        return body
    detail = _error_detail(response)
    logger.error("Error api: %s, status: %d, error: %s", sub_url, response.status_code, detail)
    raise ApiError(detail, status_code=response.status_code, url=str(response.url))
