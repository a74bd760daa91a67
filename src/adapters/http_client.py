"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and debug tracing for both remote APIs.
- Eases testing: a `transport` (e.g. `httpx.MockTransport`) can be injected.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from core.config import AppSettings
from core.logging import get_logger

logger = get_logger(__name__)

_MAX_TRACE_CHARS = 2_000
_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-ftl-sid"})


def _truncate(text: str, max_chars: int = _MAX_TRACE_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + "…"


def mask_token(token: str) -> str:
    """Keep just enough of a bearer token to correlate debug lines."""

    if len(token) <= 8:
        return "***"
    return f"{token[:4]}…{token[-4:]}"


def _redacted_headers(headers: httpx.Headers) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, value in headers.items():
        out[key] = "<redacted>" if key.lower() in _SENSITIVE_HEADERS else value
    return out


def _redacted_body(response: httpx.Response) -> str:
    """Response text with any top-level `token` value masked."""

    try:
        payload = response.json()
    except ValueError:
        return response.text
    if not isinstance(payload, dict) or "token" not in payload:
        return response.text

    token = payload["token"]
    payload["token"] = mask_token(token) if isinstance(token, str) else "***"
    return json.dumps(payload)


def _trace_request(request: httpx.Request) -> None:
    logger.debug("→ %s %s", request.method, request.url)
    logger.debug("  headers: %s", _redacted_headers(request.headers))


def _trace_response(response: httpx.Response) -> None:
    response.read()
    logger.debug(
        "← %s %s: %s",
        response.request.method,
        response.request.url,
        response.status_code,
    )
    logger.debug("  body: %s", _truncate(_redacted_body(response)) or "<empty>")


def build_client(
    base_url: str,
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create a synchronous `httpx.Client` with the project's defaults.

    Requests are blocking and issued one after another; nothing here retries.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)

    kwargs: dict[str, Any] = {}
    if transport is not None:
        kwargs["transport"] = transport

    return httpx.Client(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=headers,
        event_hooks={"request": [_trace_request], "response": [_trace_response]},
        **kwargs,
    )


def read_json(response: httpx.Response) -> Any:
    """Decoded JSON body, or None if the body is not JSON."""

    try:
        return response.json()
    except ValueError:
        return None
