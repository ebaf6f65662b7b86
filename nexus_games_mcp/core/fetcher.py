"""
core/fetcher.py

Async JSON fetcher for the WordPress REST API:
  - One shared httpx.AsyncClient per provider (HTTP/2, keep-alive)
  - 404 can be reported as NOT_FOUND instead of an error
  - Every other failure raises TransportError (no retries)
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MAX_CONNECTIONS = 5


class _NotFound:
    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Any = _NotFound()


# ---------------------------------------------------------------------------
# Core async fetch
# ---------------------------------------------------------------------------

async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    provider: str,
    context: str,
    params: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
    allow_not_found: bool = False,
) -> Any:
    """
    GET *url* and return the decoded JSON body.

    Returns NOT_FOUND on HTTP 404 when *allow_not_found* is set.
    Raises TransportError for network errors, other non-2xx statuses and
    bodies that are not JSON.
    """
    logger.info("Fetching %s params=%s", url, dict(params or {}))
    try:
        resp = await client.get(
            url,
            params=params,
            headers=headers,
            timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
        )
    except httpx.TimeoutException as exc:
        raise TransportError(provider, context, f"Timeout: {exc}") from exc
    except httpx.RequestError as exc:
        raise TransportError(provider, context, f"Request error: {exc}") from exc

    if resp.status_code == 404 and allow_not_found:
        logger.info("Not found: %s", url)
        return NOT_FOUND

    if not resp.is_success:
        raise TransportError(
            provider,
            context,
            f"HTTP {resp.status_code}: {resp.reason_phrase}",
            status_code=resp.status_code,
        )

    try:
        return resp.json()
    except ValueError as exc:
        raise TransportError(
            provider, context, f"Invalid JSON response: {exc}", status_code=resp.status_code
        ) from exc


# ---------------------------------------------------------------------------
# Shared async client factory
# ---------------------------------------------------------------------------

def build_http_client(timeout: float, max_connections: int = MAX_CONNECTIONS) -> httpx.AsyncClient:
    """
    Build an httpx.AsyncClient for talking to one WordPress site.

    The provider owns the client and closes it in aclose().
    """
    return httpx.AsyncClient(
        http2=True,
        follow_redirects=True,
        limits=httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_connections,
            keepalive_expiry=30.0,
        ),
        timeout=httpx.Timeout(timeout, connect=5.0),
    )
