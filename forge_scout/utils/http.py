"""
One-shot HTTP helpers for the REST tier and API probing.

Every call opens and closes its own httpx.AsyncClient: the adapters keep no
session between calls.
"""

from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "forge-scout",
}


async def get_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    auth: tuple[str, str] | None = None,
    params: dict[str, str] | None = None,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET a URL and decode the JSON body.

    Raises:
        httpx.HTTPStatusError: On a 4xx/5xx response.
        httpx.TimeoutException: If the request exceeds ``timeout``.
        httpx.TransportError: If the host cannot be reached.
        httpx.InvalidURL: If the URL cannot be parsed.
        ValueError: If the body is not valid JSON.
    """
    async with httpx.AsyncClient(
        headers={**DEFAULT_HEADERS, **(headers or {})},
        auth=auth,
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    ) as client:
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()


async def probe(
    url: str,
    *,
    timeout: float = 5.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bool:
    """Check whether a URL answers with a 2xx status.

    Network errors and timeouts count as "no"; this never raises for them.
    """
    try:
        async with httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        log.debug("probe_failed", url=url, error=str(e))
        return False

    log.debug("probe_response", url=url, status_code=response.status_code)
    return response.is_success
