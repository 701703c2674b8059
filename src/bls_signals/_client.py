'''Shared async HTTP client with retry logic for BLS file downloads.

Provides a pre-configured :class:`httpx.AsyncClient` that speaks HTTP/2,
sends browser-like headers, and retries on rate-limit (429) or transient
server errors (5xx) using exponential back-off.

If the ``BLS_API_KEY`` environment variable is set, the key is appended as
a ``registrationkey`` query parameter on requests to ``bls.gov`` domains.

Attributes:
    USER_AGENT: User-Agent string sent with every request.
    DEFAULT_HEADERS: Default header dict merged into every client.
    DEFAULT_TIMEOUT: Per-request timeout in seconds (60).
    MAX_RETRIES: Maximum retry attempts before giving up (8).
    MAX_BACKOFF: Longest single wait between attempts, in seconds.
'''

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import httpx

log = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (compatible; bls-signals/0.1.0)'
DEFAULT_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'text/html,application/xhtml+xml,text/csv,*/*;q=0.8',
    'Accept-Language': 'en-us,en;q=0.5',
}
DEFAULT_TIMEOUT = 60.0
MAX_RETRIES = 8
MAX_BACKOFF = 120


def _bls_api_key() -> str:
    '''Return ``BLS_API_KEY`` from the environment, or an empty string.'''
    return os.environ.get('BLS_API_KEY', '')


def request_params(url: str) -> dict[str, str]:
    '''Query parameters to attach to a request for *url*.'''
    api_key = _bls_api_key()
    if api_key and 'bls.gov' in url:
        return {'registrationkey': api_key}
    return {}


def is_retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def backoff_seconds(attempt: int) -> int:
    return min(2**attempt, MAX_BACKOFF)


def create_client(
    *,
    http2: bool = True,
    headers: Optional[dict[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    '''Build an :class:`httpx.AsyncClient` with HTTP/2 and BLS-friendly headers.

    Args:
        http2: Enable HTTP/2 negotiation (default ``True``).
        headers: Extra headers merged on top of :data:`DEFAULT_HEADERS`.
        timeout: Per-request timeout in seconds.
        transport: Optional transport override (tests use
            :class:`httpx.MockTransport`).

    Returns:
        A configured ``httpx.AsyncClient``. Caller is responsible for closing it.
    '''
    merged = {**DEFAULT_HEADERS}
    if headers:
        merged.update(headers)
    return httpx.AsyncClient(
        http2=http2,
        headers=merged,
        timeout=timeout,
        follow_redirects=True,
        transport=transport,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    max_retries: int = MAX_RETRIES,
) -> httpx.Response:
    '''Send *method* to *url* with exponential back-off on 429 and transient 5xx.

    Args:
        client: An open ``httpx.AsyncClient``.
        method: HTTP method (``'GET'``, ``'HEAD'``).
        url: Absolute URL to fetch.
        max_retries: Maximum number of retry attempts.

    Returns:
        The successful :class:`httpx.Response`.

    Raises:
        httpx.HTTPStatusError: After exhausting retries or on a
            non-retryable HTTP error.
    '''
    if max_retries < 1:
        raise ValueError(f'max_retries must be at least 1, got {max_retries}')
    params = request_params(url)
    for attempt in range(max_retries):
        r = await client.request(method, url, params=params)
        if is_retryable(r.status_code) and attempt < max_retries - 1:
            wait = backoff_seconds(attempt)
            log.warning('[%d] %s %s, retrying in %ds', r.status_code, method, url, wait)
            await asyncio.sleep(wait)
            continue
        break
    r.raise_for_status()
    return r
