'''Serve yearly QCEW CSVs from an HTTP location.

The base URL must serve an index page (a directory listing or any HTML page)
linking to files named ``{year}.annual.singlefile.csv``, and each file at
``{base_url}/{year}.annual.singlefile.csv``. Bodies are streamed, never
buffered whole.
'''

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import AsyncIterator
from pathlib import PurePosixPath
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from .._client import (
    MAX_RETRIES,
    backoff_seconds,
    create_client,
    is_retryable,
    request_params,
    request_with_retry,
)
from ..config import SOURCE_FILE_SUFFIX

log = logging.getLogger(__name__)

YEAR_FILE_RE = re.compile(rf'^(\d{{4}}){re.escape(SOURCE_FILE_SUFFIX)}$')


def discover_years(html: str) -> list[str]:
    '''Collect the years of every ``{year}.annual.singlefile.csv`` link on a page.

    Args:
        html: Raw HTML of the index page.

    Returns:
        Sorted, de-duplicated 4-digit year strings.
    '''
    soup = BeautifulSoup(html, 'html.parser')
    years: set[str] = set()
    for a in soup.find_all('a', href=True):
        href = a['href'].strip()
        if not href or href.startswith('#') or href.startswith('mailto:'):
            continue
        name = PurePosixPath(urlparse(href).path).name
        match = YEAR_FILE_RE.match(name)
        if match:
            years.add(match.group(1))
    return sorted(years)


class HttpYearSource:
    '''Yearly source files under *base_url*.

    Args:
        base_url: URL of the folder (and index page) holding the files.
        client: Optional pre-built :class:`httpx.AsyncClient`. A client is
            created on first use (and closed by :meth:`aclose`) otherwise.
        max_retries: Attempts per request on 429/5xx responses.
    '''

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        max_retries: int = MAX_RETRIES,
    ) -> None:
        self.base_url = base_url if base_url.endswith('/') else f'{base_url}/'
        self._client = client
        self._own_client = client is None
        self.max_retries = max_retries

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = create_client()
        return self._client

    async def aclose(self) -> None:
        if self._own_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> HttpYearSource:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def url_for(self, year: str) -> str:
        return urljoin(self.base_url, f'{year}{SOURCE_FILE_SUFFIX}')

    async def list_available_years(self) -> list[str]:
        r = await request_with_retry(self.client, 'GET', self.base_url, max_retries=self.max_retries)
        years = discover_years(r.text)
        log.info('Found %d yearly source files at %s', len(years), self.base_url)
        return years

    async def year_stream_size(self, year: str) -> int | None:
        '''Size from a HEAD request's ``content-length``; None if it cannot be had.'''
        url = self.url_for(year)
        try:
            r = await request_with_retry(self.client, 'HEAD', url, max_retries=self.max_retries)
        except httpx.HTTPError as exc:
            log.debug('No size for %s: %s', url, exc)
            return None
        length = r.headers.get('content-length')
        return int(length) if length and length.isdigit() else None

    async def open_year_stream(self, year: str) -> AsyncIterator[bytes]:
        '''Stream a year's file body.

        Retries 429/5xx responses before the first byte is yielded; errors
        after that propagate.

        Raises:
            httpx.HTTPStatusError: On a non-retryable status or after the
                last retry.
        '''
        url = self.url_for(year)
        params = request_params(url)
        for attempt in range(self.max_retries):
            async with self.client.stream('GET', url, params=params) as r:
                if is_retryable(r.status_code) and attempt < self.max_retries - 1:
                    wait = backoff_seconds(attempt)
                    log.warning('[%d] GET %s, retrying in %ds', r.status_code, url, wait)
                else:
                    r.raise_for_status()
                    async for chunk in r.aiter_bytes():
                        yield chunk
                    return
            await asyncio.sleep(wait)
