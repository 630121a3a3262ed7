"""Outbound HTTP for routes that call other services.

``/markdown`` and ``/page-meta`` fetch arbitrary URLs, ``/webhook``
posts to the Telegram Bot API. All of them go through one ``Fetcher``
registered with ``app.provide`` so tests can swap the network for an
``httpx.MockTransport``::

    fetcher = Fetcher(transport=httpx.MockTransport(handler))
    app = create_app(fetcher=fetcher)

A client is opened per call: the handlers make one request each and
nothing is shared across requests. Redirects are followed. Network
failures become a ``CustomError`` (400); non-2xx answers are returned
to the caller, who decides what they mean.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from edgebin.errors import CustomError

logger = logging.getLogger("edgebin.fetch")

USER_AGENT = "edgebin (+https://github.com/jiacai2050/edgebin)"


class Fetcher:
    """Thin wrapper over ``httpx.AsyncClient`` with injectable transport."""

    __slots__ = ("_timeout", "_transport")

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            follow_redirects=True,
            headers={"user-agent": USER_AGENT},
        )

    async def get(self, url: str) -> httpx.Response:
        """GET *url* and buffer the whole response body."""
        logger.debug("GET %s", url)
        async with self._client() as client:
            try:
                return await client.get(url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise _fetch_failed(url, exc) from exc

    @asynccontextmanager
    async def stream(self, url: str) -> AsyncIterator[httpx.Response]:
        """GET *url* without reading the body; iterate it with ``aiter_bytes()``."""
        logger.debug("GET (stream) %s", url)
        async with self._client() as client:
            try:
                async with client.stream("GET", url) as response:
                    yield response
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise _fetch_failed(url, exc) from exc

    async def post_json(self, url: str, body: Any) -> httpx.Response:
        """POST *body* as JSON to *url*."""
        logger.debug("POST %s", url)
        async with self._client() as client:
            try:
                return await client.post(url, json=body)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise _fetch_failed(url, exc) from exc


def _fetch_failed(url: str, exc: Exception) -> CustomError:
    logger.info("Fetching %s failed: %s", url, exc)
    return CustomError(f"Failed to fetch the URL: {exc}", 400)
