"""Asynchronous request dispatcher -- mirrors :class:`~skyfetch.client.sync_client.SyncClient`.

This module provides :class:`AsyncClient`, the non-blocking counterpart to
:class:`~skyfetch.client.sync_client.SyncClient`.  It wraps
:class:`httpx.AsyncClient` and runs the same pipeline; the transport call
is the only suspension point.

Callers may run many requests concurrently.  They coordinate only through
the shared cache: two concurrent requests for the same URL can both miss
and both store their body, and the last write wins.

A caller that stops waiting (its task is cancelled) never receives a
result, and because cancellation interrupts the transport await, the
cancelled request never writes to the cache.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from skyfetch.cache import CacheStore
from skyfetch.client.base import BaseClient
from skyfetch.client.endpoint import Endpoint
from skyfetch.client.result import Result
from skyfetch.models import Settings


class AsyncClient(BaseClient):
    """Non-blocking request dispatcher.

    Must be used as an async context manager.

    Args:
        settings: Effective settings (base URL, request timeout, cache size).
        cache: Optional shared cache; a private one is created otherwise.
        transport: Optional :class:`httpx.AsyncBaseTransport` override.

    Example::

        async with AsyncClient(settings) as client:
            result = await client.request(router.get_weather(params), WeatherModel)
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[CacheStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(settings, cache=cache, transport=transport)
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(**self._client_kwargs())
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    async def request(self, endpoint: Endpoint, shape: Any = Any) -> Result[Any]:
        """Serve *endpoint* from cache or the network and decode it as *shape*.

        Behaves identically to
        :meth:`~skyfetch.client.sync_client.SyncClient.request` but is
        non-blocking.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        prepared = self._prepare(endpoint, shape)
        if prepared.result is not None:
            return prepared.result

        try:
            response = await self._client.request(
                endpoint.method.value,
                prepared.url,
                headers=endpoint.headers,
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(exc)

        return self._complete(endpoint, prepared, response, shape)
