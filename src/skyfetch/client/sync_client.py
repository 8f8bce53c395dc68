"""Synchronous request dispatcher with a time-bounded response cache.

This module provides :class:`SyncClient`, the blocking dispatcher used by
the skyfetch CLI.  It wraps :class:`httpx.Client` and, for every
:class:`~skyfetch.client.endpoint.Endpoint`, either answers from the
in-memory :class:`~skyfetch.cache.ResponseCache` or performs exactly one
transport call:

- **Fail fast** -- an endpoint that cannot form a valid URL returns
  ``InvalidURL`` before the cache or the network is touched.
- **Cache lookup** -- only for endpoints with a positive TTL; a cached body
  that no longer decodes is dropped and refetched.
- **Single attempt** -- no retry; a transport failure is classified into
  the :class:`~skyfetch.exceptions.NetworkError` taxonomy and returned.
- **Cache store** -- the raw body is cached only after it decoded
  successfully, and only when the TTL is positive.

See Also:
    :class:`~skyfetch.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from skyfetch.cache import CacheStore
from skyfetch.client.base import BaseClient
from skyfetch.client.endpoint import Endpoint
from skyfetch.client.result import Result
from skyfetch.models import Settings


class SyncClient(BaseClient):
    """Blocking request dispatcher.

    Must be used as a context manager so that the underlying connection
    pool is opened and closed.  The cache outlives the context, so one
    client can be entered repeatedly, and several clients can share one
    cache.

    Args:
        settings: Effective settings (base URL, request timeout, cache size).
        cache: Optional shared cache; a private one is created otherwise.
        transport: Optional :class:`httpx.BaseTransport` override.

    Example::

        with SyncClient(settings) as client:
            result = client.request(router.search_city(params), SearchModel)
            if result.ok:
                print(result.value)
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[CacheStore] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        super().__init__(settings, cache=cache, transport=transport)
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(**self._client_kwargs())
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request method
    # ------------------------------------------------------------------ #

    def request(self, endpoint: Endpoint, shape: Any = Any) -> Result[Any]:
        """Serve *endpoint* from cache or the network and decode it as *shape*.

        Args:
            endpoint: The request target and caching policy.
            shape: Expected decoded type (a Pydantic model, a container
                such as ``list[SearchResult]``, or ``Any`` for raw JSON).

        Returns:
            A :class:`~skyfetch.client.result.Result` holding the decoded
            value or one :class:`~skyfetch.exceptions.NetworkError`.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        prepared = self._prepare(endpoint, shape)
        if prepared.result is not None:
            return prepared.result

        try:
            response = self._client.request(
                endpoint.method.value,
                prepared.url,
                headers=endpoint.headers,
            )
        except httpx.HTTPError as exc:
            return self._transport_failure(exc)

        return self._complete(endpoint, prepared, response, shape)
