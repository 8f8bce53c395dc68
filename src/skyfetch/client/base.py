"""State and pipeline steps shared by the sync and async dispatchers.

:class:`BaseClient` owns the provider base URL, the request cache, and the
steps of the request pipeline that do not touch the transport:

1. canonical URL derivation (fail fast with ``InvalidURL``),
2. the cache lookup for endpoints with a positive TTL,
3. status classification, decoding, and the cache write that follows a
   successful decode.

The transport call in between is the only step that differs between
:class:`~skyfetch.client.sync_client.SyncClient` and
:class:`~skyfetch.client.async_client.AsyncClient`.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from skyfetch.cache import CacheStore, ResponseCache
from skyfetch.client.endpoint import Endpoint
from skyfetch.client.errors import classify_status, classify_transport_error
from skyfetch.client.response import decode_payload
from skyfetch.client.result import Result
from skyfetch.exceptions import DecodingError, InvalidURL
from skyfetch.models import Settings
from skyfetch.output import get_output


class _Prepared:
    """Outcome of the pre-transport steps for one request."""

    __slots__ = ("url", "key", "result")

    def __init__(
        self,
        url: Optional[httpx.URL] = None,
        key: str = "",
        result: Optional[Result[Any]] = None,
    ) -> None:
        self.url = url
        self.key = key
        self.result = result


class BaseClient:
    """Common core of the request dispatchers.

    Args:
        settings: Effective settings; ``api.base_url`` is the URL every
            endpoint path is joined to, ``request`` holds the timeout and
            TLS verification flag, and ``cache.max_entries`` sizes the
            default cache.
        cache: Cache shared with other dispatchers.  When ``None`` a
            private :class:`~skyfetch.cache.ResponseCache` is created.
        transport: Optional httpx transport, used by tests to substitute
            :class:`httpx.MockTransport`.
    """

    def __init__(
        self,
        settings: Settings,
        cache: Optional[CacheStore] = None,
        transport: Any = None,
    ) -> None:
        self._settings = settings
        self._base_url = settings.api.base_url
        self._cache: CacheStore = (
            cache if cache is not None else ResponseCache(settings.cache.max_entries)
        )
        self._transport = transport

    @property
    def cache(self) -> CacheStore:
        return self._cache

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------ #
    # Cache management
    # ------------------------------------------------------------------ #

    def clear_all_caches(self) -> None:
        """Drop every cached response so later requests go to the network."""
        self._cache.clear()

    def remove_cache(self, endpoint: Endpoint) -> None:
        """Drop the cached response for *endpoint*, if any.

        An endpoint that cannot form a valid URL has nothing cached, so
        this is a no-op for it.
        """
        try:
            key = endpoint.cache_key(self._base_url)
        except InvalidURL:
            return
        self._cache.remove(key)

    # ------------------------------------------------------------------ #
    # Pipeline steps
    # ------------------------------------------------------------------ #

    def _client_kwargs(self) -> dict[str, Any]:
        config = self._settings.request
        kwargs: dict[str, Any] = {
            "timeout": config.timeout,
            "verify": config.verify_ssl,
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return kwargs

    def _prepare(self, endpoint: Endpoint, shape: Any) -> _Prepared:
        """Derive the URL and try the cache.

        Returns a :class:`_Prepared` whose ``result`` is set when the
        request is already answered (invalid URL or a decodable cache hit).
        """
        try:
            url = endpoint.url(self._base_url)
        except InvalidURL as exc:
            get_output().debug(f"Rejected endpoint {endpoint.path!r}: {exc}")
            return _Prepared(result=Result.failure(exc))

        key = endpoint.key_for(url)
        if endpoint.cache_ttl > 0:
            cached = self._cache.get(key)
            if cached is not None:
                try:
                    value = decode_payload(cached, shape)
                except DecodingError as exc:
                    # A corrupt entry is never surfaced; refetch instead.
                    get_output().debug(f"Discarding undecodable cache entry {key}: {exc}")
                    self._cache.remove(key)
                else:
                    return _Prepared(url=url, key=key, result=Result.success(value, from_cache=True))
        return _Prepared(url=url, key=key)

    def _transport_failure(self, exc: BaseException) -> Result[Any]:
        error = classify_transport_error(exc)
        get_output().debug(f"Transport failure: {error}")
        return Result.failure(error)

    def _complete(
        self,
        endpoint: Endpoint,
        prepared: _Prepared,
        response: httpx.Response,
        shape: Any,
    ) -> Result[Any]:
        """Classify the status, decode the body, and cache it on success."""
        get_output().debug(f"HTTP {response.status_code} {prepared.url}")
        error = classify_status(response.status_code)
        if error is not None:
            return Result.failure(error)

        body = response.content
        try:
            value = decode_payload(body, shape)
        except DecodingError as exc:
            return Result.failure(exc)

        if endpoint.cache_ttl > 0:
            self._cache.put(prepared.key, body, endpoint.cache_ttl)
        return Result.success(value)
