"""Request dispatch module for skyfetch.

Provides synchronous and asynchronous dispatchers that wrap :mod:`httpx`
with a per-endpoint response cache and a closed error taxonomy.

Classes:
    :class:`Endpoint` -- immutable request target with a cache TTL.
    :class:`SyncClient` -- blocking dispatcher backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking dispatcher backed by :class:`httpx.AsyncClient`.
    :class:`Result` -- decoded value or one :class:`~skyfetch.exceptions.NetworkError`.

Example::

    from skyfetch.client import Endpoint, SyncClient

    with SyncClient(settings) as client:
        result = client.request(Endpoint(path="/search.ashx", cache_ttl=3600))
"""

from skyfetch.client.async_client import AsyncClient
from skyfetch.client.endpoint import Endpoint
from skyfetch.client.result import Result
from skyfetch.client.sync_client import SyncClient

__all__ = ["AsyncClient", "Endpoint", "Result", "SyncClient"]
