"""Weather lookups on top of a request dispatcher.

:class:`WeatherService` pairs a :class:`~skyfetch.client.SyncClient` with a
:class:`~skyfetch.weather.router.WeatherRouter` and unwraps the provider's
envelopes.  Sections the provider left out come back as ``None`` rather
than an empty placeholder, so callers can tell "no data" from "no matches".
:class:`AsyncWeatherService` is the same over
:class:`~skyfetch.client.AsyncClient`.
"""

from __future__ import annotations

from typing import Optional

from skyfetch.client.async_client import AsyncClient
from skyfetch.client.result import Result
from skyfetch.client.sync_client import SyncClient
from skyfetch.weather.models import SearchModel, SearchResult, WeatherData, WeatherModel
from skyfetch.weather.router import SearchParams, WeatherParams, WeatherRouter


def _search_results(model: SearchModel) -> Optional[list[SearchResult]]:
    if model.search_api is None:
        return None
    return model.search_api.result


def _weather_data(model: WeatherModel) -> Optional[WeatherData]:
    return model.data


class WeatherService:
    """Blocking weather API facade.

    Args:
        client: An open :class:`~skyfetch.client.SyncClient`.
        router: Endpoint builder carrying the API key and TTLs.
    """

    def __init__(self, client: SyncClient, router: WeatherRouter) -> None:
        self._client = client
        self._router = router

    def search_cities(self, params: SearchParams) -> Result[Optional[list[SearchResult]]]:
        """Search for cities matching ``params.query``.

        A query that is not :attr:`~SearchParams.is_searchable` yields an
        empty list without a request.
        """
        if not params.is_searchable:
            return Result.success([])
        endpoint = self._router.search_city(params)
        return self._client.request(endpoint, SearchModel).map(_search_results)

    def get_weather(
        self, params: WeatherParams, force_refresh: bool = False
    ) -> Result[Optional[WeatherData]]:
        """Fetch current weather; *force_refresh* bypasses the cache entirely."""
        endpoint = self._router.get_weather(params, force_refresh=force_refresh)
        return self._client.request(endpoint, WeatherModel).map(_weather_data)

    def refresh_weather(self, params: WeatherParams) -> Result[Optional[WeatherData]]:
        """Drop the cached weather for *params*, then fetch and cache it again."""
        endpoint = self._router.get_weather(params)
        self._client.remove_cache(endpoint)
        return self._client.request(endpoint, WeatherModel).map(_weather_data)

    def clear_all_caches(self) -> None:
        self._client.clear_all_caches()


class AsyncWeatherService:
    """Non-blocking counterpart of :class:`WeatherService`."""

    def __init__(self, client: AsyncClient, router: WeatherRouter) -> None:
        self._client = client
        self._router = router

    async def search_cities(self, params: SearchParams) -> Result[Optional[list[SearchResult]]]:
        if not params.is_searchable:
            return Result.success([])
        endpoint = self._router.search_city(params)
        result = await self._client.request(endpoint, SearchModel)
        return result.map(_search_results)

    async def get_weather(
        self, params: WeatherParams, force_refresh: bool = False
    ) -> Result[Optional[WeatherData]]:
        endpoint = self._router.get_weather(params, force_refresh=force_refresh)
        result = await self._client.request(endpoint, WeatherModel)
        return result.map(_weather_data)

    async def refresh_weather(self, params: WeatherParams) -> Result[Optional[WeatherData]]:
        endpoint = self._router.get_weather(params)
        self._client.remove_cache(endpoint)
        result = await self._client.request(endpoint, WeatherModel)
        return result.map(_weather_data)

    def clear_all_caches(self) -> None:
        self._client.clear_all_caches()
