"""Request parameters and endpoint builders for the weather provider.

:class:`WeatherRouter` turns typed request parameters into
:class:`~skyfetch.client.endpoint.Endpoint` descriptors.  Every endpoint
starts its query with the API key and ``format=json`` followed by the
endpoint-specific items, always in the same order, so equal parameters map
to the same cache entry.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from skyfetch.client.endpoint import Endpoint
from skyfetch.models import HTTPMethod

SEARCH_PATH = "/search.ashx"
WEATHER_PATH = "/weather.ashx"

SEARCH_TTL = 3600
WEATHER_TTL = 60

MIN_SEARCH_LENGTH = 2
MAX_SEARCH_LENGTH = 50
DEFAULT_SEARCH_RESULTS = 10

_JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

QueryItems = list[tuple[str, str]]


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


class SearchParams(BaseModel):
    """Parameters of a city search.

    Attributes:
        query: Location name, ``lat,lng`` pair, or IP address.  At most
            :data:`MAX_SEARCH_LENGTH` characters.
        num_of_results: Optional cap on the number of matches.
    """

    query: str = Field(max_length=MAX_SEARCH_LENGTH)
    num_of_results: Optional[int] = Field(default=None, ge=1)

    @property
    def is_searchable(self) -> bool:
        """Whether the query has at least :data:`MIN_SEARCH_LENGTH` non-blank characters.

        Services answer unsearchable queries with no results and no
        provider call.
        """
        return len(self.query.strip()) >= MIN_SEARCH_LENGTH

    def to_query_items(self) -> QueryItems:
        items: QueryItems = [("q", self.query)]
        if self.num_of_results is not None:
            items.append(("num_of_results", str(self.num_of_results)))
        return items


class WeatherParams(BaseModel):
    """Parameters of a weather lookup.

    Attributes:
        query: Location name or ``lat,lng`` pair.
        num_of_days: Forecast days to include.
        date: Optional ``yyyy-MM-dd`` date.
        fx: ``"yes"``/``"no"`` -- include the forecast section.
        mca: ``"yes"``/``"no"`` -- include monthly climate averages.
        fx24: ``"yes"``/``"no"`` -- include 24-hourly forecast.
        tp: Forecast time interval in hours (e.g. 3, 6, 12).
        show_local_time: Include the location's local time.
        include_location: Include the nearest area section.
    """

    query: str
    num_of_days: int = Field(default=1, ge=0)
    date: Optional[str] = None
    fx: Optional[str] = None
    mca: Optional[str] = None
    fx24: Optional[str] = None
    tp: Optional[int] = None
    show_local_time: bool = True
    include_location: bool = True

    def to_query_items(self) -> QueryItems:
        items: QueryItems = [
            ("q", self.query),
            ("num_of_days", str(self.num_of_days)),
            ("showlocaltime", _yes_no(self.show_local_time)),
            ("includelocation", _yes_no(self.include_location)),
        ]
        for name in ("date", "fx", "mca", "fx24", "tp"):
            value = getattr(self, name)
            if value is not None:
                items.append((name, str(value)))
        return items


class WeatherRouter:
    """Builds the provider's endpoints.

    Args:
        api_key: Provider API key, sent as the ``key`` query parameter.
        search_ttl: Cache TTL for city searches, in seconds.
        weather_ttl: Cache TTL for weather lookups, in seconds.
    """

    def __init__(
        self,
        api_key: str,
        search_ttl: float = SEARCH_TTL,
        weather_ttl: float = WEATHER_TTL,
    ) -> None:
        self._api_key = api_key
        self._search_ttl = search_ttl
        self._weather_ttl = weather_ttl

    def search_city(self, params: SearchParams) -> Endpoint:
        return self._endpoint(SEARCH_PATH, params.to_query_items(), self._search_ttl)

    def get_weather(self, params: WeatherParams, force_refresh: bool = False) -> Endpoint:
        """Return the weather endpoint; *force_refresh* disables caching for it."""
        ttl = 0 if force_refresh else self._weather_ttl
        return self._endpoint(WEATHER_PATH, params.to_query_items(), ttl)

    def _endpoint(self, path: str, items: QueryItems, ttl: float) -> Endpoint:
        query = [("key", self._api_key), ("format", "json"), *items]
        return Endpoint(
            path=path,
            method=HTTPMethod.GET,
            headers=dict(_JSON_HEADERS),
            query=tuple(query),
            cache_ttl=ttl,
        )
