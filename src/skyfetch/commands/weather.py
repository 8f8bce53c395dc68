"""Weather commands -- search cities and show current conditions.

``skyfetch search`` lists the cities the provider matches for a query.
``skyfetch weather`` resolves a query to a single city, shows its current
conditions, and records the city in the recently viewed list.

Both commands share one :class:`~skyfetch.client.SyncClient` per
invocation, so the search that resolves a city and the weather lookup that
follows go through the same response cache.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

import typer

from skyfetch.commands import context_options
from skyfetch.exceptions import NetworkError
from skyfetch.output import debug, error, info, print_record, print_table, suggest
from skyfetch.weather.router import DEFAULT_SEARCH_RESULTS, MAX_SEARCH_LENGTH, SearchParams

if TYPE_CHECKING:
    from skyfetch.client import SyncClient
    from skyfetch.models import Settings


def _make_client(settings: Settings) -> SyncClient:
    """Build the dispatcher shared by the commands of one invocation."""
    from skyfetch.client import SyncClient

    return SyncClient(settings)


def _search_params(query: str, limit: int) -> SearchParams:
    """Validate *query* for a city search; exit with a usage error if it is too long."""
    from pydantic import ValidationError

    from skyfetch.exit_codes import EXIT_INVALID_USAGE

    try:
        return SearchParams(query=query, num_of_results=limit)
    except ValidationError:
        error(f"Search queries are limited to {MAX_SEARCH_LENGTH} characters.")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None


def _fail(err: NetworkError) -> None:
    """Report a failed request and exit with the error's code."""
    from skyfetch.client.errors import describe_error

    error(describe_error(err))
    if err.retryable:
        suggest("The failure looks temporary; run the command again.")
    raise typer.Exit(code=err.exit_code)


@contextmanager
def _open_service(ctx: typer.Context) -> Iterator[Any]:
    """Yield a :class:`~skyfetch.weather.WeatherService` for this invocation."""
    from skyfetch.config import require_api_key, resolve_settings
    from skyfetch.weather import WeatherRouter, WeatherService

    options = context_options(ctx)
    settings = resolve_settings(
        cli_api_key=options.get("api_key"),
        cli_base_url=options.get("base_url"),
    )
    router = WeatherRouter(
        require_api_key(settings),
        search_ttl=settings.cache.search_ttl,
        weather_ttl=settings.cache.weather_ttl,
    )
    debug(f"Provider: {settings.api.base_url}")
    with _make_client(settings) as client:
        yield WeatherService(client, router)


def search_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="City name, 'lat,lng' pair, or IP address."),
    limit: int = typer.Option(
        DEFAULT_SEARCH_RESULTS, "--limit", "-l", min=1, help="Maximum number of matches."
    ),
) -> None:
    """Search for cities matching QUERY.

    Example::

        skyfetch search london
        skyfetch search "new york" --limit 3 --json
    """
    params = _search_params(query, limit)
    with _open_service(ctx) as service:
        result = service.search_cities(params)

    if not result.ok:
        _fail(result.error)
    cities = result.value or []
    if not cities:
        info(f"No cities found for '{query}'.")
        return

    rows = [
        [
            city.name or "",
            city.region_name or "",
            city.country_name or "",
            city.latitude or "",
            city.longitude or "",
            city.population or "",
        ]
        for city in cities
    ]
    print_table(
        ["Name", "Region", "Country", "Latitude", "Longitude", "Population"],
        rows,
        title=f"Cities matching '{query}'",
    )


def weather_command(
    ctx: typer.Context,
    query: str = typer.Argument(help="City name or 'lat,lng' pair."),
    days: int = typer.Option(1, "--days", "-d", min=1, help="Forecast days to request."),
    refresh: bool = typer.Option(
        False, "--refresh", "-r", help="Bypass the cache and fetch fresh data."
    ),
) -> None:
    """Show current weather for the first city matching QUERY.

    The city is added to the recently viewed list.

    Example::

        skyfetch weather london
        skyfetch weather "48.85,2.35" --refresh
    """
    from skyfetch.config import get_recent_dir, resolve_settings
    from skyfetch.exit_codes import EXIT_NOT_FOUND
    from skyfetch.recent import RecentCitiesStore
    from skyfetch.weather import WeatherParams

    search = _search_params(query, 1)
    with _open_service(ctx) as service:
        found = service.search_cities(search)
        if not found.ok:
            _fail(found.error)
        if not found.value:
            error(f"No city found for '{query}'.")
            raise typer.Exit(code=EXIT_NOT_FOUND)

        city = found.value[0]
        params = WeatherParams(query=city.query or query, num_of_days=days)
        result = service.get_weather(params, force_refresh=refresh)

    if not result.ok:
        _fail(result.error)
    if result.from_cache:
        debug("Weather served from cache")
    data = result.value
    if data is None:
        error(f"No weather data available for '{city.name or query}'.")
        raise typer.Exit(code=EXIT_NOT_FOUND)

    settings = resolve_settings()
    with RecentCitiesStore(get_recent_dir(), settings.recent.max_items) as recent:
        recent.add(city)

    print_record(data.summary(), title=f"Weather in {data.area_name}")
