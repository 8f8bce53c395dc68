"""Persistent list of recently viewed cities.

The list is stored as one JSON document under the ``recentCities`` key of a
:class:`diskcache.Cache` directory, newest first.  Cities are identified by
their primary area name: viewing a city again moves it to the front instead
of adding a duplicate.  Data that can no longer be decoded (for example
after a schema change) reads as an empty list rather than failing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import diskcache
from pydantic import TypeAdapter, ValidationError

from skyfetch.output import get_output
from skyfetch.weather.models import SearchResult

RECENT_CITIES_KEY = "recentCities"

_CITIES = TypeAdapter(list[SearchResult])


class RecentCitiesStore:
    """Recently viewed cities, newest first.

    Args:
        directory: Directory holding the :class:`diskcache.Cache` files.
        max_items: Number of cities kept; older ones are dropped.

    Example::

        with RecentCitiesStore(get_recent_dir()) as recent:
            recent.add(city)
            names = [c.name for c in recent.list()]
    """

    def __init__(self, directory: Union[str, Path], max_items: int = 10) -> None:
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self._max_items = max_items
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(str(Path(directory)))

    def __enter__(self) -> RecentCitiesStore:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def list(self) -> list[SearchResult]:
        """Return the stored cities, newest first."""
        raw = self._store.get(RECENT_CITIES_KEY)
        if raw is None:
            return []
        if not isinstance(raw, (str, bytes)):
            get_output().debug("Ignoring recent cities stored in an unexpected format")
            return []
        try:
            return _CITIES.validate_json(raw)
        except (ValidationError, ValueError) as exc:
            get_output().warning(f"Ignoring unreadable recent cities: {exc}")
            return []

    def add(self, city: SearchResult) -> None:
        """Put *city* at the front, replacing any entry with the same name."""
        cities = [c for c in self.list() if c.name != city.name]
        cities.insert(0, city)
        self._save(cities[: self._max_items])

    def remove(self, city: Union[SearchResult, str]) -> bool:
        """Remove the city with the same primary area name.

        Args:
            city: A city or its primary area name.

        Returns:
            ``True`` if an entry was removed.
        """
        name = city if isinstance(city, str) else city.name
        cities = self.list()
        kept = [c for c in cities if c.name != name]
        self._save(kept)
        return len(kept) != len(cities)

    def clear(self) -> None:
        self._store.delete(RECENT_CITIES_KEY)

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        if self._cache is not None:
            self._cache.close()
            self._cache = None

    @property
    def _store(self) -> diskcache.Cache:
        if self._cache is None:
            raise RuntimeError("RecentCitiesStore is closed")
        return self._cache

    def _save(self, cities: list[SearchResult]) -> None:
        self._store.set(RECENT_CITIES_KEY, _CITIES.dump_json(cities, by_alias=True, exclude_none=True))
