"""Recently viewed cities, persisted across runs with :mod:`diskcache`."""

from skyfetch.recent.store import RECENT_CITIES_KEY, RecentCitiesStore

__all__ = ["RECENT_CITIES_KEY", "RecentCitiesStore"]
