"""In-memory, count-bounded response cache with per-entry expiry.

:class:`ResponseCache` stores raw response bodies keyed by the canonical
request URL.  Each entry carries its own absolute expiry computed from the
TTL given to :meth:`~ResponseCache.put`; a TTL of zero or less is refused so
that callers asking for fresh data never populate the cache.

Expired entries are evicted lazily when a read observes them.  When the
number of entries exceeds ``max_entries`` the least recently used ones are
dropped.  All operations take an internal lock, so the store can be shared
by dispatchers running on several threads or tasks.

The cache lives for the lifetime of the process and is never written to
disk.

See Also:
    :class:`~skyfetch.models.CacheConfig` -- the Pydantic model that
    controls ``max_entries``.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

from skyfetch.output import get_output


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload plus the window in which it may be served."""

    payload: bytes
    stored_at: float
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class CacheStore(ABC):
    """Interface the dispatchers need from a request cache."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the payload for *key*, or ``None`` on a miss."""

    @abstractmethod
    def put(self, key: str, payload: bytes, ttl_seconds: float) -> None:
        """Store *payload* under *key* for *ttl_seconds*."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Evict the entry for *key* if present."""

    @abstractmethod
    def clear(self) -> None:
        """Evict every entry."""

    @abstractmethod
    def __len__(self) -> int: ...


class ResponseCache(CacheStore):
    """Thread-safe LRU cache of raw response bodies.

    Args:
        max_entries: Maximum number of entries kept.  Must be at least 1.
        clock: Monotonic time source in seconds.  Tests inject a fake
            clock to step past expiry without sleeping.

    Example::

        from skyfetch.cache import ResponseCache

        cache = ResponseCache(max_entries=50)
        cache.put("https://api.example.com/search.ashx?q=London", b"{}", 3600)
        hit = cache.get("https://api.example.com/search.ashx?q=London")
    """

    def __init__(
        self,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Optional[bytes]:
        """Look up a cached payload.

        Returns:
            The stored bytes when an entry exists and has not expired,
            otherwise ``None``.  An expired entry is evicted as a side
            effect, so later reads keep missing.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                get_output().debug(f"Cache miss: {key}")
                return None
            if not entry.is_valid(self._clock()):
                del self._entries[key]
                get_output().debug(f"Cache expired: {key}")
                return None
            self._entries.move_to_end(key)
            get_output().debug(f"Cache hit: {key}")
            return entry.payload

    def put(self, key: str, payload: bytes, ttl_seconds: float) -> None:
        """Store a payload, replacing any existing entry for *key*.

        A non-positive TTL is a no-op: the entry is neither stored nor
        does it displace an existing one.
        """
        if ttl_seconds <= 0:
            return
        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(
                payload=payload, stored_at=now, expires_at=now + ttl_seconds
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                get_output().debug(f"Cache evicted: {evicted}")

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        get_output().debug("Cache cleared")

    def entry(self, key: str) -> Optional[CacheEntry]:
        """Return the raw entry for *key* without touching recency or expiry."""
        with self._lock:
            return self._entries.get(key)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (number of entries, expired ones
            included until they are observed) and ``max_entries``.
        """
        with self._lock:
            return {"size": len(self._entries), "max_entries": self._max_entries}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
