"""In-memory request caching for skyfetch.

This package provides :class:`ResponseCache`, a count-bounded LRU store
that keeps raw response bodies keyed by canonical request URL, each entry
with its own expiry.  :class:`CacheStore` is the interface the dispatchers
in :mod:`skyfetch.client` depend on, so tests and embedders can substitute
their own implementation.
"""

from skyfetch.cache.cache import CacheEntry, CacheStore, ResponseCache

__all__ = ["CacheEntry", "CacheStore", "ResponseCache"]
