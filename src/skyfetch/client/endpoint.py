"""Endpoint descriptors and canonical URL derivation.

An :class:`Endpoint` is an immutable description of one request target:
path, method, headers, ordered query parameters, and the cache TTL the
dispatcher should apply.  Joined with the provider base URL it yields the
canonical URL, which is both the URL that is fetched and the key under
which the response body is cached.

Query parameter order is significant: it is preserved in the canonical URL,
so two descriptors that list the same parameters in a different order are
cached separately.  Builders such as
:class:`~skyfetch.weather.router.WeatherRouter` therefore always emit their
parameters in a fixed order.

Headers only shape the outgoing request and never take part in cache
identity: descriptors that differ only in headers share a cache entry.
"""

from __future__ import annotations

import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from skyfetch.exceptions import InvalidURL
from skyfetch.models import HTTPMethod

_UNSAFE_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


class Endpoint(BaseModel):
    """A request target plus its caching policy.

    Attributes:
        path: Resource path appended to the provider base URL.
        method: HTTP method.
        headers: Extra request headers.
        query: Ordered ``(name, value)`` pairs forming the query string.
        cache_ttl: Seconds a successful response may be served from cache.
            ``0`` means never read from nor write to the cache.

    Example::

        endpoint = Endpoint(path="/search.ashx", query=(("q", "London"),), cache_ttl=3600)
        endpoint.url("https://api.example.com/v1")
        # URL('https://api.example.com/v1/search.ashx?q=London')
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod = HTTPMethod.GET
    headers: dict[str, str] = Field(default_factory=dict)
    query: tuple[tuple[str, str], ...] = ()
    cache_ttl: float = Field(default=0, ge=0)

    def url(self, base_url: str) -> httpx.URL:
        """Build the canonical URL for this endpoint.

        Args:
            base_url: Absolute ``http``/``https`` provider URL.

        Returns:
            The fully-qualified :class:`httpx.URL` with the encoded query.

        Raises:
            InvalidURL: If the base URL and path cannot form a valid
                absolute URL.
        """
        raw = _join(base_url, self.path)
        if not base_url or _UNSAFE_CHARS.search(raw) or any(c in self.path for c in "?#"):
            raise InvalidURL(raw)
        try:
            url = httpx.URL(raw, params=list(self.query)) if self.query else httpx.URL(raw)
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise InvalidURL(raw) from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURL(raw)
        return url

    def cache_key(self, base_url: str) -> str:
        """Return the cache key: the canonical URL, prefixed by the method unless GET."""
        return self.key_for(self.url(base_url))

    def key_for(self, url: httpx.URL) -> str:
        """Return the cache key for an already derived canonical *url*."""
        if self.method is HTTPMethod.GET:
            return str(url)
        return f"{self.method.value} {url}"

    def with_ttl(self, cache_ttl: float) -> Endpoint:
        """Return a copy with a different cache TTL (``0`` forces a fresh fetch).

        Raises:
            pydantic.ValidationError: If *cache_ttl* is negative.
        """
        return Endpoint.model_validate({**self.model_dump(), "cache_ttl": cache_ttl})

    def _identity(self) -> tuple[Any, ...]:
        return (self.path, self.method, self.query)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def _join(base_url: str, path: str) -> str:
    if not path:
        return base_url
    if base_url.endswith("/") and path.startswith("/"):
        return base_url + path[1:]
    if not base_url.endswith("/") and not path.startswith("/"):
        return f"{base_url}/{path}"
    return base_url + path
