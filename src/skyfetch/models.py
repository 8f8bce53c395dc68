"""Canonical Pydantic configuration models shared across skyfetch modules.

The settings file (``config.json`` in the user's config directory) is
deserialised into :class:`Settings`, which groups the per-concern models:

* :class:`ApiConfig` -- provider base URL and API key.
* :class:`RequestConfig` -- the single request timeout and TLS verification.
* :class:`CacheConfig` -- request cache capacity and per-endpoint TTLs.
* :class:`OutputConfig` -- default output format.
* :class:`RecentConfig` -- size of the recently viewed cities list.

:class:`HTTPMethod` is shared by the endpoint descriptor and the
dispatchers.  The provider's response schema lives separately in
:mod:`skyfetch.weather.models`.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


DEFAULT_BASE_URL = "https://api.worldweatheronline.com/premium/v1"


class HTTPMethod(str, enum.Enum):
    """HTTP methods an :class:`~skyfetch.client.endpoint.Endpoint` may use."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ApiConfig(BaseModel):
    """Weather provider connection settings.

    Both values must be available before the first request is dispatched.
    The API key is normally supplied through ``SKYFETCH_API_KEY`` rather
    than stored in the settings file.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, description="Provider base URL")
    api_key: str = Field(default="", description="Provider API key")


class RequestConfig(BaseModel):
    """HTTP settings applied uniformly to every request."""

    timeout: float = Field(default=30, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """In-memory request cache settings."""

    max_entries: int = Field(default=100, ge=1, description="Maximum cached responses")
    search_ttl: int = Field(default=3600, ge=0, description="City search TTL in seconds")
    weather_ttl: int = Field(default=60, ge=0, description="Current weather TTL in seconds")


class OutputConfig(BaseModel):
    """Default output format preferences."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class RecentConfig(BaseModel):
    """Recently viewed cities settings."""

    max_items: int = Field(default=10, ge=1, description="Cities kept in the recent list")


class Settings(BaseModel):
    """User-wide configuration persisted at ``~/.config/skyfetch/config.json``.

    Loaded and saved by :func:`~skyfetch.config.load_settings` and
    :func:`~skyfetch.config.save_settings`.  Values here have the lowest
    precedence and can be overridden by environment variables or CLI flags;
    see :func:`~skyfetch.config.resolve_settings`.
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    recent: RecentConfig = Field(default_factory=RecentConfig)
