"""Weather provider integration: request parameters, response models, services."""

from skyfetch.weather.models import SearchResult, WeatherData
from skyfetch.weather.router import SearchParams, WeatherParams, WeatherRouter
from skyfetch.weather.service import AsyncWeatherService, WeatherService

__all__ = [
    "AsyncWeatherService",
    "SearchParams",
    "SearchResult",
    "WeatherData",
    "WeatherParams",
    "WeatherRouter",
    "WeatherService",
]
