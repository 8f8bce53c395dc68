"""Pydantic models for the weather provider's JSON responses.

The provider wraps almost every scalar in a one-element list of
``{"value": ...}`` objects and omits whole sections when it has nothing to
report, so every field here is optional and absence is kept as ``None``.
Field aliases match the provider's keys exactly; unknown keys are ignored.

Display helpers (:attr:`WeatherData.area_name`, :attr:`WeatherData.temperature`,
...) turn the nested structure into the strings shown by the CLI and fall
back to an explicit ``"Unknown ..."`` text when a value is missing.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_UNKNOWN = "Unknown"


class _ProviderModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ValueItem(_ProviderModel):
    """The provider's ``{"value": "..."}`` wrapper."""

    value: Optional[str] = None


def _first_value(items: Optional[list[ValueItem]]) -> Optional[str]:
    if not items:
        return None
    return items[0].value


# --------------------------------------------------------------------------- #
# Search
# --------------------------------------------------------------------------- #


class SearchResult(_ProviderModel):
    """One city returned by ``/search.ashx``."""

    area_name: Optional[list[ValueItem]] = Field(default=None, alias="areaName")
    country: Optional[list[ValueItem]] = None
    region: Optional[list[ValueItem]] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    population: Optional[str] = None
    weather_url: Optional[list[ValueItem]] = Field(default=None, alias="weatherUrl")

    @property
    def name(self) -> Optional[str]:
        """Primary area name, used as the identity of a city in the recent list."""
        return _first_value(self.area_name)

    @property
    def country_name(self) -> Optional[str]:
        return _first_value(self.country)

    @property
    def region_name(self) -> Optional[str]:
        return _first_value(self.region)

    @property
    def query(self) -> str:
        """Query string that asks the provider for this city's weather.

        Coordinates are preferred because area names are ambiguous.
        """
        if self.latitude and self.longitude:
            return f"{self.latitude},{self.longitude}"
        return self.name or ""


class SearchAPI(_ProviderModel):
    result: Optional[list[SearchResult]] = None


class SearchModel(_ProviderModel):
    """Top-level ``/search.ashx`` response."""

    search_api: Optional[SearchAPI] = None


# --------------------------------------------------------------------------- #
# Weather
# --------------------------------------------------------------------------- #


class CurrentCondition(_ProviderModel):
    observation_time: Optional[str] = None
    temp_c: Optional[str] = Field(default=None, alias="temp_C")
    temp_f: Optional[str] = Field(default=None, alias="temp_F")
    weather_icon_url: Optional[list[ValueItem]] = Field(default=None, alias="weatherIconUrl")
    weather_desc: Optional[list[ValueItem]] = Field(default=None, alias="weatherDesc")
    windspeed_kmph: Optional[str] = Field(default=None, alias="windspeedKmph")
    winddir_degree: Optional[str] = Field(default=None, alias="winddirDegree")
    winddir_16_point: Optional[str] = Field(default=None, alias="winddir16Point")
    precip_mm: Optional[str] = Field(default=None, alias="precipMM")
    humidity: Optional[str] = None
    visibility: Optional[str] = None
    pressure: Optional[str] = None
    cloudcover: Optional[str] = None
    feels_like_c: Optional[str] = Field(default=None, alias="FeelsLikeC")
    feels_like_f: Optional[str] = Field(default=None, alias="FeelsLikeF")
    uv_index: Optional[str] = Field(default=None, alias="uvIndex")


class NearestArea(_ProviderModel):
    area_name: Optional[list[ValueItem]] = Field(default=None, alias="areaName")
    country: Optional[list[ValueItem]] = None
    region: Optional[list[ValueItem]] = None


class TimeZone(_ProviderModel):
    localtime: Optional[str] = None


class WeatherData(_ProviderModel):
    """The ``data`` section of a ``/weather.ashx`` response."""

    nearest_area: Optional[list[NearestArea]] = None
    time_zone: Optional[list[TimeZone]] = None
    current_condition: Optional[list[CurrentCondition]] = None

    @property
    def current(self) -> CurrentCondition:
        """The first current-condition block, or an empty one when absent."""
        if self.current_condition:
            return self.current_condition[0]
        return CurrentCondition()

    # -- Location -------------------------------------------------------- #

    @property
    def area_name(self) -> str:
        area = self.nearest_area[0] if self.nearest_area else None
        return (area and _first_value(area.area_name)) or "Unknown Area"

    @property
    def region_name(self) -> str:
        area = self.nearest_area[0] if self.nearest_area else None
        return (area and _first_value(area.region)) or "Unknown Region"

    @property
    def country_name(self) -> str:
        area = self.nearest_area[0] if self.nearest_area else None
        return (area and _first_value(area.country)) or "Unknown Country"

    @property
    def local_time(self) -> str:
        if self.time_zone and self.time_zone[0].localtime:
            return self.time_zone[0].localtime
        return "Unknown TimeZone"

    # -- Current weather ------------------------------------------------- #

    @property
    def description(self) -> str:
        return _first_value(self.current.weather_desc) or "Unknown Weather"

    @property
    def icon_url(self) -> str:
        return _first_value(self.current.weather_icon_url) or ""

    @property
    def temperature(self) -> str:
        c = self.current
        return f"{c.temp_c or _UNKNOWN}°C, {c.temp_f or _UNKNOWN}°F"

    @property
    def feels_like(self) -> str:
        c = self.current
        return f"Feels like {c.feels_like_c or _UNKNOWN}°C, {c.feels_like_f or _UNKNOWN}°F"

    @property
    def humidity(self) -> str:
        return f"{self.current.humidity or _UNKNOWN}%"

    @property
    def wind(self) -> str:
        c = self.current
        return f"{c.windspeed_kmph or _UNKNOWN} km/h {c.winddir_16_point or _UNKNOWN} ({c.winddir_degree or _UNKNOWN}°)"

    @property
    def pressure(self) -> str:
        return f"{self.current.pressure or _UNKNOWN} mb"

    @property
    def visibility(self) -> str:
        return f"{self.current.visibility or _UNKNOWN} km"

    @property
    def uv_index(self) -> str:
        return f"UV Index: {self.current.uv_index or _UNKNOWN}"

    @property
    def precipitation(self) -> str:
        return f"{self.current.precip_mm or _UNKNOWN} mm"

    @property
    def cloud_cover(self) -> str:
        return f"{self.current.cloudcover or _UNKNOWN}%"

    @property
    def observation_time(self) -> str:
        return f"Observed at: {self.current.observation_time or _UNKNOWN}"

    def summary(self) -> dict[str, str]:
        """Return the display fields in presentation order."""
        return {
            "Location": f"{self.area_name}, {self.region_name}, {self.country_name}",
            "Local time": self.local_time,
            "Conditions": self.description,
            "Temperature": self.temperature,
            "Feels like": self.feels_like,
            "Humidity": self.humidity,
            "Wind": self.wind,
            "Pressure": self.pressure,
            "Visibility": self.visibility,
            "Precipitation": self.precipitation,
            "Cloud cover": self.cloud_cover,
            "UV": self.uv_index,
            "Observation": self.observation_time,
        }


class WeatherModel(_ProviderModel):
    """Top-level ``/weather.ashx`` response."""

    data: Optional[WeatherData] = None
