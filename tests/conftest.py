"""Shared test fixtures for skyfetch.

Provides reusable fixtures for provider payloads, fake clocks, mock
transports, isolated config environments, output state, and the CLI
runner.  These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from skyfetch.models import ApiConfig, Settings
from skyfetch.output import OutputFormat, OutputManager, reset_output, set_output


BASE_URL = "https://api.example.com/v1"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Provider payloads
# ---------------------------------------------------------------------------


def _value(text: str) -> list[dict[str, str]]:
    return [{"value": text}]


@pytest.fixture
def london_search_payload() -> dict[str, Any]:
    """A ``/search.ashx`` response with a single match."""
    return {
        "search_api": {
            "result": [
                {
                    "areaName": _value("London"),
                    "country": _value("United Kingdom"),
                    "region": _value("City of London, Greater London"),
                    "latitude": "51.517",
                    "longitude": "-0.106",
                    "population": "7421228",
                    "weatherUrl": _value("https://www.example.com/london-weather"),
                }
            ]
        }
    }


@pytest.fixture
def london_weather_payload() -> dict[str, Any]:
    """A ``/weather.ashx`` response with every display field present."""
    return {
        "data": {
            "nearest_area": [
                {
                    "areaName": _value("London"),
                    "country": _value("United Kingdom"),
                    "region": _value("City of London, Greater London"),
                }
            ],
            "time_zone": [{"localtime": "2025-05-12 14:05", "utcOffset": "1.0"}],
            "current_condition": [
                {
                    "observation_time": "01:05 PM",
                    "temp_C": "18",
                    "temp_F": "64",
                    "weatherIconUrl": _value("https://cdn.example.com/sunny.png"),
                    "weatherDesc": _value("Sunny"),
                    "windspeedKmph": "13",
                    "winddirDegree": "240",
                    "winddir16Point": "WSW",
                    "precipMM": "0.0",
                    "humidity": "52",
                    "visibility": "10",
                    "pressure": "1021",
                    "cloudcover": "0",
                    "FeelsLikeC": "17",
                    "FeelsLikeF": "63",
                    "uvIndex": "5",
                }
            ],
        }
    }


# ---------------------------------------------------------------------------
# Clock and transport helpers
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class RecordingHandler:
    """MockTransport handler that records requests and replays canned responses.

    ``routes`` maps a URL path to either an :class:`httpx.Response`, a
    JSON-serialisable payload (served with status 200), or a callable
    taking the request.
    """

    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for path, route in self.routes.items():
            if request.url.path.endswith(path):
                if callable(route):
                    return route(request)
                if isinstance(route, httpx.Response):
                    return httpx.Response(
                        route.status_code, headers=route.headers, content=route.content
                    )
                return httpx.Response(200, content=json.dumps(route).encode())
        return httpx.Response(404)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def make_handler() -> Callable[[dict[str, Any]], RecordingHandler]:
    return RecordingHandler


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake provider."""
    return Settings(api=ApiConfig(base_url=BASE_URL, api_key="test-key"))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, and clears all SKYFETCH_*
    environment variables.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("skyfetch.config._is_xdg_platform", lambda: True)

    for var in ["SKYFETCH_API_KEY", "SKYFETCH_BASE_URL"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
