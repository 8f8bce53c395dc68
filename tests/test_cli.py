"""End-to-end tests for the skyfetch CLI using Typer's CliRunner."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

from skyfetch import __version__
from skyfetch.app import app, main
from skyfetch.client import SyncClient
from skyfetch.config import get_data_dir, get_recent_dir, load_settings, save_settings
from skyfetch.exceptions import ConfigError
from skyfetch.exit_codes import EXIT_INVALID_USAGE, EXIT_NOT_FOUND, EXIT_RATE_LIMITED
from skyfetch.models import ApiConfig, Settings
from skyfetch.recent import RecentCitiesStore
from skyfetch.weather.models import SearchResult

BASE = "https://api.example.com/v1"
PROVIDER = ["--api-key", "test-key", "--base-url", BASE]


@pytest.fixture()
def provider(make_handler, london_search_payload, london_weather_payload):
    return make_handler(
        {
            "/search.ashx": london_search_payload,
            "/weather.ashx": london_weather_payload,
        }
    )


@pytest.fixture()
def invoke(cli_runner, monkeypatch):
    """Run the CLI; a given handler answers every provider request."""

    def run(args, handler=None, **kwargs):
        if handler is not None:
            transport = httpx.MockTransport(handler)
            monkeypatch.setattr(
                "skyfetch.commands.weather._make_client",
                lambda settings: SyncClient(settings, transport=transport),
            )
        return cli_runner.invoke(app, args, **kwargs)

    return run


class TestGlobalOptions:
    def test_version(self, invoke, isolated_config) -> None:
        result = invoke(["--version"])
        assert result.exit_code == 0
        assert f"skyfetch {__version__}" in result.output

    def test_no_args_shows_help(self, invoke, isolated_config) -> None:
        result = invoke([])
        assert "search" in result.output
        assert "weather" in result.output


class TestSearch:
    def test_json_table(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--json", *PROVIDER, "search", "London"], provider)
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows[0]["Name"] == "London"
        assert rows[0]["Country"] == "United Kingdom"
        sent = provider.requests[0].url
        assert sent.params["key"] == "test-key"
        assert sent.params["q"] == "London"

    def test_limit_is_forwarded(self, invoke, isolated_config, provider) -> None:
        invoke(["--plain", *PROVIDER, "search", "London", "--limit", "2"], provider)
        assert provider.requests[0].url.params["num_of_results"] == "2"

    def test_default_limit(self, invoke, isolated_config, provider) -> None:
        invoke(["--plain", *PROVIDER, "search", "London"], provider)
        assert provider.requests[0].url.params["num_of_results"] == "10"

    def test_short_query_makes_no_request(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--plain", *PROVIDER, "search", "L"], provider)
        assert result.exit_code == 0
        assert "No cities found for 'L'" in result.output
        assert provider.calls == 0

    def test_overlong_query_is_usage_error(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--plain", *PROVIDER, "search", "x" * 51], provider)
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "limited to 50 characters" in result.output
        assert provider.calls == 0

    def test_api_key_from_env(self, invoke, isolated_config, provider, monkeypatch) -> None:
        monkeypatch.setenv("SKYFETCH_API_KEY", "env-key")
        monkeypatch.setenv("SKYFETCH_BASE_URL", BASE)
        result = invoke(["--plain", "search", "London"], provider)
        assert result.exit_code == 0, result.output
        assert provider.requests[0].url.params["key"] == "env-key"

    def test_no_matches(self, invoke, isolated_config, make_handler) -> None:
        handler = make_handler({"/search.ashx": {"search_api": {"result": []}}})
        result = invoke(["--plain", *PROVIDER, "search", "Atlantis"], handler)
        assert result.exit_code == 0
        assert "No cities found for 'Atlantis'" in result.output

    def test_rate_limited(self, invoke, isolated_config, make_handler) -> None:
        handler = make_handler({"/search.ashx": httpx.Response(429)})
        result = invoke(["--plain", *PROVIDER, "search", "London"], handler)
        assert result.exit_code == EXIT_RATE_LIMITED
        assert "Too many requests" in result.output

    def test_missing_api_key(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--plain", "search", "London"], provider)
        assert result.exit_code == 1
        assert isinstance(result.exception, ConfigError)
        assert provider.calls == 0

    def test_invalid_base_url(self, invoke, isolated_config, provider) -> None:
        args = ["--plain", "--api-key", "k", "--base-url", "not a url", "search", "London"]
        result = invoke(args, provider)
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "Invalid URL provided" in result.output
        assert provider.calls == 0


class TestWeather:
    def test_shows_conditions_and_records_city(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--plain", *PROVIDER, "weather", "London"], provider)
        assert result.exit_code == 0, result.output
        assert "Temperature\t18°C, 64°F" in result.stdout
        assert "Conditions\tSunny" in result.stdout

        weather_request = provider.requests[1].url
        assert weather_request.path.endswith("/weather.ashx")
        assert weather_request.params["q"] == "51.517,-0.106"

        with RecentCitiesStore(get_recent_dir()) as recent:
            assert [c.name for c in recent.list()] == ["London"]

    def test_json_summary(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--json", *PROVIDER, "weather", "London", "--refresh"], provider)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["Humidity"] == "52%"

    def test_unknown_city(self, invoke, isolated_config, make_handler) -> None:
        handler = make_handler({"/search.ashx": {"search_api": {}}})
        result = invoke(["--plain", *PROVIDER, "weather", "Atlantis"], handler)
        assert result.exit_code == EXIT_NOT_FOUND
        assert handler.calls == 1

    def test_short_query_is_not_found(self, invoke, isolated_config, provider) -> None:
        result = invoke(["--plain", *PROVIDER, "weather", "L"], provider)
        assert result.exit_code == EXIT_NOT_FOUND
        assert provider.calls == 0

    def test_http_error(self, invoke, isolated_config, make_handler, london_search_payload) -> None:
        handler = make_handler(
            {"/search.ashx": london_search_payload, "/weather.ashx": httpx.Response(404)}
        )
        result = invoke(["--plain", *PROVIDER, "weather", "London"], handler)
        assert result.exit_code == EXIT_NOT_FOUND
        assert "HTTP error: 404" in result.output
        with RecentCitiesStore(get_recent_dir()) as recent:
            assert recent.list() == []

    def test_verbose_reports_requests(self, invoke, isolated_config, provider) -> None:
        result = invoke(
            ["--plain", "--no-color", "-v", *PROVIDER, "weather", "London"], provider
        )
        assert result.exit_code == 0, result.output
        assert "[debug] HTTP 200" in result.output
        assert "[debug] Cache miss:" in result.output


class TestRecent:
    def _seed(self, *names: str) -> None:
        with RecentCitiesStore(get_recent_dir()) as store:
            for name in names:
                store.add(SearchResult.model_validate({"areaName": [{"value": name}]}))

    def test_list_empty(self, invoke, isolated_config) -> None:
        result = invoke(["recent", "list"])
        assert result.exit_code == 0
        assert "No recent cities." in result.output

    def test_list(self, invoke, isolated_config) -> None:
        self._seed("London", "Paris")
        result = invoke(["--plain", "recent", "list"])
        lines = result.stdout.splitlines()
        assert lines[0] == "Name\tRegion\tCountry"
        assert lines[1].startswith("Paris")
        assert lines[2].startswith("London")

    def test_remove(self, invoke, isolated_config) -> None:
        self._seed("London", "Paris")
        result = invoke(["recent", "remove", "London"])
        assert result.exit_code == 0
        with RecentCitiesStore(get_recent_dir()) as store:
            assert [c.name for c in store.list()] == ["Paris"]

    def test_remove_unknown(self, invoke, isolated_config) -> None:
        result = invoke(["recent", "remove", "Nowhere"])
        assert result.exit_code == EXIT_NOT_FOUND

    def test_clear_with_force(self, invoke, isolated_config) -> None:
        self._seed("London")
        result = invoke(["--force", "recent", "clear"])
        assert result.exit_code == 0
        with RecentCitiesStore(get_recent_dir()) as store:
            assert store.list() == []

    def test_clear_declined(self, invoke, isolated_config) -> None:
        self._seed("London")
        result = invoke(["recent", "clear"], input="n\n")
        assert result.exit_code == 0
        with RecentCitiesStore(get_recent_dir()) as store:
            assert len(store.list()) == 1


class TestConfig:
    def test_show_masks_api_key(self, invoke, isolated_config) -> None:
        save_settings(Settings(api=ApiConfig(api_key="abcdef123456")))
        result = invoke(["--json", "config", "show"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["api"]["api_key"] == "ab********56"
        assert "abcdef123456" not in result.output

    @pytest.mark.parametrize(
        "key, value, check",
        [
            ("request.timeout", "10", lambda s: s.request.timeout == 10.0),
            ("request.verify_ssl", "false", lambda s: s.request.verify_ssl is False),
            ("cache.weather_ttl", "120", lambda s: s.cache.weather_ttl == 120),
            ("output.format", "json", lambda s: s.output.format == "json"),
        ],
    )
    def test_set(self, invoke, isolated_config, key, value, check) -> None:
        result = invoke(["config", "set", key, value])
        assert result.exit_code == 0, result.output
        assert check(load_settings())

    @pytest.mark.parametrize(
        "key, value",
        [
            ("nope", "1"),
            ("cache.nope", "1"),
            ("cache", "1"),
            ("cache.max_entries", "many"),
            ("cache.max_entries", "0"),
            ("request.timeout", "soon"),
        ],
    )
    def test_set_rejects(self, invoke, isolated_config, key, value) -> None:
        result = invoke(["config", "set", key, value])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert load_settings() == Settings()

    def test_reset(self, invoke, isolated_config) -> None:
        save_settings(Settings(api=ApiConfig(api_key="x")))
        result = invoke(["--force", "config", "reset"])
        assert result.exit_code == 0
        assert load_settings() == Settings()

    def test_broken_settings_file_can_be_reset(self, invoke, isolated_config) -> None:
        from skyfetch.config import get_config_dir

        (get_config_dir() / "config.json").write_text("{broken", encoding="utf-8")
        result = invoke(["--force", "config", "reset"])
        assert result.exit_code == 0
        assert load_settings() == Settings()


class TestMain:
    def test_skyfetch_error_exits_with_its_code(
        self, isolated_config, monkeypatch, capsys
    ) -> None:
        monkeypatch.setattr(sys, "argv", ["skyfetch", "--plain", "search", "London"])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1
        assert "No API key configured" in capsys.readouterr().err

    def test_unexpected_error_writes_crash_log(self, isolated_config, monkeypatch) -> None:
        def boom() -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr("skyfetch.app.app", boom)
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1
        logs = list((get_data_dir() / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "kaboom" in logs[0].read_text()
