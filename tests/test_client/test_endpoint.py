"""Tests for Endpoint URL derivation and cache identity."""

from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from skyfetch.client.endpoint import Endpoint
from skyfetch.exceptions import InvalidURL
from skyfetch.models import HTTPMethod

BASE = "https://api.example.com/v1"


def _search(*query: tuple[str, str], **kwargs) -> Endpoint:
    return Endpoint(path="/search.ashx", query=tuple(query), **kwargs)


class TestUrl:
    def test_joins_base_path_and_query(self) -> None:
        endpoint = _search(("key", "k"), ("format", "json"), ("q", "London"))
        url = endpoint.url(BASE)
        assert isinstance(url, httpx.URL)
        assert str(url) == "https://api.example.com/v1/search.ashx?key=k&format=json&q=London"

    def test_query_order_is_preserved(self) -> None:
        url = _search(("q", "London"), ("format", "json")).url(BASE)
        assert str(url).endswith("?q=London&format=json")

    def test_values_are_encoded(self) -> None:
        url = _search(("q", "New York & Co")).url(BASE)
        assert "New York & Co" not in str(url)
        assert url.params["q"] == "New York & Co"

    def test_no_query(self) -> None:
        assert str(Endpoint(path="/weather.ashx").url(BASE)) == f"{BASE}/weather.ashx"

    @pytest.mark.parametrize(
        "base, path",
        [
            ("https://api.example.com/v1/", "/search.ashx"),
            ("https://api.example.com/v1", "search.ashx"),
            ("https://api.example.com/v1/", "search.ashx"),
        ],
    )
    def test_single_separator(self, base: str, path: str) -> None:
        url = Endpoint(path=path).url(base)
        assert str(url) == "https://api.example.com/v1/search.ashx"

    @pytest.mark.parametrize(
        "base",
        ["", "not a url", "api.example.com/v1", "ftp://api.example.com", "https:///v1"],
    )
    def test_invalid_base_url(self, base: str) -> None:
        with pytest.raises(InvalidURL):
            _search(("q", "London")).url(base)

    @pytest.mark.parametrize("path", ["/search ashx", "/search\n.ashx", "/search.ashx?q=x", "/a#frag"])
    def test_invalid_path(self, path: str) -> None:
        with pytest.raises(InvalidURL):
            Endpoint(path=path).url(BASE)


class TestCacheKey:
    def test_get_key_is_canonical_url(self) -> None:
        endpoint = _search(("q", "London"))
        assert endpoint.cache_key(BASE) == str(endpoint.url(BASE))

    def test_non_get_key_is_prefixed_with_method(self) -> None:
        endpoint = _search(("q", "London"), method=HTTPMethod.POST)
        assert endpoint.cache_key(BASE) == f"POST {BASE}/search.ashx?q=London"

    def test_headers_do_not_affect_key(self) -> None:
        plain = _search(("q", "London"))
        with_headers = _search(("q", "London"), headers={"Accept": "application/json"})
        assert plain.cache_key(BASE) == with_headers.cache_key(BASE)

    def test_different_order_means_different_key(self) -> None:
        a = _search(("q", "London"), ("format", "json"))
        b = _search(("format", "json"), ("q", "London"))
        assert a.cache_key(BASE) != b.cache_key(BASE)


class TestIdentity:
    def test_equal_ignores_headers_and_ttl(self) -> None:
        a = _search(("q", "London"), cache_ttl=60)
        b = _search(("q", "London"), headers={"Accept": "application/json"}, cache_ttl=0)
        assert a == b
        assert hash(a) == hash(b)

    def test_method_matters(self) -> None:
        assert _search(("q", "x")) != _search(("q", "x"), method=HTTPMethod.DELETE)

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Endpoint(path="/search.ashx", cache_ttl=-1)

    def test_with_ttl_returns_copy(self) -> None:
        endpoint = _search(("q", "London"), cache_ttl=60)
        fresh = endpoint.with_ttl(0)
        assert fresh.cache_ttl == 0
        assert endpoint.cache_ttl == 60
        assert fresh == endpoint

    def test_with_ttl_keeps_headers(self) -> None:
        endpoint = Endpoint(path="/search.ashx", headers={"Accept": "application/json"})
        assert endpoint.with_ttl(30).headers == {"Accept": "application/json"}

    def test_with_negative_ttl_rejected(self) -> None:
        endpoint = _search(("q", "London"), cache_ttl=60)
        with pytest.raises(ValidationError):
            endpoint.with_ttl(-5)

    def test_frozen(self) -> None:
        endpoint = _search(("q", "London"))
        with pytest.raises(ValidationError):
            endpoint.path = "/weather.ashx"  # type: ignore[misc]
