"""Tests for location resolution and the Nominatim geocoder."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from weather_lookup.exceptions import LocationNotFoundError, RangeError, ResolverTransportError
from weather_lookup.geocoding import (
    Geocoder,
    LocationResolver,
    NominatimGeocoder,
    parse_coordinates,
)
from weather_lookup.providers.models import GeoPoint


class _FakeGeocoder(Geocoder):
    def __init__(
        self,
        points: list[GeoPoint] | None = None,
        address: str | None = "Mitte, Berlin, Deutschland",
    ) -> None:
        self.points = points or []
        self.address = address
        self.forward_calls: list[str] = []
        self.reverse_calls: list[GeoPoint] = []

    def forward(self, query: str) -> list[GeoPoint]:
        self.forward_calls.append(query)
        return list(self.points)

    def reverse(self, point: GeoPoint) -> str | None:
        self.reverse_calls.append(point)
        return self.address


def _resolver(geocoder: Geocoder) -> LocationResolver:
    return LocationResolver(geocoder, logging.getLogger("test_geocoding"))


def _nominatim(handler: Any) -> NominatimGeocoder:
    settings = SimpleNamespace(
        geocoder_base_url="https://geo.example.com/",
        geocoder_timeout_seconds=5.0,
        weather_user_agent="weather-lookup-tests/0.1",
    )
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return NominatimGeocoder(settings=settings, logger=logging.getLogger("test"), client=client)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("52.52, 13.405", (52.52, 13.405)),
        ("-33.8688,151.2093", (-33.8688, 151.2093)),
        ("91, 0", (91.0, 0.0)),
        ("Berlin", None),
        ("Paris, France", None),
        ("1, 2, 3", None),
        ("52.52,", None),
        ("1_0, 2", None),
        ("\u0661\u0662, 3", None),
        ("\uff15, 3", None),
        ("1e1, .5", (10.0, 0.5)),
        ("+45., -7", (45.0, -7.0)),
    ],
)
def test_parse_coordinates(text: str, expected: tuple[float, float] | None) -> None:
    assert parse_coordinates(text) == expected


def test_coordinates_resolve_via_reverse_geocoding() -> None:
    geocoder = _FakeGeocoder()
    location = _resolver(geocoder).resolve("52.52, 13.405")

    assert location.latitude == 52.52
    assert location.longitude == 13.405
    assert location.address == "Mitte, Berlin, Deutschland"
    assert geocoder.reverse_calls == [GeoPoint(latitude=52.52, longitude=13.405)]
    assert geocoder.forward_calls == []


@pytest.mark.parametrize("text", ["91, 0", "-90.5, 10", "0, 181", "10, -180.01"])
def test_out_of_range_coordinates_fail_before_geocoding(text: str) -> None:
    geocoder = _FakeGeocoder()
    with pytest.raises(RangeError):
        _resolver(geocoder).resolve(text)
    assert geocoder.reverse_calls == []
    assert geocoder.forward_calls == []


def test_place_name_resolves_via_forward_geocoding_keeping_input_address() -> None:
    geocoder = _FakeGeocoder(points=[GeoPoint(latitude=48.8566, longitude=2.3522)])
    location = _resolver(geocoder).resolve("Paris, France")

    assert (location.latitude, location.longitude) == (48.8566, 2.3522)
    assert location.address == "Paris, France"
    assert geocoder.forward_calls == ["Paris, France"]


def test_first_forward_candidate_wins() -> None:
    geocoder = _FakeGeocoder(
        points=[
            GeoPoint(latitude=51.5072, longitude=-0.1276),
            GeoPoint(latitude=42.9849, longitude=-81.2453),
        ]
    )
    location = _resolver(geocoder).resolve("London")
    assert location.latitude == 51.5072


def test_forward_without_candidates_raises_not_found() -> None:
    with pytest.raises(LocationNotFoundError):
        _resolver(_FakeGeocoder(points=[])).resolve("Atlantis")


def test_reverse_without_address_raises_not_found() -> None:
    with pytest.raises(LocationNotFoundError):
        _resolver(_FakeGeocoder(address=None)).resolve("0, -140")


def test_nominatim_forward_parses_string_coordinates() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=[{"lat": "52.5170365", "lon": "13.3888599", "display_name": "Berlin"}],
        )

    with _nominatim(handler) as geocoder:
        points = geocoder.forward("Berlin")

    assert points == [GeoPoint(latitude=52.5170365, longitude=13.3888599)]
    assert seen[0].url.path == "/search"
    assert seen[0].url.params["q"] == "Berlin"
    assert seen[0].url.params["format"] == "jsonv2"


def test_nominatim_forward_empty_result() -> None:
    with _nominatim(lambda request: httpx.Response(200, json=[])) as geocoder:
        assert geocoder.forward("Atlantis") == []


def test_nominatim_reverse_returns_display_name() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/reverse"
        assert request.url.params["lat"] == "52.52"
        return httpx.Response(200, json={"display_name": "Mitte, Berlin, Deutschland"})

    with _nominatim(handler) as geocoder:
        address = geocoder.reverse(GeoPoint(latitude=52.52, longitude=13.405))
    assert address == "Mitte, Berlin, Deutschland"


def test_nominatim_reverse_error_body_means_no_address() -> None:
    handler = lambda request: httpx.Response(200, json={"error": "Unable to geocode"})  # noqa: E731
    with _nominatim(handler) as geocoder:
        assert geocoder.reverse(GeoPoint(latitude=0.0, longitude=-140.0)) is None


def test_nominatim_http_error_raises_transport_error() -> None:
    with _nominatim(lambda request: httpx.Response(503, text="overloaded")) as geocoder:
        with pytest.raises(ResolverTransportError, match="status 503"):
            geocoder.forward("Berlin")


def test_nominatim_network_failure_raises_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _nominatim(handler) as geocoder:
        with pytest.raises(ResolverTransportError, match="request failed"):
            geocoder.reverse(GeoPoint(latitude=1.0, longitude=2.0))


def test_nominatim_non_json_raises_transport_error() -> None:
    with _nominatim(lambda request: httpx.Response(200, text="<html>")) as geocoder:
        with pytest.raises(ResolverTransportError, match="non-JSON"):
            geocoder.forward("Berlin")


def test_nominatim_malformed_candidate_raises_transport_error() -> None:
    handler = lambda request: httpx.Response(200, json=[{"lat": "north"}])  # noqa: E731
    with _nominatim(handler) as geocoder:
        with pytest.raises(ResolverTransportError, match="invalid coordinates"):
            geocoder.forward("Berlin")


def test_underscored_number_is_treated_as_place_name() -> None:
    geocoder = _FakeGeocoder(points=[GeoPoint(latitude=1.0, longitude=2.0)])
    location = _resolver(geocoder).resolve("1_0, 2")

    assert geocoder.forward_calls == ["1_0, 2"]
    assert geocoder.reverse_calls == []
    assert location.address == "1_0, 2"
