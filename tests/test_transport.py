"""Tests for the httpx weather transport."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from weather_lookup.exceptions import WeatherTransportError
from weather_lookup.providers.models import RequestDescriptor
from weather_lookup.providers.transport import HttpxWeatherTransport

REQUEST = RequestDescriptor(
    url="https://api.met.no/weatherapi/locationforecast/2.0/complete",
    params={"lat": "52.52", "lon": "13.405"},
    headers={"Accept": "application/json", "User-Agent": "weather-lookup-tests/0.1"},
)


def _transport(handler: Any) -> HttpxWeatherTransport:
    settings = SimpleNamespace(
        weather_timeout_seconds=5.0,
        weather_user_agent="weather-lookup-tests/0.1",
    )
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpxWeatherTransport(
        settings=settings, logger=logging.getLogger("test_transport"), client=client
    )


def test_fetch_json_sends_params_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"type": "Feature"})

    with _transport(handler) as transport:
        payload = transport.fetch_json(REQUEST)

    assert payload == {"type": "Feature"}
    assert seen[0].url.path == "/weatherapi/locationforecast/2.0/complete"
    assert seen[0].url.params["lat"] == "52.52"
    assert seen[0].url.params["lon"] == "13.405"
    assert seen[0].headers["Accept"] == "application/json"
    assert seen[0].headers["User-Agent"] == "weather-lookup-tests/0.1"


def test_error_body_with_flag_is_returned_for_normalizer() -> None:
    body = {"error": True, "reason": "Cannot initialize WeatherVariable from invalid String value"}
    with _transport(lambda request: httpx.Response(400, json=body)) as transport:
        assert transport.fetch_json(REQUEST) == body


def test_http_error_without_error_flag_raises() -> None:
    with _transport(lambda request: httpx.Response(500, text="Internal Server Error")) as transport:
        with pytest.raises(WeatherTransportError, match="status 500"):
            transport.fetch_json(REQUEST)


def test_http_error_with_plain_json_raises() -> None:
    handler = lambda request: httpx.Response(403, json={"message": "forbidden"})  # noqa: E731
    with _transport(handler) as transport:
        with pytest.raises(WeatherTransportError, match="status 403"):
            transport.fetch_json(REQUEST)


def test_non_json_success_raises() -> None:
    with _transport(lambda request: httpx.Response(200, text="<html></html>")) as transport:
        with pytest.raises(WeatherTransportError, match="non-JSON"):
            transport.fetch_json(REQUEST)


def test_non_object_json_raises() -> None:
    with _transport(lambda request: httpx.Response(200, json=[1, 2, 3])) as transport:
        with pytest.raises(WeatherTransportError, match="non-object"):
            transport.fetch_json(REQUEST)


def test_network_failure_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with _transport(handler) as transport:
        with pytest.raises(WeatherTransportError, match="request failed"):
            transport.fetch_json(REQUEST)
