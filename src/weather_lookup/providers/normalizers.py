"""Provider-specific parsers producing normalized WeatherRecord instances.

Each parser takes the decoded JSON document and the WeatherQuery that
produced it. Required fields are type-checked one by one and a missing or
mistyped field raises MalformedResponseError naming it; nothing is defaulted.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..exceptions import CrossFieldMismatchError, MalformedResponseError, UpstreamProviderError
from .capabilities import get_profile
from .classifiers import WeatherCondition, WindDirection
from .models import CurrentConditions, GeoLocation, Provider, WeatherQuery, WeatherRecord

SERIES_LABEL_FORMAT = "%I %p"
CURRENT_LABEL_FORMAT = "%Y-%m-%d %I:%M %p"

Normalizer = Callable[[dict[str, Any], WeatherQuery], WeatherRecord]


def normalize(payload: dict[str, Any], query: WeatherQuery) -> WeatherRecord:
    """Dispatch ``payload`` to the parser registered for the query's provider."""
    return NORMALIZERS[query.provider](payload, query)


def parse_open_meteo(payload: dict[str, Any], query: WeatherQuery) -> WeatherRecord:
    provider = query.provider.value
    _raise_for_upstream_error(payload, provider)

    latitude = _require_number(payload, "latitude", provider, "latitude")
    longitude = _require_number(payload, "longitude", provider, "longitude")

    hourly = _require_mapping(payload, "hourly", provider, "hourly data")
    raw_times = _require_list(hourly, "time", provider, "hourly time")
    raw_temperatures = _require_list(hourly, "temperature_2m", provider, "hourly temperatures")

    timestamps = [
        _series_label(value, provider, f"hourly time[{index}]")
        for index, value in enumerate(raw_times)
    ]
    temperatures = [
        _as_number(value, provider, f"hourly temperatures[{index}]")
        for index, value in enumerate(raw_temperatures)
    ]
    _check_series_lengths(provider, timestamps, temperatures)

    hourly_units = _require_mapping(payload, "hourly_units", provider, "hourly units")
    unit = _require_str(hourly_units, "temperature_2m", provider, "temperature unit")

    current: CurrentConditions | None = None
    if "current_weather" in payload:
        raw_current = payload["current_weather"]
        if not isinstance(raw_current, dict):
            raise MalformedResponseError(provider, "current weather data")
        current = _parse_open_meteo_current(
            raw_current,
            payload.get("current_weather_units"),
            query,
        )

    return WeatherRecord(
        provider=query.provider,
        request_type=query.request_type,
        requested_date=query.requested_date,
        address=query.location.address,
        location=_reported_location(latitude, longitude, query, provider),
        timestamps=timestamps,
        temperatures=temperatures,
        unit=unit,
        current=current,
    )


def _parse_open_meteo_current(
    raw: dict[str, Any],
    raw_units: Any,
    query: WeatherQuery,
) -> CurrentConditions:
    provider = query.provider.value
    time_text = _require_str(raw, "time", provider, "current weather time")
    temperature = _require_number(raw, "temperature", provider, "current temperature")
    code = raw.get("weathercode")
    if not isinstance(code, int) or isinstance(code, bool):
        raise MalformedResponseError(provider, "current weather code")
    wind_speed = _require_number(raw, "windspeed", provider, "current wind speed")
    wind_degrees = _require_number(raw, "winddirection", provider, "current wind direction")

    wind_speed_unit = get_profile(query.provider).wind_speed_unit
    if isinstance(raw_units, dict):
        reported_unit = raw_units.get("windspeed")
        if isinstance(reported_unit, str) and reported_unit.strip():
            wind_speed_unit = reported_unit.strip()
    if wind_speed_unit is None:
        raise MalformedResponseError(provider, "current wind speed unit")

    return CurrentConditions(
        time=_parse_timestamp(time_text, provider, "current weather time").strftime(
            CURRENT_LABEL_FORMAT
        ),
        temperature=temperature,
        condition=WeatherCondition.from_code(code),
        wind_speed=wind_speed,
        wind_speed_unit=wind_speed_unit,
        wind_direction=WindDirection.from_degrees(wind_degrees),
    )


def parse_met_no(payload: dict[str, Any], query: WeatherQuery) -> WeatherRecord:
    provider = query.provider.value
    profile = get_profile(query.provider)

    geometry = _require_mapping(payload, "geometry", provider, "geometry")
    coordinates = _require_list(geometry, "coordinates", provider, "geometry coordinates")
    if len(coordinates) < 2:
        raise MalformedResponseError(provider, "geometry coordinates")
    # GeoJSON order is [lon, lat, altitude].
    longitude = _as_number(coordinates[0], provider, "geometry longitude")
    latitude = _as_number(coordinates[1], provider, "geometry latitude")

    properties = _require_mapping(payload, "properties", provider, "properties")
    meta = _require_mapping(properties, "meta", provider, "properties.meta")
    units = _require_mapping(meta, "units", provider, "properties.meta.units")
    unit = _require_str(units, "air_temperature", provider, "temperature unit")

    raw_series = _require_list(properties, "timeseries", provider, "timeseries")
    if profile.max_series_length is not None:
        raw_series = raw_series[: profile.max_series_length]

    timestamps: list[str] = []
    temperatures: list[float] = []
    for index, entry in enumerate(raw_series):
        field = f"timeseries[{index}]"
        if not isinstance(entry, dict):
            raise MalformedResponseError(provider, field)
        timestamps.append(_series_label(entry.get("time"), provider, f"{field}.time"))
        data = _require_mapping(entry, "data", provider, f"{field}.data")
        instant = _require_mapping(data, "instant", provider, f"{field}.data.instant")
        details = _require_mapping(instant, "details", provider, f"{field}.data.instant.details")
        temperatures.append(
            _require_number(details, "air_temperature", provider, f"{field} air temperature")
        )
    _check_series_lengths(provider, timestamps, temperatures)

    return WeatherRecord(
        provider=query.provider,
        request_type=query.request_type,
        requested_date=query.requested_date,
        address=query.location.address,
        location=_reported_location(latitude, longitude, query, provider),
        timestamps=timestamps,
        temperatures=temperatures,
        unit=unit,
        current=None,
    )


NORMALIZERS: dict[Provider, Normalizer] = {
    Provider.OPEN_METEO: parse_open_meteo,
    Provider.MET_NO: parse_met_no,
}


def _raise_for_upstream_error(payload: dict[str, Any], provider: str) -> None:
    if not payload.get("error"):
        return
    reason = payload.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        reason = "no reason given"
    raise UpstreamProviderError(provider, reason.strip())


def _check_series_lengths(provider: str, timestamps: list[str], temperatures: list[float]) -> None:
    if len(timestamps) != len(temperatures):
        raise CrossFieldMismatchError(
            f"{provider} returned {len(timestamps)} timestamps but "
            f"{len(temperatures)} temperatures."
        )


def _reported_location(
    latitude: float, longitude: float, query: WeatherQuery, provider: str
) -> GeoLocation:
    if not (-90 <= latitude <= 90):
        raise MalformedResponseError(provider, "latitude", "out of range")
    if not (-180 <= longitude <= 180):
        raise MalformedResponseError(provider, "longitude", "out of range")
    return GeoLocation(latitude=latitude, longitude=longitude, address=query.location.address)


def _series_label(value: Any, provider: str, field: str) -> str:
    return _parse_timestamp(value, provider, field).strftime(SERIES_LABEL_FORMAT)


def _parse_timestamp(value: Any, provider: str, field: str) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise MalformedResponseError(provider, field)
    candidate = value.strip().replace("T", " ")
    if candidate.endswith("Z"):
        candidate = candidate[:-1]
    try:
        return datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise MalformedResponseError(provider, field, "has unparseable timestamp") from exc


def _require_mapping(
    container: dict[str, Any], key: str, provider: str, field: str
) -> dict[str, Any]:
    value = container.get(key)
    if not isinstance(value, dict):
        raise MalformedResponseError(provider, field)
    return value


def _require_list(container: dict[str, Any], key: str, provider: str, field: str) -> list[Any]:
    value = container.get(key)
    if not isinstance(value, list):
        raise MalformedResponseError(provider, field)
    return value


def _require_str(container: dict[str, Any], key: str, provider: str, field: str) -> str:
    value = container.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MalformedResponseError(provider, field)
    return value.strip()


def _require_number(container: dict[str, Any], key: str, provider: str, field: str) -> float:
    return _as_number(container.get(key), provider, field)


def _as_number(value: Any, provider: str, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedResponseError(provider, field)
    return float(value)
