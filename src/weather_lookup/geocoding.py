"""Location resolution: explicit coordinates or OpenStreetMap geocoding."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .exceptions import LocationNotFoundError, RangeError, ResolverTransportError
from .providers.models import GeoLocation, GeoPoint

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)


class Geocoder(ABC):
    """Forward/reverse geocoding collaborator."""

    @abstractmethod
    def forward(self, query: str) -> list[GeoPoint]:
        """Return candidate points for a place name, best match first."""

    @abstractmethod
    def reverse(self, point: GeoPoint) -> str | None:
        """Return a display address for ``point``, or None when there is none."""

    def close(self) -> None:
        """Release geocoder resources."""


class NominatimGeocoder(Geocoder):
    """Geocoder backed by the OpenStreetMap Nominatim HTTP API."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.geocoder_base_url).rstrip("/")
        # Nominatim's usage policy requires an identifying User-Agent.
        self._client = client or httpx.Client(
            timeout=settings.geocoder_timeout_seconds,
            headers={"User-Agent": settings.weather_user_agent},
        )

    def __enter__(self) -> NominatimGeocoder:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def forward(self, query: str) -> list[GeoPoint]:
        payload = self._request_json(
            "/search",
            params={"q": query, "format": "jsonv2", "limit": "1"},
            context="forward geocoding",
        )
        if not isinstance(payload, list):
            raise ResolverTransportError(
                f"Nominatim forward geocoding returned unexpected payload type "
                f"{type(payload).__name__}."
            )

        points: list[GeoPoint] = []
        for candidate in payload:
            if not isinstance(candidate, dict):
                raise ResolverTransportError("Nominatim search result is not an object.")
            try:
                points.append(
                    GeoPoint(latitude=float(candidate["lat"]), longitude=float(candidate["lon"]))
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ResolverTransportError(
                    f"Nominatim search result has invalid coordinates: {exc}"
                ) from exc
        return points

    def reverse(self, point: GeoPoint) -> str | None:
        payload = self._request_json(
            "/reverse",
            params={
                "lat": str(point.latitude),
                "lon": str(point.longitude),
                "format": "jsonv2",
            },
            context="reverse geocoding",
        )
        if not isinstance(payload, dict):
            raise ResolverTransportError(
                f"Nominatim reverse geocoding returned unexpected payload type "
                f"{type(payload).__name__}."
            )
        # Nominatim answers 200 with {"error": "Unable to geocode"} for open sea etc.
        display_name = payload.get("display_name")
        if isinstance(display_name, str) and display_name.strip():
            return display_name.strip()
        return None

    def _request_json(self, path: str, params: dict[str, str], context: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ResolverTransportError(
                f"Nominatim {context} failed with status {exc.response.status_code} "
                f"at {url}: {exc.response.text[:300]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ResolverTransportError(
                f"Nominatim {context} request failed at {url}: {exc}"
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise ResolverTransportError(
                f"Nominatim {context} returned non-JSON response at {url}."
            ) from exc


class LocationResolver:
    """Turns user input into a GeoLocation with a display address."""

    def __init__(self, geocoder: Geocoder, logger: logging.Logger) -> None:
        self.geocoder = geocoder
        self.logger = logger

    def resolve(self, text: str) -> GeoLocation:
        """Resolve ``"lat, lon"`` via reverse geocoding or a place name via forward."""
        coordinates = parse_coordinates(text)
        if coordinates is not None:
            latitude, longitude = coordinates
            validate_coordinates(latitude, longitude)
            address = self.geocoder.reverse(GeoPoint(latitude=latitude, longitude=longitude))
            if address is None:
                raise LocationNotFoundError(
                    f"Could not find an address for coordinates ({latitude}, {longitude})."
                )
            self.logger.info("Reverse geocoded (%s, %s) to %s", latitude, longitude, address)
            return GeoLocation(latitude=latitude, longitude=longitude, address=address)

        points = self.geocoder.forward(text)
        if not points:
            raise LocationNotFoundError(f"Could not find location '{text}'.")
        point = points[0]
        validate_coordinates(point.latitude, point.longitude)
        self.logger.info(
            "Geocoded '%s' to (%s, %s)", text, point.latitude, point.longitude
        )
        return GeoLocation(latitude=point.latitude, longitude=point.longitude, address=text)


def parse_coordinates(text: str) -> tuple[float, float] | None:
    """Return ``(lat, lon)`` when ``text`` is exactly two comma-separated floats."""
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != 2 or not all(_FLOAT_RE.fullmatch(part) for part in parts):
        return None
    return float(parts[0]), float(parts[1])


def validate_coordinates(latitude: float, longitude: float) -> None:
    if not (-90 <= latitude <= 90):
        raise RangeError(f"Invalid latitude {latitude}; expected between -90 and 90.")
    if not (-180 <= longitude <= 180):
        raise RangeError(f"Invalid longitude {longitude}; expected between -180 and 180.")
