"""HTTP transport executing assembled weather provider requests."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from ..exceptions import WeatherTransportError
from .models import RequestDescriptor


class WeatherTransport(ABC):
    """Executes a request descriptor and returns the decoded JSON object."""

    @abstractmethod
    def fetch_json(self, request: RequestDescriptor) -> dict[str, Any]:
        """Perform a single GET for ``request``."""

    @abstractmethod
    def close(self) -> None:
        """Release transport resources."""


class HttpxWeatherTransport(WeatherTransport):
    """Single-attempt httpx transport; the request fully determines the call."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._client = client or httpx.Client(
            timeout=settings.weather_timeout_seconds,
            headers={"User-Agent": settings.weather_user_agent},
        )

    def __enter__(self) -> HttpxWeatherTransport:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch_json(self, request: RequestDescriptor) -> dict[str, Any]:
        self.logger.info("Fetching weather data from %s", request.url)
        try:
            response = self._client.get(
                request.url,
                params=request.params,
                headers=request.headers or None,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            # Open-Meteo answers bad requests with 400 + {"error": true, "reason": ...}.
            payload = self._decode(exc.response, request.url)
            if payload is not None and payload.get("error"):
                return payload
            raise WeatherTransportError(
                f"Weather request failed with status {exc.response.status_code} "
                f"at {request.url}: {exc.response.text[:300]}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherTransportError(
                f"Weather request failed at {request.url}: {exc}"
            ) from exc

        payload = self._decode(response, request.url)
        if payload is None:
            raise WeatherTransportError(
                f"Weather provider returned a non-object JSON response at {request.url}."
            )
        return payload

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> dict[str, Any] | None:
        try:
            payload = response.json()
        except ValueError as exc:
            if response.is_success:
                raise WeatherTransportError(
                    f"Weather provider returned non-JSON response at {url}."
                ) from exc
            return None
        if not isinstance(payload, dict):
            return None
        return payload
