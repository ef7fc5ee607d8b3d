"""End-to-end weather lookup: plan, resolve, assemble, fetch, normalize."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from .geocoding import Geocoder, LocationResolver, NominatimGeocoder
from .providers.assembler import build_request
from .providers.capabilities import get_profile
from .providers.models import Provider, WeatherQuery, WeatherRecord
from .providers.normalizers import normalize
from .providers.planner import NOW, plan_query
from .providers.transport import HttpxWeatherTransport, WeatherTransport


class LookupResult(BaseModel):
    """Normalized record plus the raw provider payload it came from."""

    query: WeatherQuery
    record: WeatherRecord
    raw_payload: dict[str, Any]


class WeatherLookup:
    """Runs one weather query at a time against an explicitly chosen provider."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        geocoder: Geocoder | None = None,
        transport: WeatherTransport | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self.geocoder = geocoder or NominatimGeocoder(settings=settings, logger=logger)
        self.transport = transport or HttpxWeatherTransport(settings=settings, logger=logger)
        self.resolver = LocationResolver(self.geocoder, logger)

    def __enter__(self) -> WeatherLookup:
        return self

    def __exit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.geocoder.close()
        self.transport.close()

    def build_query(
        self,
        address: str,
        date_text: str = NOW,
        *,
        provider: Provider,
        now: datetime | None = None,
    ) -> WeatherQuery:
        """Plan and resolve a query without fetching weather data.

        Planning runs first because it is pure: a request the provider cannot
        serve fails before any geocoding traffic.
        """
        plan = plan_query(date_text, get_profile(provider), now=now)
        location = self.resolver.resolve(address)
        request = build_request(
            provider,
            location,
            plan,
            user_agent=self.settings.weather_user_agent,
        )
        return WeatherQuery(
            provider=provider,
            request_type=plan.request_type,
            location=location,
            requested_date=plan.requested_date,
            request=request,
        )

    def lookup(
        self,
        address: str,
        date_text: str = NOW,
        *,
        provider: Provider,
        now: datetime | None = None,
    ) -> LookupResult:
        """Run the full pipeline for ``address`` on ``date_text``."""
        query = self.build_query(address, date_text, provider=provider, now=now)
        self.logger.info(
            "Planned %s %s request for %s on %s",
            query.provider.value,
            query.request_type.value,
            query.location.address,
            query.requested_date,
        )
        payload = self.transport.fetch_json(query.request)
        record = normalize(payload, query)
        return LookupResult(query=query, record=record, raw_payload=payload)
