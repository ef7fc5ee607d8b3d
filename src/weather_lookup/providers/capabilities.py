"""Static capability profiles for each supported weather provider."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..exceptions import ConfigError
from .models import Provider, RequestType


class ProviderProfile(BaseModel):
    """Everything the pipeline needs to know to talk to one provider."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    provider: Provider
    base_url: str
    request_paths: Mapping[RequestType, str]
    latitude_param: str
    longitude_param: str
    date_format: str | None = None
    date_params: tuple[str, ...] = ()
    fixed_params: Mapping[str, str] = Field(default_factory=dict)
    forecast_params: Mapping[str, str] = Field(default_factory=dict)
    headers: Mapping[str, str] = Field(default_factory=dict)
    requires_user_agent: bool = False
    wind_speed_unit: str | None = None
    max_series_length: int | None = None

    @field_validator("request_paths", "fixed_params", "forecast_params", "headers", mode="after")
    @classmethod
    def freeze_mapping(cls, value: Mapping[Any, str]) -> Mapping[Any, str]:
        """Store mappings as read-only views."""
        return MappingProxyType(dict(value))

    @property
    def supports_custom_dates(self) -> bool:
        return self.date_format is not None

    def supports(self, request_type: RequestType) -> bool:
        return request_type in self.request_paths

    def url_for(self, request_type: RequestType) -> str:
        return f"{self.base_url}/{self.request_paths[request_type]}"


PROVIDER_PROFILES: Mapping[Provider, ProviderProfile] = MappingProxyType({
    Provider.OPEN_METEO: ProviderProfile(
        provider=Provider.OPEN_METEO,
        base_url="https://api.open-meteo.com/v1",
        request_paths={RequestType.FORECAST: "forecast", RequestType.HISTORY: "archive"},
        latitude_param="latitude",
        longitude_param="longitude",
        date_format="%Y-%m-%d",
        date_params=("start_date", "end_date"),
        fixed_params={"hourly": "temperature_2m"},
        forecast_params={"current_weather": "true"},
        wind_speed_unit="km/h",
    ),
    Provider.MET_NO: ProviderProfile(
        provider=Provider.MET_NO,
        base_url="https://api.met.no/weatherapi/locationforecast/2.0",
        request_paths={RequestType.FORECAST: "complete"},
        latitude_param="lat",
        longitude_param="lon",
        headers={"Accept": "application/json"},
        requires_user_agent=True,
        max_series_length=24,
    ),
})


def get_profile(provider: Provider) -> ProviderProfile:
    """Return the capability profile of a provider."""
    return PROVIDER_PROFILES[provider]


def available_providers() -> list[str]:
    return [provider.value for provider in Provider]


def parse_provider(name: str) -> Provider:
    """Parse a provider name such as ``open_meteo``, raising ConfigError if unknown."""
    candidate = name.strip().lower()
    for provider in Provider:
        if provider.value == candidate:
            return provider
    raise ConfigError(
        f"Invalid provider '{name}'. Available providers: [{', '.join(available_providers())}]"
    )
