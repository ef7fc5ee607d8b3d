"""Typed models for weather queries and normalized weather records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..exceptions import CrossFieldMismatchError
from .classifiers import WeatherCondition, WindDirection


class Provider(str, Enum):
    """Supported weather data providers (none of them require an API key)."""

    OPEN_METEO = "open_meteo"
    MET_NO = "met_no"

    def __str__(self) -> str:
        return self.value


class RequestType(str, Enum):
    """Whether a query targets current/future data or past observations."""

    FORECAST = "forecast"
    HISTORY = "history"

    def __str__(self) -> str:
        return self.value


class GeoPoint(BaseModel):
    """Bare coordinate pair as returned by a geocoder."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class GeoLocation(BaseModel):
    """Resolved coordinates plus the address shown to the user."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    address: str


class RequestDescriptor(BaseModel):
    """Transport-ready HTTP GET description."""

    model_config = ConfigDict(frozen=True)

    url: str
    params: dict[str, str] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)


class WeatherQuery(BaseModel):
    """Fully assembled context for one weather lookup."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    request_type: RequestType
    location: GeoLocation
    requested_date: str
    request: RequestDescriptor


class CurrentConditions(BaseModel):
    """Point-in-time conditions reported alongside a forecast."""

    model_config = ConfigDict(frozen=True)

    time: str
    temperature: float
    condition: WeatherCondition
    wind_speed: float
    wind_speed_unit: str
    wind_direction: WindDirection


class WeatherRecord(BaseModel):
    """Provider-independent weather result for a single query."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    request_type: RequestType
    requested_date: str
    address: str
    location: GeoLocation
    timestamps: list[str]
    temperatures: list[float]
    unit: str
    current: CurrentConditions | None = None

    @model_validator(mode="after")
    def check_series_lengths(self) -> WeatherRecord:
        """Reject records whose parallel series disagree in length."""
        if len(self.timestamps) != len(self.temperatures):
            raise CrossFieldMismatchError(
                f"{self.provider.value} returned {len(self.timestamps)} timestamps but "
                f"{len(self.temperatures)} temperatures."
            )
        return self
