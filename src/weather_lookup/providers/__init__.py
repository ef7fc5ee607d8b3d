"""Provider capability table, query planning, request assembly and normalization."""

from .assembler import build_request
from .capabilities import PROVIDER_PROFILES, ProviderProfile, get_profile, parse_provider
from .classifiers import WeatherCondition, WindDirection
from .models import (
    CurrentConditions,
    GeoLocation,
    GeoPoint,
    Provider,
    RequestDescriptor,
    RequestType,
    WeatherQuery,
    WeatherRecord,
)
from .normalizers import NORMALIZERS, normalize
from .planner import QueryPlan, plan_query
from .transport import HttpxWeatherTransport, WeatherTransport

__all__ = [
    "NORMALIZERS",
    "PROVIDER_PROFILES",
    "CurrentConditions",
    "GeoLocation",
    "GeoPoint",
    "HttpxWeatherTransport",
    "Provider",
    "ProviderProfile",
    "QueryPlan",
    "RequestDescriptor",
    "RequestType",
    "WeatherCondition",
    "WeatherQuery",
    "WeatherRecord",
    "WeatherTransport",
    "WindDirection",
    "build_request",
    "get_profile",
    "normalize",
    "parse_provider",
    "plan_query",
]
