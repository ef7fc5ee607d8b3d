"""Assemble transport-ready request descriptors from planned queries."""

from __future__ import annotations

from .capabilities import get_profile
from .models import GeoLocation, Provider, RequestDescriptor, RequestType
from .planner import QueryPlan


def build_request(
    provider: Provider,
    location: GeoLocation,
    plan: QueryPlan,
    *,
    user_agent: str | None = None,
) -> RequestDescriptor:
    """Combine location, date parameters and provider fixed parameters in one pass."""
    profile = get_profile(provider)

    params: dict[str, str] = {
        profile.latitude_param: _format_coordinate(location.latitude),
        profile.longitude_param: _format_coordinate(location.longitude),
    }
    params.update(plan.date_params)
    params.update(profile.fixed_params)
    if plan.request_type is RequestType.FORECAST:
        params.update(profile.forecast_params)

    headers = dict(profile.headers)
    if profile.requires_user_agent and user_agent:
        headers.setdefault("User-Agent", user_agent)

    return RequestDescriptor(
        url=profile.url_for(plan.request_type),
        params=params,
        headers=headers,
    )


def _format_coordinate(value: float) -> str:
    # met.no rejects more than four decimals
    return str(round(value, 4))
