"""Classify the requested date and derive provider date parameters."""

from __future__ import annotations

from datetime import UTC, datetime

from dateutil import parser as dtparse
from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import DateParseError, UnsupportedCapabilityError
from .capabilities import ProviderProfile
from .models import RequestType

NOW = "now"


class QueryPlan(BaseModel):
    """Planner output: request type, normalized date and date parameters."""

    model_config = ConfigDict(frozen=True)

    request_type: RequestType
    requested_date: str
    date_params: dict[str, str] = Field(default_factory=dict)


def plan_query(
    date_text: str,
    profile: ProviderProfile,
    *,
    now: datetime | None = None,
) -> QueryPlan:
    """Decide forecast vs history for ``date_text`` and validate it against ``profile``.

    ``"now"`` always plans a forecast. Any other text is parsed leniently;
    naive results are taken as UTC. A parsed instant strictly before ``now``
    plans a history request, an equal or later one a forecast.
    """
    current = _as_utc(now) if now is not None else datetime.now(UTC)
    is_now = date_text == NOW

    if is_now:
        reference = current
        request_type = RequestType.FORECAST
    else:
        reference = _parse_date_text(date_text)
        request_type = RequestType.HISTORY if reference < current else RequestType.FORECAST

    provider_name = profile.provider.value
    if not profile.supports(request_type):
        raise UnsupportedCapabilityError(provider_name, f"{request_type.value} requests")
    if not is_now and not profile.supports_custom_dates:
        raise UnsupportedCapabilityError(provider_name, "custom dates")

    requested_date = reference.strftime("%Y-%m-%d")
    date_params: dict[str, str] = {}
    if profile.date_format is not None:
        formatted = reference.strftime(profile.date_format)
        date_params = {name: formatted for name in profile.date_params}

    return QueryPlan(
        request_type=request_type,
        requested_date=requested_date,
        date_params=date_params,
    )


def _parse_date_text(date_text: str) -> datetime:
    if not date_text.strip():
        raise DateParseError("Couldn't parse the date: empty date text.")
    try:
        parsed = dtparse.parse(date_text)
    except (ValueError, OverflowError) as exc:
        raise DateParseError(f"Couldn't parse the date '{date_text}': {exc}") from exc
    return _as_utc(parsed)


def _as_utc(value: datetime) -> datetime:
    return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
