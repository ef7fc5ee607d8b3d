"""Rich terminal rendering of normalized weather records."""

from __future__ import annotations

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .providers.capabilities import PROVIDER_PROFILES
from .providers.models import CurrentConditions, RequestType, WeatherRecord

BAR_WIDTH = 30


def render_record(console: Console, record: WeatherRecord, max_print: int) -> None:
    """Print header, optional current-conditions panel and the hourly series."""
    console.print(
        f"Weather in {record.address} "
        f"({record.location.latitude:.4f}, {record.location.longitude:.4f}) "
        f"provider={record.provider.value}"
    )
    if record.current is not None:
        console.print(_current_panel(record.current, record.unit))

    kind = "Forecast" if record.request_type is RequestType.FORECAST else "Historical Data"
    if not record.temperatures:
        console.print(f"No {kind.lower()} values returned for {record.requested_date}.")
        return

    table = Table(title=f"Weather {kind} (in {record.unit}) on {record.requested_date}")
    table.add_column("Time")
    table.add_column("Temp", justify="right")
    table.add_column("", overflow="crop")

    shown = list(zip(record.timestamps, record.temperatures))[:max_print]
    low = min(temp for _, temp in shown)
    high = max(temp for _, temp in shown)
    for label, temperature in shown:
        table.add_row(label, f"{temperature:g}", _bar(temperature, low, high))
    console.print(table)


def render_providers(console: Console) -> None:
    """Print the capability table of every provider."""
    table = Table(title="Weather Providers")
    table.add_column("Provider")
    table.add_column("Endpoint", overflow="fold")
    table.add_column("Request types")
    table.add_column("Custom dates")
    for provider, profile in PROVIDER_PROFILES.items():
        table.add_row(
            provider.value,
            profile.base_url,
            ", ".join(request_type.value for request_type in profile.request_paths),
            "yes" if profile.supports_custom_dates else "no",
        )
    console.print(table)


def _current_panel(current: CurrentConditions, unit: str) -> Panel:
    body = Group(
        Text(f"Temperature: {current.temperature:g} {unit}"),
        Text(current.condition.value),
        Text(""),
        Text(f"Wind Speed: {current.wind_speed:g} {current.wind_speed_unit}"),
        Text(f"Wind Direction: {current.wind_direction.value}"),
    )
    return Panel(body, title="Current Weather", subtitle=current.time, expand=False)


def _bar(value: float, low: float, high: float) -> Text:
    span = high - low
    fraction = 1.0 if span == 0 else (value - low) / span
    length = 1 + round(fraction * (BAR_WIDTH - 1))
    return Text("█" * length, style="cyan")
