"""Classifiers mapping raw provider values onto semantic categories."""

from __future__ import annotations

import math
from enum import Enum


class WeatherCondition(str, Enum):
    """WMO weather interpretation categories."""

    CLEAR_SKY = "Clear sky"
    MAINLY_CLEAR = "Mainly clear"
    PARTLY_CLOUDY = "Partly cloudy"
    OVERCAST = "Overcast"
    FOG = "Fog"
    DRIZZLE = "Drizzle"
    FREEZING_DRIZZLE = "Freezing drizzle"
    RAIN = "Rain"
    FREEZING_RAIN = "Freezing rain"
    SNOWFALL = "Snowfall"
    SNOW_GRAINS = "Snow grains"
    RAIN_SHOWERS = "Rain showers"
    SNOW_SHOWERS = "Snow showers"
    THUNDERSTORM = "Thunderstorm"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: int) -> WeatherCondition:
        """Classify a WMO weather code; unlisted codes map to UNKNOWN."""
        return _WMO_CODES.get(code, cls.UNKNOWN)


_WMO_CODES: dict[int, WeatherCondition] = {
    0: WeatherCondition.CLEAR_SKY,
    1: WeatherCondition.MAINLY_CLEAR,
    2: WeatherCondition.PARTLY_CLOUDY,
    3: WeatherCondition.OVERCAST,
    45: WeatherCondition.FOG,
    48: WeatherCondition.FOG,
    51: WeatherCondition.DRIZZLE,
    53: WeatherCondition.DRIZZLE,
    55: WeatherCondition.DRIZZLE,
    56: WeatherCondition.FREEZING_DRIZZLE,
    57: WeatherCondition.FREEZING_DRIZZLE,
    61: WeatherCondition.RAIN,
    63: WeatherCondition.RAIN,
    65: WeatherCondition.RAIN,
    66: WeatherCondition.FREEZING_RAIN,
    67: WeatherCondition.FREEZING_RAIN,
    71: WeatherCondition.SNOWFALL,
    73: WeatherCondition.SNOWFALL,
    75: WeatherCondition.SNOWFALL,
    77: WeatherCondition.SNOW_GRAINS,
    80: WeatherCondition.RAIN_SHOWERS,
    81: WeatherCondition.RAIN_SHOWERS,
    82: WeatherCondition.RAIN_SHOWERS,
    85: WeatherCondition.SNOW_SHOWERS,
    86: WeatherCondition.SNOW_SHOWERS,
    95: WeatherCondition.THUNDERSTORM,
    96: WeatherCondition.THUNDERSTORM,
    99: WeatherCondition.THUNDERSTORM,
}


class WindDirection(str, Enum):
    """Sixteen-point compass sectors."""

    N = "N"
    NNE = "NNE"
    NE = "NE"
    ENE = "ENE"
    E = "E"
    ESE = "ESE"
    SE = "SE"
    SSE = "SSE"
    S = "S"
    SSW = "SSW"
    SW = "SW"
    WSW = "WSW"
    W = "W"
    WNW = "WNW"
    NW = "NW"
    NNW = "NNW"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_degrees(cls, degrees: float) -> WindDirection:
        """Classify a meteorological wind direction given in degrees.

        The value is reduced into [0, 360) and rounded half-up to a whole
        degree before the sector table is scanned in order. Every sector owns
        half-open intervals, so each whole degree lands in exactly one sector;
        N spans the 0/360 seam as two intervals.
        """
        if not math.isfinite(degrees):
            return cls.UNKNOWN
        deg = math.floor(degrees % 360.0 + 0.5) % 360
        for direction, intervals in _SECTOR_INTERVALS:
            if any(low <= deg < high for low, high in intervals):
                return direction
        return cls.UNKNOWN


# http://snowfence.umn.edu/Components/winddirectionanddegrees.htm
_SECTOR_INTERVALS: tuple[tuple[WindDirection, tuple[tuple[float, float], ...]], ...] = (
    (WindDirection.N, ((348.75, 360.0), (0.0, 11.25))),
    (WindDirection.NNE, ((11.25, 33.75),)),
    (WindDirection.NE, ((33.75, 56.25),)),
    (WindDirection.ENE, ((56.25, 78.75),)),
    (WindDirection.E, ((78.75, 101.25),)),
    (WindDirection.ESE, ((101.25, 123.75),)),
    (WindDirection.SE, ((123.75, 146.25),)),
    (WindDirection.SSE, ((146.25, 168.75),)),
    (WindDirection.S, ((168.75, 191.25),)),
    (WindDirection.SSW, ((191.25, 213.75),)),
    (WindDirection.SW, ((213.75, 236.25),)),
    (WindDirection.WSW, ((236.25, 258.75),)),
    (WindDirection.W, ((258.75, 281.25),)),
    (WindDirection.WNW, ((281.25, 303.75),)),
    (WindDirection.NW, ((303.75, 326.25),)),
    (WindDirection.NNW, ((326.25, 348.75),)),
)


def sector_intervals() -> tuple[tuple[WindDirection, tuple[tuple[float, float], ...]], ...]:
    """Return the ordered sector table used by WindDirection.from_degrees."""
    return _SECTOR_INTERVALS
