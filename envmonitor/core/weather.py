"""Weather codes and lightning classification - Pure functions.

This module parses the Open-Meteo forecast response into a WeatherStatus
and classifies it into a storm level. All functions are pure with no
side effects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


# WMO weather codes that indicate thunderstorms
THUNDERSTORM_CODE = 95  # Slight or moderate
THUNDERSTORM_SLIGHT_HAIL_CODE = 96
THUNDERSTORM_HEAVY_HAIL_CODE = 99

STORM_CODES = frozenset({
    THUNDERSTORM_CODE,
    THUNDERSTORM_SLIGHT_HAIL_CODE,
    THUNDERSTORM_HEAVY_HAIL_CODE,
})

# Current hour plus five forecast hours
FORECAST_HOURS = 6


class StormLevel(Enum):
    """Lightning risk at the monitored location."""
    CLEAR = "clear"
    WATCH = "watch"
    WARNING = "warning"


@dataclass(frozen=True)
class WeatherStatus:
    """Weather codes for one update cycle.

    Attributes:
        current_code: WMO weather code for right now
        next_hours: Hourly codes, index 0 is the current hour
    """
    current_code: int = 0
    next_hours: tuple[int, ...] = (0,) * FORECAST_HOURS

    @classmethod
    def zeroed(cls) -> "WeatherStatus":
        """Return the all-zero status used when the feed is unavailable."""
        return cls()


def _to_code(value: Any) -> int:
    """Coerce a JSON value to a weather code, 0 if unusable."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def parse_weather(document: Any) -> WeatherStatus:
    """Parse an Open-Meteo response into a WeatherStatus.

    Pure function. Missing or malformed sections degrade to zero, and the
    hourly codes are zero-padded to FORECAST_HOURS entries.

    Args:
        document: Decoded JSON response

    Returns:
        WeatherStatus (all zero if nothing usable was found)
    """
    if not isinstance(document, dict):
        return WeatherStatus.zeroed()

    current_code = 0
    current = document.get("current")
    if isinstance(current, dict):
        current_code = _to_code(current.get("weather_code"))

    next_hours = [0] * FORECAST_HOURS
    hourly = document.get("hourly")
    if isinstance(hourly, dict):
        codes = hourly.get("weather_code")
        if isinstance(codes, list):
            for i, code in enumerate(codes[:FORECAST_HOURS]):
                next_hours[i] = _to_code(code)

    return WeatherStatus(current_code=current_code, next_hours=tuple(next_hours))


def is_storm_code(code: int) -> bool:
    """Return True if the weather code indicates a thunderstorm."""
    return code in STORM_CODES


def classify_storm(current_code: int, next_hours: tuple[int, ...] | list[int]) -> StormLevel:
    """Classify lightning risk from current and upcoming weather codes.

    Pure function.

    Args:
        current_code: Weather code for right now
        next_hours: Hourly codes, index 0 is the current hour and is ignored

    Returns:
        WARNING if a storm is happening now, WATCH if one is forecast
        within the next five hours, else CLEAR
    """
    if is_storm_code(current_code):
        return StormLevel.WARNING

    if any(is_storm_code(code) for code in list(next_hours)[1:FORECAST_HOURS]):
        return StormLevel.WATCH

    return StormLevel.CLEAR


def classify_weather(status: WeatherStatus) -> StormLevel:
    """Classify a parsed WeatherStatus."""
    return classify_storm(status.current_code, status.next_hours)
