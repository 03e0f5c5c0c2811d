"""Functional Core - Pure functions with no side effects.

This module contains all business logic:
- Earthquake parsing and snapshot ranking
- Weather parsing and lightning classification
- Alert deduplication ledger
- Storm state machine
- Console view formatting

Nothing here performs I/O.
"""

from envmonitor.core.earthquake import Earthquake, SeismicSnapshot, parse_earthquakes, build_snapshot
from envmonitor.core.weather import StormLevel, WeatherStatus, parse_weather, classify_storm
from envmonitor.core.dedup import AlertLedger, collect_quake_alerts
from envmonitor.core.storm import StormState, advance_storm_state
from envmonitor.core.state import MonitorState, initial_state
from envmonitor.core.formatter import MonitorView, format_view

__all__ = [
    # Earthquake
    "Earthquake",
    "SeismicSnapshot",
    "parse_earthquakes",
    "build_snapshot",
    # Weather
    "StormLevel",
    "WeatherStatus",
    "parse_weather",
    "classify_storm",
    # Dedup
    "AlertLedger",
    "collect_quake_alerts",
    # Storm
    "StormState",
    "advance_storm_state",
    # State
    "MonitorState",
    "initial_state",
    # Formatter
    "MonitorView",
    "format_view",
]
