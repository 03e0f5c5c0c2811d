"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- USGS feed client (HTTP)
- Open-Meteo client (HTTP)
- Console renderer (terminal)
- Configuration loading (files/environment/arguments)

Keep this layer thin and simple. All business logic should be in core.
"""

from envmonitor.shell.errors import FeedError, ParseFailure, TransportFailure
from envmonitor.shell.usgs_client import USGSClient
from envmonitor.shell.weather_client import OpenMeteoClient
from envmonitor.shell.console import ConsoleRenderer
from envmonitor.shell.config_loader import build_config, load_config, parse_args

__all__ = [
    "FeedError",
    "ParseFailure",
    "TransportFailure",
    "USGSClient",
    "OpenMeteoClient",
    "ConsoleRenderer",
    "build_config",
    "load_config",
    "parse_args",
]
