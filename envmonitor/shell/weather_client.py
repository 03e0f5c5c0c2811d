"""Open-Meteo Client - Imperative Shell.

This module fetches current and hourly weather codes for a location.
All I/O is contained here; classification is in the core module.
"""

import logging
from typing import Any

from envmonitor.core.config import OPEN_METEO_URL
from envmonitor.core.weather import FORECAST_HOURS
from envmonitor.shell.feed_client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, FeedClient


logger = logging.getLogger(__name__)


class OpenMeteoClient(FeedClient):
    """Client for the Open-Meteo forecast API."""

    feed_name = "Open-Meteo"

    def __init__(
        self,
        base_url: str = OPEN_METEO_URL,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize Open-Meteo client.

        Args:
            base_url: Forecast endpoint URL
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.base_url = base_url

    def _build_params(self, latitude: float, longitude: float) -> dict[str, str]:
        """Build query parameters for a forecast request."""
        return {
            "latitude": f"{latitude:.2f}",
            "longitude": f"{longitude:.2f}",
            "current": "weather_code",
            "hourly": "weather_code",
            "forecast_hours": str(FORECAST_HOURS),
        }

    def fetch_weather(self, latitude: float, longitude: float) -> dict[str, Any]:
        """Fetch weather codes for a location.

        This method performs HTTP I/O.

        Args:
            latitude: Location latitude
            longitude: Location longitude

        Returns:
            Decoded forecast response

        Raises:
            TransportFailure: If the request fails
            ParseFailure: If the body is not JSON
        """
        params = self._build_params(latitude, longitude)

        logger.info(
            "Fetching weather codes from Open-Meteo",
            extra={"params": params},
        )

        return self._get_json(self.base_url, params=params)
