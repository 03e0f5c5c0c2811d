"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS earthquake
summary feed. All I/O is contained here; business logic is in the
core module.
"""

import logging
from typing import Any

from envmonitor.core.config import USGS_FEED_URL
from envmonitor.shell.feed_client import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, FeedClient


logger = logging.getLogger(__name__)


class USGSClient(FeedClient):
    """Client for fetching the past hour of earthquakes from USGS."""

    feed_name = "USGS"

    def __init__(
        self,
        feed_url: str = USGS_FEED_URL,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize USGS client.

        Args:
            feed_url: GeoJSON summary feed URL
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        super().__init__(timeout=timeout, user_agent=user_agent)
        self.feed_url = feed_url

    def fetch_feed(self) -> dict[str, Any]:
        """Fetch the summary feed.

        This method performs HTTP I/O.

        Returns:
            Decoded GeoJSON FeatureCollection

        Raises:
            TransportFailure: If the request fails
            ParseFailure: If the body is not JSON
        """
        logger.info("Fetching earthquakes from USGS")

        data = self._get_json(self.feed_url)

        metadata = data.get("metadata") if isinstance(data, dict) else None
        if isinstance(metadata, dict):
            logger.info("Fetched %s earthquakes from USGS", metadata.get("count", 0))

        return data
