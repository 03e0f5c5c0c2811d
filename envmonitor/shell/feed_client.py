"""Shared HTTP fetch for the JSON feeds - Imperative Shell.

All I/O is contained here; parsing is in the core module.
"""

import logging
from typing import Any

import requests

from envmonitor.shell.errors import ParseFailure, TransportFailure


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30

DEFAULT_USER_AGENT = "envmonitor/1.0"


class FeedClient:
    """Base client for a public JSON feed.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    feed_name = "feed"

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize feed client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent

    def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        """GET a URL and decode the JSON body.

        This method performs HTTP I/O.

        Raises:
            TransportFailure: Connection error, timeout or non-2xx status
            ParseFailure: Body is not valid JSON
        """
        try:
            response = requests.get(
                url,
                params=params,
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )
            response.raise_for_status()
        except requests.Timeout:
            logger.error("%s request timed out", self.feed_name)
            raise TransportFailure(self.feed_name, "Request timed out")
        except requests.RequestException as e:
            logger.error("%s request failed: %s", self.feed_name, str(e))
            raise TransportFailure(self.feed_name, str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("%s returned invalid JSON: %s", self.feed_name, str(e))
            raise ParseFailure(self.feed_name, "Invalid JSON in response") from e
