"""Feed errors raised by the shell clients."""


class FeedError(Exception):
    """A feed could not be fetched or decoded this cycle."""

    def __init__(self, feed: str, message: str) -> None:
        super().__init__(f"{feed}: {message}")
        self.feed = feed
        self.message = message


class TransportFailure(FeedError):
    """Network or HTTP error while fetching a feed."""


class ParseFailure(FeedError):
    """Feed body was not valid JSON."""
