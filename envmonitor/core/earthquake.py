"""Earthquake data models and snapshot building - Pure functions.

This module parses the USGS summary GeoJSON feed into typed Earthquake
objects and ranks them into a bounded SeismicSnapshot.
All functions are pure with no side effects.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterator


# Maximum stored lengths for feed strings
MAX_PLACE_LENGTH = 255
MAX_ID_LENGTH = 63

# Default number of events kept in a snapshot
DEFAULT_SNAPSHOT_CAPACITY = 200


@dataclass(frozen=True)
class Earthquake:
    """Immutable earthquake data model.

    Attributes:
        id: Feed-unique USGS event ID, or one derived from time,
            magnitude and place when the feed gives none
        magnitude: Earthquake magnitude
        place: Human-readable location description
        time: Event timestamp (UTC), None if the feed omitted it
    """
    id: str
    magnitude: float
    place: str
    time: datetime | None = None


@dataclass(frozen=True)
class SeismicSnapshot:
    """Ranked earthquakes for one update cycle.

    Events are sorted by magnitude, strongest first. The snapshot is
    replaced wholesale every cycle.
    """
    events: tuple[Earthquake, ...] = ()

    @classmethod
    def empty(cls) -> "SeismicSnapshot":
        """Return a snapshot with no events."""
        return cls()

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Earthquake]:
        return iter(self.events)


def _parse_time(time_ms: Any) -> datetime | None:
    """Convert USGS epoch milliseconds to an aware datetime."""
    if time_ms is None or isinstance(time_ms, bool):
        return None
    try:
        return datetime.fromtimestamp(int(time_ms) / 1000, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _get_event_id(feature: dict[str, Any], props: dict[str, Any]) -> str:
    """Pick the event ID, preferring the feature-level id."""
    for candidate in (feature.get("id"), props.get("id"), props.get("code")):
        if isinstance(candidate, str) and candidate:
            return candidate[:MAX_ID_LENGTH]
    return ""


def _derive_event_id(time_ms: Any, magnitude: float, place: str) -> str:
    """Build an ID for an event the feed left unnamed."""
    return f"{time_ms}|{magnitude:g}|{place}"[:MAX_ID_LENGTH]


def parse_earthquake(feature: Any) -> Earthquake | None:
    """Parse a single GeoJSON feature into an Earthquake.

    Pure function. Missing optional fields get defaults: a null magnitude
    counts as 0.0, a missing place becomes "Unknown location" and a
    missing time becomes None.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        Earthquake object or None if the feature is unusable
    """
    if not isinstance(feature, dict):
        return None

    props = feature.get("properties")
    if not isinstance(props, dict):
        props = {}

    magnitude = props.get("mag")
    if magnitude is None:
        magnitude = 0.0
    if isinstance(magnitude, bool):
        return None

    try:
        magnitude = float(magnitude)
    except (TypeError, ValueError):
        return None

    place = props.get("place")
    if not isinstance(place, str) or not place:
        place = "Unknown location"

    place = place[:MAX_PLACE_LENGTH]
    event_id = _get_event_id(feature, props) or _derive_event_id(props.get("time"), magnitude, place)

    return Earthquake(
        id=event_id,
        magnitude=magnitude,
        place=place,
        time=_parse_time(props.get("time")),
    )


def parse_earthquakes(geojson: Any) -> list[Earthquake]:
    """Parse a USGS GeoJSON document into a list of Earthquakes.

    Pure function: skips unusable features and keeps feed order.
    A document that is not a FeatureCollection-shaped dict gives [].

    Args:
        geojson: Decoded GeoJSON FeatureCollection

    Returns:
        List of valid Earthquake objects in feed order
    """
    if not isinstance(geojson, dict):
        return []

    features = geojson.get("features")
    if not isinstance(features, list):
        return []

    earthquakes = []
    for feature in features:
        earthquake = parse_earthquake(feature)
        if earthquake is not None:
            earthquakes.append(earthquake)

    return earthquakes


def filter_by_magnitude(
    earthquakes: list[Earthquake],
    min_magnitude: float,
) -> list[Earthquake]:
    """Keep earthquakes with magnitude >= min_magnitude.

    Pure function.
    """
    return [e for e in earthquakes if e.magnitude >= min_magnitude]


def rank_by_magnitude(earthquakes: list[Earthquake]) -> list[Earthquake]:
    """Sort strongest first, keeping feed order for equal magnitudes.

    Pure function. Relies on sorted() being stable.
    """
    return sorted(earthquakes, key=lambda e: e.magnitude, reverse=True)


def build_snapshot(
    earthquakes: list[Earthquake] | None,
    min_magnitude: float,
    capacity: int = DEFAULT_SNAPSHOT_CAPACITY,
) -> SeismicSnapshot:
    """Filter, rank and cap earthquakes into a SeismicSnapshot.

    Pure function. Ranking happens before the cap is applied, so a strong
    event late in the feed is never dropped in favour of weaker ones.

    Args:
        earthquakes: Parsed earthquakes in feed order (None is treated as empty)
        min_magnitude: Minimum magnitude to include (inclusive)
        capacity: Maximum number of events to keep

    Returns:
        SeismicSnapshot sorted by magnitude, strongest first
    """
    if not isinstance(earthquakes, list):
        return SeismicSnapshot.empty()

    ranked = rank_by_magnitude(filter_by_magnitude(earthquakes, min_magnitude))
    return SeismicSnapshot(events=tuple(ranked[:max(capacity, 0)]))
