"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from envmonitor.core.dedup import DEFAULT_LEDGER_CAPACITY
from envmonitor.core.earthquake import DEFAULT_SNAPSHOT_CAPACITY


USGS_FEED_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_hour.geojson"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# Magnitude at which quakes alert when no -q filter is given
MAJOR_QUAKE_THRESHOLD = 6.0

# Guisborough, UK
DEFAULT_LATITUDE = 54.53
DEFAULT_LONGITUDE = -1.05


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        min_magnitude: Quakes below this magnitude are not shown
        alert_threshold: Quakes at or above this magnitude sound an alert
        latitude: Latitude for lightning monitoring
        longitude: Longitude for lightning monitoring
        update_interval_seconds: Sleep between update cycles
        startup_delay_seconds: Pause after the start-up banner
        request_timeout: HTTP timeout per feed request (seconds)
        snapshot_capacity: Maximum quakes kept per snapshot
        ledger_capacity: Maximum alerted quake IDs remembered
        usgs_feed_url: USGS GeoJSON summary feed
        weather_api_url: Open-Meteo forecast endpoint
        user_agent: User-Agent header sent with feed requests
    """
    min_magnitude: float = 0.0
    alert_threshold: float = MAJOR_QUAKE_THRESHOLD
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    update_interval_seconds: int = 120
    startup_delay_seconds: float = 4.0
    request_timeout: int = 30
    snapshot_capacity: int = DEFAULT_SNAPSHOT_CAPACITY
    ledger_capacity: int = DEFAULT_LEDGER_CAPACITY
    usgs_feed_url: str = USGS_FEED_URL
    weather_api_url: str = OPEN_METEO_URL
    user_agent: str = "envmonitor/1.0"


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def _require_positive(value: float, field_name: str) -> list[ValidationError]:
    if value > 0:
        return []
    return [ValidationError(
        field=field_name,
        message=f"{field_name} must be positive, got {value}",
    )]


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_coordinates(config.latitude, config.longitude, "location"))

    errors.extend(_require_positive(config.update_interval_seconds, "update_interval_seconds"))
    errors.extend(_require_positive(config.request_timeout, "request_timeout"))
    errors.extend(_require_positive(config.snapshot_capacity, "snapshot_capacity"))
    errors.extend(_require_positive(config.ledger_capacity, "ledger_capacity"))

    if config.min_magnitude < 0:
        errors.append(ValidationError(
            field="min_magnitude",
            message=f"Minimum magnitude {config.min_magnitude} is negative",
        ))

    if config.startup_delay_seconds < 0:
        errors.append(ValidationError(
            field="startup_delay_seconds",
            message="Negative start-up delay will be treated as 0",
            severity="warning",
        ))

    # Alerts only fire for quakes that made it into the snapshot.
    # A threshold of 0 is test mode: alert on everything shown.
    if 0 < config.alert_threshold < config.min_magnitude:
        errors.append(ValidationError(
            field="alert_threshold",
            message=(
                f"alert_threshold ({config.alert_threshold}) is below "
                f"min_magnitude ({config.min_magnitude}); quakes under "
                f"{config.min_magnitude} are filtered before alerting"
            ),
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
