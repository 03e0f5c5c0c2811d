"""Configuration Loader - Imperative Shell.

This module builds a Config from, in increasing precedence, built-in
defaults, an optional YAML file, environment variables and command-line
arguments. All I/O is contained here.

The Config model itself is defined in envmonitor/core/config.py.
"""

import argparse
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from envmonitor.core.config import Config


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "config/config.yaml"

# Environment variable -> (Config field, converter)
ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "MONITOR_MIN_MAGNITUDE": ("min_magnitude", float),
    "MONITOR_ALERT_THRESHOLD": ("alert_threshold", float),
    "MONITOR_LATITUDE": ("latitude", float),
    "MONITOR_LONGITUDE": ("longitude", float),
    "MONITOR_INTERVAL_SECONDS": ("update_interval_seconds", int),
}

TEST_MODE_ARGUMENT = "test"


@dataclass
class CliOptions:
    """Options parsed from the command line.

    Attributes:
        min_magnitude: Value of -q (already clamped to >= 0), None if absent
            or given without a number
        location: (lat, lon) from -l, None if absent or incomplete
        test_mode: Whether the bare "test" argument was given
        config_path: Value of --config, None if absent
        unknown: Arguments that were not understood
    """
    min_magnitude: float | None = None
    location: tuple[float, float] | None = None
    test_mode: bool = False
    config_path: str | None = None
    unknown: list[str] = field(default_factory=list)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envmonitor",
        description="Console monitor for global earthquakes and local lightning risk.",
        epilog='Pass "test" to sound an alert for every displayed earthquake.',
    )
    # Values are converted in parse_args so a flag missing its values is
    # reported as unknown instead of ending the process.
    parser.add_argument(
        "-q",
        dest="min_magnitude",
        nargs="?",
        const=(),
        metavar="MAG",
        help="Minimum magnitude to show; also sets the alert threshold",
    )
    parser.add_argument(
        "-l",
        dest="location",
        nargs="*",
        metavar=("LAT", "LON"),
        help="Coordinates for lightning monitoring",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        metavar="PATH",
        help="YAML configuration file",
    )
    return parser


def _take_floats(values: list[str], count: int) -> tuple[list[float] | None, list[str]]:
    """Convert the first count values of a flag.

    Returns:
        Tuple of (converted numbers, values left over), or (None, values)
        when there are too few values or one of them is not a number
    """
    if len(values) < count:
        return None, values
    try:
        numbers = [float(value) for value in values[:count]]
    except ValueError:
        return None, values
    return numbers, values[count:]


def parse_args(argv: list[str] | None = None) -> CliOptions:
    """Parse command-line arguments.

    Unknown arguments are collected rather than treated as errors. A -q
    or -l without enough numeric values counts as unknown, and so do the
    values it was given, except for "test".

    Args:
        argv: Arguments without the program name (sys.argv[1:] if None)

    Returns:
        Parsed CliOptions
    """
    namespace, extras = _build_parser().parse_known_args(argv)

    unknown = []
    leftovers = []

    min_magnitude = None
    if namespace.min_magnitude is not None:
        values = [namespace.min_magnitude] if namespace.min_magnitude else []
        numbers, rest = _take_floats(values, 1)
        if numbers is None:
            unknown.append("-q")
        else:
            min_magnitude = max(numbers[0], 0.0)
        leftovers.extend(rest)

    location = None
    if namespace.location is not None:
        numbers, rest = _take_floats(namespace.location, 2)
        if numbers is None:
            unknown.append("-l")
        else:
            location = (numbers[0], numbers[1])
        leftovers.extend(rest)

    test_mode = False
    for arg in leftovers + extras:
        if arg == TEST_MODE_ARGUMENT:
            test_mode = True
        else:
            unknown.append(arg)

    return CliOptions(
        min_magnitude=min_magnitude,
        location=location,
        test_mode=test_mode,
        config_path=namespace.config_path,
        unknown=unknown,
    )


def apply_cli_options(config: Config, options: CliOptions) -> Config:
    """Return a copy of config with command-line options applied.

    -q sets both the filter and the alert threshold; "test" then drops
    the threshold to 0 so every displayed quake alerts.
    """
    updates: dict[str, Any] = {}

    if options.min_magnitude is not None:
        updates["min_magnitude"] = options.min_magnitude
        updates["alert_threshold"] = options.min_magnitude

    if options.location is not None:
        updates["latitude"], updates["longitude"] = options.location

    if options.test_mode:
        updates["alert_threshold"] = 0.0

    return replace(config, **updates)


def apply_env_overrides(config: Config, environ: dict[str, str] | None = None) -> Config:
    """Return a copy of config with MONITOR_* environment overrides applied.

    Values that fail to convert are logged and ignored.
    """
    if environ is None:
        environ = dict(os.environ)

    updates: dict[str, Any] = {}
    for var_name, (field_name, convert) in ENV_OVERRIDES.items():
        raw = environ.get(var_name)
        if raw is None or raw.strip() == "":
            continue
        try:
            updates[field_name] = convert(raw.strip())
        except ValueError:
            logger.warning("Ignoring %s=%r: not a valid %s", var_name, raw, convert.__name__)

    return replace(config, **updates)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    Pure function. Missing keys keep their defaults.

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    defaults = Config()

    return Config(
        min_magnitude=max(float(data.get("min_magnitude", defaults.min_magnitude)), 0.0),
        alert_threshold=float(data.get("alert_threshold", defaults.alert_threshold)),
        latitude=float(data.get("latitude", defaults.latitude)),
        longitude=float(data.get("longitude", defaults.longitude)),
        update_interval_seconds=int(data.get("update_interval_seconds", defaults.update_interval_seconds)),
        startup_delay_seconds=float(data.get("startup_delay_seconds", defaults.startup_delay_seconds)),
        request_timeout=int(data.get("request_timeout", defaults.request_timeout)),
        snapshot_capacity=int(data.get("snapshot_capacity", defaults.snapshot_capacity)),
        ledger_capacity=int(data.get("ledger_capacity", defaults.ledger_capacity)),
        usgs_feed_url=data.get("usgs_feed_url", defaults.usgs_feed_url),
        weather_api_url=data.get("weather_api_url", defaults.weather_api_url),
        user_agent=data.get("user_agent", defaults.user_agent),
    )


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object (defaults if the file is missing or empty)

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)

    path = Path(config_path)

    if not path.exists():
        logger.info("Config file not found: %s, using defaults", path)
        return Config()

    logger.info("Loading configuration from %s", path)

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, using defaults", path)
        return Config()

    return load_config_from_dict(data)


def build_config(argv: list[str] | None = None) -> tuple[Config, CliOptions]:
    """Build the effective configuration for a run.

    Layers defaults, the YAML file, environment overrides and
    command-line options, in that order.

    Args:
        argv: Command-line arguments without the program name

    Returns:
        Tuple of (effective Config, parsed CliOptions)
    """
    options = parse_args(argv)

    config = load_config(options.config_path)
    config = apply_env_overrides(config)
    config = apply_cli_options(config, options)

    return config, options
