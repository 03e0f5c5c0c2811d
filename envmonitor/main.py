"""Console Entry Point.

Thin wrapper that configures logging, builds the configuration and runs
the orchestrator loop until the process is killed.
"""

import logging
import os
import sys

import yaml

from envmonitor.core.config import validate_config
from envmonitor.orchestrator import Orchestrator
from envmonitor.shell.config_loader import build_config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure logging from LOG_LEVEL and LOG_FILE.

    Defaults to WARNING on stderr so log lines do not break up the
    console view.
    """
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    log_file = os.environ.get("LOG_FILE")

    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format=LOG_FORMAT,
        filename=log_file or None,
    )


def main(argv: list[str] | None = None) -> int:
    """Run the environmental monitor.

    Args:
        argv: Command-line arguments without the program name

    Returns:
        Process exit code
    """
    configure_logging()

    try:
        config, options = build_config(argv)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        logger.error("Failed to load configuration: %s", e)
        return 2

    for arg in options.unknown:
        print(f"Unknown argument: {arg}")
        logger.warning("Ignoring unknown argument: %s", arg)

    validation = validate_config(config)
    for warning in validation.warnings:
        logger.warning("Config %s: %s", warning.field, warning.message)
    if not validation.valid:
        for error in validation.critical_errors:
            print(f"Configuration error in {error.field}: {error.message}", file=sys.stderr)
        return 2

    orchestrator = Orchestrator(config)

    try:
        orchestrator.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
