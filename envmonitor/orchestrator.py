"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. It's the "glue" that
turns fetched feeds into a rendered view once per cycle.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Callable

from envmonitor.core.config import Config
from envmonitor.core.dedup import collect_quake_alerts
from envmonitor.core.earthquake import Earthquake, SeismicSnapshot, build_snapshot, parse_earthquakes
from envmonitor.core.formatter import MonitorView, format_startup_banner
from envmonitor.core.state import MonitorState, initial_state
from envmonitor.core.storm import advance_storm_state
from envmonitor.core.weather import WeatherStatus, classify_weather, parse_weather
from envmonitor.shell.console import ConsoleRenderer
from envmonitor.shell.errors import FeedError
from envmonitor.shell.usgs_client import USGSClient
from envmonitor.shell.weather_client import OpenMeteoClient


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CycleResult:
    """Result of one fetch-process-render cycle.

    Attributes:
        view: The view that was rendered
        quake_alerts: Earthquakes that fired a new alert
        storm_alert: Whether the thunderstorm warning alert fired
        errors: Feed errors that degraded this cycle
    """
    view: MonitorView
    quake_alerts: list[Earthquake] = field(default_factory=list)
    storm_alert: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Returns True if both feeds were available."""
        return len(self.errors) == 0

    @property
    def alert_count(self) -> int:
        """Number of audible alerts this cycle."""
        return len(self.quake_alerts) + (1 if self.storm_alert else 0)

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        summary = (
            f"{len(self.view.snapshot)} earthquakes shown, "
            f"{len(self.quake_alerts)} new alerts, "
            f"storm {self.view.storm_level.value}"
        )
        if self.errors:
            summary += f", {len(self.errors)} feed errors"
        return summary


class Orchestrator:
    """Coordinates seismic and lightning monitoring.

    This class wires together:
    - USGS client (fetches the earthquake feed)
    - Open-Meteo client (fetches weather codes)
    - Core functions (parsing, ranking, dedup, storm state, formatting)
    - Console renderer (draws the view, sounds alerts)
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSClient | None = None,
        weather_client: OpenMeteoClient | None = None,
        renderer: ConsoleRenderer | None = None,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            weather_client: Open-Meteo client (created if not provided)
            renderer: Console renderer (created if not provided)
            clock: Returns the current UTC time
            sleep: Blocks for the given number of seconds
        """
        self.config = config
        self.usgs_client = usgs_client or USGSClient(
            feed_url=config.usgs_feed_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
        self.weather_client = weather_client or OpenMeteoClient(
            base_url=config.weather_api_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
        self.renderer = renderer or ConsoleRenderer()
        self.clock = clock or _utc_now
        self.sleep = sleep or time.sleep

    def _fetch_snapshot(self) -> tuple[SeismicSnapshot, str | None]:
        """Fetch and rank earthquakes.

        Returns:
            Tuple of (snapshot, error message). The snapshot is empty
            and the error set if the feed failed.
        """
        try:
            geojson = self.usgs_client.fetch_feed()
        except FeedError as e:
            logger.error("Seismic feed unavailable: %s", e)
            return SeismicSnapshot.empty(), str(e)

        # Pure core functions
        earthquakes = parse_earthquakes(geojson)
        snapshot = build_snapshot(
            earthquakes,
            min_magnitude=self.config.min_magnitude,
            capacity=self.config.snapshot_capacity,
        )
        return snapshot, None

    def _fetch_weather(self, state: MonitorState) -> tuple[WeatherStatus, str | None]:
        """Fetch weather codes for the monitored location.

        Returns:
            Tuple of (status, error message). The status is zeroed and
            the error set if the feed failed.
        """
        try:
            document = self.weather_client.fetch_weather(state.latitude, state.longitude)
        except FeedError as e:
            logger.error("Weather feed unavailable: %s", e)
            return WeatherStatus.zeroed(), str(e)

        return parse_weather(document), None

    def run_cycle(self, state: MonitorState) -> tuple[CycleResult, MonitorState]:
        """Run one complete monitoring cycle.

        1. Fetches and ranks earthquakes
        2. Checks them against the alert ledger
        3. Fetches and classifies weather codes
        4. Advances the storm state machine
        5. Renders the view and sounds alerts

        Args:
            state: State from the previous cycle

        Returns:
            Tuple of (CycleResult, state for the next cycle)
        """
        # Step 1: Earthquakes
        snapshot, seismic_error = self._fetch_snapshot()
        logger.info("%d earthquakes in snapshot", len(snapshot))

        # Step 2: Deduplicate alerts (mutates the ledger)
        quake_alerts = collect_quake_alerts(
            snapshot,
            state.ledger,
            self.config.alert_threshold,
        )
        for earthquake in quake_alerts:
            logger.info(
                "New earthquake alert: M%.1f %s (%s)",
                earthquake.magnitude,
                earthquake.place,
                earthquake.id,
            )

        # Step 3: Weather
        weather, weather_error = self._fetch_weather(state)
        level = classify_weather(weather)

        # Step 4: Storm state machine
        storm, storm_alert = advance_storm_state(state.storm, level)
        if storm_alert:
            logger.warning(
                "Thunderstorm warning at %.2f, %.2f",
                state.latitude,
                state.longitude,
            )

        view = MonitorView(
            generated_at=self.clock(),
            min_magnitude=self.config.min_magnitude,
            snapshot=snapshot,
            new_alert_ids=frozenset(e.id for e in quake_alerts),
            latitude=state.latitude,
            longitude=state.longitude,
            storm_level=level,
            update_interval_seconds=self.config.update_interval_seconds,
            seismic_error=seismic_error,
            weather_error=weather_error,
        )

        result = CycleResult(
            view=view,
            quake_alerts=quake_alerts,
            storm_alert=storm_alert,
            errors=[e for e in (seismic_error, weather_error) if e],
        )

        # Step 5: Render
        self.renderer.render(view, bells=result.alert_count)

        return result, replace(state, storm=storm)

    def run_forever(
        self,
        state: MonitorState | None = None,
        max_cycles: int | None = None,
    ) -> MonitorState:
        """Print the banner, then run cycles until the process is killed.

        A cycle that raises unexpectedly is logged and skipped; the loop
        carries on with the state it had before that cycle.

        Args:
            state: Starting state (built from config if not provided)
            max_cycles: Stop after this many cycles (None runs forever)

        Returns:
            Final state (only reached when max_cycles is set)
        """
        if state is None:
            state = initial_state(self.config)

        self.renderer.print_lines(format_startup_banner(
            self.config.min_magnitude,
            self.config.alert_threshold,
            state.latitude,
            state.longitude,
        ))
        self.sleep(max(self.config.startup_delay_seconds, 0))

        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            try:
                result, state = self.run_cycle(state)
                logger.info("Cycle complete: %s", result.summary)
            except Exception:
                logger.exception("Unexpected error in monitoring cycle")

            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            self.sleep(self.config.update_interval_seconds)

        return state
