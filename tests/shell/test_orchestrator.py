"""Tests for the Orchestrator module.

Tests the coordination between functional core and imperative shell.
Uses mocks for shell components to test orchestration logic.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from envmonitor.core.config import Config
from envmonitor.core.dedup import AlertLedger
from envmonitor.core.state import MonitorState, initial_state
from envmonitor.core.storm import StormState
from envmonitor.core.weather import StormLevel
from envmonitor.orchestrator import CycleResult, Orchestrator
from envmonitor.shell.errors import ParseFailure, TransportFailure


NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)
NOW_MS = int(NOW.timestamp() * 1000)


def feature(id: str, magnitude: float | None, place: str = "Somewhere") -> dict:
    return {"id": id, "properties": {"mag": magnitude, "place": place, "time": NOW_MS}}


def weather(current: int = 0, hourly: list[int] | None = None) -> dict:
    return {
        "current": {"weather_code": current},
        "hourly": {"weather_code": hourly if hourly is not None else [0] * 6},
    }


@pytest.fixture
def sample_config():
    """Create a sample configuration."""
    return Config(
        min_magnitude=2.5,
        alert_threshold=6.0,
        latitude=54.53,
        longitude=-1.05,
        update_interval_seconds=120,
        startup_delay_seconds=4,
    )


@pytest.fixture
def mock_usgs_client():
    """Create a mock USGS client."""
    client = Mock()
    client.fetch_feed.return_value = {
        "features": [
            feature("us1", 4.1, "Alaska"),
            feature("us2", 6.8, "Chile"),
            feature("us3", 1.2, "Nevada"),
            feature("us4", 6.8, "Tonga"),
        ]
    }
    return client


@pytest.fixture
def mock_weather_client():
    """Create a mock Open-Meteo client."""
    client = Mock()
    client.fetch_weather.return_value = weather()
    return client


@pytest.fixture
def mock_renderer():
    """Create a mock console renderer."""
    return Mock()


@pytest.fixture
def orchestrator(sample_config, mock_usgs_client, mock_weather_client, mock_renderer):
    """Create an orchestrator wired to mocks."""
    return Orchestrator(
        config=sample_config,
        usgs_client=mock_usgs_client,
        weather_client=mock_weather_client,
        renderer=mock_renderer,
        clock=lambda: NOW,
        sleep=Mock(),
    )


@pytest.fixture
def state(sample_config):
    """Fresh monitor state."""
    return initial_state(sample_config)


class TestRunCycle:
    """Tests for Orchestrator.run_cycle()."""

    def test_builds_ranked_snapshot(self, orchestrator, state):
        """Quakes are filtered and ranked, ties in feed order."""
        result, _ = orchestrator.run_cycle(state)

        assert [e.id for e in result.view.snapshot] == ["us2", "us4", "us1"]

    def test_alerts_new_major_quakes(self, orchestrator, state, mock_renderer):
        """Quakes at or above the threshold alert and ring the bell."""
        result, new_state = orchestrator.run_cycle(state)

        assert [e.id for e in result.quake_alerts] == ["us2", "us4"]
        assert result.view.new_alert_ids == frozenset({"us2", "us4"})
        assert list(new_state.ledger) == ["us2", "us4"]
        mock_renderer.render.assert_called_once_with(result.view, bells=2)

    def test_does_not_realert_next_cycle(self, orchestrator, state, mock_renderer):
        """The same quakes do not alert on the following cycle."""
        _, state = orchestrator.run_cycle(state)
        result, _ = orchestrator.run_cycle(state)

        assert result.quake_alerts == []
        assert result.alert_count == 0
        assert mock_renderer.render.call_args.kwargs["bells"] == 0

    def test_fetches_weather_for_state_location(self, orchestrator, mock_weather_client):
        """Weather is fetched for the coordinates held in state."""
        state = MonitorState(latitude=-33.87, longitude=151.21)
        orchestrator.run_cycle(state)

        mock_weather_client.fetch_weather.assert_called_once_with(-33.87, 151.21)

    def test_storm_warning_fires_once(self, orchestrator, state, mock_weather_client, mock_usgs_client):
        """Entering a warning fires one alert; staying there does not."""
        mock_usgs_client.fetch_feed.return_value = {"features": []}
        mock_weather_client.fetch_weather.return_value = weather(current=95)

        first, state = orchestrator.run_cycle(state)
        second, state = orchestrator.run_cycle(state)

        assert first.storm_alert is True
        assert first.alert_count == 1
        assert first.view.storm_level is StormLevel.WARNING
        assert second.storm_alert is False
        assert state.storm.was_active is True

    def test_storm_rearms_after_watch(self, orchestrator, state, mock_weather_client):
        """Warning, watch, warning fires twice."""
        fired = []
        for response in (weather(95), weather(0, [0, 95, 0, 0, 0, 0]), weather(96)):
            mock_weather_client.fetch_weather.return_value = response
            result, state = orchestrator.run_cycle(state)
            fired.append(result.storm_alert)

        assert fired == [True, False, True]

    def test_seismic_failure_degrades(self, orchestrator, state, mock_usgs_client, mock_renderer):
        """A USGS failure gives an empty snapshot and no alerts."""
        mock_usgs_client.fetch_feed.side_effect = TransportFailure("USGS", "Request timed out")

        result, new_state = orchestrator.run_cycle(state)

        assert len(result.view.snapshot) == 0
        assert result.quake_alerts == []
        assert result.view.seismic_error == "USGS: Request timed out"
        assert result.success is False
        assert len(new_state.ledger) == 0
        mock_renderer.render.assert_called_once()

    def test_weather_failure_degrades_to_clear(self, orchestrator, state, mock_weather_client):
        """A weather failure zeroes the codes, which reads as clear."""
        state.storm = StormState(is_warning=True, was_active=True)
        mock_weather_client.fetch_weather.side_effect = ParseFailure("Open-Meteo", "Invalid JSON in response")

        result, new_state = orchestrator.run_cycle(state)

        assert result.view.storm_level is StormLevel.CLEAR
        assert result.view.weather_error == "Open-Meteo: Invalid JSON in response"
        assert result.storm_alert is False
        assert new_state.storm == StormState()

    def test_both_feeds_failing(self, orchestrator, state, mock_usgs_client, mock_weather_client):
        """Both feeds failing still renders and leaves the ledger alone."""
        state.ledger.record("old")
        mock_usgs_client.fetch_feed.side_effect = TransportFailure("USGS", "down")
        mock_weather_client.fetch_weather.side_effect = TransportFailure("Open-Meteo", "down")

        result, new_state = orchestrator.run_cycle(state)

        assert result.errors == ["USGS: down", "Open-Meteo: down"]
        assert result.alert_count == 0
        assert list(new_state.ledger) == ["old"]

    def test_malformed_feed_body_gives_empty_snapshot(self, orchestrator, state, mock_usgs_client):
        """Valid JSON of the wrong shape is absorbed without an error."""
        mock_usgs_client.fetch_feed.return_value = ["not", "geojson"]

        result, _ = orchestrator.run_cycle(state)

        assert len(result.view.snapshot) == 0
        assert result.errors == []

    def test_null_magnitude_alerts_in_test_mode(self, sample_config, mock_usgs_client, mock_weather_client, mock_renderer):
        """With filter and threshold 0, a null magnitude still alerts."""
        sample_config.min_magnitude = 0.0
        sample_config.alert_threshold = 0.0
        mock_usgs_client.fetch_feed.return_value = {"features": [feature("x", None)]}
        orchestrator = Orchestrator(
            sample_config,
            usgs_client=mock_usgs_client,
            weather_client=mock_weather_client,
            renderer=mock_renderer,
            clock=lambda: NOW,
        )

        result, _ = orchestrator.run_cycle(initial_state(sample_config))

        assert [e.id for e in result.quake_alerts] == ["x"]

    def test_ledger_eviction_allows_realert(self, sample_config, mock_weather_client, mock_renderer):
        """An ID evicted from a full ledger can alert again."""
        usgs = Mock()
        orchestrator = Orchestrator(
            sample_config,
            usgs_client=usgs,
            weather_client=mock_weather_client,
            renderer=mock_renderer,
            clock=lambda: NOW,
        )
        state = MonitorState(ledger=AlertLedger(capacity=2))

        for ids in (["a"], ["b"], ["c"], ["a"]):
            usgs.fetch_feed.return_value = {"features": [feature(i, 7.0) for i in ids]}
            result, state = orchestrator.run_cycle(state)

        assert [e.id for e in result.quake_alerts] == ["a"]

    def test_unnamed_quakes_alert_separately(self, orchestrator, state, mock_usgs_client, mock_renderer):
        """Major quakes without a feed ID each alert once."""
        mock_usgs_client.fetch_feed.return_value = {
            "features": [
                {"properties": {"mag": 7.0, "place": "Off Chile", "time": NOW_MS}},
                {"properties": {"mag": 6.5, "place": "Tonga", "time": NOW_MS}},
            ]
        }

        first, state = orchestrator.run_cycle(state)
        second, _ = orchestrator.run_cycle(state)

        assert [e.place for e in first.quake_alerts] == ["Off Chile", "Tonga"]
        assert len(first.view.new_alert_ids) == 2
        assert mock_renderer.render.call_args_list[0].kwargs["bells"] == 2
        assert second.quake_alerts == []

    def test_view_fields(self, orchestrator, state, sample_config):
        """The view carries config and location details."""
        result, _ = orchestrator.run_cycle(state)

        assert result.view.generated_at == NOW
        assert result.view.min_magnitude == sample_config.min_magnitude
        assert result.view.update_interval_seconds == 120
        assert (result.view.latitude, result.view.longitude) == (54.53, -1.05)


class TestRunForever:
    """Tests for Orchestrator.run_forever()."""

    def test_prints_banner_and_sleeps(self, orchestrator, mock_renderer):
        """The banner is printed and the start-up delay observed."""
        orchestrator.run_forever(max_cycles=1)

        banner = mock_renderer.print_lines.call_args.args[0]
        assert banner[0] == "--- Starting Environmental Monitor ---"
        assert "Seismic Filter: M2.5+ (Alerts >= 6.0)" in banner
        orchestrator.sleep.assert_called_once_with(4)

    def test_sleeps_interval_between_cycles(self, orchestrator, mock_renderer):
        """Each cycle but the last is followed by the update interval."""
        orchestrator.run_forever(max_cycles=3)

        assert mock_renderer.render.call_count == 3
        assert [c.args[0] for c in orchestrator.sleep.call_args_list] == [4, 120, 120]

    def test_carries_state_between_cycles(self, orchestrator):
        """Ledger entries survive across cycles."""
        final = orchestrator.run_forever(max_cycles=2)

        assert list(final.ledger) == ["us2", "us4"]

    def test_unexpected_error_does_not_stop_loop(self, orchestrator, mock_renderer):
        """A crash inside one cycle is logged and the loop continues."""
        mock_renderer.render.side_effect = [RuntimeError("terminal gone"), None]

        orchestrator.run_forever(max_cycles=2)

        assert mock_renderer.render.call_count == 2


class TestCycleResult:
    """Tests for CycleResult properties."""

    def test_summary(self, orchestrator, state):
        """Summary mentions counts and storm level."""
        result, _ = orchestrator.run_cycle(state)

        assert isinstance(result, CycleResult)
        assert result.summary == "3 earthquakes shown, 2 new alerts, storm clear"
