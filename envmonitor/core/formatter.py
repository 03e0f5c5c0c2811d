"""Console view formatting - Pure functions.

This module turns one cycle's processed state into the lines shown on
the console. Lines use rich console markup for color; printing them is
the shell's job.
"""

from dataclasses import dataclass, field
from datetime import datetime

from rich.markup import escape

from envmonitor.core.earthquake import Earthquake, SeismicSnapshot
from envmonitor.core.weather import StormLevel


# Magnitude color bands
MAJOR_MAGNITUDE = 6.0
MODERATE_MAGNITUDE = 4.0

HEADER_STYLE = "cyan"


@dataclass(frozen=True)
class MonitorView:
    """Everything the renderer needs to draw one cycle.

    Attributes:
        generated_at: Time the view was built (UTC)
        min_magnitude: Magnitude filter in effect
        snapshot: Ranked quakes to list
        new_alert_ids: IDs of quakes that alerted this cycle
        latitude: Monitored latitude
        longitude: Monitored longitude
        storm_level: Lightning classification for this cycle
        update_interval_seconds: Wait before the next cycle
        seismic_error: Why the seismic feed is unavailable, if it is
        weather_error: Why the weather feed is unavailable, if it is
    """
    generated_at: datetime
    min_magnitude: float
    snapshot: SeismicSnapshot
    latitude: float
    longitude: float
    storm_level: StormLevel
    update_interval_seconds: int
    new_alert_ids: frozenset[str] = field(default_factory=frozenset)
    seismic_error: str | None = None
    weather_error: str | None = None


def get_severity_color(magnitude: float) -> str:
    """Get the display color for an earthquake magnitude.

    Pure function.
    """
    if magnitude >= MAJOR_MAGNITUDE:
        return "red"
    elif magnitude >= MODERATE_MAGNITUDE:
        return "yellow"
    else:
        return "green"


def format_time_ago(event_time: datetime | None, now: datetime) -> str:
    """Format how long ago an event happened, e.g. "42s ago" or "7m ago".

    Pure function. Events stamped in the future (clock skew) show as 0s.
    """
    if event_time is None:
        return "?"

    diff_s = max(int((now - event_time).total_seconds()), 0)
    if diff_s < 60:
        return f"{diff_s}s ago"
    return f"{diff_s // 60}m ago"


def format_earthquake_line(
    earthquake: Earthquake,
    now: datetime,
    is_new: bool = False,
) -> str:
    """Format one quake as a colored console line.

    Pure function.

    Args:
        earthquake: Earthquake to format
        now: Reference time for the "ago" column
        is_new: Whether the quake alerted this cycle

    Returns:
        Line with rich markup
    """
    color = get_severity_color(earthquake.magnitude)
    label = escape(f"[  M {earthquake.magnitude:.1f}  ]")
    ago = format_time_ago(earthquake.time, now)
    marker = "[bold red]NEW[/] " if is_new else ""

    return f"[{color}]{label}{ago:<10}[/] {marker}{escape(earthquake.place)}"


def format_storm_lines(level: StormLevel) -> list[str]:
    """Format the lightning status block.

    Pure function.
    """
    if level is StormLevel.WARNING:
        return [
            "[red]!!! SEVERE THUNDERSTORM WARNING IN EFFECT !!![/]",
            "> Isolate antenna and sensitive equipment immediately.",
        ]
    elif level is StormLevel.WATCH:
        return [
            "[yellow]--- THUNDERSTORM WATCH ---[/]",
            "> Thunderstorms possible within the next 6 hours. Monitor conditions.",
        ]
    else:
        return ["[green]STATUS: All clear.[/]"]


def format_view(view: MonitorView) -> list[str]:
    """Format a full monitor view as console lines.

    Pure function.

    Args:
        view: View model for this cycle

    Returns:
        Lines with rich markup, top to bottom
    """
    now = view.generated_at
    lines = [
        f"[{HEADER_STYLE}]--- GLOBAL SEISMIC MONITOR (Min Mag: {view.min_magnitude:.1f}) ---[/]",
        f"Last Updated: {now.strftime('%Y-%m-%d %H:%M:%S')} UTC",
        "",
    ]

    if view.seismic_error:
        lines.append(f"[red]Seismic feed unavailable: {escape(view.seismic_error)}[/]")
    elif not view.snapshot:
        lines.append("No earthquakes matching the filter in the last hour.")

    for earthquake in view.snapshot:
        lines.append(format_earthquake_line(
            earthquake,
            now,
            is_new=earthquake.id in view.new_alert_ids,
        ))

    lines.extend([
        "",
        f"[{HEADER_STYLE}]--- LIGHTNING PROXIMITY WARNING ---[/]",
        f"Monitoring Location: {view.latitude:.2f}, {view.longitude:.2f}",
        "",
    ])

    if view.weather_error:
        lines.append(f"[red]Weather feed unavailable: {escape(view.weather_error)}[/]")

    lines.extend(format_storm_lines(view.storm_level))

    lines.extend([
        "",
        f"Waiting {view.update_interval_seconds} seconds for the next update...",
    ])

    return lines


def format_startup_banner(
    min_magnitude: float,
    alert_threshold: float,
    latitude: float,
    longitude: float,
) -> list[str]:
    """Format the lines printed once when the monitor starts.

    Pure function.
    """
    return [
        "--- Starting Environmental Monitor ---",
        f"Seismic Filter: M{min_magnitude:.1f}+ (Alerts >= {alert_threshold:.1f})",
        f"Lightning Location: {latitude:.2f}, {longitude:.2f}",
    ]
