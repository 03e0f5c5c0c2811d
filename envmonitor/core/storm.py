"""Storm state machine - Pure functions.

Tracks lightning risk across cycles so the audible warning fires once
on entry into a warning, not on every cycle the warning lasts.
"""

from dataclasses import dataclass

from envmonitor.core.weather import StormLevel


@dataclass(frozen=True)
class StormState:
    """Lightning state carried between cycles.

    Attributes:
        is_warning: A thunderstorm is happening now
        is_watch: A thunderstorm is forecast within the next hours
        was_active: The warning alert already fired for the current storm
    """
    is_warning: bool = False
    is_watch: bool = False
    was_active: bool = False

    @property
    def level(self) -> StormLevel:
        if self.is_warning:
            return StormLevel.WARNING
        if self.is_watch:
            return StormLevel.WATCH
        return StormLevel.CLEAR


def advance_storm_state(
    state: StormState,
    level: StormLevel,
) -> tuple[StormState, bool]:
    """Apply this cycle's classification to the storm state.

    Pure function.

    Args:
        state: State from the previous cycle
        level: Classification for this cycle

    Returns:
        Tuple of (new state, whether the one-shot warning alert fires)
    """
    if level is StormLevel.WARNING:
        fire = not state.was_active
        return StormState(is_warning=True, is_watch=False, was_active=True), fire

    # Leaving (or never entering) a warning re-arms the alert
    return StormState(
        is_warning=False,
        is_watch=level is StormLevel.WATCH,
        was_active=False,
    ), False
