"""Monitor state carried between update cycles.

Everything that must survive from one cycle to the next lives in a
MonitorState owned by the orchestrator.
"""

from dataclasses import dataclass, field

from envmonitor.core.config import Config
from envmonitor.core.dedup import AlertLedger
from envmonitor.core.storm import StormState


@dataclass
class MonitorState:
    """Cross-cycle state of the monitor.

    Attributes:
        ledger: IDs of quakes that already alerted
        storm: Lightning state from the last cycle
        latitude: Monitored latitude
        longitude: Monitored longitude
    """
    ledger: AlertLedger = field(default_factory=AlertLedger)
    storm: StormState = field(default_factory=StormState)
    latitude: float = 0.0
    longitude: float = 0.0


def initial_state(config: Config) -> MonitorState:
    """Create the state for the first cycle from configuration."""
    return MonitorState(
        ledger=AlertLedger(config.ledger_capacity),
        storm=StormState(),
        latitude=config.latitude,
        longitude=config.longitude,
    )
