"""Deduplication logic - Alert ledger.

This module decides which earthquakes have already been alerted on.
The ledger lives in memory only and forgets everything on restart.
"""

from collections import deque
from typing import Iterator

from envmonitor.core.earthquake import Earthquake, SeismicSnapshot


# Default number of alerted IDs remembered
DEFAULT_LEDGER_CAPACITY = 50


class AlertLedger:
    """Bounded FIFO set of earthquake IDs that have already alerted.

    Membership checks use a set; a deque keeps insertion order so the
    oldest ID is evicted first once the ledger is full.
    """

    def __init__(self, capacity: int = DEFAULT_LEDGER_CAPACITY) -> None:
        """Initialize an empty ledger.

        Args:
            capacity: Maximum number of IDs remembered

        Raises:
            ValueError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"Ledger capacity must be a positive integer, got {capacity!r}")

        self._capacity = capacity
        self._order: deque[str] = deque()
        self._ids: set[str] = set()

    @property
    def capacity(self) -> int:
        return self._capacity

    def should_alert(self, identifier: str) -> bool:
        """Return True if this ID has not alerted yet."""
        return identifier not in self._ids

    def record(self, identifier: str) -> None:
        """Remember an ID, evicting the oldest one if the ledger is full.

        Recording an ID that is already present does nothing.
        """
        if identifier in self._ids:
            return

        if len(self._order) >= self._capacity:
            evicted = self._order.popleft()
            self._ids.discard(evicted)

        self._order.append(identifier)
        self._ids.add(identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._ids

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._order))

    def __repr__(self) -> str:
        return f"AlertLedger(capacity={self._capacity}, size={len(self._order)})"


def collect_quake_alerts(
    snapshot: SeismicSnapshot,
    ledger: AlertLedger,
    alert_threshold: float,
) -> list[Earthquake]:
    """Find snapshot events that should alert now and record them.

    Walks the snapshot in rank order. Each event at or above the threshold
    whose ID the ledger has not seen is recorded and returned, so a
    repeated ID in the same snapshot alerts only once.

    Args:
        snapshot: Current seismic snapshot
        ledger: Alert history (mutated)
        alert_threshold: Minimum magnitude that triggers an alert

    Returns:
        Earthquakes that fired a new alert, in snapshot order
    """
    alerted = []

    for earthquake in snapshot:
        if earthquake.magnitude < alert_threshold:
            continue
        if ledger.should_alert(earthquake.id):
            ledger.record(earthquake.id)
            alerted.append(earthquake)

    return alerted
