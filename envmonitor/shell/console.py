"""Console Renderer - Imperative Shell.

Prints formatted views to the terminal with rich and sounds the
terminal bell. Formatting itself is in the core module.
"""

import logging

from rich.console import Console

from envmonitor.core.formatter import MonitorView, format_view


logger = logging.getLogger(__name__)


class ConsoleRenderer:
    """Draws monitor views on a rich Console.

    This is part of the imperative shell - it writes to the terminal.
    """

    def __init__(self, console: Console | None = None) -> None:
        """Initialize renderer.

        Args:
            console: Console to draw on (stdout console if not provided)
        """
        self.console = console or Console(highlight=False)

    def print_lines(self, lines: list[str]) -> None:
        """Print markup lines without clearing the screen."""
        for line in lines:
            self.console.print(line)

    def render(self, view: MonitorView, bells: int = 0) -> None:
        """Clear the screen, draw a view and sound any alerts.

        Args:
            view: View model for this cycle
            bells: Number of audible alerts to sound
        """
        self.console.clear()
        self.print_lines(format_view(view))

        for _ in range(bells):
            self.console.bell()

        if bells:
            logger.info("Sounded %d audible alert(s)", bells)
