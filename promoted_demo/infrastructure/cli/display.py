import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.table import Table
from rich.box import SIMPLE

from promoted_demo.domain.interfaces.user_interface import UserInterface
from promoted_demo.domain.models.delivery import DeliveryOutcome

logger = logging.getLogger(__name__)

BANNER = "Promoted Delivery Client"


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output.

    Results go to stdout without wrapping; errors go to stderr.
    """

    def __init__(self, console: Optional[Console] = None, error_console: Optional[Console] = None):
        self._console = console or Console(highlight=False)
        self._error_console = error_console or Console(stderr=True, highlight=False)

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    @property
    def error_console(self) -> Console:
        return self._error_console

    def display_banner(self, metrics_endpoint: str) -> None:
        self.console.print(BANNER, markup=False, soft_wrap=True)
        self.console.print(metrics_endpoint, markup=False, soft_wrap=True)

    def display_outcome(self, outcome: DeliveryOutcome) -> None:
        """Prints the execution server, client request id and ranked items."""
        self.console.print(f"Execution server: {outcome.execution_server}", markup=False, soft_wrap=True)
        self.console.print(f"Client request ID: {outcome.client_request_id or ''}", markup=False, soft_wrap=True)
        self.console.print("Response", markup=False, soft_wrap=True)
        for item in outcome.items:
            # Unknown ids can happen if the Delivery API returns cached items.
            self.console.print(item.display_text(), markup=False, soft_wrap=True)
        logger.debug(f"Displayed {len(outcome.items)} ranked items.")

    def display_config(self, config: Dict[str, Any]) -> None:
        table = Table(title="Resolved configuration", box=SIMPLE, show_header=True)
        table.add_column("Setting", style="bold")
        table.add_column("Value")
        for key, value in config.items():
            table.add_row(key, str(value))
        self.console.print(table)

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        self.error_console.print(f"[bold red]Error:[/bold red] {error_message}", soft_wrap=True)
