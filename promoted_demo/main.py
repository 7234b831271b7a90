"""Main entry point for the promoted_demo application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import asyncio
import logging
from typing import Any, Coroutine, Dict, Optional, TypeVar

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from promoted_demo.core.command_handler import CommandHandler
from promoted_demo.core.services.delivery_service import DeliveryService

# --- Domain Layer ---
from promoted_demo.domain.interfaces.delivery_gateway import DeliveryClientError

# --- Infrastructure Layer ---
# Config
from promoted_demo.infrastructure.config.settings import (
    AppConfig, ConfigurationError, load_app_config, validate_config
)
# UI
from promoted_demo.infrastructure.cli.display import ConsoleDisplay
# Catalog
from promoted_demo.infrastructure.catalog.in_memory_catalog import InMemoryCatalog
# Delivery
from promoted_demo.infrastructure.delivery.promoted_gateway import PromotedDeliveryGateway
# Monitoring
from promoted_demo.infrastructure.monitoring.logger_setup import configure_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


# --- Dependency Injection Container (Manual) ---

def create_dependencies(config: AppConfig, ui: ConsoleDisplay) -> Dict[str, Any]:
    """Creates and wires up all dependencies for the delivery flow.

    This acts as the Composition Root.

    Raises:
        DeliveryClientError: If the Promoted client cannot be built.
    """
    logger.info("Initializing application dependencies...")
    dependencies: Dict[str, Any] = {'ui': ui, 'config': config}

    dependencies['catalog'] = InMemoryCatalog()
    dependencies['gateway'] = PromotedDeliveryGateway(config)
    dependencies['delivery_service'] = DeliveryService(
        catalog=dependencies['catalog'],
        gateway=dependencies['gateway'],
    )
    dependencies['command_handler'] = CommandHandler(
        delivery_service=dependencies['delivery_service'],
        ui=ui,
    )
    logger.info("All dependencies initialized successfully.")
    return dependencies


# --- Typer App Definition ---
app = typer.Typer(
    name="promoted-demo",
    help="Example backend client that ranks a small product catalog with the Promoted Delivery API.",
    add_completion=False,
)


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Runs an async handler from a sync Typer command."""
    return asyncio.run(coro)


def run_delivery(only_log: Optional[bool], query: Optional[str], page_size: Optional[int]) -> None:
    """Loads config, builds the client, ranks the catalog and prints the results."""
    config = load_app_config()
    ui = ConsoleDisplay()
    ui.display_banner(config.metrics_api_endpoint_url)

    try:
        validate_config(config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        ui.display_error(str(e))
        raise typer.Exit(code=1)

    if only_log is not None:
        config.only_log = only_log

    try:
        dependencies = create_dependencies(config, ui)
    except DeliveryClientError as e:
        ui.display_error(f"Failed to initialize PromotedDeliveryClient: {e}")
        raise typer.Exit(code=1)

    handler: CommandHandler = dependencies['command_handler']
    try:
        succeeded = run_async(handler.handle_deliver(config.only_log, search_query=query, page_size=page_size))
    finally:
        # Flush background metrics logging and shadow traffic before exit.
        dependencies['gateway'].shutdown()

    if not succeeded:
        raise typer.Exit(code=1)


# --- CLI Commands ---

OnlyLogOption = Annotated[
    Optional[bool],
    typer.Option("--only-log/--no-only-log", help="Rank client-side and only log to Metrics. Overrides ONLY_LOG.")
]
QueryOption = Annotated[
    Optional[str],
    typer.Option("--query", "-q", help="Search query sent with the request.")
]
PageSizeOption = Annotated[
    Optional[int],
    typer.Option("--page-size", "-n", min=1, help="Number of results to request.")
]


@app.command()
def deliver(
    only_log: OnlyLogOption = None,
    query: QueryOption = None,
    page_size: PageSizeOption = None,
):
    """Rank the sample catalog through the Delivery API and print the results."""
    run_delivery(only_log, query, page_size)


@app.command(name="show-config")
def show_config_command():
    """Show the resolved configuration with API keys masked."""
    config = load_app_config()
    ui = ConsoleDisplay()
    ui.display_config(config.masked())
    try:
        validate_config(config)
    except ConfigurationError as e:
        ui.display_error(str(e))
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging.")
    ] = False,
):
    """Main entry point. Runs 'deliver' if no command is given."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        logger.debug("No command invoked, running deliver with defaults.")
        run_delivery(None, None, None)


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
