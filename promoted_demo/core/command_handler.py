"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), delegates the work
to the DeliveryService and reports results or failures through the UI.
"""

import logging
from typing import Optional

from promoted_demo.core.services.delivery_service import DeliveryService
from promoted_demo.domain.interfaces.delivery_gateway import DeliveryCallError
from promoted_demo.domain.interfaces.user_interface import UserInterface
from promoted_demo.domain.models.common import SearchQuery

logger = logging.getLogger(__name__)


class CommandHandler:
    """Handles incoming commands and delegates to appropriate services."""

    def __init__(self, delivery_service: DeliveryService, ui: UserInterface):
        self.delivery_service = delivery_service
        self.ui = ui

    async def handle_deliver(
        self,
        only_log: bool,
        search_query: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> bool:
        """Handles the 'deliver' command.

        Returns:
            True if the ranked results were displayed, False otherwise.
        """
        logger.info(f"Handling 'deliver' command (only_log={only_log}).")
        try:
            outcome = await self.delivery_service.rank_products(
                only_log,
                search_query=SearchQuery(search_query) if search_query is not None else None,
                page_size=page_size,
            )
        except DeliveryCallError as e:
            self.ui.display_error(f"Delivery call failed: {e.original_exception}")
            return False
        except ValueError as e:
            self.ui.display_error(f"Invalid request: {e}")
            return False
        except Exception as e:
            logger.error(f"Unexpected error during delivery: {e}", exc_info=True)
            self.ui.display_error(f"Delivery command failed: {e}")
            return False

        latency = f"{outcome.latency_ms:.1f}ms" if outcome.latency_ms is not None else "n/a"
        logger.info(f"Delivery request {outcome.request_id} answered by {outcome.execution_server} in {latency}.")
        if outcome.missing_content_ids:
            logger.warning(f"{len(outcome.missing_content_ids)} returned content ids are not in the catalog.")
        self.ui.display_outcome(outcome)
        return True
