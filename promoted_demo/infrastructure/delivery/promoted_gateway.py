"""Concrete implementation of the DeliveryGateway interface using the
Promoted Python delivery client.

Hides the construction details of PromotedDeliveryClient and runs its
blocking Deliver call off the event loop.
"""

import asyncio
import logging
import time
from typing import Any, Optional

from promoted_python_delivery_client.client.client import PromotedDeliveryClient
from promoted_python_delivery_client.client.delivery_request import DeliveryRequest
from promoted_python_delivery_client.client.delivery_response import DeliveryResponse

from promoted_demo.domain.events.delivery_events import (
    DeliveryCallFailed, DeliveryCallInitiated, DeliveryCallSucceeded
)
from promoted_demo.domain.interfaces.delivery_gateway import (
    DeliveryCallError, DeliveryClientError, DeliveryGateway
)
from promoted_demo.infrastructure.config.settings import AppConfig

logger = logging.getLogger(__name__)


def dispatch_event(event: Any) -> None:
    logger.debug(f"EVENT: {event}")


def build_client(config: AppConfig) -> PromotedDeliveryClient:
    """Creates the library client from resolved settings."""
    return PromotedDeliveryClient(
        delivery_endpoint=config.delivery_api_endpoint_url,
        delivery_api_key=config.delivery_api_key,
        delivery_timeout_millis=config.delivery_timeout_millis,
        metrics_endpoint=config.metrics_api_endpoint_url,
        metrics_api_key=config.metrics_api_key,
        metrics_timeout_millis=config.metrics_timeout_millis,
        shadow_traffic_delivery_rate=config.shadow_traffic_delivery_rate,
        blocking_shadow_traffic=config.blocking_shadow_traffic,
        perform_checks=config.perform_checks,
    )


class PromotedDeliveryGateway(DeliveryGateway):
    """Promoted implementation of the DeliveryGateway interface."""

    def __init__(self, config: AppConfig, client: Optional[PromotedDeliveryClient] = None):
        """Initializes the Promoted delivery client.

        Args:
            config: Validated application settings.
            client: Pre-built client (mainly for tests); built from config if None.

        Raises:
            DeliveryClientError: If the client library rejects the settings.
        """
        self.endpoint = config.delivery_api_endpoint_url
        if client is None:
            try:
                client = build_client(config)
            except Exception as e:
                logger.error(f"Failed to initialize PromotedDeliveryClient: {e}", exc_info=True)
                raise DeliveryClientError(f"PromotedDeliveryClient initialization failed: {e}") from e
        self.client = client
        self._closed = False
        logger.info(
            f"PromotedDeliveryGateway initialized: endpoint={self.endpoint}, "
            f"shadow_rate={config.shadow_traffic_delivery_rate}, blocking_shadow={config.blocking_shadow_traffic}"
        )

    async def deliver(self, request: DeliveryRequest) -> DeliveryResponse:
        """Calls Deliver in a worker thread and reports the call as events."""
        insertion_count = len(request.request.insertion or [])
        dispatch_event(DeliveryCallInitiated(
            endpoint=self.endpoint, insertion_count=insertion_count, only_log=request.only_log
        ))
        start_time = time.perf_counter()
        try:
            response = await asyncio.to_thread(self.client.deliver, request)
        except Exception as e:
            logger.error(f"Deliver call to {self.endpoint} failed: {type(e).__name__} - {e}", exc_info=True)
            dispatch_event(DeliveryCallFailed(
                endpoint=self.endpoint, error_type=type(e).__name__, error_message=str(e)
            ))
            raise DeliveryCallError("Delivery call failed", e) from e
        latency_ms = (time.perf_counter() - start_time) * 1000

        dispatch_event(DeliveryCallSucceeded(
            endpoint=self.endpoint,
            execution_server=response.execution_server.name,
            latency_ms=latency_ms,
            client_request_id=response.client_request_id,
            insertion_count=len(response.response.insertion or []),
        ))
        logger.debug(f"Received delivery response in {latency_ms:.2f}ms from {response.execution_server.name}.")
        return response

    def shutdown(self) -> None:
        if self._closed:
            return
        self._closed = True
        logger.debug("Waiting for background delivery work to finish.")
        self.client.shutdown()
