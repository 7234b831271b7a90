"""Interface for calling a ranking/delivery backend.

Defines the contract the core service uses to rank insertions. The concrete
adapter wraps the Promoted client library, so the request and response
types here are the library's own.
"""

import abc

from promoted_python_delivery_client.client.delivery_request import DeliveryRequest
from promoted_python_delivery_client.client.delivery_response import DeliveryResponse


class DeliveryClientError(Exception):
    """Raised when the delivery client cannot be constructed."""


class DeliveryCallError(Exception):
    """Raised when a Deliver call fails inside the client library."""

    def __init__(self, message: str, original_exception: Exception):
        self.original_exception = original_exception
        super().__init__(f"{message}: {original_exception}")


class DeliveryGateway(abc.ABC):
    """Abstract Base Class for delivery (ranking) calls."""

    @abc.abstractmethod
    async def deliver(self, request: DeliveryRequest) -> DeliveryResponse:
        """Ranks the insertions in the request asynchronously.

        Args:
            request: The delivery request, including the only-log flag.

        Returns:
            The library's DeliveryResponse (response, client request id,
            execution server).

        Raises:
            DeliveryCallError: If the client library raises.
        """
        pass

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Waits for any background work (metrics logging, shadow traffic)."""
        pass
