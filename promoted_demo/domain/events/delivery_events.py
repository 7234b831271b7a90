"""Domain Events related to Delivery API calls.

Events are plain dataclasses; they are dispatched as debug log lines by the
gateway rather than through a bus.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class DeliveryCallInitiated(DomainEvent):
    """Event triggered when a Deliver call is about to be made."""
    endpoint: str
    insertion_count: int
    only_log: bool
    timestamp: float = field(default_factory=time.time)


@dataclass
class DeliveryCallSucceeded(DomainEvent):
    """Event triggered when a Deliver call returns a response."""
    endpoint: str
    execution_server: str
    latency_ms: float
    client_request_id: Optional[str] = None
    insertion_count: int = 0
    timestamp: float = field(default_factory=time.time)


@dataclass
class DeliveryCallFailed(DomainEvent):
    """Event triggered when the client library raises during Deliver."""
    endpoint: str
    error_type: str
    error_message: str
    timestamp: float = field(default_factory=time.time)
