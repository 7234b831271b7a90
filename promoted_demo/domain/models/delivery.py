"""Domain models describing the outcome of a Delivery API call.

The client library returns its own response types; the core service
translates them into these so the UI never touches library classes.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .catalog import Product
from .common import ContentId, ClientRequestId


@dataclass
class RankedItem:
    """One entry of the re-ranked list, in the order Promoted returned it."""
    content_id: ContentId
    product: Optional[Product] = None # None when the id is not in the local catalog

    @property
    def in_catalog(self) -> bool:
        return self.product is not None

    def display_text(self) -> str:
        return str(self.product) if self.product is not None else self.content_id


@dataclass
class DeliveryOutcome:
    """Everything the UI needs to report a finished delivery call."""
    execution_server: str # "API" when Promoted ranked, "SDK" when ranked client-side
    client_request_id: Optional[ClientRequestId]
    items: List[RankedItem] = field(default_factory=list)
    request_id: Optional[str] = None
    latency_ms: Optional[float] = None

    @property
    def missing_content_ids(self) -> List[ContentId]:
        return [item.content_id for item in self.items if not item.in_catalog]
