"""Application service for ranking catalog products through Promoted.

Builds the delivery request from the local catalog, calls the delivery
gateway, and re-orders the catalog products to match the ranked response.
"""

import logging
import time
from typing import Iterable, List, Optional

from promoted_python_delivery_client.client.delivery_request import DeliveryRequest
from promoted_python_delivery_client.client.delivery_response import DeliveryResponse
from promoted_python_delivery_client.model.insertion import Insertion
from promoted_python_delivery_client.model.paging import Paging
from promoted_python_delivery_client.model.properties import Properties
from promoted_python_delivery_client.model.request import Request
from promoted_python_delivery_client.model.use_case import UseCase
from promoted_python_delivery_client.model.user_info import UserInfo

from promoted_demo.domain.interfaces.catalog import ProductCatalog
from promoted_demo.domain.interfaces.delivery_gateway import DeliveryGateway
from promoted_demo.domain.models.catalog import Product
from promoted_demo.domain.models.common import ClientRequestId, ContentId
from promoted_demo.domain.models.delivery import DeliveryOutcome, RankedItem

logger = logging.getLogger(__name__)

# Sample request data sent with every call.
TEST_ANON_USER_ID = "testAnonUserId1"
TEST_USER_ID = "testUserId1"
DEFAULT_SEARCH_QUERY = "query"
DEFAULT_PAGE_SIZE = 3
DEFAULT_REQUEST_PROPERTIES = {
    "category": "topic",
    "priceMin": 10.0,
}


def build_insertions(products: Iterable[Product]) -> List[Insertion]:
    """Creates one insertion per product, preserving catalog order."""
    return [Insertion(content_id=product.id) for product in products]


def new_test_request(
    insertions: List[Insertion],
    only_log: bool,
    search_query: Optional[str] = None,
    page_size: Optional[int] = None,
) -> DeliveryRequest:
    """Builds the sample search request wrapping the given insertions.

    Args:
        insertions: Insertions to rank, in retrieval order.
        only_log: If True the client ranks locally and only logs to Metrics.
        search_query: Overrides the sample search query.
        page_size: Overrides the sample page size.
    """
    request = Request(
        user_info=UserInfo(anon_user_id=TEST_ANON_USER_ID, user_id=TEST_USER_ID),
        use_case=UseCase.SEARCH,
        search_query=search_query if search_query is not None else DEFAULT_SEARCH_QUERY,
        paging=Paging(offset=0, size=page_size if page_size is not None else DEFAULT_PAGE_SIZE),
        disable_personalization=False,
        properties=Properties(struct=dict(DEFAULT_REQUEST_PROPERTIES)),
        insertion=insertions,
    )
    return DeliveryRequest(request=request, only_log=only_log)


def rerank(response: DeliveryResponse, catalog: ProductCatalog) -> DeliveryOutcome:
    """Maps the response insertions back onto catalog products.

    Order follows the response. Ids missing from the catalog are kept with no
    product attached; the Delivery API can return cached items.
    """
    items = []
    for insertion in response.response.insertion or []:
        content_id = ContentId(insertion.content_id)
        product = catalog.get(content_id)
        if product is None:
            logger.info(f"Content id '{content_id}' not found in local catalog.")
        items.append(RankedItem(content_id=content_id, product=product))
    client_request_id = response.client_request_id
    return DeliveryOutcome(
        execution_server=response.execution_server.name,
        client_request_id=ClientRequestId(client_request_id) if client_request_id is not None else None,
        items=items,
        request_id=response.response.request_id,
    )


class DeliveryService:
    """Ranks the catalog's products through a DeliveryGateway."""

    def __init__(self, catalog: ProductCatalog, gateway: DeliveryGateway):
        self.catalog = catalog
        self.gateway = gateway

    async def rank_products(
        self,
        only_log: bool,
        search_query: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> DeliveryOutcome:
        """Sends the catalog's products for ranking and returns them re-ordered.

        Raises:
            ValueError: If page_size is not positive.
            DeliveryCallError: If the gateway call fails.
        """
        if page_size is not None and page_size <= 0:
            raise ValueError("page size must be positive")

        products = self.catalog.list_products()
        insertions = build_insertions(products)
        request = new_test_request(insertions, only_log, search_query=search_query, page_size=page_size)
        logger.info(f"Requesting ranking for {len(insertions)} insertions (only_log={only_log}).")

        start_time = time.perf_counter()
        response = await self.gateway.deliver(request)
        outcome = rerank(response, self.catalog)
        outcome.latency_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"Delivery finished on {outcome.execution_server} with {len(outcome.items)} items "
            f"({len(outcome.missing_content_ids)} not in catalog)."
        )
        return outcome
