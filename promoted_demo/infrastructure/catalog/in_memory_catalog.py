"""In-memory implementation of the ProductCatalog interface.

Stands in for the backend's real product store; the default contents are
the two sample products the example ranks.
"""

import logging
from typing import Dict, Iterable, List, Optional

from promoted_demo.domain.interfaces.catalog import ProductCatalog
from promoted_demo.domain.models.catalog import Product
from promoted_demo.domain.models.common import ContentId

logger = logging.getLogger(__name__)


def default_products() -> List[Product]:
    return [
        Product(id=ContentId("1"), name="Product 1", price=100),
        Product(id=ContentId("2"), name="Product 2", price=200),
    ]


class InMemoryCatalog(ProductCatalog):
    """Keeps products in insertion order plus a content id lookup map."""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: List[Product] = list(products) if products is not None else default_products()
        self._by_id: Dict[ContentId, Product] = {}
        for product in self._products:
            if product.id in self._by_id:
                logger.warning(f"Duplicate content id '{product.id}' in catalog; keeping the last entry.")
            self._by_id[product.id] = product
        logger.debug(f"InMemoryCatalog initialized with {len(self._products)} products.")

    def list_products(self) -> List[Product]:
        return list(self._products)

    def get(self, content_id: ContentId) -> Optional[Product]:
        return self._by_id.get(content_id)
