"""Interface for the source of products to be ranked."""

import abc
from typing import List, Optional

from ..models.catalog import Product
from ..models.common import ContentId


class ProductCatalog(abc.ABC):
    """Abstract Base Class for looking up products by content id."""

    @abc.abstractmethod
    def list_products(self) -> List[Product]:
        """Returns the products to send for ranking, in retrieval order."""
        pass

    @abc.abstractmethod
    def get(self, content_id: ContentId) -> Optional[Product]:
        """Returns the product with the given content id, or None if unknown."""
        pass
