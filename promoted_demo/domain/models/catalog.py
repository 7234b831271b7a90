"""Domain models for the local product catalog."""

from dataclasses import dataclass

from .common import ContentId


@dataclass(frozen=True)
class Product:
    """A product the backend would normally load from its own datastore."""
    id: ContentId
    name: str
    price: int

    def __str__(self) -> str:
        # Same rendering as printing a plain record: {id name price}
        return f"{{{self.id} {self.name} {self.price}}}"
