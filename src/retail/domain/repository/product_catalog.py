"""Abstract gateway to the external product catalog.

The catalog owns products and their inventory counters. Implementations
return ``None`` when a product does not exist and raise
``CatalogUnavailableError`` when the catalog cannot answer; the two must
never be confused, since a missing answer is not a missing product.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from retail.domain.model.product import Product


class ProductCatalog(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return an active product, or None."""

    @abstractmethod
    def get_by_id_including_inactive(self, product_id: int) -> Product | None:
        """Return a product whatever its active flag, or None."""

    @abstractmethod
    def set_inventory(self, product: Product, new_count: int) -> None:
        """Push ``new_count`` as the product's inventory."""

    @abstractmethod
    def create(self, draft: Product) -> Product:
        """Create a product and return it with its assigned ID."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Remove a product from the catalog."""

    @abstractmethod
    def get_by_ids(self, product_ids: list[int]) -> list[Product]:
        """Return the products found for the given IDs."""
