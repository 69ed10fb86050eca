"""Abstract repository for Sale aggregate (sold lines included)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from retail.domain.model.sale import Sale


class SaleRepository(ABC):

    @abstractmethod
    def get_by_id(self, sale_id: int) -> Sale | None:
        """Return a sale by its ID, or None if not found."""

    @abstractmethod
    def get_by_line_id(self, line_id: int) -> Sale | None:
        """Return the sale owning the sold line, or None."""

    @abstractmethod
    def save(self, sale: Sale) -> None:
        """Persist a sale and its lines, assigning IDs to new ones.

        Line IDs are unique across all sales.
        """
