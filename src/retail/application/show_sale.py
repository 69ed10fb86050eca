"""Application service: Show Sale use case (query)."""

from __future__ import annotations

from retail.application.dto import SaleDTO, to_sale_dto
from retail.domain.exceptions import SaleNotFoundError
from retail.domain.repository.sale_repository import SaleRepository


class ShowSaleHandler:

    def __init__(self, sale_repo: SaleRepository) -> None:
        self._sale_repo = sale_repo

    def handle(self, sale_id: int, include_deleted: bool = False) -> SaleDTO:
        sale = self._sale_repo.get_by_id(sale_id)
        if sale is None:
            raise SaleNotFoundError(f"Sale not found with id: {sale_id}")
        return to_sale_dto(sale, include_deleted=include_deleted)
