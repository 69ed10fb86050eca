"""Application service: Create Sale use case."""

from __future__ import annotations

import structlog

from retail.application.dto import SaleDTO, to_sale_dto
from retail.domain.model.sale import Sale
from retail.domain.repository.sale_repository import SaleRepository

logger = structlog.get_logger(__name__)


class CreateSaleHandler:

    def __init__(self, sale_repo: SaleRepository) -> None:
        self._sale_repo = sale_repo

    def handle(self) -> SaleDTO:
        """Open an empty sale; lines are added through the ledger."""
        sale = Sale.create()
        self._sale_repo.save(sale)
        logger.info("sale_created", sale_id=sale.id)
        return to_sale_dto(sale)
