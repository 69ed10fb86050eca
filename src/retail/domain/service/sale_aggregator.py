"""Domain service: Sale Aggregator.

Recomputes a sale's totals from its active lines and persists them in one
write. Safe to call any number of times; nothing else writes the totals.
"""

from __future__ import annotations

import structlog

from retail.domain.model.sale import Sale
from retail.domain.repository.sale_repository import SaleRepository

logger = structlog.get_logger(__name__)


class SaleAggregator:

    def __init__(self, sale_repo: SaleRepository) -> None:
        self._sale_repo = sale_repo

    def recompute(self, sale: Sale) -> Sale:
        totals = sale.recompute_totals()
        self._sale_repo.save(sale)
        logger.info(
            "sale_totals_recomputed",
            sale_id=sale.id,
            total_price=str(totals.total_price.amount),
            total_discount_amount=str(totals.total_discount_amount.amount),
            total_discounted_price=str(totals.total_discounted_price.amount),
        )
        return sale
