"""Application service: Sale Line Ledger.

Records, changes and removes the sold lines of a sale while keeping three
things in step: the line itself, the sale's totals and the catalog's
inventory counter.

Every mutation holds the sale's lock for its whole duration; the stock
change additionally holds the product's lock inside the reconciler (lock
order is always sale, then product). The catalog write happens before the
sale is saved. If the save fails, the inverse stock change is applied; if
that fails too, PartialReconciliationError tells the operator exactly how
far the counter is off.

Callers may pass a ``request_id``. It is bound to the operation, sale,
target and quantity it was first used with. A request whose lines were
already saved is not applied a second time; the line is returned as it
stands and the totals are refreshed. Reusing the id for anything else is a
ValidationError.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from retail.domain.exceptions import (
    PartialReconciliationError,
    ProductNotFoundError,
    SaleNotFoundError,
    SoldLineNotFoundError,
    ValidationError,
)
from retail.domain.model.sale import Sale, SoldLine
from retail.domain.model.value_objects import Quantity
from retail.domain.repository.product_catalog import ProductCatalog
from retail.domain.repository.sale_repository import SaleRepository
from retail.domain.service.campaign_store import CampaignStore
from retail.domain.service.inventory_reconciler import InventoryReconciler
from retail.domain.service.locking import KeyedLocks
from retail.domain.service.sale_aggregator import SaleAggregator
from retail.domain.service.ttl_registry import TTLRegistry

logger = structlog.get_logger(__name__)

# How long a completed request_id is remembered for replay.
DEFAULT_REQUEST_TTL = 24 * 60 * 60


@dataclass(frozen=True)
class _Request:
    """What a request_id was issued for."""

    request_id: str
    operation: str
    sale_id: int
    target_id: int  # product for "add", line for "update" and "delete"
    quantity: int | None = None

    @property
    def step_key(self) -> str:
        # Scoped to the whole request so a reused id never matches a stock
        # change made for something else.
        return (
            f"{self.request_id}:{self.operation}:{self.sale_id}:"
            f"{self.target_id}:{self.quantity}"
        )


class SaleLineLedger:

    def __init__(
        self,
        sale_repo: SaleRepository,
        catalog: ProductCatalog,
        campaigns: CampaignStore,
        inventory: InventoryReconciler,
        aggregator: SaleAggregator,
        request_ttl: float = DEFAULT_REQUEST_TTL,
    ) -> None:
        self._sale_repo = sale_repo
        self._catalog = catalog
        self._campaigns = campaigns
        self._inventory = inventory
        self._aggregator = aggregator
        self._locks = KeyedLocks("sale")
        # request_id -> (_Request, line_id)
        self._completed = TTLRegistry(request_ttl)

    # --- Mutations ------------------------------------------------------------

    def add_or_merge_line(
        self,
        sale_id: int,
        product_id: int,
        quantity: int,
        request_id: str | None = None,
    ) -> SoldLine:
        """Ring up ``quantity`` units of a product on a sale.

        If the sale already has an active line for the product, the
        quantity is added to it and only the extra units are reserved. The
        line keeps the unit price it was created with.
        """
        requested = Quantity(quantity)
        request = _request(request_id, "add", sale_id, product_id, requested.value)
        log = logger.bind(sale_id=sale_id, product_id=product_id, quantity=requested.value)

        with self._locks.hold(sale_id):
            sale = self._load_sale(sale_id)
            replay = self._replayed(sale, request)
            if replay is not None:
                return replay

            product = self._catalog.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(f"Product not found with id: {product_id}")
            discount = self._campaigns.resolve_discount(product_id)

            step_key = _step_key(request)
            self._inventory.reserve(product_id, requested.value, step_key)

            line = sale.find_active_line(product_id)
            if line is not None:
                line.reprice(line.quantity + requested, discount)
                log.info("sold_line_merged", line_id=line.id, total_quantity=line.quantity.value)
            else:
                line = SoldLine(
                    id=None,
                    sale_id=sale.id,
                    product_id=product_id,
                    name=product.name,
                    unit_price=product.price,  # <-- price snapshot
                    quantity=requested,
                )
                line.reprice(requested, discount)
                sale.add_line(line)
                log.info("sold_line_created")

            self._save_lines(sale, product_id, -requested.value, step_key)
            self._complete(request, line)
            self._aggregator.recompute(sale)
            return line

    def update_line(
        self,
        line_id: int,
        new_quantity: int,
        request_id: str | None = None,
    ) -> SoldLine:
        """Set a line's quantity.

        The stock difference is applied as one signed change, so a shortage
        leaves both the line and the catalog untouched. The unit price is
        never refreshed from the catalog.
        """
        requested = Quantity(new_quantity)
        sale_id = self._owning_sale_id(line_id)
        request = _request(request_id, "update", sale_id, line_id, requested.value)

        with self._locks.hold(sale_id):
            sale = self._load_sale(sale_id)
            replay = self._replayed(sale, request)
            if replay is not None:
                return replay

            line = self._active_line(sale, line_id)
            delta = line.quantity.value - requested.value
            discount = self._campaigns.resolve_discount(line.product_id)

            step_key = _step_key(request)
            self._inventory.apply_delta(line.product_id, delta, step_key)
            line.reprice(requested, discount)
            logger.info(
                "sold_line_updated",
                sale_id=sale_id,
                line_id=line_id,
                quantity=requested.value,
                delta=delta,
            )

            self._save_lines(sale, line.product_id, delta, step_key)
            self._complete(request, line)
            self._aggregator.recompute(sale)
            return line

    def delete_line(self, line_id: int, request_id: str | None = None) -> SoldLine:
        """Flag a line deleted and give its units back to the catalog."""
        sale_id = self._owning_sale_id(line_id)
        request = _request(request_id, "delete", sale_id, line_id)

        with self._locks.hold(sale_id):
            sale = self._load_sale(sale_id)
            replay = self._replayed(sale, request)
            if replay is not None:
                return replay

            line = self._active_line(sale, line_id)
            restored = line.quantity.value

            step_key = _step_key(request)
            self._inventory.restore(line.product_id, restored, step_key)
            line.mark_deleted()
            logger.info("sold_line_deleted", sale_id=sale_id, line_id=line_id, restored=restored)

            self._save_lines(sale, line.product_id, restored, step_key)
            self._complete(request, line)
            self._aggregator.recompute(sale)
            return line

    # --- Queries --------------------------------------------------------------

    def lines_for_sale(self, sale_id: int, include_deleted: bool = False) -> list[SoldLine]:
        sale = self._load_sale(sale_id)
        if include_deleted:
            return list(sale.lines)
        return sale.active_lines

    # --- Internal helpers -----------------------------------------------------

    def _save_lines(self, sale: Sale, product_id: int, applied_delta: int, step_key: str | None) -> None:
        """Save the line state, undoing the stock change if that fails.

        Once the lines are stored they agree with the catalog. The totals
        refresh that follows is not compensated; a failure there just leaves
        the totals stale until the next recompute.
        """
        try:
            self._sale_repo.save(sale)
        except Exception as exc:
            self._compensate(product_id, applied_delta, exc, step_key)
            raise

    def _compensate(
        self,
        product_id: int,
        applied_delta: int,
        cause: Exception,
        step_key: str | None,
    ) -> None:
        if applied_delta == 0:
            return
        log = logger.bind(product_id=product_id, delta=applied_delta)
        log.warning("compensating_inventory", reason=str(cause))
        try:
            self._inventory.apply_delta(product_id, -applied_delta)
        except Exception as comp_exc:
            log.error("compensation_failed", reason=str(comp_exc))
            raise PartialReconciliationError(product_id, applied_delta, str(cause)) from comp_exc
        # The step was undone, a retry must be allowed to apply it again.
        if step_key is not None:
            self._inventory.forget(step_key)

    def _replayed(self, sale: Sale, request: _Request | None) -> SoldLine | None:
        if request is None:
            return None
        entry = self._completed.get(request.request_id)
        if entry is None:
            return None
        issued_for, line_id = entry
        if issued_for != request:
            logger.warning(
                "request_id_reused",
                request_id=request.request_id,
                issued_for=issued_for.operation,
                sale_id=request.sale_id,
            )
            raise ValidationError(
                f"Request id {request.request_id!r} was already used for "
                f"{issued_for.operation} on sale #{issued_for.sale_id}"
            )
        logger.info("request_replayed", sale_id=sale.id, request_id=request.request_id, line_id=line_id)
        # The first attempt may have stopped before its totals refresh.
        self._aggregator.recompute(sale)
        return sale.find_line(line_id)

    def _complete(self, request: _Request | None, line: SoldLine) -> None:
        if request is not None:
            self._completed.set(request.request_id, (request, line.id))

    def _load_sale(self, sale_id: int) -> Sale:
        sale = self._sale_repo.get_by_id(sale_id)
        if sale is None:
            raise SaleNotFoundError(f"Sale not found with id: {sale_id}")
        return sale

    def _owning_sale_id(self, line_id: int) -> int:
        sale = self._sale_repo.get_by_line_id(line_id)
        if sale is None:
            raise SoldLineNotFoundError(f"Sold line not found with id: {line_id}")
        return sale.id

    @staticmethod
    def _active_line(sale: Sale, line_id: int) -> SoldLine:
        line = sale.find_line(line_id)
        if line is None or line.deleted:
            raise SoldLineNotFoundError(f"Sold line not found with id: {line_id}")
        return line


def _request(
    request_id: str | None,
    operation: str,
    sale_id: int,
    target_id: int,
    quantity: int | None = None,
) -> _Request | None:
    if request_id is None:
        return None
    return _Request(request_id, operation, sale_id, target_id, quantity)


def _step_key(request: _Request | None) -> str | None:
    return request.step_key if request is not None else None
