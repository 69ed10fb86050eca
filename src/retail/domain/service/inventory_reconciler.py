"""Domain service: Inventory Reconciler.

Every stock change caused by a sold line goes through here. The catalog
owns the counter, so each change is a read of the current product followed
by a write of the new count. The read-check-write runs under a per-product
lock so two reservations can never both pass a check that only one of them
should pass.

The catalog write is not transactional with anything on the sale side. A
caller that fails after ``apply_delta`` returned must apply the inverse
delta itself.
"""

from __future__ import annotations

import structlog

from retail.domain.exceptions import InsufficientStockError, ProductNotFoundError
from retail.domain.model.product import Product
from retail.domain.repository.product_catalog import ProductCatalog
from retail.domain.service.locking import KeyedLocks
from retail.domain.service.ttl_registry import TTLRegistry

logger = structlog.get_logger(__name__)

# How long an applied idempotency key keeps a retry from applying again.
DEFAULT_KEY_TTL = 24 * 60 * 60


class InventoryReconciler:

    def __init__(self, catalog: ProductCatalog, key_ttl: float = DEFAULT_KEY_TTL) -> None:
        self._catalog = catalog
        self._locks = KeyedLocks("product")
        self._applied_keys = TTLRegistry(key_ttl)

    def apply_delta(
        self,
        product_id: int,
        delta: int,
        idempotency_key: str | None = None,
    ) -> int | None:
        """Add ``delta`` to the product's inventory and return the new count.

        A negative delta is a reservation and fails with
        InsufficientStockError when the catalog holds fewer units; nothing
        is written in that case. When ``idempotency_key`` was already
        applied within the last ``key_ttl`` seconds the call does nothing and
        returns None.
        """
        with self._locks.hold(product_id):
            if idempotency_key is not None and idempotency_key in self._applied_keys:
                logger.info(
                    "inventory_delta_skipped",
                    product_id=product_id,
                    delta=delta,
                    idempotency_key=idempotency_key,
                )
                return None

            product = self._load(product_id, reserving=delta < 0)
            new_count = product.inventory + delta
            if new_count < 0:
                logger.warning(
                    "insufficient_stock",
                    product_id=product_id,
                    requested=-delta,
                    available=product.inventory,
                )
                raise InsufficientStockError(product_id, -delta, product.inventory)

            if delta != 0:
                self._catalog.set_inventory(product, new_count)
                logger.info(
                    "inventory_updated",
                    product_id=product_id,
                    delta=delta,
                    inventory=new_count,
                )
            if idempotency_key is not None:
                self._applied_keys.set(idempotency_key)
            return new_count

    def reserve(self, product_id: int, quantity: int, idempotency_key: str | None = None) -> int | None:
        return self.apply_delta(product_id, -quantity, idempotency_key)

    def restore(self, product_id: int, quantity: int, idempotency_key: str | None = None) -> int | None:
        return self.apply_delta(product_id, quantity, idempotency_key)

    def forget(self, idempotency_key: str) -> None:
        """Drop a key whose delta was undone, so it may be applied again."""
        self._applied_keys.delete(idempotency_key)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, product_id: int, reserving: bool) -> Product:
        # Stock of a retired product can still be given back.
        if reserving:
            product = self._catalog.get_by_id(product_id)
        else:
            product = self._catalog.get_by_id_including_inactive(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product not found with id: {product_id}")
        return product

