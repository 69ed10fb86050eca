"""JSON-file-backed implementation of ProductCatalog.

Stands in for the catalog service when no catalog URL is configured, so
the command line can be used on a single machine.
"""

from __future__ import annotations

import json
import threading
from decimal import Decimal
from pathlib import Path

from retail.domain.exceptions import ProductNotFoundError
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money
from retail.domain.repository.product_catalog import ProductCatalog


class JsonProductCatalog(ProductCatalog):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- ProductCatalog interface ---------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        product = self._load().get(product_id)
        if product is None or not product.active:
            return None
        return product

    def get_by_id_including_inactive(self, product_id: int) -> Product | None:
        return self._load().get(product_id)

    def set_inventory(self, product: Product, new_count: int) -> None:
        with self._lock:
            products = self._load()
            stored = products.get(product.id)
            if stored is None:
                raise ProductNotFoundError(f"Product not found with id: {product.id}")
            products[product.id] = stored.with_inventory(new_count)
            self._persist(products)

    def create(self, draft: Product) -> Product:
        with self._lock:
            products = self._load()
            next_id = max(products, default=0) + 1
            product = Product(
                id=next_id,
                name=draft.name,
                price=draft.price,
                inventory=draft.inventory,
                active=draft.active,
            )
            products[next_id] = product
            self._persist(products)
            return product

    def delete(self, product_id: int) -> None:
        with self._lock:
            products = self._load()
            if product_id not in products:
                raise ProductNotFoundError(f"Product not found with id: {product_id}")
            del products[product_id]
            self._persist(products)

    def get_by_ids(self, product_ids: list[int]) -> list[Product]:
        products = self._load()
        return [products[pid] for pid in product_ids if pid in products]

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[int, Product]:
        with self._lock:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return {
            item["id"]: Product(
                id=item["id"],
                name=item["name"],
                price=Money(Decimal(item["price"])),
                inventory=item.get("inventory", 0),
                active=item.get("active", True),
            )
            for item in raw
        }

    def _persist(self, products: dict[int, Product]) -> None:
        raw = [
            {
                "id": p.id,
                "name": p.name,
                "price": str(p.price.amount),
                "inventory": p.inventory,
                "active": p.active,
            }
            for p in products.values()
        ]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
