"""JSON-file-backed implementation of SaleRepository."""

from __future__ import annotations

import json
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from retail.domain.model.sale import Sale, SaleTotals, SoldLine
from retail.domain.model.value_objects import Money, Quantity
from retail.domain.repository.sale_repository import SaleRepository


class JsonSaleRepository(SaleRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- SaleRepository interface ---------------------------------------------

    def get_by_id(self, sale_id: int) -> Sale | None:
        for raw in self._load_raw():
            if raw["id"] == sale_id:
                return self._to_domain(raw)
        return None

    def get_by_line_id(self, line_id: int) -> Sale | None:
        for raw in self._load_raw():
            if any(line["id"] == line_id for line in raw["lines"]):
                return self._to_domain(raw)
        return None

    def save(self, sale: Sale) -> None:
        with self._lock:
            sales = self._load_raw()

            if sale.id is None:
                sale.id = max((s["id"] for s in sales), default=0) + 1
            next_line_id = max(
                (line["id"] for s in sales for line in s["lines"]), default=0
            ) + 1
            for line in sale.lines:
                if line.id is None:
                    line.id = next_line_id
                    next_line_id += 1

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(sales):
                if raw["id"] == sale.id:
                    sales[i] = self._to_raw(sale)
                    replaced = True
                    break
            if not replaced:
                sales.append(self._to_raw(sale))

            self._persist_raw(sales)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(sale: Sale) -> dict:
        return {
            "id": sale.id,
            "created_at": sale.created_at.isoformat(),
            "total_price": str(sale.total_price.amount),
            "total_discount_amount": str(sale.total_discount_amount.amount),
            "total_discounted_price": str(sale.total_discounted_price.amount),
            "lines": [
                {
                    "id": line.id,
                    "product_id": line.product_id,
                    "name": line.name,
                    "unit_price": str(line.unit_price.amount),
                    "quantity": line.quantity.value,
                    "discount": line.discount,
                    "discount_amount": str(line.discount_amount.amount),
                    "final_price": str(line.final_price.amount),
                    "deleted": line.deleted,
                }
                for line in sale.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Sale:
        lines = [
            SoldLine(
                id=i["id"],
                sale_id=raw["id"],
                product_id=i["product_id"],
                name=i["name"],
                unit_price=Money(Decimal(i["unit_price"])),
                quantity=Quantity(i["quantity"]),
                discount=i.get("discount", 0),
                discount_amount=Money(Decimal(i["discount_amount"])),
                final_price=Money(Decimal(i["final_price"])),
                deleted=i.get("deleted", False),
            )
            for i in raw["lines"]
        ]
        totals = SaleTotals(
            total_price=Money(Decimal(raw["total_price"])),
            total_discount_amount=Money(Decimal(raw["total_discount_amount"])),
            total_discounted_price=Money(Decimal(raw["total_discounted_price"])),
        )
        return Sale.reconstitute(
            id=raw["id"],
            lines=lines,
            totals=totals,
            created_at=datetime.fromisoformat(raw["created_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, sales: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(sales, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
