"""Product as seen from the point of sale.

Products are owned by the catalog service. This side only reads them and
pushes inventory changes back; there is no local copy of the truth.
"""

from __future__ import annotations

from dataclasses import dataclass

from retail.domain.model.value_objects import Money


@dataclass
class Product:
    """A catalog product.

    ``inventory`` is the stock counter held by the catalog. It is shared by
    every point-of-sale worker, so it is only ever changed through
    ``ProductCatalog.set_inventory``.
    """

    id: int | None
    name: str
    price: Money
    inventory: int = 0
    active: bool = True

    def with_inventory(self, count: int) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            price=self.price,
            inventory=count,
            active=self.active,
        )
