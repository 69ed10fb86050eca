"""Campaign aggregate: a named discount over an exclusive set of products.

The aggregate only knows about its own product set. Exclusivity across
campaigns is a rule over many aggregates and is enforced by the
CampaignStore domain service.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from retail.domain.exceptions import (
    CampaignHasNoProductsError,
    ProductNotInCampaignError,
    ValidationError,
)
from retail.domain.model.value_objects import Percentage


@dataclass
class Campaign:
    """Aggregate root for promotional campaigns.

    Campaigns are never removed; ``soft_delete()`` flags them and every
    query skips flagged campaigns from then on.
    """

    id: int | None
    name: str
    discount: Percentage
    description: str = ""
    product_ids: set[int] = field(default_factory=set)
    deleted: bool = False

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def create(name: str, discount: int, description: str = "") -> Campaign:
        return Campaign(
            id=None,
            name=_clean_name(name),
            discount=Percentage(discount),
            description=description or "",
        )

    # --- Mutations ------------------------------------------------------------

    def rename(self, name: str) -> None:
        self.name = _clean_name(name)

    def change_discount(self, discount: int) -> None:
        self.discount = Percentage(discount)

    def add_products(self, product_ids: set[int]) -> set[int]:
        """Union ``product_ids`` into the set and return the ids actually added."""
        added = product_ids - self.product_ids
        self.product_ids |= added
        return added

    def remove_products(self, product_ids: set[int]) -> None:
        """Remove every id in ``product_ids`` or none of them.

        The whole batch is checked against the current set before anything
        is removed.
        """
        if not self.product_ids:
            raise CampaignHasNoProductsError(
                f"No products to remove in campaign #{self.id}"
            )
        missing = product_ids - self.product_ids
        if missing:
            raise ProductNotInCampaignError(self.id, list(missing))
        self.product_ids -= product_ids

    def clear_products(self) -> set[int]:
        if not self.product_ids:
            raise CampaignHasNoProductsError(
                f"No products to remove in campaign #{self.id}"
            )
        removed = set(self.product_ids)
        self.product_ids.clear()
        return removed

    def soft_delete(self) -> None:
        if self.deleted:
            raise ValidationError(f"Campaign #{self.id} is already deleted")
        self.deleted = True

    def contains(self, product_id: int) -> bool:
        return product_id in self.product_ids


def _clean_name(name: str) -> str:
    if not name or not name.strip():
        raise ValidationError("Campaign name is required")
    return name.strip()
