"""Sale aggregate: the point-of-sale receipt.

The Sale is an aggregate root that owns its sold lines. Deleting a line
flags it instead of dropping it from the collection, so a sale keeps the
full history of what was rung up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from retail.domain.exceptions import ValidationError
from retail.domain.model.value_objects import Money, Quantity


@dataclass
class SoldLine:
    """One product's quantity and pricing record within a sale.

    ``unit_price`` is a receipt, not a live quote: it is captured from the
    catalog when the line is first created and never changes afterwards,
    even when the quantity is updated.
    """

    id: int | None
    sale_id: int
    product_id: int
    name: str
    unit_price: Money  # locked at line creation
    quantity: Quantity
    discount: int = 0
    discount_amount: Money = field(default_factory=Money.zero)
    final_price: Money = field(default_factory=Money.zero)
    deleted: bool = False

    def __setattr__(self, name: str, value) -> None:
        if name == "unit_price" and "unit_price" in self.__dict__:
            raise AttributeError("unit_price is locked at line creation")
        super().__setattr__(name, value)

    @property
    def total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def is_active(self) -> bool:
        return not self.deleted

    def reprice(self, quantity: Quantity, discount: int | None) -> None:
        """Set the quantity and recompute discount and final price.

        A missing or zero discount leaves the line at full price.
        """
        self.quantity = quantity
        total = self.total
        if discount is not None and discount > 0:
            self.discount = discount
            self.discount_amount = total.percent(discount)
            self.final_price = total - self.discount_amount
        else:
            self.discount = 0
            self.discount_amount = Money.zero()
            self.final_price = total

    def mark_deleted(self) -> None:
        if self.deleted:
            raise ValidationError(f"Sold line #{self.id} is already deleted")
        self.deleted = True


@dataclass(frozen=True)
class SaleTotals:
    total_price: Money
    total_discount_amount: Money
    total_discounted_price: Money

    @staticmethod
    def zero() -> SaleTotals:
        return SaleTotals(Money.zero(), Money.zero(), Money.zero())


@dataclass
class Sale:
    """Aggregate root for sales.

    The three totals are derived from the active lines and are read-only
    here. ``recompute_totals()`` is their only writer; between two calls
    they may lag behind the lines.
    """

    id: int | None
    lines: list[SoldLine] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _totals: SaleTotals = field(default_factory=SaleTotals.zero, init=False, repr=False)

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def create() -> Sale:
        return Sale(id=None)

    @staticmethod
    def reconstitute(
        id: int,
        lines: list[SoldLine],
        totals: SaleTotals,
        created_at: datetime,
    ) -> Sale:
        """Rebuild a persisted sale, keeping the totals exactly as stored."""
        sale = Sale(id=id, lines=lines, created_at=created_at)
        sale._totals = totals
        return sale

    # --- Lines ----------------------------------------------------------------

    @property
    def active_lines(self) -> list[SoldLine]:
        return [line for line in self.lines if line.is_active]

    def find_active_line(self, product_id: int) -> SoldLine | None:
        for line in self.lines:
            if line.product_id == product_id and line.is_active:
                return line
        return None

    def find_line(self, line_id: int) -> SoldLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def add_line(self, line: SoldLine) -> None:
        if line.sale_id != self.id:
            raise ValidationError(
                f"Line belongs to sale #{line.sale_id}, not #{self.id}"
            )
        if self.find_active_line(line.product_id) is not None:
            raise ValidationError(
                f"Sale #{self.id} already has an active line for product #{line.product_id}"
            )
        self.lines.append(line)

    # --- Totals ---------------------------------------------------------------

    @property
    def totals(self) -> SaleTotals:
        return self._totals

    @property
    def total_price(self) -> Money:
        return self._totals.total_price

    @property
    def total_discount_amount(self) -> Money:
        return self._totals.total_discount_amount

    @property
    def total_discounted_price(self) -> Money:
        return self._totals.total_discounted_price

    def recompute_totals(self) -> SaleTotals:
        total_price = Money.zero()
        discount_amount = Money.zero()
        discounted_price = Money.zero()
        for line in self.active_lines:
            total_price = total_price + line.total
            discount_amount = discount_amount + line.discount_amount
            discounted_price = discounted_price + line.final_price
        self._totals = SaleTotals(total_price, discount_amount, discounted_price)
        return self._totals
