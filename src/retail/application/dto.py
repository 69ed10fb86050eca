"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from retail.domain.model.campaign import Campaign
from retail.domain.model.sale import Sale, SoldLine


@dataclass(frozen=True)
class SoldLineDTO:
    """Output: a single sold line as displayed to the user."""

    id: int
    product_id: int
    name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    total: str
    discount: int
    discount_amount: str
    final_price: str
    deleted: bool


@dataclass(frozen=True)
class SaleDTO:
    """Output: a complete sale as displayed to the user."""

    id: int
    lines: list[SoldLineDTO]
    total_price: str
    total_discount_amount: str
    total_discounted_price: str
    created_at: str


@dataclass(frozen=True)
class CampaignDTO:
    id: int
    name: str
    discount: int
    description: str
    product_ids: list[int]


def to_sold_line_dto(line: SoldLine) -> SoldLineDTO:
    return SoldLineDTO(
        id=line.id,  # type: ignore[arg-type]
        product_id=line.product_id,
        name=line.name,
        quantity=line.quantity.value,
        unit_price=str(line.unit_price),
        total=str(line.total),
        discount=line.discount,
        discount_amount=str(line.discount_amount),
        final_price=str(line.final_price),
        deleted=line.deleted,
    )


def to_sale_dto(sale: Sale, include_deleted: bool = False) -> SaleDTO:
    lines = sale.lines if include_deleted else sale.active_lines
    return SaleDTO(
        id=sale.id,  # type: ignore[arg-type]
        lines=[to_sold_line_dto(line) for line in lines],
        total_price=str(sale.total_price),
        total_discount_amount=str(sale.total_discount_amount),
        total_discounted_price=str(sale.total_discounted_price),
        created_at=sale.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def to_campaign_dto(campaign: Campaign) -> CampaignDTO:
    return CampaignDTO(
        id=campaign.id,  # type: ignore[arg-type]
        name=campaign.name,
        discount=campaign.discount.value,
        description=campaign.description,
        product_ids=sorted(campaign.product_ids),
    )
