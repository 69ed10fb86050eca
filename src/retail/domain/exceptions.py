"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class CampaignNotFoundError(EntityNotFoundError):
    pass


class SaleNotFoundError(EntityNotFoundError):
    pass


class SoldLineNotFoundError(EntityNotFoundError):
    pass


class ProductNotFoundError(EntityNotFoundError):
    pass


class CampaignAlreadyExistsError(DomainException):
    """Another non-deleted campaign already uses the name."""


class ProductAlreadyInCampaignError(DomainException):
    """One or more products are claimed by another active campaign."""

    def __init__(self, product_ids: list[int]) -> None:
        self.product_ids = sorted(product_ids)
        super().__init__(
            f"Products already in another campaign: {self.product_ids}"
        )


class ProductNotInCampaignError(DomainException):
    """One or more products are not assigned to the campaign."""

    def __init__(self, campaign_id: int, product_ids: list[int]) -> None:
        self.campaign_id = campaign_id
        self.product_ids = sorted(product_ids)
        super().__init__(
            f"Products not found in campaign #{campaign_id}: {self.product_ids}"
        )


class CampaignHasNoProductsError(DomainException):
    """The campaign has no products to remove."""


class InsufficientStockError(DomainException):
    """A reservation asked for more units than the catalog holds."""

    def __init__(self, product_id: int, requested: int, available: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for product #{product_id} "
            f"(need {requested}, have {available} available)"
        )


class CatalogUnavailableError(DomainException):
    """The product catalog could not be reached or answered with an error."""


class PartialReconciliationError(DomainException):
    """An inventory delta was committed but could not be compensated.

    Raised when a local write fails after the catalog already applied a
    stock change and the inverse change failed too. ``delta`` is the amount
    still applied to the catalog that has no matching sale line state.
    """

    def __init__(self, product_id: int, delta: int, reason: str) -> None:
        self.product_id = product_id
        self.delta = delta
        super().__init__(
            f"Inventory for product #{product_id} left off by {delta:+d} "
            f"and needs manual reconciliation: {reason}"
        )
