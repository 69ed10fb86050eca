"""Abstract repository for Campaign aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from retail.domain.model.campaign import Campaign


class CampaignRepository(ABC):

    @abstractmethod
    def get_by_id(self, campaign_id: int) -> Campaign | None:
        """Return a non-deleted campaign by its ID, or None."""

    @abstractmethod
    def get_by_name(self, name: str) -> Campaign | None:
        """Return the non-deleted campaign with this exact name, or None."""

    @abstractmethod
    def list_active(self) -> list[Campaign]:
        """Return every non-deleted campaign."""

    @abstractmethod
    def find_active_by_product(self, product_id: int) -> list[Campaign]:
        """Return every non-deleted campaign whose product set holds the id."""

    @abstractmethod
    def save(self, campaign: Campaign) -> None:
        """Persist a new or updated campaign, assigning an ID if needed."""
