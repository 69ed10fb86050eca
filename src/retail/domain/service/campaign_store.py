"""Domain service: Campaign Store.

Owns the rule that spans many Campaign aggregates: a product may belong to
at most one non-deleted campaign at a time. The rule is enforced through an
authoritative ``product_id -> campaign_id`` index that is only changed
inside the same critical section as the campaign's product set, so a
conflict check never has to scan every campaign.

Batch operations validate the whole request before mutating anything.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

import structlog

from retail.domain.exceptions import (
    CampaignAlreadyExistsError,
    CampaignNotFoundError,
    DomainException,
    ProductAlreadyInCampaignError,
    ValidationError,
)
from retail.domain.model.campaign import Campaign
from retail.domain.repository.campaign_repository import CampaignRepository
from retail.domain.service.locking import KeyedLocks

logger = structlog.get_logger(__name__)


class CampaignStore:

    def __init__(self, campaign_repo: CampaignRepository) -> None:
        self._campaign_repo = campaign_repo
        self._locks = KeyedLocks("campaign")
        # Guards the product index and name uniqueness across campaigns.
        self._index_lock = threading.RLock()
        self._owner_by_product: dict[int, int] = {}
        self._rebuild_index()

    # --- Discount resolution --------------------------------------------------

    def resolve_discount(self, product_id: int) -> int | None:
        """Return the highest discount among campaigns holding the product."""
        campaigns = self._campaign_repo.find_active_by_product(product_id)
        if not campaigns:
            logger.debug("no_campaign_for_product", product_id=product_id)
            return None
        discount = max(c.discount.value for c in campaigns)
        logger.debug("discount_resolved", product_id=product_id, discount=discount)
        return discount

    def campaign_name_for(self, product_id: int) -> str | None:
        campaigns = self._campaign_repo.find_active_by_product(product_id)
        if not campaigns:
            return None
        return campaigns[0].name

    # --- Lifecycle ------------------------------------------------------------

    def create(self, name: str, discount: int, description: str = "") -> Campaign:
        campaign = Campaign.create(name, discount, description)
        with self._index_lock:
            self._ensure_name_free(campaign.name)
            self._campaign_repo.save(campaign)
        logger.info("campaign_created", campaign_id=campaign.id, name=campaign.name)
        return campaign

    def rename(self, campaign_id: int, name: str) -> Campaign:
        return self.update(campaign_id, name=name)

    def update(
        self,
        campaign_id: int,
        name: str | None = None,
        discount: int | None = None,
        description: str | None = None,
    ) -> Campaign:
        """Change name, discount or description; the product set is kept."""
        with self._locks.hold(campaign_id), self._index_lock:
            campaign = self.get(campaign_id)
            if name is not None:
                self._ensure_name_free(name.strip(), exclude_id=campaign_id)
                campaign.rename(name)
            if discount is not None:
                campaign.change_discount(discount)
            if description is not None:
                campaign.description = description
            self._campaign_repo.save(campaign)
        logger.info("campaign_updated", campaign_id=campaign_id)
        return campaign

    def soft_delete(self, campaign_id: int) -> Campaign:
        with self._locks.hold(campaign_id), self._index_lock:
            campaign = self.get(campaign_id)
            campaign.soft_delete()
            self._campaign_repo.save(campaign)
            self._release_index(campaign_id, campaign.product_ids)
        logger.info("campaign_deleted", campaign_id=campaign_id)
        return campaign

    # --- Product assignment ---------------------------------------------------

    def assign_products(self, campaign_id: int, product_ids: Iterable[int]) -> Campaign:
        """Add products to a campaign.

        Fails without any change if a single id is held by another
        non-deleted campaign; ids already in this campaign are skipped.
        """
        requested = _as_id_set(product_ids)
        with self._locks.hold(campaign_id), self._index_lock:
            campaign = self.get(campaign_id)
            conflicting = [
                pid for pid in requested
                if self._owner_by_product.get(pid, campaign_id) != campaign_id
            ]
            if conflicting:
                logger.warning(
                    "products_already_in_campaign",
                    campaign_id=campaign_id,
                    product_ids=sorted(conflicting),
                )
                raise ProductAlreadyInCampaignError(conflicting)

            added = campaign.add_products(requested)
            self._campaign_repo.save(campaign)
            for pid in added:
                self._owner_by_product[pid] = campaign_id
        logger.info("products_assigned", campaign_id=campaign_id, product_ids=sorted(added))
        return campaign

    def unassign_products(self, campaign_id: int, product_ids: Iterable[int]) -> Campaign:
        """Remove products from a campaign, all of them or none."""
        requested = _as_id_set(product_ids)
        with self._locks.hold(campaign_id), self._index_lock:
            campaign = self.get(campaign_id)
            try:
                campaign.remove_products(requested)
            except DomainException as exc:
                logger.warning("unassign_rejected", campaign_id=campaign_id, reason=str(exc))
                raise
            self._campaign_repo.save(campaign)
            self._release_index(campaign_id, requested)
        logger.info("products_unassigned", campaign_id=campaign_id, product_ids=sorted(requested))
        return campaign

    def unassign_all(self, campaign_id: int) -> Campaign:
        with self._locks.hold(campaign_id), self._index_lock:
            campaign = self.get(campaign_id)
            removed = campaign.clear_products()
            self._campaign_repo.save(campaign)
            self._release_index(campaign_id, removed)
        logger.info("all_products_unassigned", campaign_id=campaign_id, count=len(removed))
        return campaign

    # --- Queries --------------------------------------------------------------

    def get(self, campaign_id: int) -> Campaign:
        campaign = self._campaign_repo.get_by_id(campaign_id)
        if campaign is None or campaign.deleted:
            raise CampaignNotFoundError(f"Campaign not found with id: {campaign_id}")
        return campaign

    def list_active(self) -> list[Campaign]:
        return self._campaign_repo.list_active()

    def owner_of(self, product_id: int) -> int | None:
        """Return the ID of the campaign holding the product, per the index."""
        with self._index_lock:
            return self._owner_by_product.get(product_id)

    # --- Internal helpers -----------------------------------------------------

    def _ensure_name_free(self, name: str, exclude_id: int | None = None) -> None:
        existing = self._campaign_repo.get_by_name(name)
        if existing is not None and existing.id != exclude_id:
            logger.warning("campaign_name_taken", name=name)
            raise CampaignAlreadyExistsError(
                f"Campaign with this name already exists! {name}"
            )

    def _release_index(self, campaign_id: int, product_ids: Iterable[int]) -> None:
        for pid in product_ids:
            if self._owner_by_product.get(pid) == campaign_id:
                del self._owner_by_product[pid]

    def _rebuild_index(self) -> None:
        index: dict[int, int] = {}
        for campaign in self._campaign_repo.list_active():
            for pid in campaign.product_ids:
                owner = index.setdefault(pid, campaign.id)
                if owner != campaign.id:
                    logger.warning(
                        "campaign_exclusivity_violated",
                        product_id=pid,
                        campaign_ids=[owner, campaign.id],
                    )
        with self._index_lock:
            self._owner_by_product = index


def _as_id_set(product_ids: Iterable[int]) -> set[int]:
    ids = set(product_ids)
    if not ids:
        raise ValidationError("At least one product id is required")
    for pid in ids:
        if isinstance(pid, bool) or not isinstance(pid, int):
            raise ValidationError(f"Product id must be an integer, got {pid!r}")
    return ids
