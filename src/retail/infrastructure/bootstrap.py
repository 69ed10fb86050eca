"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. Services are built once
per process so their per-key locks are shared by every caller.
"""

from __future__ import annotations

from functools import lru_cache

from retail.application.sale_line_ledger import SaleLineLedger
from retail.domain.repository.product_catalog import ProductCatalog
from retail.domain.service.campaign_store import CampaignStore
from retail.domain.service.inventory_reconciler import InventoryReconciler
from retail.domain.service.sale_aggregator import SaleAggregator
from retail.infrastructure.catalog.http_product_catalog import HttpProductCatalog
from retail.infrastructure.catalog.json_product_catalog import JsonProductCatalog
from retail.infrastructure.persistence.json_campaign_repository import (
    JsonCampaignRepository,
)
from retail.infrastructure.persistence.json_sale_repository import (
    JsonSaleRepository,
)
from retail.infrastructure.settings import RetailSettings


@lru_cache(maxsize=1)
def settings() -> RetailSettings:
    return RetailSettings()


@lru_cache(maxsize=1)
def campaign_repository() -> JsonCampaignRepository:
    return JsonCampaignRepository(settings().data_dir / "campaigns.json")


@lru_cache(maxsize=1)
def sale_repository() -> JsonSaleRepository:
    return JsonSaleRepository(settings().data_dir / "sales.json")


@lru_cache(maxsize=1)
def product_catalog() -> ProductCatalog:
    cfg = settings()
    if cfg.catalog_url:
        return HttpProductCatalog(cfg.catalog_url, timeout=cfg.catalog_timeout)
    return JsonProductCatalog(cfg.data_dir / "products.json")


@lru_cache(maxsize=1)
def campaign_store() -> CampaignStore:
    return CampaignStore(campaign_repository())


@lru_cache(maxsize=1)
def inventory_reconciler() -> InventoryReconciler:
    return InventoryReconciler(product_catalog(), key_ttl=settings().request_ttl_seconds)


@lru_cache(maxsize=1)
def sale_line_ledger() -> SaleLineLedger:
    return SaleLineLedger(
        sale_repo=sale_repository(),
        catalog=product_catalog(),
        campaigns=campaign_store(),
        inventory=inventory_reconciler(),
        aggregator=SaleAggregator(sale_repository()),
        request_ttl=settings().request_ttl_seconds,
    )
