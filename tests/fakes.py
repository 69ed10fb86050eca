"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories and
the HTTP catalog but keep everything in a dict. No file I/O, no network.
Stored objects are copies, so an unsaved mutation never leaks into the
store, the same as with a real repository.
"""

from __future__ import annotations

import copy
import threading

from retail.domain.exceptions import CatalogUnavailableError, ProductNotFoundError
from retail.domain.model.campaign import Campaign
from retail.domain.model.product import Product
from retail.domain.model.sale import Sale
from retail.domain.model.value_objects import Money
from retail.domain.repository.campaign_repository import CampaignRepository
from retail.domain.repository.product_catalog import ProductCatalog
from retail.domain.repository.sale_repository import SaleRepository


class FakeCampaignRepository(CampaignRepository):

    def __init__(self, campaigns: list[Campaign] | None = None) -> None:
        self._store: dict[int, Campaign] = {}
        self._next_id = 1
        for c in campaigns or []:
            self.save(c)

    def get_by_id(self, campaign_id: int) -> Campaign | None:
        campaign = self._store.get(campaign_id)
        if campaign is None or campaign.deleted:
            return None
        return copy.deepcopy(campaign)

    def get_by_name(self, name: str) -> Campaign | None:
        for c in self.list_active():
            if c.name == name:
                return c
        return None

    def list_active(self) -> list[Campaign]:
        return [copy.deepcopy(c) for c in self._store.values() if not c.deleted]

    def find_active_by_product(self, product_id: int) -> list[Campaign]:
        return [c for c in self.list_active() if c.contains(product_id)]

    def save(self, campaign: Campaign) -> None:
        if campaign.id is None:
            campaign.id = self._next_id
        self._next_id = max(self._next_id, campaign.id + 1)
        self._store[campaign.id] = copy.deepcopy(campaign)


class FakeSaleRepository(SaleRepository):

    def __init__(self) -> None:
        self._store: dict[int, Sale] = {}
        self._next_id = 1
        self._next_line_id = 1
        self.save_calls = 0
        self.fail_saves = 0
        self._lock = threading.RLock()

    def get_by_id(self, sale_id: int) -> Sale | None:
        with self._lock:
            sale = self._store.get(sale_id)
        return copy.deepcopy(sale) if sale is not None else None

    def get_by_line_id(self, line_id: int) -> Sale | None:
        with self._lock:
            for sale in self._store.values():
                if sale.find_line(line_id) is not None:
                    return copy.deepcopy(sale)
        return None

    def save(self, sale: Sale) -> None:
        with self._lock:
            self.save_calls += 1
            if self.fail_saves > 0:
                self.fail_saves -= 1
                raise OSError("disk full")
            if sale.id is None:
                sale.id = self._next_id
                self._next_id += 1
            for line in sale.lines:
                if line.sale_id is None:
                    line.sale_id = sale.id
                if line.id is None:
                    line.id = self._next_line_id
                    self._next_line_id += 1
            self._store[sale.id] = copy.deepcopy(sale)


class FakeProductCatalog(ProductCatalog):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[int, Product] = {}
        for p in products or []:
            self._store[p.id] = copy.deepcopy(p)
        self.unavailable = False
        self.fail_writes = 0
        self.writes: list[tuple[int, int]] = []

    def inventory_of(self, product_id: int) -> int:
        return self._store[product_id].inventory

    def set_price(self, product_id: int, price: str) -> None:
        p = self._store[product_id]
        self._store[product_id] = Product(p.id, p.name, Money.of(price), p.inventory, p.active)

    def deactivate(self, product_id: int) -> None:
        p = self._store[product_id]
        self._store[product_id] = Product(p.id, p.name, p.price, p.inventory, active=False)

    def get_by_id(self, product_id: int) -> Product | None:
        self._check()
        product = self._store.get(product_id)
        if product is None or not product.active:
            return None
        return copy.deepcopy(product)

    def get_by_id_including_inactive(self, product_id: int) -> Product | None:
        self._check()
        product = self._store.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def set_inventory(self, product: Product, new_count: int) -> None:
        self._check()
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise CatalogUnavailableError("catalog write timed out")
        if product.id not in self._store:
            raise ProductNotFoundError(f"Product not found with id: {product.id}")
        self._store[product.id] = self._store[product.id].with_inventory(new_count)
        self.writes.append((product.id, new_count))

    def create(self, draft: Product) -> Product:
        self._check()
        new_id = max(self._store, default=0) + 1
        product = Product(new_id, draft.name, draft.price, draft.inventory, draft.active)
        self._store[new_id] = product
        return copy.deepcopy(product)

    def delete(self, product_id: int) -> None:
        self._check()
        if product_id not in self._store:
            raise ProductNotFoundError(f"Product not found with id: {product_id}")
        del self._store[product_id]

    def get_by_ids(self, product_ids: list[int]) -> list[Product]:
        self._check()
        return [copy.deepcopy(self._store[pid]) for pid in product_ids if pid in self._store]

    def _check(self) -> None:
        if self.unavailable:
            raise CatalogUnavailableError("catalog is down")


def make_product(
    product_id: int,
    name: str = "Widget",
    price: str = "100.00",
    inventory: int = 10,
    active: bool = True,
) -> Product:
    return Product(id=product_id, name=name, price=Money.of(price), inventory=inventory, active=active)
