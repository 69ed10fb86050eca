"""Tests for the JSON-file repositories and the offline catalog."""

import json
from decimal import Decimal

import pytest

from retail.domain.exceptions import ProductNotFoundError
from retail.domain.model.campaign import Campaign
from retail.domain.model.sale import Sale, SoldLine
from retail.domain.model.value_objects import Money, Quantity
from retail.infrastructure.catalog.json_product_catalog import JsonProductCatalog
from retail.infrastructure.persistence.json_campaign_repository import JsonCampaignRepository
from retail.infrastructure.persistence.json_sale_repository import JsonSaleRepository
from tests.fakes import make_product


class TestJsonCampaignRepository:

    def test_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "campaigns.json"
        JsonCampaignRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "campaigns.json"
        repo = JsonCampaignRepository(path)
        campaign = Campaign.create("Spring", 15, "Garden stuff")
        campaign.add_products({3, 1})
        repo.save(campaign)

        loaded = JsonCampaignRepository(path).get_by_id(campaign.id)

        assert loaded.name == "Spring"
        assert loaded.discount.value == 15
        assert loaded.description == "Garden stuff"
        assert loaded.product_ids == {1, 3}

    def test_deleted_campaigns_are_hidden(self, tmp_path):
        repo = JsonCampaignRepository(tmp_path / "campaigns.json")
        campaign = Campaign.create("Old", 5)
        campaign.add_products({9})
        repo.save(campaign)
        campaign.soft_delete()
        repo.save(campaign)

        assert repo.get_by_id(campaign.id) is None
        assert repo.get_by_name("Old") is None
        assert repo.find_active_by_product(9) == []

    def test_deleted_campaign_keeps_its_id(self, tmp_path):
        repo = JsonCampaignRepository(tmp_path / "campaigns.json")
        first = Campaign.create("A", 5)
        repo.save(first)
        first.soft_delete()
        repo.save(first)

        second = Campaign.create("B", 5)
        repo.save(second)

        assert second.id == first.id + 1


class TestJsonSaleRepository:

    def _sale_with_line(self, repo: JsonSaleRepository) -> Sale:
        sale = Sale.create()
        repo.save(sale)
        line = SoldLine(
            id=None,
            sale_id=sale.id,
            product_id=4,
            name="Kettle",
            unit_price=Money.of("30.00"),
            quantity=Quantity(2),
        )
        line.reprice(Quantity(2), 25)
        sale.add_line(line)
        sale.recompute_totals()
        repo.save(sale)
        return sale

    def test_round_trip_keeps_lines_and_totals(self, tmp_path):
        path = tmp_path / "sales.json"
        sale = self._sale_with_line(JsonSaleRepository(path))

        loaded = JsonSaleRepository(path).get_by_id(sale.id)

        line = loaded.lines[0]
        assert line.id == 1
        assert line.unit_price == Money(Decimal("30.00"))
        assert line.discount == 25
        assert line.discount_amount == Money(Decimal("15.00"))
        assert line.final_price == Money(Decimal("45.00"))
        assert loaded.total_price == Money(Decimal("60.00"))
        assert loaded.total_discounted_price == Money(Decimal("45.00"))
        assert loaded.created_at == sale.created_at

    def test_stored_totals_are_not_recomputed_on_load(self, tmp_path):
        path = tmp_path / "sales.json"
        repo = JsonSaleRepository(path)
        sale = self._sale_with_line(repo)
        sale.lines[0].mark_deleted()
        repo.save(sale)  # totals left as they were

        loaded = repo.get_by_id(sale.id)

        assert loaded.total_price == Money(Decimal("60.00"))
        assert loaded.recompute_totals().total_price == Money.zero()

    def test_line_ids_unique_across_sales(self, tmp_path):
        repo = JsonSaleRepository(tmp_path / "sales.json")
        a = self._sale_with_line(repo)
        b = self._sale_with_line(repo)

        assert a.lines[0].id != b.lines[0].id
        assert repo.get_by_line_id(b.lines[0].id).id == b.id

    def test_unknown_ids(self, tmp_path):
        repo = JsonSaleRepository(tmp_path / "sales.json")
        assert repo.get_by_id(1) is None
        assert repo.get_by_line_id(1) is None


class TestJsonProductCatalog:

    def test_create_and_lookup(self, tmp_path):
        catalog = JsonProductCatalog(tmp_path / "products.json")

        created = catalog.create(make_product(None, name="Mug", price="8.50", inventory=3))

        assert created.id == 1
        assert catalog.get_by_id(1).price == Money(Decimal("8.50"))
        assert catalog.get_by_ids([1, 2]) == [created]

    def test_set_inventory(self, tmp_path):
        catalog = JsonProductCatalog(tmp_path / "products.json")
        product = catalog.create(make_product(None, inventory=3))

        catalog.set_inventory(product, 1)

        assert catalog.get_by_id(product.id).inventory == 1

    def test_inactive_only_visible_including_inactive(self, tmp_path):
        catalog = JsonProductCatalog(tmp_path / "products.json")
        product = catalog.create(make_product(None, active=False))

        assert catalog.get_by_id(product.id) is None
        assert catalog.get_by_id_including_inactive(product.id) is not None

    def test_delete(self, tmp_path):
        catalog = JsonProductCatalog(tmp_path / "products.json")
        product = catalog.create(make_product(None))

        catalog.delete(product.id)

        assert catalog.get_by_id(product.id) is None
        with pytest.raises(ProductNotFoundError):
            catalog.delete(product.id)
        with pytest.raises(ProductNotFoundError):
            catalog.set_inventory(product, 1)
