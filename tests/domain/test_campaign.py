"""Unit tests for the Campaign aggregate."""

import pytest

from retail.domain.exceptions import (
    CampaignHasNoProductsError,
    ProductNotInCampaignError,
    ValidationError,
)
from retail.domain.model.campaign import Campaign


def _campaign(*product_ids: int) -> Campaign:
    campaign = Campaign.create("Spring", 10)
    campaign.id = 1
    campaign.product_ids = set(product_ids)
    return campaign


class TestCampaignCreation:

    def test_create_strips_name(self):
        campaign = Campaign.create("  Spring  ", 10)
        assert campaign.name == "Spring"
        assert campaign.discount.value == 10
        assert campaign.product_ids == set()
        assert campaign.deleted is False

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            Campaign.create("   ", 10)

    def test_discount_over_hundred_rejected(self):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Campaign.create("Spring", 150)


class TestCampaignProducts:

    def test_add_is_idempotent_union(self):
        campaign = _campaign(1, 2)
        added = campaign.add_products({2, 3})
        assert added == {3}
        assert campaign.product_ids == {1, 2, 3}

    def test_remove_products(self):
        campaign = _campaign(1, 2, 3)
        campaign.remove_products({1, 3})
        assert campaign.product_ids == {2}

    def test_remove_is_all_or_nothing(self):
        campaign = _campaign(1, 2)
        with pytest.raises(ProductNotInCampaignError) as exc_info:
            campaign.remove_products({1, 9})
        assert exc_info.value.product_ids == [9]
        assert campaign.product_ids == {1, 2}

    def test_remove_from_empty_campaign_rejected(self):
        with pytest.raises(CampaignHasNoProductsError):
            _campaign().remove_products({1})

    def test_clear_returns_removed_ids(self):
        campaign = _campaign(4, 5)
        assert campaign.clear_products() == {4, 5}
        assert campaign.product_ids == set()

    def test_clear_empty_campaign_rejected(self):
        with pytest.raises(CampaignHasNoProductsError):
            _campaign().clear_products()


class TestCampaignSoftDelete:

    def test_soft_delete_flags(self):
        campaign = _campaign(1)
        campaign.soft_delete()
        assert campaign.deleted is True

    def test_delete_twice_rejected(self):
        campaign = _campaign()
        campaign.soft_delete()
        with pytest.raises(ValidationError, match="already deleted"):
            campaign.soft_delete()
