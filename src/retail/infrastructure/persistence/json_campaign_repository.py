"""JSON-file-backed implementation of CampaignRepository."""

from __future__ import annotations

import json
import threading
from pathlib import Path

from retail.domain.model.campaign import Campaign
from retail.domain.model.value_objects import Percentage
from retail.domain.repository.campaign_repository import CampaignRepository


class JsonCampaignRepository(CampaignRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._ensure_file()

    # --- CampaignRepository interface -----------------------------------------

    def get_by_id(self, campaign_id: int) -> Campaign | None:
        for campaign in self.list_active():
            if campaign.id == campaign_id:
                return campaign
        return None

    def get_by_name(self, name: str) -> Campaign | None:
        for campaign in self.list_active():
            if campaign.name == name:
                return campaign
        return None

    def list_active(self) -> list[Campaign]:
        return [
            self._to_domain(raw) for raw in self._load_raw() if not raw.get("deleted", False)
        ]

    def find_active_by_product(self, product_id: int) -> list[Campaign]:
        return [c for c in self.list_active() if c.contains(product_id)]

    def save(self, campaign: Campaign) -> None:
        with self._lock:
            records = self._load_raw()
            if campaign.id is None:
                campaign.id = max((r["id"] for r in records), default=0) + 1

            # Upsert: replace if exists, otherwise append
            replaced = False
            for i, raw in enumerate(records):
                if raw["id"] == campaign.id:
                    records[i] = self._to_raw(campaign)
                    replaced = True
                    break
            if not replaced:
                records.append(self._to_raw(campaign))
            self._persist_raw(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(campaign: Campaign) -> dict:
        return {
            "id": campaign.id,
            "name": campaign.name,
            "discount": campaign.discount.value,
            "description": campaign.description,
            "product_ids": sorted(campaign.product_ids),
            "deleted": campaign.deleted,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Campaign:
        return Campaign(
            id=raw["id"],
            name=raw["name"],
            discount=Percentage(raw["discount"]),
            description=raw.get("description", ""),
            product_ids=set(raw.get("product_ids", [])),
            deleted=raw.get("deleted", False),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        with self._lock:
            return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
