"""HTTP client for the catalog service.

Talks to the catalog's REST endpoints with a shared ``requests.Session``
and short timeouts. A 404 on a lookup means the product does not exist and
is reported as None. Anything else that goes wrong on the wire (connection
errors, timeouts, 5xx, unreadable bodies) is a CatalogUnavailableError so
that callers never mistake an outage for a missing product.
"""

from __future__ import annotations

from typing import Any

import requests
import structlog

from retail.domain.exceptions import (
    CatalogUnavailableError,
    ProductNotFoundError,
    ValidationError,
)
from retail.domain.model.product import Product
from retail.domain.model.value_objects import Money
from retail.domain.repository.product_catalog import ProductCatalog

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 5


class HttpProductCatalog(ProductCatalog):

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    # --- ProductCatalog interface ---------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        return self._get_product(f"/product/{product_id}")

    def get_by_id_including_inactive(self, product_id: int) -> Product | None:
        return self._get_product(f"/product/getByIdIncludeInactive/{product_id}")

    def set_inventory(self, product: Product, new_count: int) -> None:
        body = _to_raw(product.with_inventory(new_count))
        path = f"/product/updateInventory/{product.id}"
        resp = self._request("PUT", path, json=body)
        if resp.status_code == 404:
            raise ProductNotFoundError(f"Product not found with id: {product.id}")
        self._raise_for_status(resp, path)

    def create(self, draft: Product) -> Product:
        path = "/product/add"
        resp = self._request("POST", path, json=_to_raw(draft))
        self._raise_for_status(resp, path)
        return _to_domain(self._json(resp, path))

    def delete(self, product_id: int) -> None:
        path = f"/product/delete/{product_id}"
        resp = self._request("DELETE", path)
        if resp.status_code == 404:
            raise ProductNotFoundError(f"Product not found with id: {product_id}")
        self._raise_for_status(resp, path)

    def get_by_ids(self, product_ids: list[int]) -> list[Product]:
        path = "/product/getByIds"
        resp = self._request("POST", path, json=list(product_ids))
        self._raise_for_status(resp, path)
        data = self._json(resp, path) or []
        return [_to_domain(item) for item in data]

    # --- HTTP helpers ---------------------------------------------------------

    def _url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        try:
            return self._session.request(
                method, self._url(path), timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            logger.error("catalog_request_failed", method=method, path=path, error=str(exc))
            raise CatalogUnavailableError(
                f"Catalog request {method} {path} failed: {exc}"
            ) from exc

    def _get_product(self, path: str) -> Product | None:
        resp = self._request("GET", path)
        if resp.status_code == 404:
            logger.info("catalog_product_missing", path=path)
            return None
        self._raise_for_status(resp, path)
        data = self._json(resp, path)
        if not data:
            return None
        return _to_domain(data)

    @staticmethod
    def _raise_for_status(resp: requests.Response, path: str) -> None:
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.error("catalog_error_status", path=path, status=resp.status_code)
            raise CatalogUnavailableError(
                f"Catalog answered {resp.status_code} for {path}"
            ) from exc

    @staticmethod
    def _json(resp: requests.Response, path: str) -> Any:
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise CatalogUnavailableError(f"Catalog sent an unreadable body for {path}") from exc


def _to_raw(product: Product) -> dict:
    raw = {
        "name": product.name,
        "price": float(product.price.amount),
        "inventory": product.inventory,
        "active": product.active,
    }
    if product.id is not None:
        raw["id"] = product.id
    return raw


def _to_domain(raw: dict) -> Product:
    try:
        return Product(
            id=int(raw["id"]),
            name=raw.get("name") or "",
            price=Money.of(raw.get("price", 0)),
            inventory=int(raw.get("inventory", 0)),
            active=bool(raw.get("active", True)),
        )
    except (KeyError, TypeError, ValueError, ValidationError) as exc:
        raise CatalogUnavailableError(f"Catalog sent a malformed product: {raw!r}") from exc
