"""Unit tests for the InventoryReconciler domain service."""

import threading

import pytest

from retail.domain.exceptions import (
    CatalogUnavailableError,
    InsufficientStockError,
    ProductNotFoundError,
)
from retail.domain.service.inventory_reconciler import InventoryReconciler
from tests.fakes import FakeProductCatalog, make_product


class TestReserve:

    def test_reserve_decrements(self):
        catalog = FakeProductCatalog([make_product(1, inventory=10)])
        reconciler = InventoryReconciler(catalog)

        assert reconciler.reserve(1, 3) == 7
        assert catalog.inventory_of(1) == 7

    def test_reserve_exactly_available_succeeds(self):
        catalog = FakeProductCatalog([make_product(1, inventory=5)])
        reconciler = InventoryReconciler(catalog)

        assert reconciler.reserve(1, 5) == 0
        assert catalog.inventory_of(1) == 0

    def test_reserve_one_more_than_available_fails(self):
        catalog = FakeProductCatalog([make_product(1, inventory=5)])
        reconciler = InventoryReconciler(catalog)

        with pytest.raises(InsufficientStockError) as exc_info:
            reconciler.reserve(1, 6)

        assert exc_info.value.requested == 6
        assert exc_info.value.available == 5
        assert catalog.inventory_of(1) == 5
        assert catalog.writes == []

    def test_shortage_message(self):
        catalog = FakeProductCatalog([make_product(1, inventory=2)])
        reconciler = InventoryReconciler(catalog)

        with pytest.raises(InsufficientStockError, match="need 3, have 2"):
            reconciler.reserve(1, 3)

    def test_inactive_product_cannot_be_reserved(self):
        catalog = FakeProductCatalog([make_product(1, active=False)])
        reconciler = InventoryReconciler(catalog)

        with pytest.raises(ProductNotFoundError):
            reconciler.reserve(1, 1)

    def test_unknown_product(self):
        reconciler = InventoryReconciler(FakeProductCatalog())
        with pytest.raises(ProductNotFoundError, match="42"):
            reconciler.reserve(42, 1)

    def test_catalog_down_propagates(self):
        catalog = FakeProductCatalog([make_product(1)])
        catalog.unavailable = True
        reconciler = InventoryReconciler(catalog)

        with pytest.raises(CatalogUnavailableError):
            reconciler.reserve(1, 1)


class TestRestore:

    def test_restore_increments(self):
        catalog = FakeProductCatalog([make_product(1, inventory=4)])
        reconciler = InventoryReconciler(catalog)

        assert reconciler.restore(1, 6) == 10

    def test_restore_reaches_inactive_product(self):
        catalog = FakeProductCatalog([make_product(1, inventory=0, active=False)])
        reconciler = InventoryReconciler(catalog)

        reconciler.restore(1, 2)
        assert catalog.inventory_of(1) == 2

    def test_zero_delta_writes_nothing(self):
        catalog = FakeProductCatalog([make_product(1, inventory=4)])
        reconciler = InventoryReconciler(catalog)

        assert reconciler.apply_delta(1, 0) == 4
        assert catalog.writes == []


class TestIdempotencyKeys:

    def test_same_key_applied_once(self):
        catalog = FakeProductCatalog([make_product(1, inventory=10)])
        reconciler = InventoryReconciler(catalog)

        assert reconciler.reserve(1, 2, idempotency_key="req-1:reserve") == 8
        assert reconciler.reserve(1, 2, idempotency_key="req-1:reserve") is None
        assert catalog.inventory_of(1) == 8

    def test_failed_delta_does_not_burn_key(self):
        catalog = FakeProductCatalog([make_product(1, inventory=1)])
        reconciler = InventoryReconciler(catalog)

        with pytest.raises(InsufficientStockError):
            reconciler.reserve(1, 2, idempotency_key="k")
        reconciler.restore(1, 5)
        assert reconciler.reserve(1, 2, idempotency_key="k") == 4

    def test_forgotten_key_can_apply_again(self):
        catalog = FakeProductCatalog([make_product(1, inventory=10)])
        reconciler = InventoryReconciler(catalog)

        reconciler.reserve(1, 1, idempotency_key="k")
        reconciler.forget("k")
        assert reconciler.reserve(1, 1, idempotency_key="k") == 8


class TestConcurrency:

    def test_parallel_reservations_never_oversell(self):
        catalog = FakeProductCatalog([make_product(1, inventory=10)])
        reconciler = InventoryReconciler(catalog)
        succeeded: list[int] = []
        rejected: list[int] = []
        barrier = threading.Barrier(25)

        def buy(worker: int) -> None:
            barrier.wait()
            try:
                reconciler.reserve(1, 1)
                succeeded.append(worker)
            except InsufficientStockError:
                rejected.append(worker)

        threads = [threading.Thread(target=buy, args=(i,)) for i in range(25)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(succeeded) == 10
        assert len(rejected) == 15
        assert catalog.inventory_of(1) == 0
