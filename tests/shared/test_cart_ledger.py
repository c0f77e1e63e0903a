"""Tests for the cart ledger and its storage adapters."""

import json
from decimal import Decimal

import pytest

from shared.cart import CartLedger, InMemoryStorage, JsonFileStorage, PriceSnapshot


def _snapshot(product_id="p1", price="10", name="Linen Overshirt"):
    return PriceSnapshot(product_id=product_id, unit_price=Decimal(price), display_name=name)


@pytest.fixture()
def storage():
    return InMemoryStorage()


@pytest.fixture()
def ledger(storage):
    return CartLedger(storage)


class TestAddToCart:
    def test_new_product_starts_at_one(self, ledger):
        ledger.add_to_cart(_snapshot())

        assert ledger.quantity_of("p1") == 1
        assert ledger.lines[0].unit_price == Decimal("10")

    def test_existing_product_increments(self, ledger):
        ledger.add_to_cart(_snapshot())
        ledger.add_to_cart(_snapshot())

        assert ledger.quantity_of("p1") == 2
        assert len(ledger.lines) == 1

    def test_existing_line_keeps_first_unit_price(self, ledger):
        ledger.add_to_cart(_snapshot(price="10"))
        ledger.add_to_cart(_snapshot(price="12"))

        assert ledger.lines[0].unit_price == Decimal("10")
        assert ledger.calculated_price.total_price == Decimal("20")


class TestRemoveFromCart:
    def test_decrements_above_one(self, ledger):
        ledger.add_to_cart(_snapshot())
        ledger.add_to_cart(_snapshot())
        ledger.remove_from_cart(_snapshot())

        assert ledger.quantity_of("p1") == 1

    def test_last_unit_deletes_line(self, ledger):
        ledger.add_to_cart(_snapshot())
        ledger.remove_from_cart(_snapshot())

        assert ledger.is_empty()
        assert ledger.quantity_of("p1") == 0

    def test_absent_product_is_noop(self, ledger):
        ledger.add_to_cart(_snapshot("p1"))
        ledger.remove_from_cart(_snapshot("p2"))

        assert ledger.quantity_of("p1") == 1

    def test_add_then_remove_restores_quantity(self, ledger):
        ledger.add_to_cart(_snapshot())
        ledger.add_to_cart(_snapshot())
        before = ledger.quantity_of("p1")

        ledger.add_to_cart(_snapshot())
        ledger.remove_from_cart(_snapshot())

        assert ledger.quantity_of("p1") == before


class TestCalculatedPrice:
    def test_total_is_sum_of_line_totals(self, ledger):
        ledger.add_to_cart(_snapshot("p1", "10"))
        ledger.add_to_cart(_snapshot("p1", "10"))
        ledger.add_to_cart(_snapshot("p2", "5.50"))

        price = ledger.calculated_price
        assert [p.total_price for p in price.products] == [Decimal("20"), Decimal("5.50")]
        assert price.total_price == Decimal("25.50")

    def test_empty_cart_totals_zero(self, ledger):
        assert ledger.calculated_price.total_price == Decimal("0")
        assert ledger.calculated_price.products == []

    def test_snapshots_supply_display_details_only(self, ledger):
        ledger.add_to_cart(_snapshot("p1", "10", name="Old name"))
        ledger.update_snapshots([_snapshot("p1", "99", name="New name")])

        line = ledger.calculated_price.products[0]
        assert line.display_name == "New name"
        assert line.unit_price == Decimal("10")
        assert ledger.calculated_price.total_price == Decimal("10")


class TestClearCart:
    def test_clears_everything(self, ledger, storage):
        ledger.add_to_cart(_snapshot("p1"))
        ledger.add_to_cart(_snapshot("p2"))
        ledger.clear_cart()

        assert ledger.is_empty()
        assert json.loads(storage.get("cart")) == []


class TestPersistence:
    def test_writes_wire_shape(self, ledger, storage):
        ledger.add_to_cart(_snapshot("p1", "10"))

        stored = json.loads(storage.get("cart"))
        assert stored == [{"documentId": "p1", "quantity": 1, "pricePerItem": "10"}]

    def test_reload_restores_lines(self, storage):
        CartLedger(storage).add_to_cart(_snapshot("p1", "10"))

        reloaded = CartLedger(storage)
        assert reloaded.quantity_of("p1") == 1
        assert reloaded.lines[0].unit_price == Decimal("10")

    def test_unreadable_cart_loads_empty(self):
        storage = InMemoryStorage({"cart": "{not json"})

        assert CartLedger(storage).is_empty()

    def test_invalid_lines_load_empty(self):
        storage = InMemoryStorage({"cart": json.dumps([{"documentId": "p1", "quantity": 0}])})

        assert CartLedger(storage).is_empty()

    def test_duplicate_stored_lines_merge(self):
        stored = [
            {"documentId": "p1", "quantity": 1, "pricePerItem": "10"},
            {"documentId": "p1", "quantity": 2, "pricePerItem": "10"},
        ]
        ledger = CartLedger(InMemoryStorage({"cart": json.dumps(stored)}))

        assert ledger.quantity_of("p1") == 3
        assert len(ledger.lines) == 1

    def test_json_file_storage(self, tmp_path):
        path = tmp_path / "state" / "cart.json"
        CartLedger(JsonFileStorage(path)).add_to_cart(_snapshot("p1", "10"))

        assert path.exists()
        assert CartLedger(JsonFileStorage(path)).quantity_of("p1") == 1

    def test_json_file_storage_delete(self, tmp_path):
        storage = JsonFileStorage(tmp_path / "cart.json")
        storage.set("cart", "[]")
        storage.delete("cart")

        assert storage.get("cart") is None


class TestSubscribe:
    def test_listener_receives_totals(self, ledger):
        received = []
        ledger.subscribe(received.append)

        ledger.add_to_cart(_snapshot("p1", "10"))
        ledger.add_to_cart(_snapshot("p1", "10"))

        assert [p.total_price for p in received] == [Decimal("10"), Decimal("20")]

    def test_snapshot_replacement_notifies(self, ledger):
        received = []
        ledger.subscribe(received.append)

        ledger.update_snapshots([_snapshot("p1")])

        assert len(received) == 1

    def test_unsubscribe(self, ledger):
        received = []
        unsubscribe = ledger.subscribe(received.append)
        unsubscribe()

        ledger.add_to_cart(_snapshot())

        assert received == []


def test_submission_products(ledger):
    ledger.add_to_cart(_snapshot("p1"))
    ledger.add_to_cart(_snapshot("p1"))
    ledger.add_to_cart(_snapshot("p2"))

    assert ledger.submission_products() == [
        {"documentId": "p1", "quantity": 2},
        {"documentId": "p2", "quantity": 1},
    ]
