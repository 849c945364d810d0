"""Tests for seeding a new order into the lifecycle."""

from datetime import UTC, datetime, timedelta

import pytest
from lifecycle.document.document import DocumentKind, DocumentStatus
from lifecycle.exceptions import DuplicateEntity
from lifecycle.order.order import Order, OrderStatus
from lifecycle.order.seeding import provisional_tracking_number
from lifecycle.shipment.shipment import ShipmentStatus
from lifecycle.store import EntityKind

PLACED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _make_order(order_id="O1", **overrides):
    data = {
        "order_id": order_id,
        "placed_at": PLACED_AT,
        "product": {"name": "Samsung Galaxy S23 Ultra", "weight": "234g", "quantity": 2},
        "customer_address": "John Smith, 123 Main Street, New York, NY 10001, USA",
        "warehouse_address": "GADA RETAIL, MUMBAI, 400001, INDIA",
        "seller_address": "GADA RETAIL, MUMBAI, 400001, INDIA",
    }
    data.update(overrides)
    return Order(**data)


class TestSeedOpenOrder:
    def test_shipment_starts_received(self, lifecycle):
        result = lifecycle.seed(_make_order())
        shipment = result.shipment

        assert shipment.shipment_id == "SHP-O1"
        assert shipment.status == ShipmentStatus.ORDER_RECEIVED
        assert shipment.progress == 20
        assert shipment.origin == "Mumbai, India"
        assert shipment.destination == "NY 10001"
        assert shipment.carrier == "FedEx"
        assert shipment.eta == PLACED_AT + timedelta(days=3)

    def test_tracking_has_received_and_current_events(self, lifecycle):
        shipment = lifecycle.seed(_make_order()).shipment

        assert len(shipment.tracking) == 2
        assert shipment.tracking[0].description == "Order has been received"
        assert all(event.timestamp == PLACED_AT for event in shipment.tracking)
        assert shipment.tracking[1].type == ShipmentStatus.ORDER_RECEIVED

    def test_three_base_documents_and_no_label(self, lifecycle):
        result = lifecycle.seed(_make_order())
        kinds = [doc.kind for doc in result.documents]

        assert kinds == [DocumentKind.INVOICE, DocumentKind.PACKING_LIST, DocumentKind.CERTIFICATE_OF_ORIGIN]
        assert all(doc.status == DocumentStatus.FINAL for doc in result.documents)
        assert all(doc.issued_at == PLACED_AT for doc in result.documents)
        assert not lifecycle.store.has_label("O1")

    def test_everything_lands_in_the_store(self, lifecycle):
        lifecycle.seed(_make_order())

        assert lifecycle.store.get(EntityKind.ORDER, "O1").status == OrderStatus.OPEN
        assert lifecycle.store.shipment_for("O1").progress == 20
        assert len(lifecycle.store.documents_for("O1")) == 3
        assert lifecycle.check_invariants() == []

    def test_provisional_tracking_number(self, lifecycle):
        shipment = lifecycle.seed(_make_order()).shipment
        assert shipment.tracking_number == provisional_tracking_number("O1")
        assert shipment.tracking_number.startswith("TRK")
        assert len(shipment.tracking_number) == 9


class TestSeedDuplicates:
    def test_duplicate_order_rejected(self, lifecycle):
        lifecycle.seed(_make_order())
        with pytest.raises(DuplicateEntity):
            lifecycle.seed(_make_order(customer_address="Someone Else, Paris, 75001, France"))

        assert lifecycle.store.get(EntityKind.ORDER, "O1").customer_address.startswith("John Smith")
        assert len(lifecycle.store.documents_for("O1")) == 3

    def test_orphan_shipment_blocks_seed(self, lifecycle):
        lifecycle.seed(_make_order())
        snapshot = lifecycle.export_snapshot()
        del snapshot["orders"]["O1"]
        lifecycle.import_snapshot(snapshot)

        with pytest.raises(DuplicateEntity):
            lifecycle.seed(_make_order())
        assert not lifecycle.store.contains(EntityKind.ORDER, "O1")


class TestSeedShippedOrder:
    def test_shipped_order_gets_label(self, lifecycle):
        result = lifecycle.seed(_make_order("O2", status="SHIPPED"))

        assert result.shipment.status == ShipmentStatus.IN_TRANSIT
        assert result.shipment.progress == 60
        assert len(result.documents) == 4
        label = result.documents[-1]
        assert label.kind == DocumentKind.LABEL
        assert label.tracking_number == result.shipment.tracking_number
        assert lifecycle.check_invariants() == []

    def test_delivered_order(self, lifecycle):
        result = lifecycle.seed(_make_order("O3", status="DELIVERED"))

        assert result.shipment.status == ShipmentStatus.REACHED_DESTINATION
        assert result.shipment.progress == 100
        assert lifecycle.store.has_label("O3")
