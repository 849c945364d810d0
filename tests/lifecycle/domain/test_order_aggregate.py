"""Tests for the Order aggregate and its state machine."""

from datetime import UTC, datetime

import pytest
from lifecycle.exceptions import InvalidTransition
from lifecycle.order.order import Order, OrderStatus, Product, status_rank
from pydantic import ValidationError as PydanticValidationError


def _make_order(**overrides):
    data = {
        "order_id": "ORD-001",
        "placed_at": datetime(2026, 3, 1, 12, 0, tzinfo=UTC),
        "product": {"name": "Phone", "dimensions": "16 x 8 x 1 cm", "weight": "234g", "quantity": 2},
        "customer_address": "John Smith, 123 Main Street, New York, NY 10001, USA",
        "warehouse_address": "Warehouse 1, Mumbai, 400001, INDIA",
        "seller_address": "Seller 1, Mumbai, 400001, INDIA",
    }
    data.update(overrides)
    return Order(**data)


class TestOrderCreation:
    def test_defaults_to_open(self):
        order = _make_order()
        assert order.status == OrderStatus.OPEN
        assert order.is_open

    def test_status_accepts_string_value(self):
        order = _make_order(status="DELIVERED")
        assert order.status == OrderStatus.DELIVERED

    def test_product_is_a_value_object(self):
        order = _make_order()
        assert isinstance(order.product, Product)
        assert order.product.quantity == 2

    def test_quantity_must_be_positive(self):
        with pytest.raises(PydanticValidationError):
            _make_order(product={"name": "Phone", "quantity": 0})

    @pytest.mark.parametrize("field", ["customer_address", "warehouse_address", "seller_address", "order_id"])
    def test_required_strings_cannot_be_empty(self, field):
        with pytest.raises(PydanticValidationError):
            _make_order(**{field: ""})

    def test_unknown_status_rejected(self):
        with pytest.raises(PydanticValidationError):
            _make_order(status="CANCELLED")

    def test_invalid_assignment_rejected(self):
        order = _make_order()
        with pytest.raises(PydanticValidationError):
            order.status = "RETURNED"


class TestValidTransitions:
    def test_open_to_shipped(self):
        order = _make_order()
        order.transition_to(OrderStatus.SHIPPED)
        assert order.status == OrderStatus.SHIPPED

    def test_shipped_to_delivered(self):
        order = _make_order(status="SHIPPED")
        order.transition_to(OrderStatus.DELIVERED)
        assert order.status == OrderStatus.DELIVERED

    def test_next_status(self):
        assert _make_order().next_status() == OrderStatus.SHIPPED
        assert _make_order(status="SHIPPED").next_status() == OrderStatus.DELIVERED
        assert _make_order(status="DELIVERED").next_status() is None


class TestInvalidTransitions:
    def test_cannot_skip_shipped(self):
        order = _make_order()
        with pytest.raises(InvalidTransition) as exc:
            order.transition_to(OrderStatus.DELIVERED)
        assert "OPEN to DELIVERED" in str(exc.value)
        assert order.status == OrderStatus.OPEN

    def test_cannot_regress(self):
        order = _make_order(status="DELIVERED")
        with pytest.raises(InvalidTransition):
            order.transition_to(OrderStatus.SHIPPED)

    def test_delivered_is_terminal(self):
        order = _make_order(status="DELIVERED")
        with pytest.raises(InvalidTransition):
            order.transition_to(OrderStatus.DELIVERED)

    def test_error_carries_context(self):
        order = _make_order()
        with pytest.raises(InvalidTransition) as exc:
            order.transition_to(OrderStatus.DELIVERED)
        assert exc.value.context == {"order_id": "ORD-001", "current": "OPEN", "target": "DELIVERED"}


def test_status_rank_follows_lifecycle():
    assert status_rank(OrderStatus.OPEN) < status_rank("SHIPPED") < status_rank(OrderStatus.DELIVERED)
