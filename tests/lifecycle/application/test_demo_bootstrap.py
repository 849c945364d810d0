from datetime import timedelta

from lifecycle.demo import OPEN_ORDER_ID, PAST_ORDER_COUNT, bootstrap_demo, demo_orders
from lifecycle.domain import get_lifecycle, reset_lifecycle
from lifecycle.order.order import OrderStatus
from lifecycle.store import EntityKind


class TestDemoOrders:
    def test_one_open_order_then_delivered_history(self, now):
        orders = demo_orders(now)

        assert len(orders) == PAST_ORDER_COUNT + 1
        assert orders[0].order_id == OPEN_ORDER_ID
        assert orders[0].status == OrderStatus.OPEN
        assert all(order.status == OrderStatus.DELIVERED for order in orders[1:])

    def test_history_is_deterministic(self, now):
        assert demo_orders(now) == demo_orders(now)

    def test_placement_within_the_last_month(self, now):
        for order in demo_orders(now)[1:]:
            assert now - timedelta(days=30) <= order.placed_at < now

    def test_order_ids_are_unique(self, now):
        ids = [order.order_id for order in demo_orders(now)]
        assert len(ids) == len(set(ids))


class TestBootstrapDemo:
    def test_bootstrap_seeds_consistent_state(self, lifecycle):
        added = bootstrap_demo(lifecycle)

        assert added == PAST_ORDER_COUNT + 1
        assert lifecycle.store.count(EntityKind.ORDER) == PAST_ORDER_COUNT + 1
        assert not lifecycle.store.has_label(OPEN_ORDER_ID)
        assert lifecycle.check_invariants() == []

    def test_bootstrap_is_repeatable(self, lifecycle):
        bootstrap_demo(lifecycle)
        assert bootstrap_demo(lifecycle) == 0

    def test_open_demo_order_can_ship(self, lifecycle):
        bootstrap_demo(lifecycle)
        result = lifecycle.advance(OPEN_ORDER_ID, "SHIPPED", carrier="DHL Express")

        assert result.ok
        assert lifecycle.check_invariants() == []


class TestProcessLifecycle:
    def test_seed_demo_data_from_env(self, monkeypatch):
        monkeypatch.setenv("SEED_DEMO_DATA", "true")
        monkeypatch.delenv("SNAPSHOT_PATH", raising=False)
        reset_lifecycle()

        lifecycle = get_lifecycle()

        assert lifecycle.store.contains(EntityKind.ORDER, OPEN_ORDER_ID)
        assert get_lifecycle() is lifecycle

    def test_snapshot_loaded_from_env(self, monkeypatch, tmp_path, lifecycle):
        bootstrap_demo(lifecycle)
        path = lifecycle.save(tmp_path / "orders.json")
        monkeypatch.setenv("SNAPSHOT_PATH", str(path))
        monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
        reset_lifecycle()

        loaded = get_lifecycle()

        assert loaded is not lifecycle
        assert loaded.store.count(EntityKind.ORDER) == PAST_ORDER_COUNT + 1
