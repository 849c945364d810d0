import json

from lifecycle.demo import PAST_ORDER_COUNT
from manage import check, seed_demo


class TestSeedDemo:
    def test_writes_demo_order_book(self, tmp_path, capsys):
        path = tmp_path / "orders.json"

        seed_demo(path)

        assert len(json.loads(path.read_text())["orders"]) == PAST_ORDER_COUNT + 1
        assert f"Added {PAST_ORDER_COUNT + 1} demo orders" in capsys.readouterr().out

    def test_keeps_existing_orders(self, tmp_path, capsys):
        path = tmp_path / "orders.json"
        seed_demo(path)
        seed_demo(path)

        assert "Added 0 demo orders" in capsys.readouterr().out


class TestCheck:
    def test_consistent_snapshot(self, tmp_path, capsys):
        path = tmp_path / "orders.json"
        seed_demo(path)

        assert check(path) == 0
        assert "0 violation(s)." in capsys.readouterr().out

    def test_inconsistent_snapshot(self, tmp_path, capsys):
        path = tmp_path / "orders.json"
        seed_demo(path)
        snapshot = json.loads(path.read_text())
        del snapshot["shipments"]["SHP-ORD340001"]
        path.write_text(json.dumps(snapshot))

        assert check(path) == 1
        out = capsys.readouterr().out
        assert "ORD340001: no shipment" in out
        assert "1 violation(s)." in out
