"""Lifecycle bounded context: orders, shipments and documents kept in step.

``Lifecycle`` wires the snapshot store, the carrier adapter and the engines
that write to the store. Everything is injected; the process-wide instance
used by the HTTP layer is reached through ``get_lifecycle()``.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import structlog

from lifecycle.carrier import get_carrier
from lifecycle.carrier.port import CarrierPort
from lifecycle.config import Settings
from lifecycle.invariants import check_invariants
from lifecycle.order.order import Order, OrderStatus
from lifecycle.order.payment_events import PaymentCompleted, PaymentTriggerHandler
from lifecycle.order.seeding import OrderSeeder, SeedResult
from lifecycle.order.transitions import AdvanceResult, OrderTransitioner
from lifecycle.persistence import read_snapshot, write_snapshot
from lifecycle.store import SnapshotStore

logger = structlog.get_logger(__name__)


class Lifecycle:
    def __init__(
        self,
        settings: Settings | None = None,
        store: SnapshotStore | None = None,
        carrier: CarrierPort | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or Settings.from_env()
        self.store = store or SnapshotStore(lock_mode=self.settings.lock_mode)
        self.carrier = carrier or get_carrier(self.settings.carrier_adapter)
        self._clock = clock or (lambda: datetime.now(UTC))

        self.seeder = OrderSeeder(self.store, self.settings)
        self.transitioner = OrderTransitioner(self.store, self.carrier, self.settings, clock=self._clock)
        self.payments = PaymentTriggerHandler(
            self.transitioner,
            timeout_seconds=self.settings.trigger_timeout_seconds,
        )

    def now(self) -> datetime:
        return self._clock()

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------
    def seed(self, order: Order) -> SeedResult:
        return self.seeder.seed(order)

    def advance(self, order_id: str, next_status: OrderStatus | str, carrier: str | None = None) -> AdvanceResult:
        return self.transitioner.advance(order_id, next_status, carrier=carrier)

    def on_payment_completed(self, event: PaymentCompleted | dict) -> AdvanceResult:
        return self.payments.on_payment_completed(event)

    def check_invariants(self) -> list[str]:
        return check_invariants(self.store)

    # -------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------
    def export_snapshot(self) -> dict:
        return self.store.export_snapshot()

    def import_snapshot(self, snapshot: dict) -> None:
        self.store.import_snapshot(snapshot)

    def _snapshot_path(self, path: str | Path | None) -> Path:
        path = path or self.settings.snapshot_path
        if not path:
            raise ValueError("No snapshot path given and SNAPSHOT_PATH is not set")
        return Path(path)

    def save(self, path: str | Path | None = None) -> Path:
        return write_snapshot(self.store, self._snapshot_path(path))

    def load(self, path: str | Path | None = None) -> None:
        self.store.import_snapshot(read_snapshot(self._snapshot_path(path)))


# ---------------------------------------------------------------------------
# Process instance
# ---------------------------------------------------------------------------
_lifecycle: Lifecycle | None = None


def get_lifecycle() -> Lifecycle:
    """Return the process-wide lifecycle, building it from the environment on first use."""
    global _lifecycle
    if _lifecycle is None:
        lifecycle = Lifecycle()
        snapshot_path = lifecycle.settings.snapshot_path
        if snapshot_path and Path(snapshot_path).exists():
            lifecycle.load(snapshot_path)
        if lifecycle.settings.seed_demo_data:
            from lifecycle.demo import bootstrap_demo

            bootstrap_demo(lifecycle)
        _lifecycle = lifecycle
        logger.info("Lifecycle initialized", env=lifecycle.settings.env, carrier=type(lifecycle.carrier).__name__)
    return _lifecycle


def set_lifecycle(lifecycle: Lifecycle) -> None:
    """Override the process-wide lifecycle (useful for tests)."""
    global _lifecycle
    _lifecycle = lifecycle


def reset_lifecycle() -> None:
    global _lifecycle
    _lifecycle = None
