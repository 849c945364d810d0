"""Order transitions: advance an order and propagate the change.

State Machine:
    OPEN → SHIPPED → DELIVERED

Moving to SHIPPED books the carrier, appends an "Order in Transit" event to
the shipment and generates the shipping Label. Moving to DELIVERED appends a
"Reached Destination" event. In both cases the order, the shipment and any
new document are written in a single store commit: a failure at any step
leaves all three exactly as they were.

Advancing an order to the status it already has is a successful no-op, so a
caller can safely resubmit after a failure or a timeout.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import structlog

from lifecycle.carrier.options import service_for, transit_days_for
from lifecycle.carrier.port import CarrierPort
from lifecycle.config import Settings
from lifecycle.document.document import Document, DocumentKind, build_label, document_id_for
from lifecycle.exceptions import (
    CarrierError,
    InvalidTransition,
    LifecycleError,
    PartialCommitFailure,
    ValidationError,
)
from lifecycle.order.order import Order, OrderStatus
from lifecycle.shipment.shipment import STATUS_FOR_ORDER, Shipment, ShipmentStatus
from lifecycle.store import EntityKind, SnapshotStore
from lifecycle.utils.logging import bound_context

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AdvanceResult:
    """Outcome of a single ``advance`` call.

    ``changed`` is False when the order was already in the target status and
    nothing was written.
    """

    order_id: str
    target_status: OrderStatus | None
    ok: bool
    changed: bool = False
    order: Order | None = None
    shipment: Shipment | None = None
    label: Document | None = None
    error: LifecycleError | None = None

    @classmethod
    def failure(cls, order_id: str, target_status: OrderStatus | None, error: LifecycleError) -> "AdvanceResult":
        return cls(order_id=order_id, target_status=target_status, ok=False, error=error)

    def unwrap(self) -> "AdvanceResult":
        """Return the result, or raise the error it carries."""
        if self.error is not None:
            raise self.error
        return self


def parse_status(value: OrderStatus | str) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError({"target_status": [f"Unknown order status: {value!r}"]}) from None


class OrderTransitioner:
    """Applies order status transitions and their side effects."""

    def __init__(
        self,
        store: SnapshotStore,
        carrier: CarrierPort,
        settings: Settings,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.carrier = carrier
        self.settings = settings
        self._clock = clock or (lambda: datetime.now(UTC))

    def advance(
        self,
        order_id: str,
        next_status: OrderStatus | str,
        carrier: str | None = None,
    ) -> AdvanceResult:
        """Move ``order_id`` to ``next_status``; failures come back inside the result."""
        target = None
        with bound_context(order_id=order_id):
            try:
                target = parse_status(next_status)
                return self._advance(order_id, target, carrier)
            except PartialCommitFailure as exc:
                logger.error("Advance aborted before commit", error=str(exc), target=getattr(target, "value", None))
                return AdvanceResult.failure(order_id, target, exc)
            except LifecycleError as exc:
                logger.warning(
                    "Advance rejected",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    target=getattr(target, "value", None),
                )
                return AdvanceResult.failure(order_id, target, exc)

    # -------------------------------------------------------------------
    # Core
    # -------------------------------------------------------------------
    def _advance(self, order_id: str, target: OrderStatus, carrier: str | None) -> AdvanceResult:
        if target == OrderStatus.OPEN:
            raise InvalidTransition(f"Order {order_id} cannot be moved back to OPEN", order_id=order_id)

        with self.store.lock_for(order_id):
            order = self.store.get(EntityKind.ORDER, order_id)
            shipment = self.store.shipment_for(order_id)

            if order.status == target:
                return self._replay(order, shipment, carrier)

            previous = shipment.model_copy(deep=True)
            order.transition_to(target)
            now = self._clock()

            label = None
            if target == OrderStatus.SHIPPED:
                label = self._dispatch(order, shipment, carrier, now)
            else:
                shipment.record_event(ShipmentStatus.REACHED_DESTINATION, timestamp=now, location=shipment.destination)

            self._verify(order, previous, shipment, label)

            writes = [
                (EntityKind.ORDER, order_id, order),
                (EntityKind.SHIPMENT, shipment.shipment_id, shipment),
            ]
            if label is not None:
                writes.append((EntityKind.DOCUMENT, label.document_id, label))
            self.store.commit(writes)

        logger.info(
            "Order advanced",
            status=order.status.value,
            shipment_status=shipment.status.value,
            progress=shipment.progress,
            label_created=label is not None,
        )
        return AdvanceResult(
            order_id=order_id,
            target_status=target,
            ok=True,
            changed=True,
            order=order,
            shipment=shipment,
            label=label,
        )

    def _dispatch(self, order: Order, shipment: Shipment, carrier: str | None, now: datetime) -> Document:
        """Book the carrier, record the in-transit event and build the Label."""
        carrier_name = (carrier or "").strip() or self.settings.default_carrier
        service_type = service_for(carrier_name)

        booking = self.carrier.create_shipment(order.order_id, carrier_name, service_type)
        tracking_number = booking.get("tracking_number")
        if booking.get("error") or not tracking_number:
            raise CarrierError(
                f"Carrier {carrier_name} could not book order {order.order_id}: {booking.get('error', 'no tracking number')}",
                order_id=order.order_id,
                carrier=carrier_name,
            )

        shipment.carrier = carrier_name
        shipment.service_type = service_type
        shipment.tracking_number = tracking_number
        shipment.eta = now + timedelta(days=booking.get("transit_days") or transit_days_for(carrier_name))
        shipment.record_event(ShipmentStatus.IN_TRANSIT, timestamp=now, location=shipment.origin)

        return build_label(
            order.order_id,
            now,
            self.settings.document_base_url,
            carrier=carrier_name,
            tracking_number=tracking_number,
        )

    def _replay(self, order: Order, shipment: Shipment, carrier: str | None) -> AdvanceResult:
        """The order is already in the target status: report it without writing."""
        label = None
        if self.store.has_label(order.order_id):
            label = self.store.get(EntityKind.DOCUMENT, document_id_for(order.order_id, DocumentKind.LABEL))

        if carrier and order.status == OrderStatus.SHIPPED and carrier.strip() != shipment.carrier:
            logger.warning(
                "Carrier differs from the booked shipment; keeping the original",
                requested_carrier=carrier,
                booked_carrier=shipment.carrier,
            )
        logger.info("Advance already applied", status=order.status.value)
        return AdvanceResult(
            order_id=order.order_id,
            target_status=order.status,
            ok=True,
            changed=False,
            order=order,
            shipment=shipment,
            label=label,
        )

    def _verify(self, order: Order, previous: Shipment, shipment: Shipment, label: Document | None) -> None:
        """Check the batch against the lifecycle invariants before it is committed."""
        problems = []

        has_label = self.store.has_label(order.order_id)
        if label is not None and has_label:
            problems.append("label already exists")
        if (has_label or label is not None) != (order.status != OrderStatus.OPEN):
            problems.append(f"label presence does not match order status {order.status.value}")

        if shipment.status != STATUS_FOR_ORDER[order.status]:
            problems.append(f"shipment status {shipment.status.value} does not match order status {order.status.value}")
        if shipment.progress < previous.progress:
            problems.append(f"progress would drop from {previous.progress} to {shipment.progress}")
        if (
            len(shipment.tracking) != len(previous.tracking) + 1
            or shipment.tracking[: len(previous.tracking)] != previous.tracking
        ):
            problems.append("tracking history must grow by exactly one event")

        if problems:
            raise PartialCommitFailure(
                f"Refusing to commit order {order.order_id}: {'; '.join(problems)}",
                order_id=order.order_id,
                problems=problems,
            )
