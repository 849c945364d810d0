"""Order seeding: derive the shipment and base documents of a new order.

A freshly placed order gets one shipment whose tracking history starts with
a "received" event followed by an event for the order's current status, and
the three base documents (Invoice, Packing List, Certificate of Origin).
Orders imported in SHIPPED or DELIVERED state also get their Label, so the
label invariant holds from the first write.
"""

import hashlib
from dataclasses import dataclass
from datetime import timedelta

import structlog

from lifecycle.carrier.options import service_for, transit_days_for
from lifecycle.config import Settings
from lifecycle.document.document import Document, build_base_documents, build_label
from lifecycle.exceptions import DuplicateEntity
from lifecycle.order.order import Order, OrderStatus
from lifecycle.shipment.shipment import (
    RECEIVED_DESCRIPTION,
    STATUS_FOR_ORDER,
    Shipment,
    ShipmentStatus,
    destination_from_address,
    shipment_id_for,
)
from lifecycle.store import EntityKind, SnapshotStore

logger = structlog.get_logger(__name__)


def provisional_tracking_number(order_id: str) -> str:
    """Tracking number assigned at order creation: ``TRK`` + six digits."""
    value = int(hashlib.sha256(order_id.encode("utf-8")).hexdigest(), 16)
    return f"TRK{value % 10**6:06d}"


def derive_shipment(order: Order, carrier: str, origin: str) -> Shipment:
    """Build the shipment for ``order`` as of its current status."""
    shipment = Shipment(
        shipment_id=shipment_id_for(order.order_id),
        order_id=order.order_id,
        tracking_number=provisional_tracking_number(order.order_id),
        origin=origin,
        destination=destination_from_address(order.customer_address),
        carrier=carrier,
        service_type=service_for(carrier),
        eta=order.placed_at + timedelta(days=transit_days_for(carrier)),
    )
    shipment.record_event(
        ShipmentStatus.ORDER_RECEIVED,
        timestamp=order.placed_at,
        location=origin,
        description=RECEIVED_DESCRIPTION,
    )
    shipment.record_event(STATUS_FOR_ORDER[order.status], timestamp=order.placed_at, location=origin)
    return shipment


def derive_documents(order: Order, shipment: Shipment, base_url: str) -> list[Document]:
    """Base documents, plus the Label when the order has already shipped."""
    documents = build_base_documents(order.order_id, order.placed_at, base_url)
    if order.status != OrderStatus.OPEN:
        documents.append(
            build_label(
                order.order_id,
                order.placed_at,
                base_url,
                carrier=shipment.carrier,
                tracking_number=shipment.tracking_number,
            )
        )
    return documents


@dataclass(frozen=True)
class SeedResult:
    order: Order
    shipment: Shipment
    documents: list[Document]


class OrderSeeder:
    """Writes a new order together with everything derived from it."""

    def __init__(self, store: SnapshotStore, settings: Settings):
        self.store = store
        self.settings = settings

    def seed(self, order: Order) -> SeedResult:
        order_id = order.order_id
        with self.store.lock_for(order_id):
            if self.store.contains(EntityKind.ORDER, order_id):
                raise DuplicateEntity(f"Order {order_id} already exists", order_id=order_id)
            if self.store.contains(EntityKind.SHIPMENT, shipment_id_for(order_id)):
                raise DuplicateEntity(
                    f"Shipment for order {order_id} already exists",
                    order_id=order_id,
                )

            shipment = derive_shipment(order, self.settings.default_carrier, self.settings.origin_location)
            documents = derive_documents(order, shipment, self.settings.document_base_url)

            self.store.commit(
                [
                    (EntityKind.ORDER, order_id, order),
                    (EntityKind.SHIPMENT, shipment.shipment_id, shipment),
                    *[(EntityKind.DOCUMENT, doc.document_id, doc) for doc in documents],
                ]
            )

        logger.info(
            "Order seeded",
            order_id=order_id,
            status=order.status.value,
            shipment_status=shipment.status.value,
            document_count=len(documents),
        )
        return SeedResult(order=order.model_copy(deep=True), shipment=shipment, documents=documents)
