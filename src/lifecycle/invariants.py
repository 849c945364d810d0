"""Consistency checks across orders, shipments and documents."""

from lifecycle.document.document import BASE_KINDS, DocumentKind
from lifecycle.order.order import OrderStatus
from lifecycle.shipment.shipment import PROGRESS, STATUS_FOR_ORDER, shipment_id_for
from lifecycle.store import EntityKind, SnapshotStore


def check_invariants(store: SnapshotStore) -> list[str]:
    """Return a human-readable line per violation; empty when consistent."""
    violations = []
    view = store.snapshot_view()
    orders = view[EntityKind.ORDER]
    shipments = {s.shipment_id: s for s in view[EntityKind.SHIPMENT]}

    documents_by_order: dict[str, list] = {}
    for doc in view[EntityKind.DOCUMENT]:
        documents_by_order.setdefault(doc.order_id, []).append(doc)

    for order in orders:
        order_id = order.order_id

        shipment = shipments.pop(shipment_id_for(order_id), None)
        if shipment is None:
            violations.append(f"{order_id}: no shipment")
        else:
            expected = STATUS_FOR_ORDER[order.status]
            if shipment.status != expected:
                violations.append(
                    f"{order_id}: shipment status {shipment.status.value} should be {expected.value}"
                )
            if shipment.progress != PROGRESS[shipment.status]:
                violations.append(f"{order_id}: progress {shipment.progress} does not match {shipment.status.value}")

        kinds = [doc.kind for doc in documents_by_order.pop(order_id, [])]
        for kind in BASE_KINDS:
            if kinds.count(kind) != 1:
                violations.append(f"{order_id}: expected one {kind.value}, found {kinds.count(kind)}")

        labels = kinds.count(DocumentKind.LABEL)
        expected_labels = 0 if order.status == OrderStatus.OPEN else 1
        if labels != expected_labels:
            violations.append(f"{order_id}: {labels} label(s) for a {order.status.value} order")

    for shipment_id in shipments:
        violations.append(f"{shipment_id}: shipment without an order")
    for order_id in documents_by_order:
        violations.append(f"{order_id}: documents without an order")

    return violations
