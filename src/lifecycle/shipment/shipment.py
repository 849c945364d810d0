"""The shipment: tracking record derived 1:1 from an order.

The shipment status is a function of the order status and the progress
percentage only moves forward. Tracking events are append-only.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from lifecycle.exceptions import ValidationError
from lifecycle.order.order import OrderStatus


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ShipmentStatus(Enum):
    ORDER_RECEIVED = "Order Received"
    ORDER_PICKED = "Order Picked"
    IN_TRANSIT = "Order in Transit"
    OUT_FOR_DELIVERY = "Out For Delivery"
    REACHED_DESTINATION = "Reached Destination"


PROGRESS = {
    ShipmentStatus.ORDER_RECEIVED: 20,
    ShipmentStatus.ORDER_PICKED: 40,
    ShipmentStatus.IN_TRANSIT: 60,
    ShipmentStatus.OUT_FOR_DELIVERY: 80,
    ShipmentStatus.REACHED_DESTINATION: 100,
}

STATUS_FOR_ORDER = {
    OrderStatus.OPEN: ShipmentStatus.ORDER_RECEIVED,
    OrderStatus.SHIPPED: ShipmentStatus.IN_TRANSIT,
    OrderStatus.DELIVERED: ShipmentStatus.REACHED_DESTINATION,
}

LAST_UPDATE_TEXT = {
    ShipmentStatus.ORDER_RECEIVED: "Order received and processing",
    ShipmentStatus.IN_TRANSIT: "Package in transit",
    ShipmentStatus.REACHED_DESTINATION: "Package delivered",
}

RECEIVED_DESCRIPTION = "Order has been received"


def shipment_id_for(order_id: str) -> str:
    return f"SHP-{order_id}"


def destination_from_address(address: str) -> str:
    """Locality shown on the tracking page: the second-to-last address component."""
    parts = [part.strip() for part in address.split(",") if part.strip()]
    if len(parts) < 2:
        return address.strip()
    return parts[-2]


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
class TrackingEvent(BaseModel):
    """A single entry in the shipment's tracking history."""

    model_config = ConfigDict(frozen=True)

    event_id: str
    timestamp: datetime
    location: str = ""
    status: str
    description: str = ""
    type: ShipmentStatus


class Shipment(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    shipment_id: str
    order_id: str
    tracking_number: str = Field(min_length=1)
    origin: str
    destination: str
    status: ShipmentStatus = ShipmentStatus.ORDER_RECEIVED
    carrier: str
    service_type: str
    eta: datetime
    last_update: str = ""
    progress: int = Field(default=20, ge=0, le=100)
    tracking: list[TrackingEvent] = Field(default_factory=list)

    def _next_event_id(self) -> str:
        return f"{self.shipment_id}-EVT-{len(self.tracking) + 1:03d}"

    def record_event(
        self,
        status: ShipmentStatus,
        timestamp: datetime,
        location: str,
        description: str | None = None,
    ) -> TrackingEvent:
        """Append a tracking event and move the shipment to ``status``.

        Progress never decreases; an event that would move it backwards is
        rejected before anything changes.
        """
        progress = PROGRESS[status]
        if progress < self.progress:
            raise ValidationError(
                {"progress": [f"Shipment {self.shipment_id} cannot move from {self.progress}% back to {progress}%"]}
            )

        description = description or LAST_UPDATE_TEXT.get(status, status.value)
        event = TrackingEvent(
            event_id=self._next_event_id(),
            timestamp=timestamp,
            location=location,
            status=status.value,
            description=description,
            type=status,
        )
        self.tracking = [*self.tracking, event]
        self.status = status
        self.progress = progress
        self.last_update = description
        return event
