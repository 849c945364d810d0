"""Fake carrier adapter: deterministic carrier for testing and development.

Tracking numbers are derived from the order id and carrier, so booking the
same shipment twice yields the same number. Configurable success/failure
behavior for integration testing.
"""

import hashlib

from lifecycle.carrier.options import tracking_prefix_for, transit_days_for
from lifecycle.carrier.port import CarrierPort


def _digits(seed: str, width: int) -> str:
    value = int(hashlib.sha256(seed.encode("utf-8")).hexdigest(), 16)
    return str(value % 10**width).zfill(width)


class FakeCarrier(CarrierPort):
    """Fake carrier that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.bookings: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable"):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_shipment(self, order_id: str, carrier: str, service_type: str) -> dict:
        if not self.should_succeed:
            return {
                "tracking_number": None,
                "transit_days": None,
                "error": self.failure_reason,
            }

        tracking_number = f"{tracking_prefix_for(carrier)}{_digits(f'{order_id}:{carrier}', 10)}"
        booking = {
            "tracking_number": tracking_number,
            "transit_days": transit_days_for(carrier),
            "service_type": service_type,
        }
        self.bookings.append({"order_id": order_id, "carrier": carrier, **booking})
        return booking

    def get_tracking(self, tracking_number: str) -> dict:
        if not self.should_succeed:
            return {
                "status": "unknown",
                "location": None,
                "events": [],
                "error": self.failure_reason,
            }

        booking = next((b for b in self.bookings if b["tracking_number"] == tracking_number), None)
        if booking is None:
            return {"status": "unknown", "location": None, "events": []}

        return {
            "status": "in_transit",
            "location": None,
            "events": [
                {
                    "status": "picked_up",
                    "description": f"Package picked up by {booking['carrier']}",
                },
            ],
        }
