"""Carrier port: abstract interface for shipping carrier integrations.

All carrier adapters must implement this interface. The engines program
against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    def create_shipment(self, order_id: str, carrier: str, service_type: str) -> dict:
        """Book a shipment with the carrier.

        Returns:
            dict with keys: tracking_number, transit_days, and ``error`` when
            the carrier refused the booking
        """
        ...

    @abstractmethod
    def get_tracking(self, tracking_number: str) -> dict:
        """Get current tracking status for a shipment.

        Returns:
            dict with keys: status, location, events (list of tracking events)
        """
        ...
