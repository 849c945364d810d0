"""Carrier adapters: pluggable shipping carrier integration."""

import os

from lifecycle.carrier.port import CarrierPort

_carrier_instance: CarrierPort | None = None


def get_carrier(adapter: str | None = None) -> CarrierPort:
    """Return the configured carrier adapter (singleton).

    Uses FakeCarrier by default. In production, configure via
    CARRIER_ADAPTER environment variable.
    """
    global _carrier_instance
    if _carrier_instance is None:
        adapter = adapter or os.environ.get("CARRIER_ADAPTER", "fake")
        if adapter == "fake":
            from lifecycle.carrier.fake_adapter import FakeCarrier

            _carrier_instance = FakeCarrier()
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return _carrier_instance


def set_carrier(carrier: CarrierPort) -> None:
    """Override the active carrier adapter (useful for tests)."""
    global _carrier_instance
    _carrier_instance = carrier


def reset_carrier() -> None:
    """Reset the carrier singleton (useful for testing)."""
    global _carrier_instance
    _carrier_instance = None
