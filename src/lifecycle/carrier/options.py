"""Carrier catalog: the shipping options offered at checkout."""

from pydantic import BaseModel, ConfigDict


class CarrierOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    carrier: str
    service: str
    transit_days: int
    tracking_prefix: str
    original_price: float
    negotiated_price: float
    rating: float
    is_best_option: bool = False

    @property
    def savings(self) -> float:
        return self.original_price - self.negotiated_price


CARRIER_OPTIONS = (
    CarrierOption(
        carrier="DHL Express",
        service="Express Air Freight",
        transit_days=2,
        tracking_prefix="DHL",
        original_price=950,
        negotiated_price=850,
        rating=4.8,
        is_best_option=True,
    ),
    CarrierOption(
        carrier="FedEx",
        service="Priority Freight",
        transit_days=3,
        tracking_prefix="FDX",
        original_price=850,
        negotiated_price=780,
        rating=4.7,
    ),
    CarrierOption(
        carrier="UPS",
        service="Express Saver",
        transit_days=3,
        tracking_prefix="1Z",
        original_price=880,
        negotiated_price=800,
        rating=4.6,
    ),
    CarrierOption(
        carrier="Bluedart",
        service="Surface Express",
        transit_days=4,
        tracking_prefix="BD",
        original_price=750,
        negotiated_price=680,
        rating=4.5,
    ),
)

DEFAULT_SERVICE = "Standard"
DEFAULT_TRANSIT_DAYS = 5
DEFAULT_TRACKING_PREFIX = "TRK"


def find_option(carrier: str) -> CarrierOption | None:
    """Look up a carrier by name, ignoring case."""
    wanted = carrier.strip().lower()
    return next((o for o in CARRIER_OPTIONS if o.carrier.lower() == wanted), None)


def service_for(carrier: str) -> str:
    option = find_option(carrier)
    return option.service if option else DEFAULT_SERVICE


def transit_days_for(carrier: str) -> int:
    option = find_option(carrier)
    return option.transit_days if option else DEFAULT_TRANSIT_DAYS


def tracking_prefix_for(carrier: str) -> str:
    option = find_option(carrier)
    return option.tracking_prefix if option else DEFAULT_TRACKING_PREFIX


def recommend_carriers() -> list[CarrierOption]:
    """Checkout options, best option first, then by rating and negotiated price."""
    return sorted(
        CARRIER_OPTIONS,
        key=lambda o: (not o.is_best_option, -o.rating, o.negotiated_price),
    )
