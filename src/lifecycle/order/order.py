"""Order aggregate, the root record of the lifecycle.

State Machine:
    OPEN → SHIPPED → DELIVERED

An order only ever moves to the immediate successor of its current status.
Shipment and document state is derived from the order status and is never
written by anything other than the seeding and transition engines.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from lifecycle.exceptions import InvalidTransition


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    OPEN = "OPEN"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"


_STATUS_ORDER = [OrderStatus.OPEN, OrderStatus.SHIPPED, OrderStatus.DELIVERED]

_VALID_TRANSITIONS = {
    OrderStatus.OPEN: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # terminal
}


def status_rank(status: OrderStatus | str) -> int:
    """Position of ``status`` along the lifecycle (OPEN is 0)."""
    return _STATUS_ORDER.index(OrderStatus(status))


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
class Product(BaseModel):
    """What was ordered. Dimensions and weight are display strings."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    dimensions: str = ""
    weight: str = ""
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
class Order(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    order_id: str = Field(min_length=1)
    placed_at: datetime
    status: OrderStatus = OrderStatus.OPEN
    product: Product
    customer_address: str = Field(min_length=1)
    warehouse_address: str = Field(min_length=1)
    seller_address: str = Field(min_length=1)

    @property
    def is_open(self) -> bool:
        return self.status == OrderStatus.OPEN

    def next_status(self) -> OrderStatus | None:
        """The immediate successor of the current status, if any."""
        successors = _VALID_TRANSITIONS[self.status]
        return next(iter(successors)) if successors else None

    def assert_can_transition(self, target_status: OrderStatus) -> None:
        if target_status not in _VALID_TRANSITIONS[self.status]:
            raise InvalidTransition(
                f"Cannot transition order {self.order_id} from {self.status.value} to {target_status.value}",
                order_id=self.order_id,
                current=self.status.value,
                target=target_status.value,
            )

    def transition_to(self, target_status: OrderStatus) -> None:
        """Move the order to ``target_status`` after checking the state machine."""
        self.assert_can_transition(target_status)
        self.status = target_status
