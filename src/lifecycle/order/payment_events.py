"""Inbound trigger: a completed payment advances the order.

The checkout collaborator publishes a ``PaymentCompleted`` event once the
customer has paid and picked a carrier. The handler checks the event is well
formed and hands it to the transitioner. It never retries on its own: the
publisher resubmits the same event, which is safe because a replayed advance
is a no-op.
"""

import asyncio

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from lifecycle.exceptions import TriggerTimeout, ValidationError
from lifecycle.order.order import OrderStatus
from lifecycle.order.transitions import AdvanceResult, OrderTransitioner

logger = structlog.get_logger(__name__)

_TRIGGER_TARGETS = {OrderStatus.SHIPPED.value, OrderStatus.DELIVERED.value}


class PaymentCompleted(BaseModel):
    """Payment succeeded and the order may move forward.

    Accepts both ``{"orderId", "targetStatus", "carrier"}`` and the snake_case
    field names.
    """

    model_config = ConfigDict(frozen=True)

    order_id: str = Field(default="", validation_alias=AliasChoices("order_id", "orderId"))
    target_status: str = Field(default="", validation_alias=AliasChoices("target_status", "targetStatus"))
    carrier: str | None = None


def _errors_from_pydantic(exc: PydanticValidationError) -> dict[str, list[str]]:
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "event"
        messages.setdefault(field, []).append(error["msg"])
    return messages


def _order_id_of(event) -> str:
    if isinstance(event, PaymentCompleted):
        return event.order_id
    if isinstance(event, dict):
        return str(event.get("orderId") or event.get("order_id") or "")
    return ""


class PaymentTriggerHandler:
    """Turns payment completion events into order transitions."""

    def __init__(self, transitioner: OrderTransitioner, timeout_seconds: float = 10.0):
        self.transitioner = transitioner
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def validate(event: PaymentCompleted) -> None:
        messages = {}
        if not event.order_id.strip():
            messages["order_id"] = ["Order id is required"]

        target = event.target_status.strip().upper()
        if target not in _TRIGGER_TARGETS:
            messages["target_status"] = [f"Target status must be one of {sorted(_TRIGGER_TARGETS)}"]
        elif target == OrderStatus.SHIPPED.value and not (event.carrier or "").strip():
            messages["carrier"] = ["A carrier must be chosen before the order can ship"]

        if messages:
            raise ValidationError(messages)

    def on_payment_completed(self, event: PaymentCompleted | dict) -> AdvanceResult:
        """Validate the event and advance the order; the outcome is returned, never raised."""
        try:
            if not isinstance(event, PaymentCompleted):
                event = PaymentCompleted.model_validate(event)
            self.validate(event)
        except PydanticValidationError as exc:
            error = ValidationError(_errors_from_pydantic(exc))
            logger.warning("Malformed payment event", errors=error.messages)
            return AdvanceResult.failure(_order_id_of(event), None, error)
        except ValidationError as exc:
            logger.warning("Malformed payment event", order_id=event.order_id, errors=exc.messages)
            return AdvanceResult.failure(event.order_id, None, exc)

        logger.info(
            "Payment completed, advancing order",
            order_id=event.order_id,
            target_status=event.target_status,
            carrier=event.carrier,
        )
        result = self.transitioner.advance(event.order_id.strip(), event.target_status, carrier=event.carrier)
        if not result.ok:
            logger.warning(
                "Payment trigger failed",
                order_id=event.order_id,
                error_type=type(result.error).__name__,
            )
        return result

    async def submit(self, event: PaymentCompleted | dict, timeout: float | None = None) -> AdvanceResult:
        """Run the handler off the event loop, bounded by ``timeout`` seconds.

        On timeout the advance keeps running in its worker thread and still
        commits all-or-nothing; the caller gets a ``TriggerTimeout`` result
        and may resubmit.
        """
        timeout = self.timeout_seconds if timeout is None else timeout
        try:
            return await asyncio.wait_for(asyncio.to_thread(self.on_payment_completed, event), timeout)
        except TimeoutError:
            order_id = _order_id_of(event)
            logger.warning("Payment trigger timed out", order_id=order_id, timeout=timeout)
            return AdvanceResult.failure(
                order_id,
                None,
                TriggerTimeout(f"Advancing order {order_id} did not finish within {timeout}s", order_id=order_id),
            )
