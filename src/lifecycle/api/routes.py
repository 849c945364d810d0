"""FastAPI routes for the lifecycle domain."""

from fastapi import APIRouter, HTTPException
from pydantic import ValidationError as PydanticValidationError

from lifecycle.api.schemas import (
    AdvanceOrderRequest,
    AdvanceResponse,
    CreateOrderRequest,
    SeedResponse,
    ShippingOptionResponse,
)
from lifecycle.carrier.options import recommend_carriers
from lifecycle.domain import get_lifecycle
from lifecycle.exceptions import (
    CarrierError,
    DuplicateEntity,
    InvalidTransition,
    LifecycleError,
    NotFound,
    PartialCommitFailure,
    TriggerTimeout,
    ValidationError,
)
from lifecycle.order.order import Order
from lifecycle.store import EntityKind

_STATUS_CODES = {
    NotFound: 404,
    DuplicateEntity: 409,
    InvalidTransition: 409,
    ValidationError: 422,
    CarrierError: 502,
    TriggerTimeout: 504,
    PartialCommitFailure: 500,
}


def _http_error(error: LifecycleError) -> HTTPException:
    status_code = next((code for cls, code in _STATUS_CODES.items() if isinstance(error, cls)), 400)
    detail = error.messages if isinstance(error, ValidationError) else str(error)
    return HTTPException(status_code=status_code, detail=detail)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=SeedResponse)
async def create_order(body: CreateOrderRequest) -> SeedResponse:
    """Create an order along with its shipment and base documents."""
    lifecycle = get_lifecycle()
    try:
        order = Order(
            order_id=body.order_id,
            placed_at=body.placed_at or lifecycle.now(),
            status=body.status.upper(),
            product=body.product.model_dump(),
            customer_address=body.customer_address,
            warehouse_address=body.warehouse_address,
            seller_address=body.seller_address,
        )
    except PydanticValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc

    try:
        result = lifecycle.seed(order)
    except LifecycleError as exc:
        raise _http_error(exc) from exc

    return SeedResponse(
        order_id=result.order.order_id,
        shipment_id=result.shipment.shipment_id,
        document_ids=[doc.document_id for doc in result.documents],
    )


@order_router.get("")
async def list_orders() -> list[dict]:
    """All orders in placement order of arrival."""
    return [order.model_dump(mode="json") for order in get_lifecycle().store.list(EntityKind.ORDER)]


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    try:
        order = get_lifecycle().store.get(EntityKind.ORDER, order_id)
    except NotFound as exc:
        raise _http_error(exc) from exc
    return order.model_dump(mode="json")


@order_router.get("/{order_id}/shipment")
async def get_shipment(order_id: str) -> dict:
    try:
        shipment = get_lifecycle().store.shipment_for(order_id)
    except NotFound as exc:
        raise _http_error(exc) from exc
    return shipment.model_dump(mode="json")


@order_router.get("/{order_id}/documents")
async def get_documents(order_id: str) -> list[dict]:
    lifecycle = get_lifecycle()
    if not lifecycle.store.contains(EntityKind.ORDER, order_id):
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return [doc.model_dump(mode="json") for doc in lifecycle.store.documents_for(order_id)]


@order_router.get("/{order_id}/shipping-options", response_model=list[ShippingOptionResponse])
async def get_shipping_options(order_id: str) -> list[ShippingOptionResponse]:
    """Carriers the customer can pick from before paying, best option first."""
    try:
        order = get_lifecycle().store.get(EntityKind.ORDER, order_id)
    except NotFound as exc:
        raise _http_error(exc) from exc
    if not order.is_open:
        raise HTTPException(status_code=409, detail=f"Order {order_id} already has a carrier")

    return [
        ShippingOptionResponse(
            carrier=option.carrier,
            service=option.service,
            transit_days=option.transit_days,
            original_price=option.original_price,
            negotiated_price=option.negotiated_price,
            savings=option.savings,
            rating=option.rating,
            is_best_option=option.is_best_option,
        )
        for option in recommend_carriers()
    ]


@order_router.post("/{order_id}/advance", response_model=AdvanceResponse)
async def advance_order(order_id: str, body: AdvanceOrderRequest) -> AdvanceResponse:
    """Advance the order as if its payment had just completed."""
    lifecycle = get_lifecycle()
    result = await lifecycle.payments.submit(
        {"order_id": order_id, "target_status": body.target_status, "carrier": body.carrier}
    )
    if not result.ok:
        raise _http_error(result.error)

    return AdvanceResponse(
        order_id=order_id,
        status=result.order.status.value,
        shipment_status=result.shipment.status.value,
        progress=result.shipment.progress,
        changed=result.changed,
        label_id=result.label.document_id if result.label else None,
        tracking_number=result.shipment.tracking_number,
    )


# ---------------------------------------------------------------------------
# Snapshot Router
# ---------------------------------------------------------------------------
snapshot_router = APIRouter(prefix="/snapshot", tags=["snapshot"])


@snapshot_router.get("")
async def export_snapshot() -> dict:
    return get_lifecycle().export_snapshot()


@snapshot_router.put("")
async def import_snapshot(snapshot: dict) -> dict:
    """Replace the whole store with ``snapshot``."""
    lifecycle = get_lifecycle()
    try:
        lifecycle.import_snapshot(snapshot)
    except LifecycleError as exc:
        raise _http_error(exc) from exc
    except PydanticValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc
    return {"status": "imported", "violations": lifecycle.check_invariants()}
