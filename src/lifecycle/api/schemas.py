"""Pydantic API schemas for the lifecycle endpoints.

These are the external API contracts, separate from the domain models. The
routes translate between these schemas and the engines.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ProductRequest(BaseModel):
    name: str
    dimensions: str = ""
    weight: str = ""
    quantity: int = Field(ge=1)


class CreateOrderRequest(BaseModel):
    order_id: str
    placed_at: datetime | None = None
    status: str = "OPEN"
    product: ProductRequest
    customer_address: str
    warehouse_address: str
    seller_address: str


class AdvanceOrderRequest(BaseModel):
    target_status: str
    carrier: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class SeedResponse(BaseModel):
    order_id: str
    shipment_id: str
    document_ids: list[str]


class AdvanceResponse(BaseModel):
    order_id: str
    status: str
    shipment_status: str
    progress: int
    changed: bool
    label_id: str | None = None
    tracking_number: str | None = None


class ShippingOptionResponse(BaseModel):
    carrier: str
    service: str
    transit_days: int
    original_price: float
    negotiated_price: float
    savings: float
    rating: float
    is_best_option: bool
