"""Generated paperwork attached to an order.

Invoice, Packing List and Certificate of Origin exist from the moment the
order is created. The shipping Label exists if and only if the order has
left OPEN, and carries the carrier and tracking number of the shipment at
the moment it was generated.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentKind(Enum):
    INVOICE = "Invoice"
    PACKING_LIST = "Packing List"
    CERTIFICATE_OF_ORIGIN = "Certificate of Origin"
    LABEL = "Label"


class DocumentStatus(Enum):
    DRAFT = "Draft"
    FINAL = "Final"
    APPROVED = "Approved"
    REJECTED = "Rejected"


BASE_KINDS = (
    DocumentKind.INVOICE,
    DocumentKind.PACKING_LIST,
    DocumentKind.CERTIFICATE_OF_ORIGIN,
)

BASE_DOCUMENT_SIZE = "245 KB"
LABEL_SIZE = "125 KB"
LABEL_NAME = "Shipping Label"


def document_id_for(order_id: str, kind: DocumentKind) -> str:
    """``DOC-<order id>-<KIND>``, e.g. ``DOC-ORD1-PACKING-LIST``."""
    return f"DOC-{order_id}-{kind.value.upper().replace(' ', '-')}"


def document_url(base_url: str, order_id: str, kind: DocumentKind) -> str:
    slug = kind.value.lower().replace(" ", "_")
    return f"{base_url.rstrip('/')}/{order_id}/{order_id}_{slug}.pdf"


class Document(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    document_id: str
    order_id: str
    name: str
    kind: DocumentKind
    issued_at: datetime
    size: str = BASE_DOCUMENT_SIZE
    status: DocumentStatus = DocumentStatus.FINAL
    url: str
    carrier: str | None = None
    tracking_number: str | None = None

    @model_validator(mode="after")
    def _label_carries_shipping_details(self):
        if self.kind == DocumentKind.LABEL:
            if not self.carrier or not self.tracking_number:
                raise ValueError("A Label document requires a carrier and a tracking number")
        elif self.carrier is not None or self.tracking_number is not None:
            raise ValueError(f"{self.kind.value} documents do not carry shipping details")
        return self

    @property
    def is_label(self) -> bool:
        return self.kind == DocumentKind.LABEL


def build_base_documents(order_id: str, issued_at: datetime, base_url: str) -> list[Document]:
    """Invoice, Packing List and Certificate of Origin for a new order."""
    return [
        Document(
            document_id=document_id_for(order_id, kind),
            order_id=order_id,
            name=kind.value,
            kind=kind,
            issued_at=issued_at,
            size=BASE_DOCUMENT_SIZE,
            status=DocumentStatus.FINAL,
            url=document_url(base_url, order_id, kind),
        )
        for kind in BASE_KINDS
    ]


def build_label(
    order_id: str,
    issued_at: datetime,
    base_url: str,
    carrier: str,
    tracking_number: str,
) -> Document:
    """The shipping Label, populated from the shipment's carrier details."""
    return Document(
        document_id=document_id_for(order_id, DocumentKind.LABEL),
        order_id=order_id,
        name=LABEL_NAME,
        kind=DocumentKind.LABEL,
        issued_at=issued_at,
        size=LABEL_SIZE,
        status=DocumentStatus.FINAL,
        url=document_url(base_url, order_id, DocumentKind.LABEL),
        carrier=carrier,
        tracking_number=tracking_number,
    )
