from datetime import UTC, datetime

import pytest
from lifecycle.document.document import (
    BASE_KINDS,
    Document,
    DocumentKind,
    DocumentStatus,
    build_base_documents,
    build_label,
    document_id_for,
    document_url,
)
from pydantic import ValidationError as PydanticValidationError

ISSUED_AT = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
BASE_URL = "https://docs.example.com/orders_docs/"


class TestDocumentIdentity:
    @pytest.mark.parametrize(
        "kind, expected",
        [
            (DocumentKind.INVOICE, "DOC-ORD1-INVOICE"),
            (DocumentKind.PACKING_LIST, "DOC-ORD1-PACKING-LIST"),
            (DocumentKind.CERTIFICATE_OF_ORIGIN, "DOC-ORD1-CERTIFICATE-OF-ORIGIN"),
            (DocumentKind.LABEL, "DOC-ORD1-LABEL"),
        ],
    )
    def test_id_is_derived_from_order_and_kind(self, kind, expected):
        assert document_id_for("ORD1", kind) == expected

    def test_url_uses_order_and_snake_case_kind(self):
        url = document_url(BASE_URL, "ORD1", DocumentKind.PACKING_LIST)
        assert url == "https://docs.example.com/orders_docs/ORD1/ORD1_packing_list.pdf"


class TestBaseDocuments:
    def test_three_final_documents(self):
        documents = build_base_documents("ORD1", ISSUED_AT, BASE_URL)

        assert [doc.kind for doc in documents] == list(BASE_KINDS)
        assert all(doc.status == DocumentStatus.FINAL for doc in documents)
        assert all(doc.issued_at == ISSUED_AT for doc in documents)
        assert all(doc.size == "245 KB" for doc in documents)
        assert not any(doc.is_label for doc in documents)

    def test_base_documents_carry_no_shipping_details(self):
        for doc in build_base_documents("ORD1", ISSUED_AT, BASE_URL):
            assert doc.carrier is None
            assert doc.tracking_number is None


class TestLabel:
    def test_label_copies_carrier_and_tracking_number(self):
        label = build_label("ORD1", ISSUED_AT, BASE_URL, carrier="DHL Express", tracking_number="DHL0000000001")

        assert label.is_label
        assert label.document_id == "DOC-ORD1-LABEL"
        assert label.name == "Shipping Label"
        assert label.carrier == "DHL Express"
        assert label.tracking_number == "DHL0000000001"
        assert label.size == "125 KB"
        assert label.status == DocumentStatus.FINAL

    def test_label_requires_tracking_number(self):
        with pytest.raises(PydanticValidationError):
            build_label("ORD1", ISSUED_AT, BASE_URL, carrier="DHL Express", tracking_number="")

    def test_invoice_cannot_carry_carrier(self):
        with pytest.raises(PydanticValidationError):
            Document(
                document_id="DOC-ORD1-INVOICE",
                order_id="ORD1",
                name="Invoice",
                kind=DocumentKind.INVOICE,
                issued_at=ISSUED_AT,
                url="https://docs.example.com/x.pdf",
                carrier="UPS",
            )
