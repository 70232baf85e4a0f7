import pytest
from decimal import Decimal
from datetime import date

from erp.schemas.document import SalesInvoiceCreate, DocumentItemIn
from erp.services import invoice_service, numbering_service
from erp.utils.constants import DocumentType
from erp.utils.exceptions import ValidationError


def test_numbers_are_sequential_per_type(db_session):
    first = numbering_service.next_document_number(db_session, DocumentType.SALE_INVOICE)
    second = numbering_service.next_document_number(db_session, DocumentType.SALE_INVOICE)
    other = numbering_service.next_document_number(db_session, DocumentType.STOCK_OUT)

    assert (first, second, other) == ("INV-0001", "INV-0002", "STK-OUT-0001")


def test_preview_does_not_consume(db_session):
    assert numbering_service.preview_document_number(db_session, DocumentType.PAYMENT_IN) == "PI-0001"
    assert numbering_service.next_document_number(db_session, DocumentType.PAYMENT_IN) == "PI-0001"
    assert numbering_service.preview_document_number(db_session, DocumentType.PAYMENT_IN) == "PI-0002"


def test_rolled_back_number_is_reused(db_session):
    numbering_service.next_document_number(db_session, DocumentType.PURCHASE_ORDER)
    db_session.rollback()

    assert numbering_service.next_document_number(db_session, DocumentType.PURCHASE_ORDER) == "PO-0001"


def test_configure_sequence(db_session):
    numbering_service.configure_sequence(db_session, DocumentType.SALE_INVOICE, "SI", 250)

    assert numbering_service.next_document_number(db_session, DocumentType.SALE_INVOICE) == "SI-0250"
    described = numbering_service.describe_sequence(db_session, DocumentType.SALE_INVOICE)
    assert described["next_document_no"] == "SI-0251"


@pytest.mark.parametrize("prefix, next_number", [("", 1), ("   ", 1), ("INV", 0)])
def test_configure_sequence_rejects_bad_values(db_session, prefix, next_number):
    with pytest.raises(ValidationError):
        numbering_service.configure_sequence(db_session, DocumentType.SALE_INVOICE, prefix, next_number)


def test_numbers_taken_by_manual_invoices_are_skipped(db_session, customer, product):
    request = SalesInvoiceCreate(
        customer_id=customer.id,
        invoice_no="INV-0002",
        invoice_date=date(2024, 2, 1),
        items=[DocumentItemIn(product_id=product.id, quantity=Decimal("1"), unit_price=Decimal("50"))],
    )
    invoice_service.create_invoice(db_session, request)

    first = numbering_service.next_document_number(db_session, DocumentType.SALE_INVOICE)
    second = numbering_service.next_document_number(db_session, DocumentType.SALE_INVOICE)

    assert (first, second) == ("INV-0001", "INV-0003")
