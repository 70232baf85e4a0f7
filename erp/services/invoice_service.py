from sqlalchemy.orm import Session

from erp.logger_config import logger
from erp.models.sales import SalesInvoice, SalesInvoiceItem
from erp.repositories import document_repo
from erp.schemas.document import SalesInvoiceCreate, DocumentUpdate
from erp.services import ledger_service, numbering_service, stock_service
from erp.services.line_items import build_lines, compute_total
from erp.utils.constants import (
    PartyKind,
    LedgerTransactionType,
    DocumentStatus,
    DocumentType,
)
from erp.utils.exceptions import ValidationError, NotFoundError

STOCK_REFERENCE = "sales_invoice"


def get_invoice(db: Session, invoice_id: int) -> SalesInvoice:
    invoice = document_repo.get_invoice(db, invoice_id)
    if not invoice:
        raise NotFoundError(f"Sales invoice {invoice_id} not found")
    return invoice


def _deduct_stock(db: Session, invoice: SalesInvoice) -> None:
    for item in invoice.items:
        stock_service.apply_stock_out(
            db,
            item.product_id,
            item.quantity,
            invoice.invoice_date,
            reference_type=STOCK_REFERENCE,
            reference_no=invoice.invoice_no,
            customer_id=invoice.customer_id,
            notes=f"Auto-generated from Sales Invoice {invoice.invoice_no}",
        )


def _post(db: Session, invoice: SalesInvoice) -> None:
    """Deduct stock and, for credit sales, debit the customer ledger."""
    invoice.status = DocumentStatus.FINALIZED.value
    _deduct_stock(db, invoice)

    if invoice.add_to_account:
        entry = ledger_service.post_entry(
            db,
            PartyKind.CUSTOMER,
            invoice.customer_id,
            LedgerTransactionType.INVOICE,
            invoice.total_amount,
            transaction_date=invoice.invoice_date,
            reference_id=invoice.id,
            reference_no=invoice.invoice_no,
            description=f"Sales Invoice {invoice.invoice_no}",
        )
        invoice.ledger_entry_id = entry.id

    customer = ledger_service.lock_party(db, PartyKind.CUSTOMER, invoice.customer_id)
    if not customer.last_order_date or customer.last_order_date < invoice.invoice_date:
        customer.last_order_date = invoice.invoice_date
    db.flush()


def _create_invoice(db: Session, request: SalesInvoiceCreate) -> SalesInvoice:
    customer = ledger_service.lock_party(db, PartyKind.CUSTOMER, request.customer_id)
    lines, subtotal = build_lines(db, request.items, SalesInvoiceItem)
    total = compute_total(subtotal, request.discount)

    invoice = SalesInvoice(
        invoice_no=request.invoice_no or numbering_service.next_document_number(db, DocumentType.SALE_INVOICE),
        invoice_date=request.invoice_date,
        customer_id=customer.id,
        status=DocumentStatus.DRAFT.value,
        add_to_account=request.add_to_account,
        subtotal=subtotal,
        discount=ledger_service.to_amount(request.discount),
        total_amount=total,
        notes=request.notes,
        items=lines,
    )
    document_repo.add_invoice(db, invoice)

    if DocumentStatus(request.save_as) == DocumentStatus.FINALIZED:
        _post(db, invoice)
    return invoice


def create_invoice(db: Session, request: SalesInvoiceCreate) -> SalesInvoice:
    """
    Create a sales invoice.

    Drafts are saved as-is. Finalized invoices deduct stock and, when
    add_to_account is set, post one invoice entry to the customer ledger.
    """
    invoice = ledger_service.run_in_unit_of_work(db, _create_invoice, request)
    logger.info("Sales invoice %s saved as %s", invoice.invoice_no, invoice.status)
    return invoice


def _finalize_invoice(db: Session, invoice_id: int) -> SalesInvoice:
    invoice = get_invoice(db, invoice_id)
    if invoice.status == DocumentStatus.FINALIZED.value:
        raise ValidationError(f"Sales invoice {invoice.invoice_no} is already finalized")
    _post(db, invoice)
    return invoice


def finalize_invoice(db: Session, invoice_id: int) -> SalesInvoice:
    return ledger_service.run_in_unit_of_work(db, _finalize_invoice, invoice_id)


def _update_invoice(db: Session, invoice_id: int, request: DocumentUpdate) -> SalesInvoice:
    invoice = get_invoice(db, invoice_id)
    finalized = invoice.status == DocumentStatus.FINALIZED.value

    if finalized:
        stock_service.revert_reference(db, STOCK_REFERENCE, invoice.invoice_no)

    if request.items is not None:
        lines, subtotal = build_lines(db, request.items, SalesInvoiceItem)
        invoice.items = lines
        invoice.subtotal = subtotal
    if request.discount is not None:
        invoice.discount = ledger_service.to_amount(request.discount)
    invoice.total_amount = compute_total(invoice.subtotal, invoice.discount)
    if request.document_date is not None:
        invoice.invoice_date = request.document_date
    if request.notes is not None:
        invoice.notes = request.notes
    db.flush()

    if finalized:
        _deduct_stock(db, invoice)
        if invoice.ledger_entry_id:
            ledger_service.amend_entry(
                db,
                PartyKind.CUSTOMER,
                invoice.ledger_entry_id,
                invoice.total_amount,
                invoice.invoice_date,
            )
    return invoice


def update_invoice(db: Session, invoice_id: int, request: DocumentUpdate) -> SalesInvoice:
    """Edit an invoice. Finalized invoices have their stock and ledger entry amended."""
    return ledger_service.run_in_unit_of_work(db, _update_invoice, invoice_id, request)


def _delete_invoice(db: Session, invoice_id: int) -> None:
    invoice = get_invoice(db, invoice_id)
    if invoice.status == DocumentStatus.FINALIZED.value:
        stock_service.revert_reference(db, STOCK_REFERENCE, invoice.invoice_no)
        if invoice.ledger_entry_id:
            ledger_service.void_entry(db, PartyKind.CUSTOMER, invoice.ledger_entry_id)
    document_repo.delete_document(db, invoice)


def delete_invoice(db: Session, invoice_id: int) -> None:
    ledger_service.run_in_unit_of_work(db, _delete_invoice, invoice_id)
    logger.info("Deleted sales invoice %s", invoice_id)
