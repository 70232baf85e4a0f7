from sqlalchemy.orm import Session
from erp.models.document_sequence import DocumentSequence
from erp.models.payment import PaymentIn, PaymentOut
from erp.models.product import StockIn, StockOut
from erp.models.purchase import PurchaseOrder
from erp.models.sales import SalesInvoice
from typing import Optional

# doc_type -> column holding the numbers handed out for it
NUMBERED_COLUMNS = {
    "sale_invoice": SalesInvoice.invoice_no,
    "purchase_order": PurchaseOrder.po_no,
    "payment_in": PaymentIn.receipt_no,
    "payment_out": PaymentOut.receipt_no,
    "stock_in": StockIn.reference_no,
    "stock_out": StockOut.reference_no,
}


def get_sequence(db: Session, doc_type: str) -> Optional[DocumentSequence]:
    return db.query(DocumentSequence).filter(DocumentSequence.doc_type == doc_type).first()


def create_sequence(db: Session, doc_type: str, prefix: str, next_number: int = 1) -> DocumentSequence:
    sequence = DocumentSequence(doc_type=doc_type, prefix=prefix, next_number=next_number)
    db.add(sequence)
    db.flush()
    return sequence


def increment_sequence(db: Session, doc_type: str) -> DocumentSequence:
    """
    Bump next_number in a single UPDATE and return the refreshed row.

    The UPDATE takes the row (or database) write lock first, so two
    callers can never be handed the same number.
    """
    db.query(DocumentSequence).filter(DocumentSequence.doc_type == doc_type).update(
        {DocumentSequence.next_number: DocumentSequence.next_number + 1},
        synchronize_session=False,
    )
    return (
        db.query(DocumentSequence)
        .filter(DocumentSequence.doc_type == doc_type)
        .populate_existing()
        .one()
    )


def number_in_use(db: Session, doc_type: str, document_no: str) -> bool:
    """True when a document of this type already carries the number (e.g. entered by hand)."""
    column = NUMBERED_COLUMNS[doc_type]
    return db.query(column).filter(column == document_no).first() is not None
