from sqlalchemy.orm import Session
from typing import Optional

from erp.logger_config import logger
from erp.repositories import payment_repo, party_repo
from erp.schemas.payment import PaymentInCreate, PaymentOutCreate, PaymentUpdate
from erp.services import ledger_service, numbering_service
from erp.utils.constants import (
    PartyKind,
    LedgerTransactionType,
    DocumentType,
    PaymentMethod,
)
from erp.utils.exceptions import NotFoundError, ValidationError

# kind -> (numbering sequence, party column, balance snapshot column, ledger wording)
PAYMENT_SETTINGS = {
    PartyKind.CUSTOMER: (DocumentType.PAYMENT_IN, "customer_id", "customer_balance", "Payment received"),
    PartyKind.SUPPLIER: (DocumentType.PAYMENT_OUT, "supplier_id", "supplier_balance", "Payment made"),
}


def _create_payment(db: Session, kind: PartyKind, party_id: int, request):
    doc_type, party_field, balance_field, wording = PAYMENT_SETTINGS[kind]

    # Step 1: Reject bad amounts and unknown parties before writing anything
    amount = ledger_service.validate_amount(LedgerTransactionType.PAYMENT, request.amount)
    party = ledger_service.lock_party(db, kind, party_id)

    # Step 2: Payment row
    receipt_no = request.receipt_no or numbering_service.next_document_number(db, doc_type)
    if request.receipt_no and payment_repo.get_by_receipt_no(db, kind, receipt_no):
        raise ValidationError(f"Receipt number {receipt_no} is already in use")
    online_reference = None
    if request.payment_method in (PaymentMethod.ONLINE, PaymentMethod.BANK_TRANSFER):
        online_reference = request.online_reference

    payment = payment_repo.create_payment(
        db,
        kind,
        receipt_no=receipt_no,
        payment_date=request.payment_date,
        payment_method=PaymentMethod(request.payment_method).value,
        online_reference=online_reference,
        amount=amount,
        notes=request.notes,
        **{party_field: party.id},
    )

    # Step 3: Ledger entry and balance
    entry = ledger_service.post_entry(
        db,
        kind,
        party.id,
        LedgerTransactionType.PAYMENT,
        amount,
        transaction_date=payment.payment_date,
        reference_id=payment.id,
        reference_no=receipt_no,
        description=f"{wording} - {payment.payment_method}",
    )
    payment.ledger_entry_id = entry.id
    setattr(payment, balance_field, party.current_balance)
    db.flush()
    return payment


def receive_payment(db: Session, request: PaymentInCreate):
    """
    Record money received from a customer (payment in).
    Credits the customer ledger: the customer's balance goes down.
    """
    payment = ledger_service.run_in_unit_of_work(
        db, _create_payment, PartyKind.CUSTOMER, request.customer_id, request
    )
    logger.info("Payment in %s recorded for customer %s", payment.receipt_no, payment.customer_id)
    return payment


def make_payment(db: Session, request: PaymentOutCreate):
    """
    Record money paid to a supplier (payment out).
    Debits the supplier ledger: the amount payable goes down.
    """
    payment = ledger_service.run_in_unit_of_work(
        db, _create_payment, PartyKind.SUPPLIER, request.supplier_id, request
    )
    logger.info("Payment out %s recorded for supplier %s", payment.receipt_no, payment.supplier_id)
    return payment


def get_payment(db: Session, kind: PartyKind, payment_id: int):
    payment = payment_repo.get_payment(db, kind, payment_id)
    if not payment:
        raise NotFoundError(f"Payment {payment_id} not found")
    return payment


def _update_payment(db: Session, kind: PartyKind, payment_id: int, request: PaymentUpdate):
    _, _, balance_field, _ = PAYMENT_SETTINGS[kind]
    payment = get_payment(db, kind, payment_id)

    amount = request.amount if request.amount is not None else payment.amount
    payment_date = request.payment_date or payment.payment_date

    entry = ledger_service.amend_entry(db, kind, payment.ledger_entry_id, amount, payment_date)

    payment.amount = ledger_service.to_amount(amount)
    payment.payment_date = payment_date
    if request.payment_method is not None:
        payment.payment_method = PaymentMethod(request.payment_method).value
    if request.online_reference is not None:
        payment.online_reference = request.online_reference
    if request.notes is not None:
        payment.notes = request.notes
    party = party_repo.get_party(db, kind, entry.party_id)
    setattr(payment, balance_field, party.current_balance)
    db.flush()
    return payment


def update_payment(db: Session, kind: PartyKind, payment_id: int, request: PaymentUpdate):
    """Edit a payment. The ledger entry is amended by the change in amount."""
    return ledger_service.run_in_unit_of_work(db, _update_payment, PartyKind(kind), payment_id, request)


def _delete_payment(db: Session, kind: PartyKind, payment_id: int) -> None:
    payment = get_payment(db, kind, payment_id)
    ledger_service.void_entry(db, kind, payment.ledger_entry_id)
    payment_repo.delete_payment(db, payment)


def delete_payment(db: Session, kind: PartyKind, payment_id: int) -> None:
    """Delete a payment and reverse its effect on the party balance."""
    ledger_service.run_in_unit_of_work(db, _delete_payment, PartyKind(kind), payment_id)
    logger.info("Deleted %s payment %s", PartyKind(kind).value, payment_id)


def list_payments(db: Session, kind: PartyKind, party_id: Optional[int] = None, skip: int = 0, limit: int = 50):
    return payment_repo.list_payments(db, PartyKind(kind), party_id=party_id, skip=skip, limit=limit)
