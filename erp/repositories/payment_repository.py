from sqlalchemy.orm import Session
from erp.models.payment import PaymentIn, PaymentOut
from erp.utils.constants import PartyKind
from typing import List, Optional

PAYMENT_MODELS = {
    PartyKind.CUSTOMER: PaymentIn,
    PartyKind.SUPPLIER: PaymentOut,
}


def create_payment(db: Session, kind: PartyKind, **fields):
    """Create a payment-in (customer) or payment-out (supplier) row."""
    payment = PAYMENT_MODELS[kind](**fields)
    db.add(payment)
    db.flush()
    return payment


def get_payment(db: Session, kind: PartyKind, payment_id: int):
    model = PAYMENT_MODELS[kind]
    return db.query(model).filter(model.id == payment_id).first()


def get_by_receipt_no(db: Session, kind: PartyKind, receipt_no: str):
    model = PAYMENT_MODELS[kind]
    return db.query(model).filter(model.receipt_no == receipt_no).first()


def list_payments(
    db: Session,
    kind: PartyKind,
    party_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 50,
) -> List:
    model = PAYMENT_MODELS[kind]
    query = db.query(model)
    if party_id:
        party_column = model.customer_id if kind == PartyKind.CUSTOMER else model.supplier_id
        query = query.filter(party_column == party_id)
    return query.order_by(model.payment_date.desc(), model.id.desc()).offset(skip).limit(limit).all()


def delete_payment(db: Session, payment) -> None:
    db.delete(payment)
    db.flush()
