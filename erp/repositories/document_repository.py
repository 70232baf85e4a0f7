from sqlalchemy.orm import Session, selectinload
from erp.models.sales import SalesInvoice
from erp.models.purchase import PurchaseOrder
from typing import Optional


def add_invoice(db: Session, invoice: SalesInvoice) -> SalesInvoice:
    db.add(invoice)
    db.flush()
    return invoice


def get_invoice(db: Session, invoice_id: int) -> Optional[SalesInvoice]:
    return (
        db.query(SalesInvoice)
        .options(selectinload(SalesInvoice.items))
        .filter(SalesInvoice.id == invoice_id)
        .first()
    )


def add_purchase_order(db: Session, order: PurchaseOrder) -> PurchaseOrder:
    db.add(order)
    db.flush()
    return order


def get_purchase_order(db: Session, order_id: int) -> Optional[PurchaseOrder]:
    return (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.items))
        .filter(PurchaseOrder.id == order_id)
        .first()
    )


def delete_document(db: Session, document) -> None:
    db.delete(document)
    db.flush()
