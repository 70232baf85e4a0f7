from sqlalchemy.orm import Session

from erp.logger_config import logger
from erp.models.purchase import PurchaseOrder, PurchaseOrderItem
from erp.repositories import document_repo
from erp.schemas.document import PurchaseOrderCreate, DocumentUpdate
from erp.services import ledger_service, numbering_service, stock_service
from erp.services.line_items import build_lines, compute_total
from erp.utils.constants import (
    PartyKind,
    LedgerTransactionType,
    DocumentStatus,
    DocumentType,
)
from erp.utils.exceptions import ValidationError, NotFoundError

STOCK_REFERENCE = "purchase_order"


def get_purchase_order(db: Session, order_id: int) -> PurchaseOrder:
    order = document_repo.get_purchase_order(db, order_id)
    if not order:
        raise NotFoundError(f"Purchase order {order_id} not found")
    return order


def _receive_stock(db: Session, order: PurchaseOrder) -> None:
    for item in order.items:
        stock_service.apply_stock_in(
            db,
            item.product_id,
            item.quantity,
            order.receiving_date or order.po_date,
            reference_type=STOCK_REFERENCE,
            reference_no=order.po_no,
            supplier_id=order.supplier_id,
            unit_cost=item.unit_price,
            notes=f"Auto-generated from Purchase Order {order.po_no}",
        )


def _post(db: Session, order: PurchaseOrder) -> None:
    """Receive stock and, when on account, credit the supplier ledger."""
    order.status = DocumentStatus.FINALIZED.value
    _receive_stock(db, order)

    if order.add_to_account:
        entry = ledger_service.post_entry(
            db,
            PartyKind.SUPPLIER,
            order.supplier_id,
            LedgerTransactionType.PURCHASE,
            order.total_amount,
            transaction_date=order.po_date,
            reference_id=order.id,
            reference_no=order.po_no,
            description=f"Purchase Order {order.po_no}",
        )
        order.ledger_entry_id = entry.id

    supplier = ledger_service.lock_party(db, PartyKind.SUPPLIER, order.supplier_id)
    if not supplier.last_purchase_date or supplier.last_purchase_date < order.po_date:
        supplier.last_purchase_date = order.po_date
    db.flush()


def _create_purchase_order(db: Session, request: PurchaseOrderCreate) -> PurchaseOrder:
    supplier = ledger_service.lock_party(db, PartyKind.SUPPLIER, request.supplier_id)
    lines, subtotal = build_lines(db, request.items, PurchaseOrderItem)
    total = compute_total(subtotal, request.discount)

    order = PurchaseOrder(
        po_no=request.po_no or numbering_service.next_document_number(db, DocumentType.PURCHASE_ORDER),
        po_date=request.po_date,
        receiving_date=request.receiving_date,
        supplier_id=supplier.id,
        status=DocumentStatus.DRAFT.value,
        add_to_account=request.add_to_account,
        subtotal=subtotal,
        discount=ledger_service.to_amount(request.discount),
        total_amount=total,
        notes=request.notes,
        items=lines,
    )
    document_repo.add_purchase_order(db, order)

    if DocumentStatus(request.save_as) == DocumentStatus.FINALIZED:
        _post(db, order)
    return order


def create_purchase_order(db: Session, request: PurchaseOrderCreate) -> PurchaseOrder:
    """
    Create a purchase order.

    Finalized orders add their items to stock and, when add_to_account is
    set, post one purchase entry to the supplier ledger (raising payable).
    """
    order = ledger_service.run_in_unit_of_work(db, _create_purchase_order, request)
    logger.info("Purchase order %s saved as %s", order.po_no, order.status)
    return order


def _finalize_purchase_order(db: Session, order_id: int) -> PurchaseOrder:
    order = get_purchase_order(db, order_id)
    if order.status == DocumentStatus.FINALIZED.value:
        raise ValidationError(f"Purchase order {order.po_no} is already finalized")
    _post(db, order)
    return order


def finalize_purchase_order(db: Session, order_id: int) -> PurchaseOrder:
    return ledger_service.run_in_unit_of_work(db, _finalize_purchase_order, order_id)


def _update_purchase_order(db: Session, order_id: int, request: DocumentUpdate) -> PurchaseOrder:
    order = get_purchase_order(db, order_id)
    finalized = order.status == DocumentStatus.FINALIZED.value

    if finalized:
        stock_service.revert_reference(db, STOCK_REFERENCE, order.po_no)

    if request.items is not None:
        lines, subtotal = build_lines(db, request.items, PurchaseOrderItem)
        order.items = lines
        order.subtotal = subtotal
    if request.discount is not None:
        order.discount = ledger_service.to_amount(request.discount)
    order.total_amount = compute_total(order.subtotal, order.discount)
    if request.document_date is not None:
        order.po_date = request.document_date
    if request.notes is not None:
        order.notes = request.notes
    db.flush()

    if finalized:
        _receive_stock(db, order)
        if order.ledger_entry_id:
            ledger_service.amend_entry(
                db,
                PartyKind.SUPPLIER,
                order.ledger_entry_id,
                order.total_amount,
                order.po_date,
            )
    return order


def update_purchase_order(db: Session, order_id: int, request: DocumentUpdate) -> PurchaseOrder:
    return ledger_service.run_in_unit_of_work(db, _update_purchase_order, order_id, request)


def _delete_purchase_order(db: Session, order_id: int) -> None:
    order = get_purchase_order(db, order_id)
    if order.status == DocumentStatus.FINALIZED.value:
        # Fails with InsufficientStockError if the goods were already sold on
        stock_service.revert_reference(db, STOCK_REFERENCE, order.po_no)
        if order.ledger_entry_id:
            ledger_service.void_entry(db, PartyKind.SUPPLIER, order.ledger_entry_id)
    document_repo.delete_document(db, order)


def delete_purchase_order(db: Session, order_id: int) -> None:
    ledger_service.run_in_unit_of_work(db, _delete_purchase_order, order_id)
    logger.info("Deleted purchase order %s", order_id)
