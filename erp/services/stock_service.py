from sqlalchemy.orm import Session
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import date
from typing import List, Optional

from erp.logger_config import logger
from erp.models.product import Product, StockIn, StockOut
from erp.repositories import product_repo
from erp.schemas.stock import ProductCreate, StockMovementCreate
from erp.services import ledger_service, numbering_service
from erp.utils.constants import DocumentType
from erp.utils.exceptions import ValidationError, NotFoundError, InsufficientStockError

QUANTITY_STEP = Decimal("0.001")
# Largest value a Numeric(15, 3) column holds
MAX_QUANTITY = Decimal("999999999999.999")
MANUAL = "manual"


def to_quantity(value) -> Decimal:
    """Positive, finite quantity rounded to three places."""
    try:
        quantity = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Quantity {value!r} is not a number")
    if not quantity.is_finite():
        raise ValidationError(f"Quantity {value!r} must be a finite number")
    try:
        quantity = quantity.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Quantity {value!r} is too large")
    if quantity <= 0:
        raise ValidationError(f"Quantity must be positive, got {quantity}")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity {value!r} exceeds the limit of {MAX_QUANTITY}")
    return quantity


def create_product(db: Session, request: ProductCreate) -> Product:
    product = product_repo.create_product(
        db,
        name=request.name,
        category=request.category,
        unit=request.unit,
        unit_price=ledger_service.to_amount(request.unit_price),
        current_stock=request.current_stock,
    )
    db.commit()
    db.refresh(product)
    return product


def get_product(db: Session, product_id: int) -> Product:
    product = product_repo.get_product(db, product_id)
    if not product:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def _lock_product(db: Session, product_id: int) -> Product:
    product = product_repo.get_product_for_update(db, product_id)
    if not product or not product.is_active:
        raise NotFoundError(f"Product {product_id} not found")
    return product


def apply_stock_in(
    db: Session,
    product_id: int,
    quantity,
    movement_date: date,
    reference_type: str = MANUAL,
    reference_no: Optional[str] = None,
    supplier_id: Optional[int] = None,
    unit_cost=None,
    notes: Optional[str] = None,
) -> StockIn:
    """Add stock to a product and keep a stock-in row for it. Does not commit."""
    quantity = to_quantity(quantity)
    product = _lock_product(db, product_id)
    movement = product_repo.create_stock_in(
        db,
        product_id=product.id,
        movement_date=movement_date,
        quantity=quantity,
        reference_type=reference_type,
        reference_no=reference_no,
        supplier_id=supplier_id,
        unit_cost=unit_cost,
        notes=notes,
    )
    product.current_stock = Decimal(product.current_stock) + quantity
    db.flush()
    return movement


def apply_stock_out(
    db: Session,
    product_id: int,
    quantity,
    movement_date: date,
    reference_type: str = MANUAL,
    reference_no: Optional[str] = None,
    customer_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> StockOut:
    """Take stock out of a product. Raises InsufficientStockError instead of going negative."""
    quantity = to_quantity(quantity)
    product = _lock_product(db, product_id)
    available = Decimal(product.current_stock)
    if available < quantity:
        raise InsufficientStockError(
            f"Product {product.name} has insufficient stock. Available: {available}, Required: {quantity}"
        )
    movement = product_repo.create_stock_out(
        db,
        product_id=product.id,
        movement_date=movement_date,
        quantity=quantity,
        reference_type=reference_type,
        reference_no=reference_no,
        customer_id=customer_id,
        notes=notes,
    )
    product.current_stock = available - quantity
    db.flush()
    return movement


def revert_reference(db: Session, reference_type: str, reference_no: str) -> None:
    """Undo and delete every stock row generated from one invoice or purchase order."""
    for movement in product_repo.get_movements_by_reference(db, StockIn, reference_type, reference_no):
        product = _lock_product(db, movement.product_id)
        remaining = Decimal(product.current_stock) - Decimal(movement.quantity)
        if remaining < 0:
            raise InsufficientStockError(
                f"Cannot take back {movement.quantity} of {product.name}, only {product.current_stock} left"
            )
        product.current_stock = remaining
        db.delete(movement)
        db.flush()

    for movement in product_repo.get_movements_by_reference(db, StockOut, reference_type, reference_no):
        product = _lock_product(db, movement.product_id)
        product.current_stock = Decimal(product.current_stock) + Decimal(movement.quantity)
        db.delete(movement)
        db.flush()
    db.flush()


def _record_stock_in(db: Session, request: StockMovementCreate) -> List[StockIn]:
    reference_no = request.reference_no or numbering_service.next_document_number(db, DocumentType.STOCK_IN)
    return [
        apply_stock_in(
            db,
            line.product_id,
            line.quantity,
            request.movement_date,
            reference_no=reference_no,
            supplier_id=request.supplier_id,
            unit_cost=line.unit_cost,
            notes=request.notes,
        )
        for line in request.items
    ]


def _record_stock_out(db: Session, request: StockMovementCreate) -> List[StockOut]:
    reference_no = request.reference_no or numbering_service.next_document_number(db, DocumentType.STOCK_OUT)
    return [
        apply_stock_out(
            db,
            line.product_id,
            line.quantity,
            request.movement_date,
            reference_no=reference_no,
            customer_id=request.customer_id,
            notes=request.notes,
        )
        for line in request.items
    ]


def record_stock_in(db: Session, request: StockMovementCreate) -> List[StockIn]:
    """Manual stock in. Never touches a party ledger."""
    movements = ledger_service.run_in_unit_of_work(db, _record_stock_in, request)
    logger.info("Stock in recorded: %d line(s)", len(movements))
    return movements


def record_stock_out(db: Session, request: StockMovementCreate) -> List[StockOut]:
    """Manual stock out. All lines are applied or none are."""
    movements = ledger_service.run_in_unit_of_work(db, _record_stock_out, request)
    logger.info("Stock out recorded: %d line(s)", len(movements))
    return movements


def low_stock_products(db: Session, threshold=Decimal("10")) -> List[Product]:
    return product_repo.list_low_stock(db, threshold)
