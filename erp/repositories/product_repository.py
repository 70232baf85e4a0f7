from sqlalchemy.orm import Session
from erp.models.product import Product, StockIn, StockOut
from typing import List, Optional


def create_product(db: Session, **fields) -> Product:
    product = Product(**fields)
    db.add(product)
    db.flush()
    return product


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


def get_product_for_update(db: Session, product_id: int) -> Optional[Product]:
    """Fetch a product and lock its row until commit or rollback."""
    return (
        db.query(Product)
        .filter(Product.id == product_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def list_low_stock(db: Session, threshold) -> List[Product]:
    return (
        db.query(Product)
        .filter(Product.is_active.is_(True), Product.current_stock <= threshold)
        .order_by(Product.current_stock, Product.name)
        .all()
    )


def create_stock_in(db: Session, **fields) -> StockIn:
    movement = StockIn(**fields)
    db.add(movement)
    db.flush()
    return movement


def create_stock_out(db: Session, **fields) -> StockOut:
    movement = StockOut(**fields)
    db.add(movement)
    db.flush()
    return movement


def get_movements_by_reference(db: Session, model, reference_type: str, reference_no: str) -> List:
    """Stock rows generated from one invoice or purchase order."""
    return (
        db.query(model)
        .filter(model.reference_type == reference_type, model.reference_no == reference_no)
        .order_by(model.id)
        .all()
    )
