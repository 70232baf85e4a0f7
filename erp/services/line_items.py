from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Tuple

from erp.services import ledger_service, stock_service
from erp.utils.exceptions import ValidationError


def build_lines(db: Session, items, item_model) -> Tuple[List, Decimal]:
    """Price each requested line against its product and return (rows, subtotal)."""
    lines = []
    subtotal = ledger_service.ZERO
    for item in items:
        product = stock_service.get_product(db, item.product_id)
        quantity = stock_service.to_quantity(item.quantity)
        unit_price = ledger_service.to_amount(item.unit_price)
        total_price = ledger_service.to_amount(quantity * unit_price)
        lines.append(
            item_model(
                product_id=product.id,
                product_name=product.name,
                quantity=quantity,
                unit_price=unit_price,
                total_price=total_price,
            )
        )
        subtotal += total_price
    return lines, subtotal


def compute_total(subtotal, discount) -> Decimal:
    subtotal = ledger_service.to_amount(subtotal)
    discount = ledger_service.to_amount(discount)
    if discount < 0:
        raise ValidationError("Discount must not be negative")
    if discount > subtotal:
        raise ValidationError(f"Discount {discount} exceeds subtotal {subtotal}")
    return subtotal - discount
