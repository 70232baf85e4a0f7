import pytest
from decimal import Decimal
from datetime import date

from erp.models.product import StockIn, StockOut
from erp.schemas.stock import StockMovementCreate, StockLine, ProductCreate
from erp.services import stock_service
from erp.utils.exceptions import ValidationError, InsufficientStockError


@pytest.fixture
def second_product(db_session):
    return stock_service.create_product(
        db_session,
        ProductCreate(name="Cotton Yarn", unit="kg", unit_price=Decimal("800"), current_stock=Decimal("5")),
    )


def test_stock_in_adds_quantity(db_session, product, supplier):
    movements = stock_service.record_stock_in(
        db_session,
        StockMovementCreate(
            movement_date=date(2024, 4, 1),
            supplier_id=supplier.id,
            items=[StockLine(product_id=product.id, quantity=Decimal("12.5"), unit_cost=Decimal("40"))],
        ),
    )

    assert movements[0].reference_no == "STK-IN-0001"
    assert movements[0].reference_type == "manual"
    assert product.current_stock == Decimal("112.500")
    # Stock never moves a party balance
    assert supplier.current_balance == Decimal("0.00")


def test_stock_out_removes_quantity(db_session, product):
    movements = stock_service.record_stock_out(
        db_session,
        StockMovementCreate(
            movement_date=date(2024, 4, 2),
            reference_no="GATE-17",
            items=[StockLine(product_id=product.id, quantity=Decimal("30"))],
        ),
    )

    assert movements[0].reference_no == "GATE-17"
    assert product.current_stock == Decimal("70.000")


def test_stock_out_is_all_or_nothing(db_session, product, second_product):
    with pytest.raises(InsufficientStockError):
        stock_service.record_stock_out(
            db_session,
            StockMovementCreate(
                movement_date=date(2024, 4, 2),
                items=[
                    StockLine(product_id=product.id, quantity=Decimal("10")),
                    StockLine(product_id=second_product.id, quantity=Decimal("6")),
                ],
            ),
        )

    assert product.current_stock == Decimal("100.000")
    assert second_product.current_stock == Decimal("5.000")
    assert db_session.query(StockOut).count() == 0


@pytest.mark.parametrize("quantity", [0, -1, "nan", "lots", "1e30", "1000000000000"])
def test_invalid_quantity(quantity):
    with pytest.raises(ValidationError):
        stock_service.to_quantity(quantity)


def test_low_stock_products(db_session, product, second_product):
    low = stock_service.low_stock_products(db_session, Decimal("10"))

    assert [p.name for p in low] == ["Cotton Yarn"]


def test_revert_reference_restores_stock(db_session, product):
    stock_service.apply_stock_in(
        db_session, product.id, Decimal("5"), date(2024, 4, 3),
        reference_type="purchase_order", reference_no="PO-0042",
    )
    db_session.commit()

    stock_service.revert_reference(db_session, "purchase_order", "PO-0042")
    db_session.commit()

    assert product.current_stock == Decimal("100.000")
    assert db_session.query(StockIn).count() == 0
