from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Date, Numeric, Text,
    BigInteger, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


class Product(Base):
    __tablename__ = "products"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False, index=True)
    category = Column(String(100), nullable=True)
    unit = Column(String(30), nullable=True)  # e.g. "meter", "kg", "roll"

    unit_price = Column(Numeric(15, 2), nullable=False, default=0)
    current_stock = Column(Numeric(15, 3), nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_products_active", "is_active"),
        {"mysql_engine": "InnoDB"},
    )


class StockMovementMixin:
    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    movement_date = Column(Date, nullable=False, index=True)
    quantity = Column(Numeric(15, 3), nullable=False)

    # 'manual', 'sales_invoice' or 'purchase_order'
    reference_type = Column(String(30), nullable=False, default="manual")
    reference_no = Column(String(50), nullable=True, index=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class StockIn(StockMovementMixin, Base):
    __tablename__ = "stock_in"

    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False, index=True)
    supplier_id = Column(BigInteger, ForeignKey("suppliers.id"), nullable=True)
    unit_cost = Column(Numeric(15, 2), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_stock_in_quantity_positive"),
        {"mysql_engine": "InnoDB"},
    )


class StockOut(StockMovementMixin, Base):
    __tablename__ = "stock_out"

    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False, index=True)
    customer_id = Column(BigInteger, ForeignKey("customers.id"), nullable=True)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_stock_out_quantity_positive"),
        {"mysql_engine": "InnoDB"},
    )
