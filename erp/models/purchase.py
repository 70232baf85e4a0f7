from sqlalchemy import (
    Column, String, DateTime, Boolean, Date, Numeric, Text,
    BigInteger, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    po_no = Column(String(50), unique=True, nullable=False, index=True)
    po_date = Column(Date, nullable=False, index=True)
    receiving_date = Column(Date, nullable=True)
    supplier_id = Column(BigInteger, ForeignKey("suppliers.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="draft")
    add_to_account = Column(Boolean, nullable=False, default=True)

    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    discount = Column(Numeric(15, 2), nullable=False, default=0)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)

    ledger_entry_id = Column(BigInteger, ForeignKey("supplier_ledger.id"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "PurchaseOrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItem.id",
    )

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'finalized')", name="chk_purchase_order_status"),
        {"mysql_engine": "InnoDB"},
    )


class PurchaseOrderItem(Base):
    __tablename__ = "purchase_order_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey("purchase_orders.id"), nullable=False, index=True)
    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False)
    product_name = Column(String(150), nullable=True)

    quantity = Column(Numeric(15, 3), nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    total_price = Column(Numeric(15, 2), nullable=False)

    order = relationship("PurchaseOrder", back_populates="items")
