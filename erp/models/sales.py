from sqlalchemy import (
    Column, String, DateTime, Boolean, Date, Numeric, Text,
    BigInteger, ForeignKey, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


class SalesInvoice(Base):
    __tablename__ = "sales_invoices"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    invoice_no = Column(String(50), unique=True, nullable=False, index=True)
    invoice_date = Column(Date, nullable=False, index=True)
    customer_id = Column(BigInteger, ForeignKey("customers.id"), nullable=False, index=True)

    # draft invoices never touch stock or the customer ledger
    status = Column(String(20), nullable=False, default="draft")
    # False for cash sales settled on the spot
    add_to_account = Column(Boolean, nullable=False, default=True)

    subtotal = Column(Numeric(15, 2), nullable=False, default=0)
    discount = Column(Numeric(15, 2), nullable=False, default=0)
    total_amount = Column(Numeric(15, 2), nullable=False, default=0)

    ledger_entry_id = Column(BigInteger, ForeignKey("customer_ledger.id"), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship(
        "SalesInvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="SalesInvoiceItem.id",
    )

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'finalized')", name="chk_sales_invoice_status"),
        {"mysql_engine": "InnoDB"},
    )


class SalesInvoiceItem(Base):
    __tablename__ = "sales_invoice_items"

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    invoice_id = Column(BigInteger, ForeignKey("sales_invoices.id"), nullable=False, index=True)
    product_id = Column(BigInteger, ForeignKey("products.id"), nullable=False)
    product_name = Column(String(150), nullable=True)

    quantity = Column(Numeric(15, 3), nullable=False)
    unit_price = Column(Numeric(15, 2), nullable=False)
    total_price = Column(Numeric(15, 2), nullable=False)

    invoice = relationship("SalesInvoice", back_populates="items")
