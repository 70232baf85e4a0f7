from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Date, Numeric, Text, Index
)
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


class PartyMixin:
    """Columns shared by customers and suppliers."""
    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    name = Column(String(150), nullable=False, index=True)
    contact_person = Column(String(100), nullable=True)
    mobile_no = Column(String(30), nullable=True)
    whatsapp_no = Column(String(30), nullable=True)
    email = Column(String(150), nullable=True)
    address = Column(Text, nullable=True)

    # Tax registration numbers
    ntn = Column(String(30), nullable=True)
    strn = Column(String(30), nullable=True)

    notes = Column(Text, nullable=True)

    # Balance declared when the account was opened, kept for reference
    opening_balance = Column(Numeric(15, 2), nullable=False, default=0)

    # Denormalized running balance. Only the ledger engine writes it.
    current_balance = Column(Numeric(15, 2), nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Customer(PartyMixin, Base):
    __tablename__ = "customers"

    # Positive balance: the customer owes the business
    last_order_date = Column(Date, nullable=True)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_customers_active", "is_active"),
        {"mysql_engine": "InnoDB"},
    )


class Supplier(PartyMixin, Base):
    __tablename__ = "suppliers"

    # Positive balance: the business owes the supplier
    last_purchase_date = Column(Date, nullable=True)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (
        Index("idx_suppliers_active", "is_active"),
        {"mysql_engine": "InnoDB"},
    )
