from sqlalchemy import (
    Column, String, DateTime, Date, Numeric, Text,
    BigInteger, ForeignKey, CheckConstraint
)
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


class PaymentMixin:
    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    receipt_no = Column(String(50), unique=True, nullable=False, index=True)
    payment_date = Column(Date, nullable=False, index=True)

    # cash, cheque, bank_transfer, online
    payment_method = Column(String(20), nullable=False)
    online_reference = Column(String(100), nullable=True)

    amount = Column(Numeric(15, 2), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class PaymentIn(PaymentMixin, Base):
    """Money received from a customer."""
    __tablename__ = "payments_in"

    customer_id = Column(BigInteger, ForeignKey("customers.id"), nullable=False, index=True)
    ledger_entry_id = Column(BigInteger, ForeignKey("customer_ledger.id"), nullable=True)

    # Customer balance right after this payment was posted
    customer_balance = Column(Numeric(15, 2), nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="chk_payments_in_amount_positive"),
        {"mysql_engine": "InnoDB"},
    )


class PaymentOut(PaymentMixin, Base):
    """Money paid to a supplier."""
    __tablename__ = "payments_out"

    supplier_id = Column(BigInteger, ForeignKey("suppliers.id"), nullable=False, index=True)
    ledger_entry_id = Column(BigInteger, ForeignKey("supplier_ledger.id"), nullable=True)

    supplier_balance = Column(Numeric(15, 2), nullable=True)

    __table_args__ = (
        CheckConstraint("amount > 0", name="chk_payments_out_amount_positive"),
        {"mysql_engine": "InnoDB"},
    )
