from sqlalchemy import (
    Column, String, DateTime, Date, Numeric,
    BigInteger, ForeignKey, Index, CheckConstraint
)
from sqlalchemy.sql import func
from erp.database import Base, BigIntPK


def _entry_constraints(prefix: str) -> tuple:
    return (
        CheckConstraint("debit >= 0 AND credit >= 0", name=f"chk_{prefix}_non_negative"),
        CheckConstraint("debit = 0 OR credit = 0", name=f"chk_{prefix}_single_side"),
        CheckConstraint(
            "status IN ('committed', 'amended', 'voided')", name=f"chk_{prefix}_status_valid"
        ),
        Index(f"idx_{prefix}_party_date", "party_id", "transaction_date", "id"),
        {"mysql_engine": "InnoDB"},
    )


class LedgerEntryMixin:
    id = Column(BigIntPK, primary_key=True, autoincrement=True)

    # 'opening', 'invoice', 'purchase', 'payment' or 'adjustment'
    transaction_type = Column(String(20), nullable=False, index=True)
    transaction_date = Column(Date, nullable=False)

    # Originating payment / invoice / purchase order row
    reference_id = Column(BigInteger, nullable=True)
    reference_no = Column(String(50), nullable=True)

    debit = Column(Numeric(15, 2), nullable=False, default=0)
    credit = Column(Numeric(15, 2), nullable=False, default=0)

    # Running balance after this entry
    balance = Column(Numeric(15, 2), nullable=False)

    description = Column(String(255), nullable=True)

    # 'committed', 'amended' or 'voided'. Voided entries are left out of replay.
    status = Column(String(20), nullable=False, default="committed")

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class CustomerLedgerEntry(LedgerEntryMixin, Base):
    __tablename__ = "customer_ledger"

    party_id = Column(BigInteger, ForeignKey("customers.id"), nullable=False, index=True)

    __table_args__ = _entry_constraints("customer_ledger")


class SupplierLedgerEntry(LedgerEntryMixin, Base):
    __tablename__ = "supplier_ledger"

    party_id = Column(BigInteger, ForeignKey("suppliers.id"), nullable=False, index=True)

    __table_args__ = _entry_constraints("supplier_ledger")
