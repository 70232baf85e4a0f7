from datetime import date
from sqlalchemy.orm import Session
from erp.models.ledger import CustomerLedgerEntry, SupplierLedgerEntry
from erp.utils.constants import PartyKind, EntryStatus
from typing import List, Optional

LEDGER_MODELS = {
    PartyKind.CUSTOMER: CustomerLedgerEntry,
    PartyKind.SUPPLIER: SupplierLedgerEntry,
}


def get_ledger_model(kind: PartyKind):
    return LEDGER_MODELS[PartyKind(kind)]


def insert_ledger_entry(db: Session, kind: PartyKind, **fields):
    """Create a ledger entry and flush it so it gets an ID."""
    entry = get_ledger_model(kind)(**fields)
    db.add(entry)
    db.flush()
    return entry


def get_entry(db: Session, kind: PartyKind, entry_id: int):
    model = get_ledger_model(kind)
    return db.query(model).filter(model.id == entry_id).first()


def update_ledger_entry(db: Session, entry, **fields) -> None:
    for field, value in fields.items():
        setattr(entry, field, value)


def query_ledger_entries(
    db: Session,
    kind: PartyKind,
    party_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    include_voided: bool = False,
) -> List:
    """
    Entries for one party in replay order: transaction_date, then id.
    """
    model = get_ledger_model(kind)
    query = db.query(model).filter(model.party_id == party_id)
    if not include_voided:
        query = query.filter(model.status != EntryStatus.VOIDED.value)
    if from_date:
        query = query.filter(model.transaction_date >= from_date)
    if to_date:
        query = query.filter(model.transaction_date <= to_date)
    return query.order_by(model.transaction_date, model.id).all()


def has_entries_after(db: Session, kind: PartyKind, party_id: int, after: date) -> bool:
    """True when a live entry is dated later than `after`."""
    model = get_ledger_model(kind)
    return db.query(
        db.query(model)
        .filter(
            model.party_id == party_id,
            model.status != EntryStatus.VOIDED.value,
            model.transaction_date > after,
        )
        .exists()
    ).scalar()
