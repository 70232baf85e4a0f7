from decimal import Decimal
from sqlalchemy import or_
from sqlalchemy.orm import Session
from erp.models.party import Customer, Supplier
from erp.utils.constants import PartyKind
from typing import List, Optional

PARTY_MODELS = {
    PartyKind.CUSTOMER: Customer,
    PartyKind.SUPPLIER: Supplier,
}


def get_party_model(kind: PartyKind):
    return PARTY_MODELS[PartyKind(kind)]


def get_party(db: Session, kind: PartyKind, party_id: int):
    """Fetch a customer or supplier by ID."""
    model = get_party_model(kind)
    return db.query(model).filter(model.id == party_id).first()


def get_party_for_update(db: Session, kind: PartyKind, party_id: int):
    """
    Fetch a party and LOCK its row for the current transaction.

    Uses SELECT ... FOR UPDATE so concurrent postings on the same party
    queue up behind each other. The lock is held until commit or rollback.
    populate_existing() makes sure the balance comes from the database and
    not from an object already sitting in the session.
    """
    model = get_party_model(kind)
    return (
        db.query(model)
        .filter(model.id == party_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def create_party(db: Session, kind: PartyKind, **fields):
    """
    Create a customer or supplier with a zero running balance.

    The opening balance is posted separately through the ledger engine.
    """
    model = get_party_model(kind)
    party = model(current_balance=Decimal("0.00"), **fields)
    db.add(party)
    db.flush()
    return party


def list_parties(
    db: Session,
    kind: PartyKind,
    search: Optional[str] = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> List:
    model = get_party_model(kind)
    query = db.query(model)
    if not include_inactive:
        query = query.filter(model.is_active.is_(True))
    if search:
        query = query.filter(
            or_(
                model.name.ilike(f"%{search}%"),
                model.mobile_no.ilike(f"%{search}%"),
            )
        )
    return query.order_by(model.name).offset(skip).limit(limit).all()


def update_party_balance(db: Session, party, new_balance: Decimal) -> None:
    """
    Set a party's running balance.

    NOTE: Call get_party_for_update() first. The version column turns a
    write based on a stale read into a StaleDataError at flush time.
    """
    party.current_balance = new_balance
