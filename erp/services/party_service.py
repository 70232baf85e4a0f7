from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List, Optional

from erp.logger_config import logger
from erp.repositories import party_repo
from erp.schemas.party import PartyCreate
from erp.services import ledger_service
from erp.utils.constants import PartyKind, LedgerTransactionType
from erp.utils.exceptions import NotFoundError


def _open_account(db: Session, kind: PartyKind, request: PartyCreate):
    opening = ledger_service.to_amount(request.opening_balance)
    fields = request.model_dump(exclude={"opening_balance", "opening_date"})
    party = party_repo.create_party(db, kind, opening_balance=opening, **fields)

    # The running balance starts at zero and only moves through the ledger
    if opening != Decimal("0"):
        ledger_service.post_entry(
            db,
            kind,
            party.id,
            LedgerTransactionType.OPENING,
            opening,
            transaction_date=request.opening_date,
            description="Opening Balance",
        )
    logger.info("Created %s %s (%s) with opening balance %s", kind.value, party.id, party.name, opening)
    return party


def create_party(db: Session, kind: PartyKind, request: PartyCreate):
    """Create a customer or supplier, posting an opening entry when the opening balance is not zero."""
    return ledger_service.run_in_unit_of_work(db, _open_account, PartyKind(kind), request)


def get_party(db: Session, kind: PartyKind, party_id: int):
    party = party_repo.get_party(db, kind, party_id)
    if not party:
        raise NotFoundError(f"{PartyKind(kind).value.title()} {party_id} not found")
    return party


def list_parties(
    db: Session,
    kind: PartyKind,
    search: Optional[str] = None,
    include_inactive: bool = False,
    skip: int = 0,
    limit: int = 50,
) -> List:
    return party_repo.list_parties(
        db, kind, search=search, include_inactive=include_inactive, skip=skip, limit=limit
    )


def deactivate_party(db: Session, kind: PartyKind, party_id: int):
    """Hide a party from pickers. Its ledger stays readable."""
    def _deactivate(db: Session):
        party = ledger_service.lock_party(db, kind, party_id, require_active=False)
        party.is_active = False
        return party

    return ledger_service.run_in_unit_of_work(db, _deactivate)
