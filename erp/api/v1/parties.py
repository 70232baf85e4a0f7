from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import List, Optional
from erp.database import get_db
from erp.services import party_service, ledger_service
from erp.schemas.party import PartyCreate, PartyResponse
from erp.schemas.ledger import LedgerStatement
from erp.utils.constants import PartyKind


def build_router(kind: PartyKind) -> APIRouter:
    """Customer and supplier endpoints only differ by the ledger they post to."""
    router = APIRouter()

    @router.post("", response_model=PartyResponse, status_code=status.HTTP_201_CREATED)
    def create_party(request: PartyCreate, db: Session = Depends(get_db)):
        """
        Create a party. A nonzero opening balance is posted as the first
        ledger entry, so current_balance always matches the ledger.
        """
        return party_service.create_party(db, kind, request)

    @router.get("", response_model=List[PartyResponse])
    def list_parties(
        search: Optional[str] = Query(None, description="Match on name or mobile number"),
        include_inactive: bool = False,
        skip: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=500),
        db: Session = Depends(get_db)
    ):
        return party_service.list_parties(
            db, kind, search=search, include_inactive=include_inactive, skip=skip, limit=limit
        )

    @router.get("/{party_id}", response_model=PartyResponse)
    def get_party(party_id: int, db: Session = Depends(get_db)):
        return party_service.get_party(db, kind, party_id)

    @router.delete("/{party_id}", response_model=PartyResponse)
    def deactivate_party(party_id: int, db: Session = Depends(get_db)):
        """Deactivate rather than delete: the ledger history stays."""
        return party_service.deactivate_party(db, kind, party_id)

    @router.get("/{party_id}/statement", response_model=LedgerStatement)
    def get_statement(
        party_id: int,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        db: Session = Depends(get_db)
    ):
        return ledger_service.reconstruct_statement(db, kind, party_id, from_date, to_date)

    return router
