from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from erp.database import get_db
from erp.services import ledger_service
from erp.schemas.ledger import AdjustmentRequest, LedgerEntryResponse, LedgerVerification
from erp.utils.constants import PartyKind, LedgerTransactionType

router = APIRouter()

@router.post(
    "/{kind}/{party_id}/adjustments",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
def post_adjustment(
    kind: PartyKind,
    party_id: int,
    request: AdjustmentRequest,
    db: Session = Depends(get_db)
):
    """
    Post a manual adjustment. A positive amount raises the balance
    (customer owes more / we owe the supplier more), a negative one lowers it.
    """
    return ledger_service.record_transaction(
        db,
        kind,
        party_id,
        LedgerTransactionType.ADJUSTMENT,
        request.amount,
        transaction_date=request.transaction_date,
        reference_no=request.reference_no,
        description=request.description or "Balance adjustment",
    )

@router.get("/{kind}/{party_id}/verify", response_model=LedgerVerification)
def verify_ledger(kind: PartyKind, party_id: int, db: Session = Depends(get_db)):
    return ledger_service.verify_ledger(db, kind, party_id)
