from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional
from datetime import date, datetime

from erp.utils.constants import PartyKind

class AdjustmentRequest(BaseModel):
    # Signed: positive raises the party's balance, negative lowers it
    amount: Decimal = Field(..., max_digits=15, decimal_places=2)
    transaction_date: Optional[date] = None
    reference_no: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=255)

class LedgerEntryResponse(BaseModel):
    id: int
    party_id: int
    transaction_type: str
    transaction_date: date
    reference_id: Optional[int] = None
    reference_no: Optional[str] = None
    debit: Decimal
    credit: Decimal
    balance: Decimal
    description: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class StatementLine(BaseModel):
    entry_id: int
    transaction_date: date
    transaction_type: str
    reference_no: Optional[str] = None
    description: Optional[str] = None
    debit: Decimal
    credit: Decimal
    balance: Decimal

class LedgerStatement(BaseModel):
    party_kind: PartyKind
    party_id: int
    party_name: str
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    opening_balance: Decimal
    lines: List[StatementLine]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal
    current_balance: Decimal

class LedgerVerification(BaseModel):
    party_kind: PartyKind
    party_id: int
    consistent: bool
    replayed_balance: Decimal
    current_balance: Decimal
    mismatched_entry_ids: List[int] = []
