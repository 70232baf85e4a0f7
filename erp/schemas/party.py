from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional
from datetime import date, datetime

class PartyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    contact_person: Optional[str] = Field(None, max_length=100)
    mobile_no: Optional[str] = Field(None, max_length=30)
    whatsapp_no: Optional[str] = Field(None, max_length=30)
    email: Optional[str] = Field(None, max_length=150)
    address: Optional[str] = None
    ntn: Optional[str] = Field(None, max_length=30)
    strn: Optional[str] = Field(None, max_length=30)
    notes: Optional[str] = None
    # Signed: a negative customer opening balance means the customer holds credit
    opening_balance: Decimal = Field(Decimal("0"), max_digits=15, decimal_places=2)
    opening_date: Optional[date] = None

class PartyResponse(BaseModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    mobile_no: Optional[str] = None
    whatsapp_no: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    ntn: Optional[str] = None
    strn: Optional[str] = None
    notes: Optional[str] = None
    opening_balance: Decimal
    current_balance: Decimal
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
