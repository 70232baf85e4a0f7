from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional
from datetime import date, datetime

from erp.utils.constants import PaymentMethod

class PaymentBase(BaseModel):
    receipt_no: Optional[str] = Field(None, min_length=1, max_length=50)
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    online_reference: Optional[str] = Field(None, max_length=100)
    amount: Decimal = Field(..., gt=0, max_digits=15, decimal_places=2)
    notes: Optional[str] = None

class PaymentInCreate(PaymentBase):
    customer_id: int = Field(..., gt=0)

class PaymentOutCreate(PaymentBase):
    supplier_id: int = Field(..., gt=0)

class PaymentUpdate(BaseModel):
    payment_date: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    online_reference: Optional[str] = Field(None, max_length=100)
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=15, decimal_places=2)
    notes: Optional[str] = None

class PaymentResponse(BaseModel):
    id: int
    receipt_no: str
    payment_date: date
    payment_method: str
    online_reference: Optional[str] = None
    amount: Decimal
    notes: Optional[str] = None
    ledger_entry_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PaymentInResponse(PaymentResponse):
    customer_id: int
    customer_balance: Optional[Decimal] = None

class PaymentOutResponse(PaymentResponse):
    supplier_id: int
    supplier_balance: Optional[Decimal] = None
