from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional
from datetime import date

from erp.utils.constants import DocumentStatus

class DocumentItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: Decimal = Field(..., gt=0, max_digits=15, decimal_places=3)
    unit_price: Decimal = Field(..., ge=0, max_digits=15, decimal_places=2)

class DocumentItemResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    total_price: Decimal

    class Config:
        from_attributes = True

class SalesInvoiceCreate(BaseModel):
    customer_id: int = Field(..., gt=0)
    invoice_no: Optional[str] = Field(None, min_length=1, max_length=50)
    invoice_date: date
    items: List[DocumentItemIn] = Field(..., min_length=1)
    discount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    add_to_account: bool = True
    save_as: DocumentStatus = DocumentStatus.FINALIZED
    notes: Optional[str] = None

class PurchaseOrderCreate(BaseModel):
    supplier_id: int = Field(..., gt=0)
    po_no: Optional[str] = Field(None, min_length=1, max_length=50)
    po_date: date
    receiving_date: Optional[date] = None
    items: List[DocumentItemIn] = Field(..., min_length=1)
    discount: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    add_to_account: bool = True
    save_as: DocumentStatus = DocumentStatus.FINALIZED
    notes: Optional[str] = None

class DocumentUpdate(BaseModel):
    document_date: Optional[date] = None
    items: Optional[List[DocumentItemIn]] = Field(None, min_length=1)
    discount: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
    notes: Optional[str] = None

class SalesInvoiceResponse(BaseModel):
    id: int
    invoice_no: str
    invoice_date: date
    customer_id: int
    status: str
    add_to_account: bool
    subtotal: Decimal
    discount: Decimal
    total_amount: Decimal
    ledger_entry_id: Optional[int] = None
    notes: Optional[str] = None
    items: List[DocumentItemResponse] = []

    class Config:
        from_attributes = True

class PurchaseOrderResponse(BaseModel):
    id: int
    po_no: str
    po_date: date
    receiving_date: Optional[date] = None
    supplier_id: int
    status: str
    add_to_account: bool
    subtotal: Decimal
    discount: Decimal
    total_amount: Decimal
    ledger_entry_id: Optional[int] = None
    notes: Optional[str] = None
    items: List[DocumentItemResponse] = []

    class Config:
        from_attributes = True
