from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional
from datetime import date

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    category: Optional[str] = Field(None, max_length=100)
    unit: Optional[str] = Field(None, max_length=30)
    unit_price: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=2)
    current_stock: Decimal = Field(Decimal("0"), ge=0, max_digits=15, decimal_places=3)

class ProductResponse(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    unit: Optional[str] = None
    unit_price: Decimal
    current_stock: Decimal
    is_active: bool

    class Config:
        from_attributes = True

class StockLine(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: Decimal = Field(..., gt=0, max_digits=15, decimal_places=3)
    unit_cost: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)

class StockMovementCreate(BaseModel):
    movement_date: date
    reference_no: Optional[str] = Field(None, max_length=50)
    supplier_id: Optional[int] = None
    customer_id: Optional[int] = None
    notes: Optional[str] = None
    items: List[StockLine] = Field(..., min_length=1)

class StockMovementResponse(BaseModel):
    id: int
    product_id: int
    movement_date: date
    quantity: Decimal
    reference_type: str
    reference_no: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True
