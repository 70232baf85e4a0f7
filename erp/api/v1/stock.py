from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from decimal import Decimal
from typing import List
from erp.database import get_db
from erp.services import stock_service
from erp.schemas.stock import (
    ProductCreate,
    ProductResponse,
    StockMovementCreate,
    StockMovementResponse,
)

router = APIRouter()

@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(request: ProductCreate, db: Session = Depends(get_db)):
    return stock_service.create_product(db, request)

@router.get("/products/low-stock", response_model=List[ProductResponse])
def low_stock_products(
    threshold: Decimal = Query(Decimal("10"), ge=0),
    db: Session = Depends(get_db)
):
    return stock_service.low_stock_products(db, threshold)

@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return stock_service.get_product(db, product_id)

@router.post("/stock/in", response_model=List[StockMovementResponse], status_code=status.HTTP_201_CREATED)
def stock_in(request: StockMovementCreate, db: Session = Depends(get_db)):
    """Manual stock in. Only product stock changes, no party ledger is touched."""
    return stock_service.record_stock_in(db, request)

@router.post("/stock/out", response_model=List[StockMovementResponse], status_code=status.HTTP_201_CREATED)
def stock_out(request: StockMovementCreate, db: Session = Depends(get_db)):
    """Manual stock out. Fails as a whole if any line lacks stock."""
    return stock_service.record_stock_out(db, request)
