from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from erp.database import get_db
from erp.services import payment_service
from erp.schemas.payment import (
    PaymentInCreate,
    PaymentOutCreate,
    PaymentUpdate,
    PaymentInResponse,
    PaymentOutResponse,
)
from erp.utils.constants import PartyKind

router = APIRouter()

@router.post("/in", response_model=PaymentInResponse, status_code=status.HTTP_201_CREATED)
def receive_payment(request: PaymentInCreate, db: Session = Depends(get_db)):
    """
    Record a payment received from a customer.
    The customer's balance goes down by the amount.
    """
    return payment_service.receive_payment(db, request)

@router.get("/in", response_model=List[PaymentInResponse])
def list_payments_in(
    customer_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    return payment_service.list_payments(db, PartyKind.CUSTOMER, customer_id, skip, limit)

@router.get("/in/{payment_id}", response_model=PaymentInResponse)
def get_payment_in(payment_id: int, db: Session = Depends(get_db)):
    return payment_service.get_payment(db, PartyKind.CUSTOMER, payment_id)

@router.put("/in/{payment_id}", response_model=PaymentInResponse)
def update_payment_in(payment_id: int, request: PaymentUpdate, db: Session = Depends(get_db)):
    return payment_service.update_payment(db, PartyKind.CUSTOMER, payment_id, request)

@router.delete("/in/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment_in(payment_id: int, db: Session = Depends(get_db)):
    payment_service.delete_payment(db, PartyKind.CUSTOMER, payment_id)

@router.post("/out", response_model=PaymentOutResponse, status_code=status.HTTP_201_CREATED)
def make_payment(request: PaymentOutCreate, db: Session = Depends(get_db)):
    """
    Record a payment made to a supplier.
    The amount payable to the supplier goes down.
    """
    return payment_service.make_payment(db, request)

@router.get("/out", response_model=List[PaymentOutResponse])
def list_payments_out(
    supplier_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    return payment_service.list_payments(db, PartyKind.SUPPLIER, supplier_id, skip, limit)

@router.get("/out/{payment_id}", response_model=PaymentOutResponse)
def get_payment_out(payment_id: int, db: Session = Depends(get_db)):
    return payment_service.get_payment(db, PartyKind.SUPPLIER, payment_id)

@router.put("/out/{payment_id}", response_model=PaymentOutResponse)
def update_payment_out(payment_id: int, request: PaymentUpdate, db: Session = Depends(get_db)):
    return payment_service.update_payment(db, PartyKind.SUPPLIER, payment_id, request)

@router.delete("/out/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_payment_out(payment_id: int, db: Session = Depends(get_db)):
    payment_service.delete_payment(db, PartyKind.SUPPLIER, payment_id)
