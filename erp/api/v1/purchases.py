from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from erp.database import get_db
from erp.services import purchase_service
from erp.schemas.document import PurchaseOrderCreate, DocumentUpdate, PurchaseOrderResponse

router = APIRouter()

@router.post("/orders", response_model=PurchaseOrderResponse, status_code=status.HTTP_201_CREATED)
def create_purchase_order(request: PurchaseOrderCreate, db: Session = Depends(get_db)):
    """
    Save a purchase order as a draft or finalize it straight away.
    Finalizing receives the goods into stock and, with add_to_account,
    credits the supplier.
    """
    return purchase_service.create_purchase_order(db, request)

@router.get("/orders/{order_id}", response_model=PurchaseOrderResponse)
def get_purchase_order(order_id: int, db: Session = Depends(get_db)):
    return purchase_service.get_purchase_order(db, order_id)

@router.put("/orders/{order_id}", response_model=PurchaseOrderResponse)
def update_purchase_order(order_id: int, request: DocumentUpdate, db: Session = Depends(get_db)):
    return purchase_service.update_purchase_order(db, order_id, request)

@router.post("/orders/{order_id}/finalize", response_model=PurchaseOrderResponse)
def finalize_purchase_order(order_id: int, db: Session = Depends(get_db)):
    return purchase_service.finalize_purchase_order(db, order_id)

@router.delete("/orders/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_purchase_order(order_id: int, db: Session = Depends(get_db)):
    purchase_service.delete_purchase_order(db, order_id)
