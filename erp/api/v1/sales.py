from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from erp.database import get_db
from erp.services import invoice_service
from erp.schemas.document import SalesInvoiceCreate, DocumentUpdate, SalesInvoiceResponse

router = APIRouter()

@router.post("/invoices", response_model=SalesInvoiceResponse, status_code=status.HTTP_201_CREATED)
def create_invoice(request: SalesInvoiceCreate, db: Session = Depends(get_db)):
    """
    Save a sales invoice as a draft or finalize it straight away.
    Finalizing deducts stock and, with add_to_account, debits the customer.
    """
    return invoice_service.create_invoice(db, request)

@router.get("/invoices/{invoice_id}", response_model=SalesInvoiceResponse)
def get_invoice(invoice_id: int, db: Session = Depends(get_db)):
    return invoice_service.get_invoice(db, invoice_id)

@router.put("/invoices/{invoice_id}", response_model=SalesInvoiceResponse)
def update_invoice(invoice_id: int, request: DocumentUpdate, db: Session = Depends(get_db)):
    return invoice_service.update_invoice(db, invoice_id, request)

@router.post("/invoices/{invoice_id}/finalize", response_model=SalesInvoiceResponse)
def finalize_invoice(invoice_id: int, db: Session = Depends(get_db)):
    return invoice_service.finalize_invoice(db, invoice_id)

@router.delete("/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(invoice_id: int, db: Session = Depends(get_db)):
    invoice_service.delete_invoice(db, invoice_id)
