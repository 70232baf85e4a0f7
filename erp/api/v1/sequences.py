from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from erp.database import get_db
from erp.services import numbering_service
from erp.schemas.sequence import SequenceUpdate, SequenceResponse
from erp.utils.constants import DocumentType

router = APIRouter()

@router.get("/{doc_type}", response_model=SequenceResponse)
def get_sequence(doc_type: DocumentType, db: Session = Depends(get_db)):
    """Show the number the next document of this type will get."""
    return numbering_service.describe_sequence(db, doc_type)

@router.put("/{doc_type}", response_model=SequenceResponse)
def configure_sequence(doc_type: DocumentType, request: SequenceUpdate, db: Session = Depends(get_db)):
    numbering_service.configure_sequence(db, doc_type, request.prefix, request.next_number)
    return numbering_service.describe_sequence(db, doc_type)
