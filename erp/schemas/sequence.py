from pydantic import BaseModel, Field

from erp.utils.constants import DocumentType

class SequenceUpdate(BaseModel):
    prefix: str = Field(..., min_length=1, max_length=20)
    next_number: int = Field(..., ge=1)

class SequenceResponse(BaseModel):
    doc_type: DocumentType
    prefix: str
    next_number: int
    next_document_no: str
