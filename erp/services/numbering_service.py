from sqlalchemy.orm import Session

from erp.logger_config import logger
from erp.repositories import sequence_repo
from erp.utils.constants import DocumentType, DEFAULT_PREFIXES
from erp.utils.exceptions import ValidationError


def format_document_number(prefix: str, number: int) -> str:
    return f"{prefix}-{number:04d}"


def _get_or_create(db: Session, doc_type: DocumentType):
    sequence = sequence_repo.get_sequence(db, doc_type.value)
    if not sequence:
        sequence = sequence_repo.create_sequence(db, doc_type.value, DEFAULT_PREFIXES[doc_type])
    return sequence


def next_document_number(db: Session, doc_type: DocumentType) -> str:
    """
    Hand out the next number for a document type, e.g. "INV-0007".

    Runs inside the caller's transaction, so a rolled back recording
    gives its number back. Numbers already taken by a document entered
    with a manual number are skipped.
    """
    doc_type = DocumentType(doc_type)
    _get_or_create(db, doc_type)
    while True:
        sequence = sequence_repo.increment_sequence(db, doc_type.value)
        document_no = format_document_number(sequence.prefix, sequence.next_number - 1)
        if not sequence_repo.number_in_use(db, doc_type.value, document_no):
            return document_no
        logger.info("Skipping %s, already used by a manual entry", document_no)


def preview_document_number(db: Session, doc_type: DocumentType) -> str:
    """The number the next document will get, without consuming it."""
    doc_type = DocumentType(doc_type)
    sequence = sequence_repo.get_sequence(db, doc_type.value)
    if not sequence:
        return format_document_number(DEFAULT_PREFIXES[doc_type], 1)
    return format_document_number(sequence.prefix, sequence.next_number)


def configure_sequence(db: Session, doc_type: DocumentType, prefix: str, next_number: int):
    """Change the prefix or restart point of a sequence (settings page)."""
    if not prefix or not prefix.strip():
        raise ValidationError("Prefix must not be empty")
    if next_number < 1:
        raise ValidationError("Next number must be at least 1")
    sequence = _get_or_create(db, DocumentType(doc_type))
    sequence.prefix = prefix.strip()
    sequence.next_number = next_number
    db.commit()
    db.refresh(sequence)
    return sequence


def describe_sequence(db: Session, doc_type: DocumentType) -> dict:
    doc_type = DocumentType(doc_type)
    sequence = sequence_repo.get_sequence(db, doc_type.value)
    prefix = sequence.prefix if sequence else DEFAULT_PREFIXES[doc_type]
    next_number = sequence.next_number if sequence else 1
    return {
        "doc_type": doc_type,
        "prefix": prefix,
        "next_number": next_number,
        "next_document_no": preview_document_number(db, doc_type),
    }
