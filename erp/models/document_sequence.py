from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from erp.database import Base


class DocumentSequence(Base):
    """Prefix and next number for each kind of numbered document."""
    __tablename__ = "document_sequences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    doc_type = Column(String(30), unique=True, nullable=False)
    prefix = Column(String(20), nullable=False)
    next_number = Column(Integer, nullable=False, default=1)

    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        {"mysql_engine": "InnoDB"},
    )
