from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session
from erp.database import get_db

router = APIRouter()

@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness plus a round trip to the database."""
    db.execute(text("SELECT 1"))
    return {"status": "healthy"}
