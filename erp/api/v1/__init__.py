from fastapi import APIRouter
from . import health, parties, ledgers, payments, sales, purchases, stock, sequences
from erp.utils.constants import PartyKind

api_router = APIRouter()

# Include all v1 routes
api_router.include_router(health.router, tags=["health"])
api_router.include_router(parties.build_router(PartyKind.CUSTOMER), prefix="/customers", tags=["customers"])
api_router.include_router(parties.build_router(PartyKind.SUPPLIER), prefix="/suppliers", tags=["suppliers"])
api_router.include_router(ledgers.router, prefix="/ledgers", tags=["ledgers"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(sales.router, prefix="/sales", tags=["sales"])
api_router.include_router(purchases.router, prefix="/purchases", tags=["purchases"])
api_router.include_router(stock.router, tags=["stock"])
api_router.include_router(sequences.router, prefix="/sequences", tags=["sequences"])
