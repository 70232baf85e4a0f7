from contextlib import asynccontextmanager
from fastapi import FastAPI
from erp.config import settings
from erp.database import init_db
from erp.logger_config import logger
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from erp.api.v1 import api_router
from erp.middleware.error_handler import (
    validation_exception_handler,
    erp_validation_handler,
    not_found_handler,
    insufficient_stock_handler,
    concurrency_conflict_handler,
    persistence_error_handler,
    database_exception_handler,
    generic_exception_handler
)
from erp.utils.exceptions import (
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    ConcurrencyConflict,
    PersistenceError
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests build their own schema per test
    if settings.APP_ENV != "test":
        init_db()
        logger.info("%s started (%s)", settings.PROJECT_NAME, settings.APP_ENV)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
    lifespan=lifespan
)

@app.get("/health")
def health_check():
    return {"status": "healthy"}

# Register exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, erp_validation_handler)
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(InsufficientStockError, insufficient_stock_handler)
app.add_exception_handler(ConcurrencyConflict, concurrency_conflict_handler)
app.add_exception_handler(PersistenceError, persistence_error_handler)
app.add_exception_handler(SQLAlchemyError, database_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include API routes
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
