from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from decimal import Decimal

from erp.logger_config import logger
from erp.utils.exceptions import (
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    ConcurrencyConflict,
    PersistenceError,
)


def _error_body(error: str, message: str, details=None) -> dict:
    return {"error": error, "message": message, "details": details or {}}


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    # Convert Decimal objects to strings for JSON serialization
    errors = exc.errors()
    for error in errors:
        ctx = error.get("ctx")
        if ctx:
            for key, value in ctx.items():
                if isinstance(value, (Decimal, Exception)):
                    ctx[key] = str(value)
        if isinstance(error.get("input"), Decimal):
            error["input"] = str(error["input"])

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body("validation_error", "Invalid request data", errors),
    )


async def erp_validation_handler(request: Request, exc: ValidationError):
    """Handle rejected amounts, unknown types and illegal state changes"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("invalid_transaction", exc.message),
    )


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=_error_body("not_found", exc.message),
    )


async def insufficient_stock_handler(request: Request, exc: InsufficientStockError):
    """Handle insufficient stock errors"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("insufficient_stock", exc.message),
    )


async def concurrency_conflict_handler(request: Request, exc: ConcurrencyConflict):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=_error_body("concurrency_conflict", exc.message),
    )


async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("persistence_error", exc.message),
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Handle database errors"""
    logger.exception("Unhandled database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("database_error", "A database error occurred"),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("internal_server_error", "An unexpected error occurred"),
    )
