class ErpException(Exception):
    """Base exception for all ledger and recorder errors"""
    def __init__(self, message: str, code: str = "ERP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)

class ValidationError(ErpException):
    def __init__(self, message: str = "Invalid transaction data"):
        super().__init__(message, code="VALIDATION_ERROR")

class NotFoundError(ErpException):
    def __init__(self, message: str = "The requested record was not found"):
        super().__init__(message, code="NOT_FOUND")

class InsufficientStockError(ErpException):
    def __init__(self, message: str = "Insufficient stock to complete transaction"):
        super().__init__(message, code="INSUFFICIENT_STOCK")

class ConcurrencyConflict(ErpException):
    def __init__(self, message: str = "The record was modified concurrently, please retry"):
        super().__init__(message, code="CONCURRENCY_CONFLICT")

class PersistenceError(ErpException):
    def __init__(self, message: str = "Transaction failed, no changes were made"):
        super().__init__(message, code="PERSISTENCE_ERROR")
