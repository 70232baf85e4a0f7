from erp.database import Base
from .party import Customer, Supplier
from .ledger import CustomerLedgerEntry, SupplierLedgerEntry
from .payment import PaymentIn, PaymentOut
from .product import Product, StockIn, StockOut
from .sales import SalesInvoice, SalesInvoiceItem
from .purchase import PurchaseOrder, PurchaseOrderItem
from .document_sequence import DocumentSequence

__all__ = [
    "Base",
    "Customer", "Supplier",
    "CustomerLedgerEntry", "SupplierLedgerEntry",
    "PaymentIn", "PaymentOut",
    "Product", "StockIn", "StockOut",
    "SalesInvoice", "SalesInvoiceItem",
    "PurchaseOrder", "PurchaseOrderItem",
    "DocumentSequence",
]
