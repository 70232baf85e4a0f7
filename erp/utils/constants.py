from enum import Enum


class PartyKind(str, Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"

class LedgerTransactionType(str, Enum):
    OPENING = "opening"
    INVOICE = "invoice"
    PURCHASE = "purchase"
    PAYMENT = "payment"
    ADJUSTMENT = "adjustment"

class EntrySide(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"

class EntryStatus(str, Enum):
    COMMITTED = "committed"
    AMENDED = "amended"
    VOIDED = "voided"

class PaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    BANK_TRANSFER = "bank_transfer"
    ONLINE = "online"

class DocumentStatus(str, Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"

class DocumentType(str, Enum):
    SALE_INVOICE = "sale_invoice"
    PURCHASE_ORDER = "purchase_order"
    PAYMENT_IN = "payment_in"
    PAYMENT_OUT = "payment_out"
    STOCK_IN = "stock_in"
    STOCK_OUT = "stock_out"


DEFAULT_PREFIXES = {
    DocumentType.SALE_INVOICE: "INV",
    DocumentType.PURCHASE_ORDER: "PO",
    DocumentType.PAYMENT_IN: "PI",
    DocumentType.PAYMENT_OUT: "PO-PAY",
    DocumentType.STOCK_IN: "STK-IN",
    DocumentType.STOCK_OUT: "STK-OUT",
}

# Side a positive amount posts to, per party kind and transaction type.
# Combinations missing here are rejected.
SIGN_CONVENTIONS = {
    (PartyKind.CUSTOMER, LedgerTransactionType.INVOICE): EntrySide.DEBIT,
    (PartyKind.CUSTOMER, LedgerTransactionType.PAYMENT): EntrySide.CREDIT,
    (PartyKind.SUPPLIER, LedgerTransactionType.PURCHASE): EntrySide.CREDIT,
    (PartyKind.SUPPLIER, LedgerTransactionType.PAYMENT): EntrySide.DEBIT,
}

# Types whose side follows the sign of the amount
SIGNED_TRANSACTION_TYPES = {
    LedgerTransactionType.OPENING,
    LedgerTransactionType.ADJUSTMENT,
}

# Side that raises the party's balance
INCREASE_SIDE = {
    PartyKind.CUSTOMER: EntrySide.DEBIT,
    PartyKind.SUPPLIER: EntrySide.CREDIT,
}
