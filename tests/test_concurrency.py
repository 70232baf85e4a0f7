import pytest
from concurrent.futures import ThreadPoolExecutor, as_completed
from decimal import Decimal
from datetime import date

from erp.config import settings
from erp.models.party import Customer
from erp.models.product import Product
from erp.schemas.payment import PaymentInCreate
from erp.schemas.document import SalesInvoiceCreate, DocumentItemIn
from erp.services import ledger_service, payment_service, invoice_service
from erp.utils.constants import PartyKind, LedgerTransactionType
from erp.utils.exceptions import InsufficientStockError
from tests.conftest import TestingSessionLocal, make_party


def create_worker_session():
    """Create independent database session for each worker thread"""
    return TestingSessionLocal()


def worker_invoice_amount(customer_id, amount):
    """Post a raw invoice entry from its own session"""
    db = create_worker_session()
    try:
        ledger_service.record_transaction(
            db, PartyKind.CUSTOMER, customer_id, LedgerTransactionType.INVOICE, Decimal(str(amount))
        )
        return {"success": True}
    except Exception as e:
        return {"success": False, "error": str(e)}
    finally:
        db.close()


def worker_payment(customer_id, amount):
    """Receive a payment from its own session"""
    db = create_worker_session()
    try:
        payment = payment_service.receive_payment(
            db,
            PaymentInCreate(customer_id=customer_id, payment_date=date(2024, 5, 1), amount=Decimal(str(amount))),
        )
        return {"success": True, "receipt_no": payment.receipt_no}
    except Exception as e:
        return {"success": False, "error": str(e)}
    finally:
        db.close()


def worker_sale(customer_id, product_id, quantity, invoice_no):
    """Sell stock from its own session"""
    db = create_worker_session()
    try:
        invoice_service.create_invoice(
            db,
            SalesInvoiceCreate(
                customer_id=customer_id,
                invoice_no=invoice_no,
                invoice_date=date(2024, 5, 2),
                items=[DocumentItemIn(product_id=product_id, quantity=Decimal(str(quantity)), unit_price=Decimal("10"))],
            ),
        )
        return {"success": True}
    except InsufficientStockError:
        return {"success": False, "error": "insufficient_stock"}
    except Exception as e:
        return {"success": False, "error": str(e)}
    finally:
        db.close()


def _fresh_balance(customer_id):
    db = create_worker_session()
    try:
        return db.query(Customer).filter(Customer.id == customer_id).one().current_balance
    finally:
        db.close()


def test_two_concurrent_postings_do_not_lose_updates(db_session, customer):
    """+100 and +50 posted at the same time on a zero balance end at 150."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        future1 = executor.submit(worker_invoice_amount, customer.id, 100)
        future2 = executor.submit(worker_invoice_amount, customer.id, 50)
        results = [future1.result(), future2.result()]

    assert all(r["success"] for r in results), results
    assert _fresh_balance(customer.id) == Decimal("150.00")

    db = create_worker_session()
    try:
        assert ledger_service.verify_ledger(db, PartyKind.CUSTOMER, customer.id).consistent
    finally:
        db.close()


def test_concurrent_payments_get_unique_receipts(db_session, monkeypatch):
    """
    10 threads each receive 100 from the same customer.
    All succeed, every receipt number is distinct and the balance is exact.
    """
    monkeypatch.setattr(settings, "LEDGER_MAX_RETRIES", 25)
    customer = make_party(db_session, PartyKind.CUSTOMER, "Busy Buyer", "10000")
    customer_id = customer.id
    # First payment creates the receipt sequence
    assert worker_payment(customer_id, 100)["success"]

    num_threads = 10
    with ThreadPoolExecutor(max_workers=5) as executor:
        futures = [executor.submit(worker_payment, customer_id, 100) for _ in range(num_threads)]
        results = [f.result() for f in as_completed(futures)]

    successes = [r for r in results if r["success"]]
    assert len(successes) == num_threads, results
    assert len({r["receipt_no"] for r in successes}) == num_threads
    assert _fresh_balance(customer_id) == Decimal("8900.00")


def test_concurrent_sales_cannot_oversell(db_session, customer, product, monkeypatch):
    """Three sales of 40 against 100 in stock: exactly two go through."""
    monkeypatch.setattr(settings, "LEDGER_MAX_RETRIES", 10)
    customer_id, product_id = customer.id, product.id

    with ThreadPoolExecutor(max_workers=3) as executor:
        futures = [
            executor.submit(worker_sale, customer_id, product_id, 40, f"INV-T{i}")
            for i in range(3)
        ]
        results = [f.result() for f in as_completed(futures)]

    successes = [r for r in results if r["success"]]
    failures = [r for r in results if not r["success"]]
    assert len(successes) == 2, results
    assert [f["error"] for f in failures] == ["insufficient_stock"]

    db = create_worker_session()
    try:
        assert db.query(Product).filter(Product.id == product_id).one().current_stock == Decimal("20.000")
    finally:
        db.close()
    assert _fresh_balance(customer_id) == Decimal("800.00")
