import pytest
from decimal import Decimal
from datetime import date

from erp.repositories import ledger_repo
from erp.schemas.payment import PaymentInCreate, PaymentOutCreate, PaymentUpdate
from erp.services import payment_service, party_service
from erp.utils.constants import PartyKind, PaymentMethod, EntryStatus
from erp.utils.exceptions import ValidationError, NotFoundError


def _receive(db, customer_id, amount, **extra):
    request = PaymentInCreate(
        customer_id=customer_id,
        payment_date=extra.pop("payment_date", date(2024, 1, 5)),
        amount=Decimal(amount),
        **extra
    )
    return payment_service.receive_payment(db, request)


def test_receive_payment_credits_customer(db_session, customer_1200):
    payment = _receive(db_session, customer_1200.id, "500")

    entry = ledger_repo.get_entry(db_session, PartyKind.CUSTOMER, payment.ledger_entry_id)
    assert payment.receipt_no == "PI-0001"
    assert payment.customer_balance == Decimal("700.00")
    assert entry.credit == Decimal("500.00")
    assert entry.reference_no == "PI-0001"
    assert entry.reference_id == payment.id
    assert customer_1200.current_balance == Decimal("700.00")


def test_receipt_numbers_increment(db_session, customer_1200):
    first = _receive(db_session, customer_1200.id, "100")
    second = _receive(db_session, customer_1200.id, "100")

    assert (first.receipt_no, second.receipt_no) == ("PI-0001", "PI-0002")


def test_duplicate_receipt_number_is_rejected(db_session, customer_1200):
    _receive(db_session, customer_1200.id, "100", receipt_no="MANUAL-1")

    with pytest.raises(ValidationError):
        _receive(db_session, customer_1200.id, "100", receipt_no="MANUAL-1")
    assert customer_1200.current_balance == Decimal("1100.00")


def test_auto_numbering_skips_manual_receipt_in_same_format(db_session, customer_1200):
    _receive(db_session, customer_1200.id, "100", receipt_no="PI-0001")

    first = _receive(db_session, customer_1200.id, "100")
    second = _receive(db_session, customer_1200.id, "100")

    assert (first.receipt_no, second.receipt_no) == ("PI-0002", "PI-0003")
    assert customer_1200.current_balance == Decimal("900.00")


def test_online_reference_only_kept_for_online_methods(db_session, customer_1200):
    cash = _receive(db_session, customer_1200.id, "10", online_reference="TXN-1")
    online = _receive(
        db_session, customer_1200.id, "10",
        payment_method=PaymentMethod.ONLINE, online_reference="TXN-2",
    )

    assert cash.online_reference is None
    assert online.online_reference == "TXN-2"
    assert online.payment_method == "online"


def test_make_payment_debits_supplier(db_session, supplier_1200):
    request = PaymentOutCreate(
        supplier_id=supplier_1200.id,
        payment_date=date(2024, 1, 8),
        payment_method=PaymentMethod.CHEQUE,
        amount=Decimal("450"),
    )
    payment = payment_service.make_payment(db_session, request)

    entry = ledger_repo.get_entry(db_session, PartyKind.SUPPLIER, payment.ledger_entry_id)
    assert payment.receipt_no == "PO-PAY-0001"
    assert entry.debit == Decimal("450.00")
    assert payment.supplier_balance == Decimal("750.00")
    assert supplier_1200.current_balance == Decimal("750.00")


def test_payment_from_unknown_customer(db_session):
    with pytest.raises(NotFoundError):
        _receive(db_session, 777, "100")


def test_payment_from_inactive_customer(db_session, customer_1200):
    party_service.deactivate_party(db_session, PartyKind.CUSTOMER, customer_1200.id)

    with pytest.raises(NotFoundError):
        _receive(db_session, customer_1200.id, "100")


def test_update_payment_amends_entry(db_session, customer_1200):
    payment = _receive(db_session, customer_1200.id, "500")

    updated = payment_service.update_payment(
        db_session, PartyKind.CUSTOMER, payment.id, PaymentUpdate(amount=Decimal("800"))
    )

    entry = ledger_repo.get_entry(db_session, PartyKind.CUSTOMER, updated.ledger_entry_id)
    assert updated.amount == Decimal("800.00")
    assert updated.customer_balance == Decimal("400.00")
    assert entry.status == EntryStatus.AMENDED.value
    assert customer_1200.current_balance == Decimal("400.00")
    assert len(ledger_repo.query_ledger_entries(db_session, PartyKind.CUSTOMER, customer_1200.id)) == 2


def test_update_payment_without_amount_change(db_session, customer_1200):
    payment = _receive(db_session, customer_1200.id, "500")

    updated = payment_service.update_payment(
        db_session, PartyKind.CUSTOMER, payment.id, PaymentUpdate(notes="cheque cleared")
    )

    assert updated.notes == "cheque cleared"
    assert customer_1200.current_balance == Decimal("700.00")


def test_delete_payment_restores_balance(db_session, customer_1200):
    payment = _receive(db_session, customer_1200.id, "500")
    entry_id = payment.ledger_entry_id

    payment_service.delete_payment(db_session, PartyKind.CUSTOMER, payment.id)

    assert customer_1200.current_balance == Decimal("1200.00")
    assert ledger_repo.get_entry(db_session, PartyKind.CUSTOMER, entry_id).status == EntryStatus.VOIDED.value
    with pytest.raises(NotFoundError):
        payment_service.get_payment(db_session, PartyKind.CUSTOMER, payment.id)


def test_list_payments_by_party(db_session, customer_1200, customer):
    _receive(db_session, customer_1200.id, "50")
    _receive(db_session, customer.id, "20")

    payments = payment_service.list_payments(db_session, PartyKind.CUSTOMER, customer_1200.id)

    assert [p.customer_id for p in payments] == [customer_1200.id]
