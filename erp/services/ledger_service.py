from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from datetime import date
from typing import Callable, Iterator, Optional, Tuple, TypeVar

from erp.config import settings
from erp.logger_config import logger
from erp.repositories import party_repo, ledger_repo
from erp.schemas.ledger import LedgerStatement, LedgerVerification, StatementLine
from erp.utils.constants import (
    PartyKind,
    LedgerTransactionType,
    EntrySide,
    EntryStatus,
    SIGN_CONVENTIONS,
    SIGNED_TRANSACTION_TYPES,
    INCREASE_SIDE,
)
from erp.utils.exceptions import (
    ErpException,
    ValidationError,
    NotFoundError,
    ConcurrencyConflict,
    PersistenceError,
)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
# Largest value a Numeric(15, 2) column holds
MAX_AMOUNT = Decimal("9999999999999.99")

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Amounts and sign conventions
# ---------------------------------------------------------------------------

def to_amount(value) -> Decimal:
    """Coerce input to a 2-place Decimal. Rejects non-numbers, NaN and infinity."""
    if isinstance(value, bool):
        raise ValidationError(f"Amount {value!r} is not a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Amount {value!r} is not a number")
    if not amount.is_finite():
        raise ValidationError(f"Amount {value!r} must be a finite number")
    try:
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount {value!r} is too large")
    if abs(amount) > MAX_AMOUNT:
        raise ValidationError(f"Amount {value!r} exceeds the limit of {MAX_AMOUNT}")
    return amount


def _check_balance(balance: Decimal) -> None:
    if abs(balance) > MAX_AMOUNT:
        raise ValidationError(f"Resulting balance {balance} exceeds the limit of {MAX_AMOUNT}")


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown {label} {value!r}")


def validate_amount(transaction_type: LedgerTransactionType, amount) -> Decimal:
    """
    Invoices, purchases and payments need a positive amount.
    Opening balances and adjustments are signed but never zero.
    """
    transaction_type = _coerce(LedgerTransactionType, transaction_type, "transaction type")
    amount = to_amount(amount)
    if transaction_type in SIGNED_TRANSACTION_TYPES:
        if amount == ZERO:
            raise ValidationError(f"{transaction_type.value} amount must not be zero")
    elif amount <= ZERO:
        raise ValidationError(
            f"{transaction_type.value} amount must be positive, got {amount}"
        )
    return amount


def resolve_side(kind: PartyKind, transaction_type: LedgerTransactionType, amount: Decimal) -> EntrySide:
    """Which column (debit or credit) an amount posts to for this party."""
    kind = _coerce(PartyKind, kind, "party kind")
    transaction_type = _coerce(LedgerTransactionType, transaction_type, "transaction type")

    if transaction_type in SIGNED_TRANSACTION_TYPES:
        increase = INCREASE_SIDE[kind]
        if amount > ZERO:
            return increase
        return EntrySide.CREDIT if increase == EntrySide.DEBIT else EntrySide.DEBIT

    side = SIGN_CONVENTIONS.get((kind, transaction_type))
    if side is None:
        raise ValidationError(
            f"{transaction_type.value} transactions cannot be posted to a {kind.value} ledger"
        )
    return side


def split_amount(side: EntrySide, amount: Decimal) -> Tuple[Decimal, Decimal]:
    """(debit, credit) for an amount on the given side."""
    if side == EntrySide.DEBIT:
        return abs(amount), ZERO
    return ZERO, abs(amount)


def signed_delta(kind: PartyKind, debit, credit) -> Decimal:
    """Balance change of one entry: debit-increases for customers, credit-increases for suppliers."""
    debit = Decimal(debit or 0)
    credit = Decimal(credit or 0)
    if PartyKind(kind) == PartyKind.CUSTOMER:
        return debit - credit
    return credit - debit


# ---------------------------------------------------------------------------
# Unit of work
# ---------------------------------------------------------------------------

def _is_lock_error(error: OperationalError) -> bool:
    message = str(error.orig).lower() if error.orig is not None else str(error).lower()
    return "deadlock" in message or "database is locked" in message or "lock wait timeout" in message


def run_in_unit_of_work(db: Session, operation: Callable[..., T], *args, **kwargs) -> T:
    """
    Run `operation(db, *args, **kwargs)` as one database transaction and commit.

    Any failure rolls the whole unit back, so a ledger entry is never left
    without its balance update (or the other way round). A stale party
    version or a lock error replays the operation from scratch, re-reading
    the balance, up to LEDGER_MAX_RETRIES attempts.
    """
    attempts = max(1, settings.LEDGER_MAX_RETRIES)
    for attempt in range(1, attempts + 1):
        try:
            result = operation(db, *args, **kwargs)
            db.commit()
            return result

        except StaleDataError:
            db.rollback()
            logger.warning(
                "Balance changed underneath %s (attempt %d/%d), retrying",
                operation.__name__, attempt, attempts,
            )

        except OperationalError as e:
            db.rollback()
            if not _is_lock_error(e):
                logger.exception("Database error in %s", operation.__name__)
                raise PersistenceError() from e
            logger.warning(
                "Lock conflict in %s (attempt %d/%d), retrying",
                operation.__name__, attempt, attempts,
            )

        except ErpException:
            db.rollback()
            raise

        except IntegrityError as e:
            db.rollback()
            logger.warning("Integrity error in %s: %s", operation.__name__, e.orig)
            raise ValidationError("Duplicate or invalid reference, no changes were made") from e

        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Database error in %s", operation.__name__)
            raise PersistenceError() from e

    raise ConcurrencyConflict(
        f"Could not apply {operation.__name__} after {attempts} attempts, no changes were made"
    )


# ---------------------------------------------------------------------------
# Building blocks. These do not commit; recorders call them inside their
# own unit of work so the domain row and the ledger entry land together.
# ---------------------------------------------------------------------------

def lock_party(db: Session, kind: PartyKind, party_id: int, require_active: bool = True):
    """Lock a party row or raise NotFoundError."""
    kind = _coerce(PartyKind, kind, "party kind")
    party = party_repo.get_party_for_update(db, kind, party_id)
    if not party:
        raise NotFoundError(f"{kind.value.title()} {party_id} not found")
    if require_active and not party.is_active:
        raise NotFoundError(f"{kind.value.title()} {party_id} is inactive")
    return party


def _rewalk(db: Session, kind: PartyKind, party) -> Decimal:
    """
    Replay every live entry of a party in (transaction_date, id) order and
    rewrite any stored balance snapshot that no longer matches.
    """
    db.flush()
    running = ZERO
    for entry in ledger_repo.query_ledger_entries(db, kind, party.id):
        running += signed_delta(kind, entry.debit, entry.credit)
        if entry.balance is None or Decimal(entry.balance) != running:
            entry.balance = running

    if running != Decimal(party.current_balance):
        logger.warning(
            "Ledger replay for %s %s ends at %s but current balance is %s",
            kind.value, party.id, running, party.current_balance,
        )
    return running


def post_entry(
    db: Session,
    kind: PartyKind,
    party_id: int,
    transaction_type: LedgerTransactionType,
    amount,
    transaction_date: Optional[date] = None,
    reference_id: Optional[int] = None,
    reference_no: Optional[str] = None,
    description: Optional[str] = None,
):
    """Append one ledger entry and move the party's balance by its signed delta."""
    kind = _coerce(PartyKind, kind, "party kind")
    transaction_type = _coerce(LedgerTransactionType, transaction_type, "transaction type")
    amount = validate_amount(transaction_type, amount)
    side = resolve_side(kind, transaction_type, amount)

    party = lock_party(db, kind, party_id)

    debit, credit = split_amount(side, amount)
    delta = signed_delta(kind, debit, credit)
    balance_before = Decimal(party.current_balance or 0)
    balance_after = balance_before + delta
    entry_date = transaction_date or date.today()
    _check_balance(balance_after)

    backdated = ledger_repo.has_entries_after(db, kind, party.id, entry_date)

    entry = ledger_repo.insert_ledger_entry(
        db,
        kind,
        party_id=party.id,
        transaction_type=transaction_type.value,
        transaction_date=entry_date,
        reference_id=reference_id,
        reference_no=reference_no,
        debit=debit,
        credit=credit,
        balance=balance_after,
        description=description,
        status=EntryStatus.COMMITTED.value,
    )
    party_repo.update_party_balance(db, party, balance_after)
    # Flush now so a stale version fails here and later locks see the new balance
    db.flush()

    if backdated:
        # Later entries carry snapshots that did not include this one
        _rewalk(db, kind, party)

    logger.info(
        "Posted %s %s to %s %s: debit=%s credit=%s balance %s -> %s",
        transaction_type.value, reference_no or "-", kind.value, party.id,
        debit, credit, balance_before, balance_after,
    )
    return entry


def _get_live_entry(db: Session, kind: PartyKind, entry_id: Optional[int]):
    entry = ledger_repo.get_entry(db, kind, entry_id) if entry_id else None
    if not entry:
        raise NotFoundError(f"{kind.value.title()} ledger entry {entry_id} not found")
    if entry.status == EntryStatus.VOIDED.value:
        raise ValidationError(f"Ledger entry {entry_id} has been voided")
    return entry


def amend_entry(
    db: Session,
    kind: PartyKind,
    entry_id: int,
    new_amount,
    new_date: Optional[date] = None,
):
    """
    Change the amount and/or date of a posted entry in place.

    The difference between the new and old signed amounts is applied to
    the party's current balance, not to the entry's own snapshot. Later
    snapshots are then re-walked so the ledger still replays cleanly.
    """
    kind = _coerce(PartyKind, kind, "party kind")
    entry = _get_live_entry(db, kind, entry_id)
    transaction_type = LedgerTransactionType(entry.transaction_type)
    amount = validate_amount(transaction_type, new_amount)
    side = resolve_side(kind, transaction_type, amount)

    party = lock_party(db, kind, entry.party_id, require_active=False)

    debit, credit = split_amount(side, amount)
    old_delta = signed_delta(kind, entry.debit, entry.credit)
    delta = signed_delta(kind, debit, credit) - old_delta
    balance_before = Decimal(party.current_balance or 0)
    balance_after = balance_before + delta
    _check_balance(balance_after)

    ledger_repo.update_ledger_entry(
        db,
        entry,
        debit=debit,
        credit=credit,
        transaction_date=new_date or entry.transaction_date,
        status=EntryStatus.AMENDED.value,
    )
    party_repo.update_party_balance(db, party, balance_after)
    _rewalk(db, kind, party)

    logger.info(
        "Amended %s entry %s: delta=%s balance %s -> %s",
        kind.value, entry.id, delta, balance_before, balance_after,
    )
    return entry


def void_entry(db: Session, kind: PartyKind, entry_id: int) -> None:
    """Undo an entry's effect on the balance and mark it voided."""
    kind = _coerce(PartyKind, kind, "party kind")
    entry = _get_live_entry(db, kind, entry_id)
    party = lock_party(db, kind, entry.party_id, require_active=False)

    delta = signed_delta(kind, entry.debit, entry.credit)
    balance_before = Decimal(party.current_balance or 0)
    balance_after = balance_before - delta

    ledger_repo.update_ledger_entry(db, entry, status=EntryStatus.VOIDED.value)
    party_repo.update_party_balance(db, party, balance_after)
    _rewalk(db, kind, party)

    logger.info(
        "Voided %s entry %s: balance %s -> %s",
        kind.value, entry.id, balance_before, balance_after,
    )


# ---------------------------------------------------------------------------
# Public engine operations. Each one is its own committed unit of work.
# ---------------------------------------------------------------------------

def record_transaction(
    db: Session,
    kind: PartyKind,
    party_id: int,
    transaction_type: LedgerTransactionType,
    amount,
    transaction_date: Optional[date] = None,
    reference_id: Optional[int] = None,
    reference_no: Optional[str] = None,
    description: Optional[str] = None,
):
    return run_in_unit_of_work(
        db,
        post_entry,
        kind,
        party_id,
        transaction_type,
        amount,
        transaction_date=transaction_date,
        reference_id=reference_id,
        reference_no=reference_no,
        description=description,
    )


def amend_transaction(db: Session, kind: PartyKind, entry_id: int, new_amount, new_date: Optional[date] = None):
    return run_in_unit_of_work(db, amend_entry, kind, entry_id, new_amount, new_date)


def reverse_transaction(db: Session, kind: PartyKind, entry_id: int) -> None:
    run_in_unit_of_work(db, void_entry, kind, entry_id)


def iter_statement_lines(
    db: Session,
    kind: PartyKind,
    party_id: int,
    to_date: Optional[date] = None,
) -> Iterator[Tuple[object, Decimal]]:
    """Yield (entry, running balance) pairs in replay order, up to `to_date`."""
    running = ZERO
    for entry in ledger_repo.query_ledger_entries(db, kind, party_id, to_date=to_date):
        running += signed_delta(kind, entry.debit, entry.credit)
        yield entry, running


def reconstruct_statement(
    db: Session,
    kind: PartyKind,
    party_id: int,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
) -> LedgerStatement:
    """
    Read-only statement for a party, as used by ledger pages and PDF exports.

    Entries before `from_date` are folded into the opening balance brought
    forward. Running balances are replayed rather than read from the stored
    snapshots.
    """
    kind = _coerce(PartyKind, kind, "party kind")
    if from_date and to_date and from_date > to_date:
        raise ValidationError("from_date must not be after to_date")

    party = party_repo.get_party(db, kind, party_id)
    if not party:
        raise NotFoundError(f"{kind.value.title()} {party_id} not found")

    opening = ZERO
    closing = ZERO
    total_debit = ZERO
    total_credit = ZERO
    lines = []
    for entry, running in iter_statement_lines(db, kind, party_id, to_date=to_date):
        closing = running
        if from_date and entry.transaction_date < from_date:
            opening = running
            continue
        total_debit += Decimal(entry.debit)
        total_credit += Decimal(entry.credit)
        lines.append(
            StatementLine(
                entry_id=entry.id,
                transaction_date=entry.transaction_date,
                transaction_type=entry.transaction_type,
                reference_no=entry.reference_no,
                description=entry.description,
                debit=entry.debit,
                credit=entry.credit,
                balance=running,
            )
        )

    return LedgerStatement(
        party_kind=kind,
        party_id=party.id,
        party_name=party.name,
        from_date=from_date,
        to_date=to_date,
        opening_balance=opening,
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=closing,
        current_balance=party.current_balance,
    )


def verify_ledger(db: Session, kind: PartyKind, party_id: int) -> LedgerVerification:
    """Replay a party's ledger and compare it with the stored snapshots and balance."""
    kind = _coerce(PartyKind, kind, "party kind")
    party = party_repo.get_party(db, kind, party_id)
    if not party:
        raise NotFoundError(f"{kind.value.title()} {party_id} not found")

    mismatched = []
    running = ZERO
    for entry, running in iter_statement_lines(db, kind, party_id):
        if Decimal(entry.balance) != running:
            mismatched.append(entry.id)

    current = Decimal(party.current_balance)
    consistent = not mismatched and running == current
    if not consistent:
        logger.warning(
            "Ledger for %s %s does not replay: replayed=%s current=%s mismatched=%s",
            kind.value, party_id, running, current, mismatched,
        )
    return LedgerVerification(
        party_kind=kind,
        party_id=party.id,
        consistent=consistent,
        replayed_balance=running,
        current_balance=current,
        mismatched_entry_ids=mismatched,
    )
