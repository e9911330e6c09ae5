"""Shared helpers for the ledger use cases."""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from decimal import Decimal
from typing import Any, TypeVar

from finledger.application.ports.ledger_store import (
    LedgerSession,
    LedgerUnitOfWorkPort,
)
from finledger.domain.constants import TRANSFER, UPDATABLE_TRANSACTION_FIELDS
from finledger.domain.errors import (
    AccountNotFoundError,
    ConcurrentModificationError,
    InsufficientBalanceError,
    ValidationFailedError,
)
from finledger.domain.models.accounts import Account
from finledger.domain.models.transactions import (
    Transaction,
    TransactionCandidate,
)
from finledger.domain.models.validation import ValidationViolation
from finledger.domain.services.validation import parse_amount, parse_date
from finledger.infrastructure.logging.logger import get_app_logger
from finledger.utils.decimal_utils import quantize_money

DEFAULT_MAX_ATTEMPTS = 3

T = TypeVar("T")


def run_atomic(
    unit_of_work: LedgerUnitOfWorkPort,
    operation: Callable[[LedgerSession], T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    logger=None,
) -> T:
    """Run ``operation`` inside one unit of work.

    The whole operation is re-run from a fresh unit when a balance write
    loses an optimistic-concurrency race. Any other error propagates after
    the unit has rolled back.

    Args:
        unit_of_work: Port opening atomic units.
        operation: Callable receiving the session of the unit.
        max_attempts: Total attempts allowed on concurrency conflicts.
        logger: Optional logger compatible with logging.Logger-like API.

    Returns:
        T: Whatever ``operation`` returned in the committed attempt.

    Raises:
        ConcurrentModificationError: If every attempt hit a conflict.
    """
    resolved_logger = logger or get_app_logger()
    attempt = 1
    while True:
        try:
            with unit_of_work.begin() as session:
                return operation(session)
        except ConcurrentModificationError as exc:
            if attempt >= max_attempts:
                resolved_logger.error(
                    f"Giving up after {attempt} conflicting attempts: {exc}"
                )
                raise
            resolved_logger.warning(
                f"Retrying ledger operation after conflict "
                f"(attempt {attempt}/{max_attempts}): {exc}"
            )
            attempt += 1


def lock_accounts(
    session: LedgerSession,
    owner_id: str,
    account_ids: Iterable[str | None],
) -> dict[str, Account]:
    """Lock the owner's accounts among ``account_ids`` in id order.

    Ids that are empty, unknown or owned by someone else are skipped; the
    validator reports them.
    """
    locked: dict[str, Account] = {}
    for account_id in sorted(
        {value for value in account_ids if isinstance(value, str) and value}
    ):
        account = session.accounts.get_for_update(account_id)
        if account is not None and account.owner_id == owner_id:
            locked[account_id] = account
    return locked


def load_owner_accounts(
    session: LedgerSession,
    owner_id: str,
    locked: Mapping[str, Account],
) -> dict[str, Account]:
    """Return the owner's accounts, preferring the locked snapshots."""
    accounts = {
        account.id: account
        for account in session.accounts.list_by_owner(owner_id)
    }
    accounts.update(locked)
    return accounts


def raise_for_violations(
    violations: list[ValidationViolation],
    candidate: TransactionCandidate,
    accounts: Mapping[str, Account],
) -> None:
    """Raise the most specific error describing ``violations``.

    Unknown accounts win over insufficient balance, which wins over generic
    validation failures. Every error carries the full violation list.
    """
    if not violations:
        return
    missing = [v for v in violations if v.code == "not_found"]
    if missing:
        missing_id = (
            candidate.account_id
            if missing[0].field == "account_id"
            else candidate.to_account_id
        )
        raise AccountNotFoundError(missing_id, violations)
    if any(v.code == "insufficient_balance" for v in violations):
        account_id = candidate.account_id or ""
        raise InsufficientBalanceError(
            account_id,
            accounts[account_id].balance,
            violations,
        )
    raise ValidationFailedError(violations)


def normalized_fields(candidate: TransactionCandidate) -> dict[str, Any]:
    """Return storage-ready fields from a validated candidate."""
    transaction_type = candidate.transaction_type
    return {
        "transaction_type": transaction_type,
        "amount": quantize_money(parse_amount(candidate.amount)),
        "account_id": candidate.account_id,
        "to_account_id": (
            candidate.to_account_id if transaction_type == TRANSFER else None
        ),
        "source": (candidate.source or "").strip(),
        "date": parse_date(candidate.date),
    }


def merge_candidate(
    existing: Transaction,
    updates: Mapping[str, Any],
) -> TransactionCandidate:
    """Overlay ``updates`` on the fields of a committed transaction.

    Raises:
        ValidationFailedError: If an update names a field that cannot change.
    """
    unknown = [key for key in updates if key not in UPDATABLE_TRANSACTION_FIELDS]
    if unknown:
        raise ValidationFailedError(
            [
                ValidationViolation(key, f"Field cannot be updated: {key}", "read_only")
                for key in unknown
            ]
        )
    merged = replace(TransactionCandidate.from_transaction(existing), **updates)
    if merged.transaction_type != TRANSFER and merged.to_account_id:
        merged = replace(merged, to_account_id=None)
    return merged


def write_balances(
    session: LedgerSession,
    accounts: Mapping[str, Account],
    new_balances: Mapping[str, Decimal],
) -> dict[str, Account]:
    """Persist every balance that changed, guarded by the account version.

    Returns:
        dict[str, Account]: Accounts as stored after the write.
    """
    written: dict[str, Account] = {}
    for account_id in sorted(new_balances):
        account = accounts[account_id]
        if new_balances[account_id] == account.balance:
            continue
        written[account_id] = session.accounts.set_balance(
            account_id,
            new_balances[account_id],
            account.version,
        )
    return written


__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "run_atomic",
    "lock_accounts",
    "load_owner_accounts",
    "raise_for_violations",
    "normalized_fields",
    "merge_candidate",
    "write_balances",
]
